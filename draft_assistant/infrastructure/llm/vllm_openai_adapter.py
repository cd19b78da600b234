from collections.abc import Sequence
from dataclasses import dataclass
from importlib import import_module
from typing import Any, cast

from draft_assistant.application.ports.llm_port import ChatMessage, LLMPort, LLMResponse
from draft_assistant.domain.errors import LLMError, MalformedResponseError


@dataclass
class VLLMOpenAIAdapter(LLMPort):
    """OpenAI-compatible chat server (vLLM) as the draft LLM.

    The server hosts one model, so ``model`` pins what is sent; the
    requested ``model_id`` only selects among hosted Bedrock models and is
    ignored here. A trailing assistant turn is continued, not answered.
    """

    base_url: str  # e.g. "http://localhost:8000/v1"
    api_key: str = "EMPTY"
    model: str = "meta-llama/Meta-Llama-3.1-8B-Instruct"

    def __post_init__(self) -> None:
        # Defer import of OpenAI to chat() to avoid hard dependency in tests
        self._client: Any | None = None

    def chat(
        self,
        messages: Sequence[ChatMessage],
        *,
        system: str,
        model_id: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        payload: Any = [{"role": "system", "content": system}]
        payload.extend(m.__dict__ for m in messages)
        prefilled = bool(messages) and messages[-1].role == "assistant"
        extra_body = (
            {"continue_final_message": True, "add_generation_prompt": False}
            if prefilled
            else None
        )
        try:
            if self._client is None:
                module = import_module("openai")
                OpenAI = module.OpenAI
                self._client = OpenAI(base_url=self.base_url, api_key=self.api_key)
            assert self._client is not None
            resp: Any = self._client.chat.completions.create(
                model=self.model,
                messages=cast(Any, payload),
                temperature=temperature,
                max_tokens=max_tokens,
                extra_body=extra_body,
            )
        except Exception as ex:  # noqa: BLE001
            # Translate external errors to domain-specific errors
            raise LLMError(f"LLM communication failed: {ex}") from ex
        if not getattr(resp, "choices", None):
            raise MalformedResponseError("LLM returned no choices")
        choice = resp.choices[0]
        if choice.message.content is None:
            raise MalformedResponseError("LLM returned no message content")
        usage = getattr(resp, "usage", None)
        return LLMResponse(
            text=choice.message.content,
            finish_reason=choice.finish_reason or "stop",
            usage_tokens=getattr(usage, "completion_tokens", None),
        )
