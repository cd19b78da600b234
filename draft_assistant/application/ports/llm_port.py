from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" | "assistant"
    content: str


@dataclass(frozen=True)
class LLMResponse:
    text: str
    finish_reason: str = "stop"
    usage_tokens: int | None = None


@runtime_checkable
class LLMPort(Protocol):
    def chat(
        self,
        messages: Sequence[ChatMessage],
        *,
        system: str,
        model_id: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        """Generate the continuation of ``messages``.

        Args:
            messages: Conversation turns; when the last one is an assistant
                turn it is a prefill and the model continues from it.
            system: System instruction.
            model_id: Which model to invoke.
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse with only the newly generated text (prefill excluded).

        Raises:
            LLMError: the backend could not be reached or rejected the call.
            MalformedResponseError: the backend answered without usable text.
        """
        ...
