"""Anthropic-on-Bedrock LLM adapter with assistant-turn prefill."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from importlib import import_module
from typing import Any

from draft_assistant.application.ports.llm_port import ChatMessage, LLMPort, LLMResponse
from draft_assistant.domain.errors import LLMError, MalformedResponseError

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "bedrock-2023-05-31"


def build_request_body(
    messages: Sequence[ChatMessage], system: str, temperature: float, max_tokens: int
) -> dict[str, Any]:
    return {
        "anthropic_version": ANTHROPIC_VERSION,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "system": system,
        "messages": [{"role": m.role, "content": m.content} for m in messages],
    }


def parse_response_body(raw: bytes | str) -> LLMResponse:
    """Join the text parts of a Messages API reply; a reply without text is malformed."""
    try:
        out = json.loads(raw)
        texts = [p["text"] for p in out["content"] if p.get("type", "text") == "text"]
        text = "".join(texts)
    except (ValueError, KeyError, TypeError, AttributeError) as ex:
        raise MalformedResponseError(f"unexpected model response: {ex}") from ex
    if not texts:
        raise MalformedResponseError("model response contains no text")
    usage = out.get("usage") or {}
    return LLMResponse(
        text=text,
        finish_reason=out.get("stop_reason") or "stop",
        usage_tokens=usage.get("output_tokens"),
    )


@dataclass
class BedrockAnthropicAdapter(LLMPort):
    region: str
    client: Any | None = None  # injectable boto3 "bedrock-runtime" client

    def _get_client(self) -> Any:
        if self.client is None:
            boto3 = import_module("boto3")
            self.client = boto3.client("bedrock-runtime", region_name=self.region)
        return self.client

    def chat(
        self,
        messages: Sequence[ChatMessage],
        *,
        system: str,
        model_id: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        body = build_request_body(messages, system, temperature, max_tokens)
        try:
            resp = self._get_client().invoke_model(
                modelId=model_id,
                body=json.dumps(body).encode("utf-8"),
                contentType="application/json",
                accept="application/json",
            )
            raw = resp["body"].read()
        except Exception as ex:  # noqa: BLE001
            raise LLMError(f"LLM communication failed: {ex}") from ex
        result = parse_response_body(raw)
        logger.debug("Model %s stopped with %s", model_id, result.finish_reason)
        return result
