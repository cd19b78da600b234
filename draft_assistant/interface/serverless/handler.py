"""Serverless entry point running the draft orchestrator behind an API gateway.

Why: Thin adapter between proxy-integration events and DraftEmailReply;
the orchestrator is built once per warm container.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

from draft_assistant.application.ports.draft_service_port import DraftServicePort
from draft_assistant.config.composition import build_draft_use_case
from draft_assistant.config.log_setup import configure_logging
from draft_assistant.config.settings import AppSettings
from draft_assistant.domain.errors import ValidationError
from draft_assistant.domain.models import ConversationMessage, DraftRequest

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server side error: unable to draft a reply"

_use_case: DraftServicePort | None = None


def get_use_case() -> DraftServicePort:
    """Build the orchestrator on first use; missing configuration raises."""
    global _use_case
    if _use_case is None:
        settings = AppSettings()
        configure_logging(settings.log_level)
        _use_case = build_draft_use_case(settings)
    return _use_case


def normalize_headers(headers: dict[str, Any] | None) -> dict[str, str]:
    return {str(k).lower(): str(v) for k, v in (headers or {}).items()}


def parse_body(event: dict[str, Any]) -> dict[str, Any]:
    """Decode the JSON body of a proxy event (plain, base64 or already parsed)."""
    body = event.get("body")
    if body is None or body == "":
        return {}
    if isinstance(body, dict):
        return body

    content_type = normalize_headers(event.get("headers")).get("content-type", "")
    if content_type and "json" not in content_type:
        raise ValidationError(f"Unsupported content type: {content_type}")

    try:
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")
        data = json.loads(body)
    except (ValueError, TypeError) as ex:
        raise ValidationError("Request body must be valid JSON") from ex
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def to_draft_request(payload: dict[str, Any]) -> DraftRequest:
    question = payload.get("question")
    raw_history = payload.get("conversationHistory") or []
    if not isinstance(raw_history, list):
        raise ValidationError("conversationHistory must be an array")

    history = []
    for item in raw_history:
        if not isinstance(item, dict):
            raise ValidationError("Each conversation message must have role and content")
        history.append(ConversationMessage(role=item.get("role"), content=item.get("content")))

    return DraftRequest(
        question=question if isinstance(question, str) else "",
        session_id=payload.get("requestSessionId"),
        model_id=payload.get("modelId") or None,
        conversation_history=tuple(history),
    )


def make_results(
    status_code: int,
    response_text: str,
    citation: str | None,
    session_id: str | None,
) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "body": json.dumps(
            {"response": response_text, "citation": citation, "sessionId": session_id}
        ),
        "headers": {
            "Access-Control-Allow-Origin": "*",
            "Content-Type": "application/json",
        },
    }


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    use_case = get_use_case()

    try:
        req = to_draft_request(parse_body(event))
    except ValidationError as ex:
        return make_results(400, str(ex), None, None)

    logger.info("model %s", req.model_id or "default")
    try:
        result = use_case.execute(req)
    except Exception:
        logger.exception("Error drafting reply")
        return make_results(500, SERVER_ERROR_MESSAGE, None, None)

    if result.ok and result.value is not None:
        draft = result.value
        return make_results(200, draft.response_text, draft.citation, draft.session_id)

    if isinstance(result.error, ValidationError):
        return make_results(400, str(result.error), None, None)

    logger.error("Error: %s", result.error)
    return make_results(500, SERVER_ERROR_MESSAGE, None, None)
