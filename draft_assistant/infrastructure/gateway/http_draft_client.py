"""HTTP client forwarding draft requests to the deployed draft function.

Why: Implements DraftServicePort for the gateway when the orchestrator runs
behind an API gateway; every transport problem becomes a typed domain error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import import_module
from typing import Any

from draft_assistant.application.ports.draft_service_port import DraftServicePort
from draft_assistant.domain.errors import (
    DomainError,
    GatewayUnavailableError,
    MalformedResponseError,
)
from draft_assistant.domain.models import DraftRequest, DraftResponse
from draft_assistant.domain.types import Result

logger = logging.getLogger(__name__)


def to_wire(req: DraftRequest) -> dict[str, Any]:
    body: dict[str, Any] = {"question": req.question}
    if req.session_id is not None:
        body["requestSessionId"] = req.session_id
    if req.model_id:
        body["modelId"] = req.model_id
    if req.conversation_history:
        body["conversationHistory"] = [
            {"role": m.role, "content": m.content} for m in req.conversation_history
        ]
    return body


def from_wire(data: Any) -> DraftResponse:
    if not isinstance(data, dict) or not isinstance(data.get("response"), str):
        raise MalformedResponseError("draft function returned an unexpected payload")
    return DraftResponse(
        response_text=data["response"],
        citation=data.get("citation") or None,
        session_id=data.get("sessionId") or None,
    )


@dataclass
class HttpDraftServiceClient(DraftServicePort):
    base_url: str
    timeout_s: float = 30.0
    session: Any | None = None  # injectable requests.Session

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    def _get_session(self) -> Any:
        if self.session is None:
            requests = import_module("requests")
            self.session = requests.Session()
        return self.session

    def execute(self, req: DraftRequest) -> Result[DraftResponse, DomainError]:
        url = f"{self.base_url}/ai-draft"
        try:
            resp = self._get_session().post(url, json=to_wire(req), timeout=self.timeout_s)
        except Exception as ex:  # noqa: BLE001
            logger.error("Error calling API Gateway: %s", ex)
            return Result.failure(GatewayUnavailableError(f"API Gateway unreachable: {ex}"))

        if not resp.ok:
            logger.error("API Gateway returned status %s: %s", resp.status_code, resp.text)
            return Result.failure(
                GatewayUnavailableError(
                    f"API Gateway returned status {resp.status_code}",
                    status_code=resp.status_code,
                )
            )

        try:
            data = resp.json()
        except ValueError:
            return Result.failure(MalformedResponseError("draft function returned non-JSON body"))
        try:
            return Result.success(from_wire(data))
        except MalformedResponseError as ex:
            return Result.failure(ex)
