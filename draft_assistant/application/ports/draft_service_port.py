from typing import Protocol, runtime_checkable

from draft_assistant.domain.errors import DomainError
from draft_assistant.domain.models import DraftRequest, DraftResponse
from draft_assistant.domain.types import Result


@runtime_checkable
class DraftServicePort(Protocol):
    """What the gateway talks to: the orchestrator in-process, or a remote function."""

    def execute(self, req: DraftRequest) -> Result[DraftResponse, DomainError]: ...
