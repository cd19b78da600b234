# draft_assistant/domain/models.py
# Domain models must be pure (no I/O, no external libs)
from __future__ import annotations

from dataclasses import dataclass, field

from draft_assistant.domain.errors import ValidationError

CUSTOMER_ROLE = "customer"
AGENT_ROLE = "agent"
ALLOWED_ROLES = (CUSTOMER_ROLE, AGENT_ROLE)

SUPPORTED_MODEL_IDS = (
    "anthropic.claude-3-haiku-20240307-v1:0",
    "anthropic.claude-3-sonnet-20240229-v1:0",
    "anthropic.claude-3-opus-20240229-v1:0",
)
DEFAULT_MODEL_ID = SUPPORTED_MODEL_IDS[0]

S3_LOCATION = "s3"
WEB_LOCATION = "web"


@dataclass(frozen=True)
class ConversationMessage:
    """One earlier turn of the customer conversation."""

    role: str  # "customer" | "agent"
    content: str

    def __post_init__(self) -> None:
        if not self.role or not self.content:
            raise ValidationError("Each conversation message must have role and content")
        if self.role not in ALLOWED_ROLES:
            raise ValidationError('Message role must be either "customer" or "agent"')

    @property
    def is_customer(self) -> bool:
        return self.role == CUSTOMER_ROLE


@dataclass(frozen=True)
class DraftRequest:
    """
    One customer inquiry to draft a reply for.

    - question:             the inquiry text (must be non-empty after trimming)
    - session_id:           opaque correlation token, echoed back unchanged
    - model_id:             which LLM to use (None = configured default)
    - conversation_history: earlier turns, oldest first
    """

    question: str
    session_id: str | None = None
    model_id: str | None = None
    conversation_history: tuple[ConversationMessage, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SourceLocation:
    """Where a retrieved passage came from: an object-store URI or a web URL."""

    kind: str  # "s3" | "web"
    uri: str


@dataclass(frozen=True)
class RetrievedPassage:
    """A knowledge-base passage returned for a query, in rank order."""

    text: str
    location: SourceLocation | None = None
    score: float | None = None


@dataclass(frozen=True)
class DraftResponse:
    """Drafted email plus the source backing it."""

    response_text: str
    citation: str | None
    session_id: str | None


@dataclass(frozen=True)
class PromptBundle:
    """Everything sent to the LLM for one draft.

    The assistant turn is seeded with ``prefill`` so the model continues a
    letter instead of answering free-form.
    """

    system: str
    user_prompt: str
    prefill: str
    has_knowledge: bool
