"""HTTP gateway for email drafting.

Why: Browser-facing API without business logic; validates, delegates to the
draft service and maps failures onto status codes.
"""

import logging
from http import HTTPStatus
from typing import Any

try:
    from fastapi import FastAPI, Request
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
    from starlette.exceptions import HTTPException as StarletteHTTPException
except ImportError as err:
    raise ImportError(
        "FastAPI not installed. Install with: pip install 'draft-assistant[http]'"
    ) from err

from draft_assistant.application.ports.clock_port import ClockPort
from draft_assistant.application.ports.draft_service_port import DraftServicePort
from draft_assistant.config.composition import build_clock, build_draft_service
from draft_assistant.config.log_setup import configure_logging
from draft_assistant.config.settings import AppSettings
from draft_assistant.domain.errors import UpstreamUnavailableError, ValidationError
from draft_assistant.domain.models import (
    ALLOWED_ROLES,
    SUPPORTED_MODEL_IDS,
    ConversationMessage,
    DraftRequest,
)

logger = logging.getLogger(__name__)

MISSING_QUESTION = "Missing required parameter: question"
INVALID_MODEL = f"Invalid modelId. Must be one of: {', '.join(SUPPORTED_MODEL_IDS)}"
UNAVAILABLE_MESSAGE = "Knowledge base temporarily unavailable"
INTERNAL_MESSAGE = "Error invoking model"


# Pydantic models for request/response validation
class ConversationMessageModel(BaseModel):
    """One history entry; presence and role are checked together."""

    role: str | None = None
    content: str | None = None

    @model_validator(mode="after")
    def _check_entry(self) -> "ConversationMessageModel":
        if not self.role or not self.content:
            raise ValueError("Each conversation message must have role and content")
        if self.role not in ALLOWED_ROLES:
            raise ValueError('Message role must be either "customer" or "agent"')
        return self


class DraftRequestModel(BaseModel):
    """Request model for /ai-draft endpoint."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    question: str
    request_session_id: str | None = Field(default=None, alias="requestSessionId")
    model_id: str | None = Field(default=None, alias="modelId")
    conversation_history: list[ConversationMessageModel] | None = Field(
        default=None, alias="conversationHistory"
    )

    @field_validator("question", mode="before")
    @classmethod
    def _question_present(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError(MISSING_QUESTION)
        return v.strip()

    @field_validator("model_id", mode="before")
    @classmethod
    def _known_model(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        if v not in SUPPORTED_MODEL_IDS:
            raise ValueError(INVALID_MODEL)
        return v

    @field_validator("conversation_history", mode="before")
    @classmethod
    def _history_is_array(cls, v: Any) -> Any:
        if v is not None and not isinstance(v, list):
            raise ValueError("conversationHistory must be an array")
        return v

    def to_domain(self) -> DraftRequest:
        history = tuple(
            ConversationMessage(role=m.role or "", content=m.content or "")
            for m in self.conversation_history or []
        )
        return DraftRequest(
            question=self.question,
            session_id=self.request_session_id,
            model_id=self.model_id,
            conversation_history=history,
        )


class DraftResponseModel(BaseModel):
    """Response model for /ai-draft endpoint."""

    response: str
    citation: str | None = None
    sessionId: str | None = None


class HealthResponseModel(BaseModel):
    status: str
    timestamp: str
    service: str


def error_response(status_code: int, message: str) -> JSONResponse:
    """Error envelope shared by every non-2xx answer."""
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "error": HTTPStatus(status_code).phrase,
            "message": message,
        },
    )


def _validation_message(errors: list[dict[str, Any]]) -> str:
    if not errors:
        return "Invalid request"
    err = errors[0]
    ctx_error = (err.get("ctx") or {}).get("error")
    if isinstance(ctx_error, Exception):
        return str(ctx_error)
    loc = [str(p) for p in err.get("loc", ()) if p != "body"]
    if err.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    if not loc:
        return "Request body must be a JSON object"
    if err.get("type") == "missing":
        return f"Missing required parameter: {loc[-1]}"
    return f"Invalid value for {'.'.join(loc)}: {err.get('msg')}"


def create_app(
    settings: AppSettings | None = None,
    draft_service: DraftServicePort | None = None,
    clock: ClockPort | None = None,
) -> FastAPI:
    """Build the gateway app.

    When ``draft_service`` is omitted it is built from settings on startup;
    missing configuration then aborts the startup.
    """
    settings = settings or AppSettings()
    app = FastAPI(title="Customer Service Email Draft API", version="1.0.0")
    app.state.draft_service = draft_service
    app.state.clock = clock or build_clock()
    app.state.service_name = settings.service_name

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event() -> None:
        """Initialize the draft service from the environment."""
        configure_logging(settings.log_level)
        if app.state.draft_service is None:
            app.state.draft_service = build_draft_service(settings)
        logger.info(
            "Gateway ready (backend=%s, service=%s)",
            settings.draft_backend,
            settings.service_name,
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Any) -> Any:
        logger.info(
            "%s - %s %s", app.state.clock.timestamp(), request.method, request.url.path
        )
        return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(400, _validation_message(list(exc.errors())))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        # Unknown route or wrong method: same answer as an unmatched path
        if exc.status_code in (404, 405):
            return error_response(404, f"Cannot {request.method} {request.url.path}")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error", exc_info=exc)
        return error_response(500, "Internal Server Error")

    @app.post("/ai-draft", response_model=DraftResponseModel)
    def ai_draft(req: DraftRequestModel) -> Any:
        """Generate a customer service email draft.

        Example:
            POST /ai-draft
            {
                "question": "How do I reset my password?",
                "requestSessionId": "abc-123",
                "modelId": "anthropic.claude-3-haiku-20240307-v1:0",
                "conversationHistory": [{"role": "customer", "content": "Hi"}]
            }
        """
        service = app.state.draft_service
        if service is None:
            return error_response(503, "Service not initialized")

        try:
            result = service.execute(req.to_domain())
        except ValidationError as ex:
            return error_response(400, str(ex))
        except Exception:
            logger.exception("Error in /ai-draft endpoint")
            return error_response(500, INTERNAL_MESSAGE)

        if result.ok and result.value is not None:
            return DraftResponseModel(
                response=result.value.response_text,
                citation=result.value.citation,
                sessionId=result.value.session_id,
            )

        err = result.error
        if isinstance(err, ValidationError):
            return error_response(400, str(err))
        if isinstance(err, UpstreamUnavailableError):
            logger.error("Draft service unavailable: %s", err)
            return error_response(503, UNAVAILABLE_MESSAGE)
        logger.error("Draft failed: %s", err)
        return error_response(500, INTERNAL_MESSAGE)

    @app.get("/health", response_model=HealthResponseModel)
    async def health() -> HealthResponseModel:
        """Health check endpoint."""
        return HealthResponseModel(
            status="healthy",
            timestamp=app.state.clock.timestamp(),
            service=app.state.service_name,
        )

    return app


app = create_app()
