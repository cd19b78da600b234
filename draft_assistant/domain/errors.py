"""Domain errors (typed) for the draft pipeline.

Why: One error family for the application layer; adapters translate their
client exceptions into these so no infrastructure types leak upward.
"""


class DomainError(Exception):
    """Base class for domain-specific errors."""


class ValidationError(DomainError):
    """Invalid input (client-caused)."""


class ConfigurationError(DomainError):
    """Required process-wide configuration is missing or invalid."""


class UpstreamUnavailableError(DomainError):
    """A collaborator service could not be reached or refused the call."""


class RetrievalError(UpstreamUnavailableError):
    """Knowledge base retrieval failed."""


class LLMError(UpstreamUnavailableError):
    """LLM backend failed or is misconfigured."""


class GatewayUnavailableError(UpstreamUnavailableError):
    """The forwarded call to the draft function failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InternalError(DomainError):
    """Unexpected failure inside the pipeline."""


class MalformedResponseError(InternalError):
    """A collaborator answered, but with a payload we cannot interpret."""
