"""Application settings with environment-driven configuration.

Why: Single place that reads the environment; every other layer receives
settings via dependency injection.
"""

import os
from dataclasses import dataclass, field

from draft_assistant.domain.errors import ConfigurationError
from draft_assistant.domain.models import DEFAULT_MODEL_ID


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from environment variables.

    This is the ONLY place where environment variables are read.

    Required values depend on the role of the process:
    - draft function / local gateway: KNOWLEDGE_BASE_ID and AWS_REGION
    - remote gateway: API_GATEWAY_URL
    """

    # ===== Knowledge Base / Region =====
    knowledge_base_id: str = field(default_factory=lambda: os.getenv("KNOWLEDGE_BASE_ID", ""))
    aws_region: str = field(default_factory=lambda: os.getenv("AWS_REGION", ""))
    retrieval_top_k: int = field(default_factory=lambda: int(os.getenv("RETRIEVAL_TOP_K", "5")))

    # ===== LLM Configuration =====
    llm_backend: str = field(default_factory=lambda: os.getenv("LLM_BACKEND", "bedrock").lower())
    # Supported: "bedrock" | "openai" (OpenAI-compatible server, e.g. vLLM)

    default_model_id: str = field(
        default_factory=lambda: os.getenv("DEFAULT_MODEL_ID", DEFAULT_MODEL_ID)
    )
    llm_base_url: str = field(
        default_factory=lambda: os.getenv("LLM_BASE_URL", "http://localhost:8000/v1")
    )
    llm_api_key: str = field(default_factory=lambda: os.getenv("LLM_API_KEY", "EMPTY"))
    llm_model: str = field(
        default_factory=lambda: os.getenv("LLM_MODEL", "meta-llama/Meta-Llama-3.1-8B-Instruct")
    )

    # ===== Gateway Configuration =====
    draft_backend: str = field(
        default_factory=lambda: os.getenv("DRAFT_BACKEND", "remote").lower()
    )
    # Supported: "remote" (forward to API_GATEWAY_URL) | "local" (orchestrator in-process)

    api_gateway_url: str = field(default_factory=lambda: os.getenv("API_GATEWAY_URL", ""))
    gateway_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("GATEWAY_TIMEOUT_S", "30"))
    )
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    service_name: str = field(
        default_factory=lambda: os.getenv("SERVICE_NAME", "draft-assistant-gateway")
    )

    # ===== Logging =====
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    def require_orchestrator(self) -> None:
        """Fail fast when the orchestrator cannot be built."""
        missing = [
            name
            for name, value in (
                ("KNOWLEDGE_BASE_ID", self.knowledge_base_id),
                ("AWS_REGION", self.aws_region),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"{' and '.join(missing)} environment variable(s) required"
            )

    def require_gateway(self) -> None:
        if self.draft_backend == "local":
            self.require_orchestrator()
        elif self.draft_backend == "remote":
            if not self.api_gateway_url:
                raise ConfigurationError("API_GATEWAY_URL environment variable is required")
        else:
            raise ConfigurationError(f"unknown DRAFT_BACKEND: {self.draft_backend}")
