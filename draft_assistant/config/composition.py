from draft_assistant.application.dto.draft_dto import DraftConfig
from draft_assistant.application.ports.clock_port import ClockPort
from draft_assistant.application.ports.draft_service_port import DraftServicePort
from draft_assistant.application.ports.knowledge_retriever_port import KnowledgeRetrieverPort
from draft_assistant.application.ports.llm_port import LLMPort
from draft_assistant.application.use_cases.draft_email_reply import DraftEmailReply
from draft_assistant.config.settings import AppSettings
from draft_assistant.domain.errors import ConfigurationError
from draft_assistant.infrastructure.gateway.http_draft_client import HttpDraftServiceClient
from draft_assistant.infrastructure.llm.bedrock_anthropic_adapter import BedrockAnthropicAdapter
from draft_assistant.infrastructure.llm.vllm_openai_adapter import VLLMOpenAIAdapter
from draft_assistant.infrastructure.retrieval.bedrock_kb_retriever import (
    BedrockKnowledgeBaseRetriever,
)
from draft_assistant.infrastructure.time.system_clock import SystemClock


def build_retriever(settings: AppSettings) -> KnowledgeRetrieverPort:
    return BedrockKnowledgeBaseRetriever(region=settings.aws_region)


def build_llm(settings: AppSettings) -> LLMPort:
    backend = settings.llm_backend

    if backend == "bedrock":
        return BedrockAnthropicAdapter(region=settings.aws_region)

    if backend == "openai":
        return VLLMOpenAIAdapter(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
        )

    raise ConfigurationError(f"unknown LLM_BACKEND: {backend}")


def build_draft_config(settings: AppSettings) -> DraftConfig:
    return DraftConfig(
        knowledge_base_id=settings.knowledge_base_id,
        default_model_id=settings.default_model_id,
        top_k=settings.retrieval_top_k,
    )


def build_clock() -> ClockPort:
    """Build clock adapter for time operations.

    Note:
        Tests should inject FakeClock or similar test doubles instead.
    """
    return SystemClock()


def build_draft_use_case(settings: AppSettings | None = None) -> DraftEmailReply:
    """Build the orchestrator; raises ConfigurationError if KB id or region is missing."""
    settings = settings or AppSettings()
    settings.require_orchestrator()
    return DraftEmailReply(
        retriever=build_retriever(settings),
        llm=build_llm(settings),
        config=build_draft_config(settings),
    )


def build_draft_service(settings: AppSettings | None = None) -> DraftServicePort:
    """Build what the gateway forwards to.

    DRAFT_BACKEND=remote: HTTP client for the deployed draft function.
    DRAFT_BACKEND=local:  the orchestrator itself, in-process.
    """
    settings = settings or AppSettings()
    settings.require_gateway()
    if settings.draft_backend == "local":
        return build_draft_use_case(settings)
    return HttpDraftServiceClient(
        base_url=settings.api_gateway_url,
        timeout_s=settings.gateway_timeout_s,
    )
