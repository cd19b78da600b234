"""Tests for composition root (dependency injection/wiring).

The composition root is the ONLY place that:
1. Reads environment variables (via AppSettings)
2. Instantiates concrete infrastructure adapters
3. Wires dependencies into use cases
"""

import pytest

from draft_assistant.application.ports.knowledge_retriever_port import KnowledgeRetrieverPort
from draft_assistant.application.ports.llm_port import LLMPort
from draft_assistant.application.use_cases.draft_email_reply import DraftEmailReply
from draft_assistant.config.composition import (
    build_draft_service,
    build_draft_use_case,
    build_llm,
    build_retriever,
)
from draft_assistant.config.settings import AppSettings
from draft_assistant.domain.errors import ConfigurationError
from draft_assistant.infrastructure.gateway.http_draft_client import HttpDraftServiceClient
from draft_assistant.infrastructure.llm.bedrock_anthropic_adapter import BedrockAnthropicAdapter
from draft_assistant.infrastructure.llm.vllm_openai_adapter import VLLMOpenAIAdapter

CONFIGURED = dict(knowledge_base_id="KB1", aws_region="eu-west-1")


class TestCompositionRoot:
    def test_build_retriever_returns_port_implementation(self) -> None:
        adapter = build_retriever(AppSettings(**CONFIGURED))

        assert isinstance(adapter, KnowledgeRetrieverPort)

    def test_build_llm_bedrock(self) -> None:
        adapter = build_llm(AppSettings(llm_backend="bedrock", **CONFIGURED))

        assert isinstance(adapter, BedrockAnthropicAdapter)
        assert isinstance(adapter, LLMPort)

    def test_build_llm_openai(self) -> None:
        adapter = build_llm(
            AppSettings(llm_backend="openai", llm_base_url="http://vllm:8000/v1", **CONFIGURED)
        )

        assert isinstance(adapter, VLLMOpenAIAdapter)
        assert adapter.base_url == "http://vllm:8000/v1"

    def test_build_llm_unknown(self) -> None:
        with pytest.raises(ConfigurationError):
            build_llm(AppSettings(llm_backend="nope", **CONFIGURED))

    def test_build_use_case_wires_config(self) -> None:
        uc = build_draft_use_case(AppSettings(retrieval_top_k=3, **CONFIGURED))

        assert isinstance(uc, DraftEmailReply)
        assert uc.config.knowledge_base_id == "KB1"
        assert uc.config.top_k == 3
        assert uc.config.max_tokens == 1000
        assert uc.config.temperature == 0.7

    def test_build_use_case_fails_fast_without_kb(self) -> None:
        with pytest.raises(ConfigurationError):
            build_draft_use_case(AppSettings(knowledge_base_id="", aws_region="eu-west-1"))

    def test_remote_draft_service(self) -> None:
        service = build_draft_service(
            AppSettings(draft_backend="remote", api_gateway_url="https://api.example.com/prod/")
        )

        assert isinstance(service, HttpDraftServiceClient)
        assert service.base_url == "https://api.example.com/prod"

    def test_local_draft_service(self) -> None:
        service = build_draft_service(AppSettings(draft_backend="local", **CONFIGURED))

        assert isinstance(service, DraftEmailReply)
