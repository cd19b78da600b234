"""Tests for the DraftEmailReply use case."""

from collections.abc import Sequence

from draft_assistant.application.dto.draft_dto import DraftConfig
from draft_assistant.application.ports.llm_port import ChatMessage, LLMResponse
from draft_assistant.application.use_cases.draft_email_reply import DraftEmailReply
from draft_assistant.domain.errors import (
    InternalError,
    LLMError,
    MalformedResponseError,
    RetrievalError,
    ValidationError,
)
from draft_assistant.domain.models import (
    ConversationMessage,
    DraftRequest,
    RetrievedPassage,
    SourceLocation,
)
from draft_assistant.domain.services.prompting import NO_KNOWLEDGE_INSTRUCTION


class FakeRetriever:
    """Fake knowledge retriever recording its calls."""

    def __init__(
        self, passages: list[RetrievedPassage] | None = None, error: Exception | None = None
    ) -> None:
        self.passages = passages or []
        self.error = error
        self.calls: list[tuple[str, str, int]] = []

    def retrieve(self, knowledge_base_id: str, query: str, top_k: int = 5) -> list[RetrievedPassage]:
        self.calls.append((knowledge_base_id, query, top_k))
        if self.error is not None:
            raise self.error
        return self.passages[:top_k]


class FakeLLM:
    """Fake LLM adapter recording the prompt it was given."""

    def __init__(self, response: str = "Happy to help!", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def chat(
        self,
        messages: Sequence[ChatMessage],
        *,
        system: str,
        model_id: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        self.calls.append(
            {
                "messages": list(messages),
                "system": system,
                "model_id": model_id,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return LLMResponse(text=self.response)


CONFIG = DraftConfig(knowledge_base_id="KB123")


def make_passage(text: str, uri: str | None = None, kind: str = "s3") -> RetrievedPassage:
    location = SourceLocation(kind=kind, uri=uri) if uri else None
    return RetrievedPassage(text=text, location=location)


def make_uc(retriever: FakeRetriever, llm: FakeLLM) -> DraftEmailReply:
    return DraftEmailReply(retriever=retriever, llm=llm, config=CONFIG)


class TestValidation:
    def test_empty_question(self) -> None:
        """Whitespace-only question fails before any collaborator is called."""
        retriever, llm = FakeRetriever(), FakeLLM()
        result = make_uc(retriever, llm).execute(DraftRequest(question="   "))

        assert not result.ok
        assert isinstance(result.error, ValidationError)
        assert retriever.calls == []
        assert llm.calls == []

    def test_unknown_model(self) -> None:
        retriever = FakeRetriever()
        result = make_uc(retriever, FakeLLM()).execute(
            DraftRequest(question="X", model_id="not-a-real-model")
        )

        assert not result.ok
        assert isinstance(result.error, ValidationError)
        assert retriever.calls == []


class TestDraftFlow:
    def test_success_with_passages(self) -> None:
        found = [
            make_passage("Reset via the login page.", "s3://kb/reset.pdf"),
            make_passage("Passwords expire yearly.", "https://help.example.com/expiry", "web"),
        ]
        retriever = FakeRetriever(found)
        llm = FakeLLM("You can reset it from the login page.\n\nThanks,\n{{CS_REP_NAME}}")
        result = make_uc(retriever, llm).execute(
            DraftRequest(question="  How do I reset my password?  ", session_id="sess-1")
        )

        assert result.ok
        assert result.value is not None
        assert result.value.response_text == (
            "Hi {{CUSTOMER_NAME}},\n\nYou can reset it from the login page.\n\n"
            "Thanks,\n{{CS_REP_NAME}}"
        )
        assert result.value.citation == "s3://kb/reset.pdf"
        assert result.value.session_id == "sess-1"
        assert retriever.calls == [("KB123", "How do I reset my password?", 5)]

    def test_invoke_parameters_and_prefill(self) -> None:
        llm = FakeLLM()
        make_uc(FakeRetriever([make_passage("ctx")]), llm).execute(DraftRequest(question="Q"))

        call = llm.calls[0]
        assert call["model_id"] == "anthropic.claude-3-haiku-20240307-v1:0"
        assert call["temperature"] == 0.7
        assert call["max_tokens"] == 1000
        assert [m.role for m in call["messages"]] == ["user", "assistant"]
        assert call["messages"][-1].content == "Hi {{CUSTOMER_NAME}},"
        assert "[Source 1]: ctx" in call["messages"][0].content

    def test_requested_model_used(self) -> None:
        llm = FakeLLM()
        model = "anthropic.claude-3-opus-20240229-v1:0"
        make_uc(FakeRetriever(), llm).execute(DraftRequest(question="Q", model_id=model))

        assert llm.calls[0]["model_id"] == model

    def test_no_passages(self) -> None:
        """Zero results is not an error: no-knowledge prompt and null citation."""
        llm = FakeLLM()
        result = make_uc(FakeRetriever([]), llm).execute(DraftRequest(question="unrelated topic"))

        assert result.ok
        assert result.value is not None
        assert result.value.citation is None
        assert NO_KNOWLEDGE_INSTRUCTION in llm.calls[0]["messages"][0].content
        assert "<company_knowledge>" not in llm.calls[0]["messages"][0].content

    def test_citation_only_from_first_passage(self) -> None:
        found = [make_passage("a", "https://a.example", "web")] + [
            make_passage(f"p{i}", f"s3://kb/{i}") for i in range(4)
        ]
        result = make_uc(FakeRetriever(found), FakeLLM()).execute(DraftRequest(question="Q"))

        assert result.value is not None
        assert result.value.citation == "https://a.example"

    def test_session_id_none_echoed(self) -> None:
        result = make_uc(FakeRetriever(), FakeLLM()).execute(DraftRequest(question="Q"))

        assert result.value is not None
        assert result.value.session_id is None

    def test_history_in_prompt(self) -> None:
        llm = FakeLLM()
        history = (
            ConversationMessage(role="customer", content="My card was declined"),
            ConversationMessage(role="agent", content="Sorry to hear that"),
        )
        make_uc(FakeRetriever([make_passage("ctx")]), llm).execute(
            DraftRequest(question="Can I pay by wire?", conversation_history=history)
        )

        user_turn = llm.calls[0]["messages"][0].content
        assert "[Customer]: My card was declined\n\n[CS Rep]: Sorry to hear that" in user_turn


class TestFailures:
    def test_retrieval_failure_is_fatal(self) -> None:
        """No fallback to a no-context answer when retrieval fails."""
        llm = FakeLLM()
        result = make_uc(FakeRetriever(error=RetrievalError("network down")), llm).execute(
            DraftRequest(question="Q")
        )

        assert not result.ok
        assert isinstance(result.error, RetrievalError)
        assert llm.calls == []

    def test_llm_failure(self) -> None:
        result = make_uc(FakeRetriever(), FakeLLM(error=LLMError("throttled"))).execute(
            DraftRequest(question="Q")
        )

        assert not result.ok
        assert isinstance(result.error, LLMError)

    def test_malformed_response(self) -> None:
        result = make_uc(FakeRetriever(), FakeLLM(error=MalformedResponseError("no content"))).execute(
            DraftRequest(question="Q")
        )

        assert not result.ok
        assert isinstance(result.error, MalformedResponseError)

    def test_unexpected_error_wrapped(self) -> None:
        """Raw exception text never leaves the use case."""
        result = make_uc(FakeRetriever(error=KeyError("secret-detail")), FakeLLM()).execute(
            DraftRequest(question="Q")
        )

        assert not result.ok
        assert isinstance(result.error, InternalError)
        assert "secret-detail" not in str(result.error)
