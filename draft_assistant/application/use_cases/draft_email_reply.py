# draft_assistant/application/use_cases/draft_email_reply.py
from __future__ import annotations

import logging

from draft_assistant.application.dto.draft_dto import DraftConfig
from draft_assistant.application.ports.knowledge_retriever_port import KnowledgeRetrieverPort
from draft_assistant.application.ports.llm_port import ChatMessage, LLMPort
from draft_assistant.domain.errors import (
    DomainError,
    InternalError,
    UpstreamUnavailableError,
    ValidationError,
)
from draft_assistant.domain.models import SUPPORTED_MODEL_IDS, DraftRequest, DraftResponse
from draft_assistant.domain.services.citations import extract_citation
from draft_assistant.domain.services.prompting import assemble_draft, compose_prompt
from draft_assistant.domain.types import Result

logger = logging.getLogger(__name__)


class DraftEmailReply:
    """
    Application use case turning one inquiry into one drafted email.
    No I/O of its own, uses only ports; handles errors via Result[T, E].

    Validate -> Retrieve -> Compose -> Invoke -> Extract citation -> Respond.
    """

    def __init__(
        self,
        retriever: KnowledgeRetrieverPort,
        llm: LLMPort,
        config: DraftConfig,
    ) -> None:
        self.retriever = retriever
        self.llm = llm
        self.config = config

    def execute(self, req: DraftRequest) -> Result[DraftResponse, DomainError]:
        # 1) Validate
        question = (req.question or "").strip()
        if not question:
            return Result.failure(ValidationError("Missing required parameter: question"))
        if req.model_id and req.model_id not in SUPPORTED_MODEL_IDS:
            return Result.failure(
                ValidationError(
                    f"Invalid modelId. Must be one of: {', '.join(SUPPORTED_MODEL_IDS)}"
                )
            )
        model_id = req.model_id or self.config.default_model_id

        try:
            # 2) Retrieve (zero passages means "no relevant knowledge")
            passages = self.retriever.retrieve(
                self.config.knowledge_base_id, question, self.config.top_k
            )
            logger.info("Retrieved %d passages", len(passages))

            # 3) Compose
            bundle = compose_prompt(question, passages, req.conversation_history)
            messages = [
                ChatMessage(role="user", content=bundle.user_prompt),
                ChatMessage(role="assistant", content=bundle.prefill),
            ]

            # 4) Invoke
            logger.info("Invoking model %s with prefilled response", model_id)
            response = self.llm.chat(
                messages,
                system=bundle.system,
                model_id=model_id,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except UpstreamUnavailableError as ex:
            logger.error("Draft failed, upstream unavailable: %s", ex)
            return Result.failure(ex)
        except InternalError as ex:
            logger.exception("Draft failed")
            return Result.failure(ex)
        except Exception as ex:  # noqa: BLE001
            logger.exception("Draft failed with unexpected error")
            return Result.failure(InternalError(f"draft pipeline failed: {type(ex).__name__}"))

        # 5) Citation from the top-ranked passage only
        citation = extract_citation(passages)

        # 6) Final text: greeting prefill + continuation, placeholders untouched
        text = assemble_draft(response.text)
        logger.debug("Generated email (%d chars)", len(text))

        return Result.success(
            DraftResponse(response_text=text, citation=citation, session_id=req.session_id)
        )
