"""Application ports package.

Re-exports the ports the draft pipeline depends on.
"""

from draft_assistant.application.ports.clock_port import ClockPort
from draft_assistant.application.ports.draft_service_port import DraftServicePort
from draft_assistant.application.ports.knowledge_retriever_port import (
    KnowledgeRetrieverPort,
    RetrievedPassage,
)
from draft_assistant.application.ports.llm_port import ChatMessage, LLMPort, LLMResponse

__all__ = [
    "ClockPort",
    "DraftServicePort",
    "KnowledgeRetrieverPort",
    "RetrievedPassage",
    "LLMPort",
    "ChatMessage",
    "LLMResponse",
]
