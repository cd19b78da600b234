from typing import Protocol, runtime_checkable

from draft_assistant.domain.models import RetrievedPassage

__all__ = ["KnowledgeRetrieverPort", "RetrievedPassage"]


@runtime_checkable
class KnowledgeRetrieverPort(Protocol):
    def retrieve(
        self, knowledge_base_id: str, query: str, top_k: int = 5
    ) -> list[RetrievedPassage]:
        """Return up to ``top_k`` passages, best first. An empty list is not an error.

        Raises:
            RetrievalError: the knowledge base could not be queried.
        """
        ...
