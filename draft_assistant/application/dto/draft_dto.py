# draft_assistant/application/dto/draft_dto.py
from __future__ import annotations

from dataclasses import dataclass

from draft_assistant.domain.models import DEFAULT_MODEL_ID


@dataclass(frozen=True)
class DraftConfig:
    """
    Process-wide settings the orchestrator is built with.

    - knowledge_base_id: which knowledge base every retrieval targets
    - default_model_id:  model used when a request does not name one
    - top_k:             passages fetched per request
    - max_tokens:        generation cap for the continuation
    - temperature:       sampling temperature
    """

    knowledge_base_id: str
    default_model_id: str = DEFAULT_MODEL_ID
    top_k: int = 5
    max_tokens: int = 1000
    temperature: float = 0.7
