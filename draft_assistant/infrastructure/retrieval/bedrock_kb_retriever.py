"""Bedrock Knowledge Base retriever adapter.

Why: Implements KnowledgeRetrieverPort on top of the managed retrieval API;
boto3 is imported lazily so the domain and tests never need it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import import_module
from typing import Any

from draft_assistant.application.ports.knowledge_retriever_port import KnowledgeRetrieverPort
from draft_assistant.domain.errors import MalformedResponseError, RetrievalError
from draft_assistant.domain.models import (
    S3_LOCATION,
    WEB_LOCATION,
    RetrievedPassage,
    SourceLocation,
)

logger = logging.getLogger(__name__)


def parse_location(raw: Any) -> SourceLocation | None:
    """Map a retrieval result location onto an S3 URI or web URL (anything else -> None)."""
    if not isinstance(raw, dict):
        return None
    loc_type = str(raw.get("type") or "").upper()
    if loc_type == "S3":
        uri = (raw.get("s3Location") or {}).get("uri")
        return SourceLocation(kind=S3_LOCATION, uri=uri) if uri else None
    if loc_type == "WEB":
        url = (raw.get("webLocation") or {}).get("url")
        return SourceLocation(kind=WEB_LOCATION, uri=url) if url else None
    return None


def parse_retrieval_results(payload: Any) -> list[RetrievedPassage]:
    if not isinstance(payload, dict):
        raise MalformedResponseError("retrieve response is not an object")
    results = payload.get("retrievalResults") or []
    if not isinstance(results, list):
        raise MalformedResponseError("retrievalResults is not a list")

    passages: list[RetrievedPassage] = []
    for item in results:
        if not isinstance(item, dict):
            raise MalformedResponseError("retrieval result is not an object")
        content = item.get("content") or {}
        passages.append(
            RetrievedPassage(
                text=content.get("text") or "",
                location=parse_location(item.get("location")),
                score=item.get("score"),
            )
        )
    return passages


@dataclass
class BedrockKnowledgeBaseRetriever(KnowledgeRetrieverPort):
    region: str
    client: Any | None = None  # injectable boto3 "bedrock-agent-runtime" client

    def _get_client(self) -> Any:
        if self.client is None:
            boto3 = import_module("boto3")
            self.client = boto3.client("bedrock-agent-runtime", region_name=self.region)
        return self.client

    def retrieve(
        self, knowledge_base_id: str, query: str, top_k: int = 5
    ) -> list[RetrievedPassage]:
        logger.info("Retrieving from knowledge base %s (top_k=%d)", knowledge_base_id, top_k)
        try:
            resp = self._get_client().retrieve(
                knowledgeBaseId=knowledge_base_id,
                retrievalQuery={"text": query},
                retrievalConfiguration={
                    "vectorSearchConfiguration": {"numberOfResults": top_k},
                },
            )
        except Exception as ex:  # noqa: BLE001
            # Translate client/transport errors to domain-specific errors
            raise RetrievalError(f"knowledge base retrieval failed: {ex}") from ex
        return parse_retrieval_results(resp)
