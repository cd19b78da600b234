from __future__ import annotations

from collections.abc import Sequence

from draft_assistant.domain.models import RetrievedPassage


def extract_citation(passages: Sequence[RetrievedPassage]) -> str | None:
    """Citation for a draft: the top-ranked passage's source URI/URL, or None.

    Lower-ranked passages are never consulted, even if the first has no location.
    """
    if not passages:
        return None
    location = passages[0].location
    if location is None or not location.uri:
        return None
    return location.uri
