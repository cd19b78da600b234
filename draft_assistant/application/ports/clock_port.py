from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, datetime


class ClockPort(ABC):
    """Source of "now" for the gateway's health answer and request log lines."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware UTC."""
        ...

    def timestamp(self) -> str:
        """``now()`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ``, the form browser clients parse."""
        return self.now().astimezone(UTC).isoformat(timespec="milliseconds").replace(
            "+00:00", "Z"
        )
