from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.suggestion import Suggestion
from .base import RegistrationStatus

"""In-memory registration backends (mock mode).

Used when no platform Wi-Fi stack is wanted or present: every call is
recorded and logged, nothing touches the system.
"""

__all__ = [
    "MockChannel",
    "MockRegistrar",
]

logger = logging.getLogger(__name__)


class MockRegistrar:
    """Bulk registrar that records calls and answers with a fixed status."""

    def __init__(
        self,
        status: RegistrationStatus = RegistrationStatus.SUCCESS,
        *,
        available: bool = True,
    ) -> None:
        self.status = status
        self.available = available
        self.calls: list[tuple[Suggestion, ...]] = []

    def is_available(self) -> bool:
        return self.available

    def add_suggestions(self, suggestions: Sequence[Suggestion]) -> RegistrationStatus:
        self.calls.append(tuple(suggestions))
        logger.info(f"mock: add_suggestions count={len(suggestions)} status={self.status.value}")
        return self.status


class MockChannel:
    """Chunked channel that records every forwarded batch."""

    def __init__(self, *, available: bool = True) -> None:
        self.available = available
        self.batches: list[tuple[Suggestion, ...]] = []

    def is_available(self) -> bool:
        return self.available

    def send(self, batch: Sequence[Suggestion]) -> None:
        self.batches.append(tuple(batch))
        names = ", ".join(s.ssid for s in batch)
        logger.info(f"mock: forwarding {len(batch)} networks: {names}")
