from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Protocol

from ..models.suggestion import Suggestion

"""Registration collaborator contracts.

BulkRegistrar: one all-or-nothing call for every suggestion of an import.
ChunkedChannel: fire-and-forget forwarding of small batches (<= 5).

Both expose is_available() so callers can perform the platform capability
check before running the pipeline.
"""

__all__ = [
    "BulkRegistrar",
    "ChunkedChannel",
    "RegistrationError",
    "RegistrationStatus",
]


class RegistrationStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class RegistrationError(Exception):
    """Raised by a backend when a single registration command fails."""


class BulkRegistrar(Protocol):
    def is_available(self) -> bool: ...

    def add_suggestions(self, suggestions: Sequence[Suggestion]) -> RegistrationStatus: ...


class ChunkedChannel(Protocol):
    def is_available(self) -> bool: ...

    def send(self, batch: Sequence[Suggestion]) -> None: ...
