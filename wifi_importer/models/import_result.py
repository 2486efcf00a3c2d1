from __future__ import annotations

from dataclasses import dataclass

from .row_error import RowError
from .suggestion import Suggestion

"""Result models for the import pipeline.

CollectResult is the shared output of the parse-and-validate pass.
ImportResult is the aggregated outcome of a full import with bulk registration.
"""

__all__ = [
    "CollectResult",
    "ImportResult",
]


@dataclass(frozen=True)
class CollectResult:
    """Partitioned output of one full pass over a CSV source."""
    suggestions: tuple[Suggestion, ...] = ()
    errors: tuple[RowError, ...] = ()  # 行順

    @property
    def error_messages(self) -> list[str]:
        return [e.display for e in self.errors]


@dataclass(frozen=True)
class ImportResult:
    """Aggregated results for one import run.

    failure_count = number of row errors, plus every suggestion of the call
    when the bulk registration reported a failure status.
    """
    success_count: int
    failure_count: int
    errors: tuple[str, ...] = ()  # 表示用メッセージ (行順)

    @property
    def has_failures(self) -> bool:
        return self.failure_count > 0
