from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..csvio.reader import CsvSource
from ..logging.error_log import ErrorLogBuffer
from ..models.import_result import CollectResult
from ..models.row_error import RowError
from ..models.suggestion import Suggestion
from ..registration.base import ChunkedChannel
from .pipeline import collect

"""Batch dispatcher: releases collected suggestions in fixed-size chunks.

State transitions: EMPTY -> LOADED -> EXHAUSTED -> EMPTY

- EMPTY: dispatch() loads the source via collect(); if nothing valid was
  found the dispatcher stays EMPTY and reports the collected errors
- LOADED: each dispatch() forwards the next batch (<= batch_size) to the
  channel and advances the cursor
- EXHAUSTED: cursor at the end; the next dispatch() reports completion and
  resets to EMPTY in the same call, so the call after that reloads
"""

__all__ = [
    "BATCH_SIZE",
    "BatchDispatcher",
    "DispatchOutcome",
    "DispatchStatus",
    "DispatcherState",
]

logger = logging.getLogger(__name__)

BATCH_SIZE = 5

Collector = Callable[..., CollectResult]


class DispatcherState(Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    EXHAUSTED = "exhausted"


class DispatchStatus(Enum):
    BATCH_SENT = "batch_sent"  # one batch forwarded to the channel
    EXHAUSTED = "exhausted"  # everything was already sent; state reset
    NOTHING_TO_DISPATCH = "nothing_to_dispatch"  # source had no valid networks


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of a single dispatch() call.

    errors is only filled on the call that (re)loaded the source.
    """
    status: DispatchStatus
    batch: tuple[Suggestion, ...] = ()
    remaining: int = 0
    errors: tuple[RowError, ...] = ()


class BatchDispatcher:
    """Owns the loaded suggestions and the cursor into them.

    The check / slice / advance sequence of dispatch() runs under a lock, so
    concurrent callers can neither send a batch twice nor skip one.
    """

    def __init__(
        self,
        channel: ChunkedChannel,
        batch_size: int = BATCH_SIZE,
        collector: Collector = collect,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1: {batch_size}")
        self._channel = channel
        self._batch_size = batch_size
        self._collector = collector
        self._lock = threading.Lock()
        self._suggestions: tuple[Suggestion, ...] = ()
        self._errors: tuple[RowError, ...] = ()
        self._position = 0

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def state(self) -> DispatcherState:
        if not self._suggestions:
            return DispatcherState.EMPTY
        if self._position >= len(self._suggestions):
            return DispatcherState.EXHAUSTED
        return DispatcherState.LOADED

    @property
    def position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return len(self._suggestions)

    @property
    def remaining(self) -> int:
        return len(self._suggestions) - self._position

    @property
    def errors(self) -> tuple[RowError, ...]:
        """Errors collected by the most recent load."""
        return self._errors

    def reset(self) -> None:
        with self._lock:
            self._reset_locked()

    def _reset_locked(self) -> None:
        self._suggestions = ()
        self._errors = ()
        self._position = 0

    def dispatch(
        self,
        source: CsvSource,
        encoding: str = "utf-8",
        error_log: ErrorLogBuffer | None = None,
    ) -> DispatchOutcome:
        """Forward the next batch, loading the source first when EMPTY."""
        with self._lock:
            loaded_errors: tuple[RowError, ...] = ()
            if not self._suggestions:
                collected = self._collector(source, encoding=encoding, error_log=error_log)
                if not collected.suggestions:
                    logger.info(f"no networks to dispatch ({len(collected.errors)} errors)")
                    self._errors = collected.errors
                    return DispatchOutcome(
                        status=DispatchStatus.NOTHING_TO_DISPATCH,
                        errors=collected.errors,
                    )
                self._suggestions = collected.suggestions
                self._errors = collected.errors
                self._position = 0
                loaded_errors = collected.errors

            if self._position >= len(self._suggestions):
                logger.info("All networks have been processed.")
                self._reset_locked()
                return DispatchOutcome(status=DispatchStatus.EXHAUSTED)

            end = min(self._position + self._batch_size, len(self._suggestions))
            batch = self._suggestions[self._position:end]
            # 送信失敗 (例外) 時はカーソルを進めない
            self._channel.send(batch)
            self._position = end
            remaining = len(self._suggestions) - end
            logger.debug(f"dispatched rows [{end - len(batch)}, {end}) remaining={remaining}")
            return DispatchOutcome(
                status=DispatchStatus.BATCH_SENT,
                batch=batch,
                remaining=remaining,
                errors=loaded_errors,
            )
