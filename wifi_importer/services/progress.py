from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

Non-TTY output (CI, pipes) gets no progress bar to avoid ANSI control
sequence spam; log lines still carry the per-batch status.
"""

__all__ = [
    "DispatchProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class DispatchProgress:
    """Progress bar over the networks forwarded by batch dispatch."""

    def __init__(self, total_networks: int, *, description: str = "Dispatching networks") -> None:
        self.total_networks = total_networks
        self.description = description
        self.sent = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_networks,
                desc=description,
                unit="network",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, batch_size: int, remaining: int) -> None:
        self.sent += batch_size
        if self.enabled and self.pbar is not None:
            self.pbar.update(batch_size)
            self.pbar.set_postfix(remaining=remaining)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> DispatchProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
