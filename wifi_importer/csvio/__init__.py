from .reader import (
    CriticalIOError,
    iter_records,
    open_csv_source,
    read_csv_preview,
)

__all__ = [
    "CriticalIOError",
    "iter_records",
    "open_csv_source",
    "read_csv_preview",
]
