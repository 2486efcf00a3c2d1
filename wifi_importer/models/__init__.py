"""Domain models for the Wi-Fi network CSV importer.

This package contains the value types that flow through the pipeline:
raw CSV records, validated suggestions, row errors and aggregated results.
"""

from .import_result import CollectResult, ImportResult
from .raw_record import RawRecord
from .row_error import ErrorType, RowError
from .suggestion import SecurityKind, Suggestion

__all__ = [
    # Parsing models
    "RawRecord",
    "RowError",
    "ErrorType",
    # Validated output
    "SecurityKind",
    "Suggestion",
    # Aggregation
    "CollectResult",
    "ImportResult",
]
