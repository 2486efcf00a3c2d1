from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

"""RowError model for per-row diagnostics.

Each CSV record that does not yield a Suggestion produces exactly one RowError.
row=-1 is a sentinel for file-level errors (the stream could not be opened or
read, or the bulk registration call failed) where no row can be attributed.
"""

__all__ = [
    "ErrorType",
    "RowError",
    "UNKNOWN_ROW",
]

UNKNOWN_ROW = -1


class ErrorType(Enum):
    """Error classification, serialized in UPPER_SNAKE_CASE."""
    ROW_FORMAT = "ROW_FORMAT"  # wrong column count
    VALIDATION = "VALIDATION"  # empty SSID / missing passphrase / unsupported type
    CRITICAL_IO = "CRITICAL_IO"  # stream cannot be opened or read
    BULK_REGISTRATION = "BULK_REGISTRATION"  # registrar returned a failure status


@dataclass(frozen=True)
class RowError:
    """Row-scoped diagnostic.

    Attributes:
        row: Row number (1-based, header = 1). Use -1 for file-level errors
        message: Human readable reason, without the "Row N: " prefix
        error_type: ErrorType classification
    """
    row: int  # 行番号。不明な場合 -1 許容
    message: str
    error_type: ErrorType = ErrorType.VALIDATION

    @staticmethod
    def critical(detail: str) -> RowError:
        return RowError(row=UNKNOWN_ROW, message=detail, error_type=ErrorType.CRITICAL_IO)

    @property
    def display(self) -> str:
        """User-facing line as shown in the error list."""
        if self.error_type is ErrorType.CRITICAL_IO:
            return f"Critical error: {self.message}"
        if self.row == UNKNOWN_ROW:
            return self.message
        return f"Row {self.row}: {self.message}"

    def to_json_line(self, file: str) -> str:
        """Serialize to a JSON Lines entry for the error log.

        Parameters:
            file: CSV file name the error belongs to

        Returns:
            JSON string with exactly timestamp, file, row, error_type, message
        """
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return json.dumps(
            {
                "timestamp": ts,
                "file": file,
                "row": self.row,
                "error_type": self.error_type.value,
                "message": self.message,
            },
            ensure_ascii=False,
        )
