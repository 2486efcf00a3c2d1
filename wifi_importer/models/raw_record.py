from __future__ import annotations

from dataclasses import dataclass

"""RawRecord model for the Wi-Fi network CSV importer.

RawRecord represents a single data line of the CSV after column-count checks,
before any trimming or validation is applied.
"""

__all__ = [
    "RawRecord",
]


@dataclass(frozen=True)
class RawRecord:
    """One 3-field CSV line as read from the file.

    The row_number refers to the physical record position in the file
    (header = row 1, so the first data row is row 2).
    """
    row_number: int  # CSV row number (starting from 2 = 1st data row)
    ssid: str
    password: str
    security_type: str  # 未加工 (trim/upper はバリデータ側)
