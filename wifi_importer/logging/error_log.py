from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.row_error import RowError

"""Error log buffering.

- JSON Lines 固定スキーマ: timestamp, file, row, error_type, message (追加キー禁止)
- 起動ごとに `<log_dir>/errors-YYYYMMDD-HHMMSS.log` (UTC) を生成 (エラーがある場合のみ)
- メモリにバッファし、実行終了時に flush() で一括追記
"""

__all__ = [
    "ErrorLogBuffer",
    "LOGS_DIR",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer of (file, RowError) pairs. Flush writes JSON Lines.

    - the file path is decided on first access and stays fixed for the run
    - not thread-safe (serial execution)
    """

    def __init__(self, log_dir: Path = LOGS_DIR) -> None:
        self.log_dir = log_dir
        self._records: list[tuple[str, RowError]] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.log_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, file: str, error: RowError) -> None:
        self._records.append((file, error))

    def extend(self, file: str, errors: list[RowError] | tuple[RowError, ...]) -> None:
        for error in errors:
            self.append(file, error)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file.

        Returns:
            The log file path, or None when there was nothing to write
        """
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for file, error in self._records:
                f.write(error.to_json_line(file) + "\n")
        self._records.clear()
        return fp
