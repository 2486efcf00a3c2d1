from __future__ import annotations

import csv
import io
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

import pandas as pd

from ..models.raw_record import RawRecord
from ..models.row_error import ErrorType, RowError

"""CSV row parser.

1行目は内容に関係なくヘッダとして読み捨て、2行目以降をデータ行とする。
Each data record must have exactly 3 fields (ssid, password, security type);
records with any other field count are reported as ROW_FORMAT errors and
parsing continues with the next record.

Row numbers count CSV records, not physical lines, so a quoted field with an
embedded newline still advances the row number by one.
"""

__all__ = [
    "CriticalIOError",
    "CsvSource",
    "EXPECTED_COLUMNS",
    "FIRST_DATA_ROW",
    "INCORRECT_COLUMNS_MESSAGE",
    "iter_records",
    "open_csv_source",
    "read_csv_preview",
]

EXPECTED_COLUMNS = 3
FIRST_DATA_ROW = 2  # header = row 1
INCORRECT_COLUMNS_MESSAGE = "Incorrect number of columns"

CsvSource = str | Path | IO[str] | IO[bytes]


class CriticalIOError(Exception):
    """Raised when the CSV source cannot be opened or read at all."""


def _is_binary(stream: Any) -> bool:
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return "b" in getattr(stream, "mode", "")


@contextmanager
def open_csv_source(source: CsvSource, encoding: str = "utf-8") -> Iterator[IO[str]]:
    """Open a CSV source as a text stream and always close it on exit.

    Parameters
    ----------
    source: ファイルパス、テキストストリーム、またはバイナリストリーム。
        Streams passed in are owned by this context from then on and are
        closed together with it.
    encoding: テキストエンコーディング (パス/バイナリの場合のみ使用)
    """
    try:
        if isinstance(source, (str, Path)):
            stream: IO[str] = open(source, encoding=encoding, newline="")
        elif _is_binary(source):
            stream = io.TextIOWrapper(source, encoding=encoding, newline="")  # type: ignore[arg-type]
        else:
            stream = source  # type: ignore[assignment]
    except (OSError, LookupError) as e:
        # 未知のエンコーディングでも渡されたストリームは閉じる
        if not isinstance(source, (str, Path)):
            source.close()
        raise CriticalIOError(str(e)) from e
    try:
        yield stream
    finally:
        stream.close()


def iter_records(stream: IO[str]) -> Iterator[RawRecord | RowError]:
    """Yield RawRecord or ROW_FORMAT RowError for every record after the header.

    The iterator is lazy and cannot be restarted. Read failures (I/O errors,
    undecodable bytes, CSV syntax errors) abort iteration with CriticalIOError.
    """
    reader = csv.reader(stream)
    try:
        # Skip header row
        next(reader, None)
        for row_number, fields in enumerate(reader, start=FIRST_DATA_ROW):
            if len(fields) != EXPECTED_COLUMNS:
                yield RowError(
                    row=row_number,
                    message=INCORRECT_COLUMNS_MESSAGE,
                    error_type=ErrorType.ROW_FORMAT,
                )
                continue
            ssid, password, security_type = fields
            yield RawRecord(
                row_number=row_number,
                ssid=ssid,
                password=password,
                security_type=security_type,
            )
    except (OSError, ValueError, csv.Error) as e:
        # UnicodeDecodeError は ValueError のサブクラス
        raise CriticalIOError(str(e)) from e


def read_csv_preview(path: Path, nrows: int = 5, encoding: str = "utf-8") -> pd.DataFrame:
    """Read the header and the first rows of a CSV file for inspection.

    All cells are kept as strings (no NA conversion, so literal "NONE" or
    "NA" security tokens survive). The password column is masked.
    """
    df = pd.read_csv(
        path,
        nrows=nrows,
        dtype=str,
        keep_default_na=False,
        encoding=encoding,
        on_bad_lines="skip",
    )
    df = df.fillna("")
    if df.shape[1] >= 2:
        # 2列目 = password
        df.iloc[:, 1] = df.iloc[:, 1].map(lambda v: "***" if v else "")
    return df
