from __future__ import annotations

import logging
from pathlib import Path

from ..csvio.reader import CsvSource, iter_records, open_csv_source
from ..logging.error_log import ErrorLogBuffer
from ..models.import_result import CollectResult, ImportResult
from ..models.row_error import UNKNOWN_ROW, ErrorType, RowError
from ..models.suggestion import Suggestion
from ..registration.base import BulkRegistrar, RegistrationStatus
from .validator import validate_record

"""Import pipeline: parse -> validate -> aggregate -> (optional) bulk registration.

collect() is the shared primitive used by both import_and_register() and the
batch dispatcher. Row level problems never abort a pass; only a failure to
open or read the stream stops parsing early, and even then everything
collected so far is returned together with one critical error.
"""

__all__ = [
    "BULK_FAILURE_MESSAGE",
    "collect",
    "import_and_register",
    "source_name",
]

logger = logging.getLogger(__name__)

BULK_FAILURE_MESSAGE = "Failed to add network suggestions"


def source_name(source: CsvSource) -> str:
    """File name used to attribute errors in the error log."""
    if isinstance(source, (str, Path)):
        return Path(source).name
    name = getattr(source, "name", None)
    return Path(name).name if isinstance(name, str) else "<stream>"


def collect(
    source: CsvSource,
    encoding: str = "utf-8",
    error_log: ErrorLogBuffer | None = None,
) -> CollectResult:
    """Parse and validate a whole CSV source.

    Args:
        source: Path or stream (streams are closed when the pass ends)
        encoding: Text encoding for paths and binary streams
        error_log: Optional buffer receiving every RowError of the pass

    Returns:
        CollectResult with suggestions and errors, both in row order
    """
    name = source_name(source)
    suggestions: list[Suggestion] = []
    errors: list[RowError] = []

    try:
        with open_csv_source(source, encoding=encoding) as stream:
            for item in iter_records(stream):
                if isinstance(item, RowError):
                    errors.append(item)
                    continue
                outcome = validate_record(item.ssid, item.password, item.security_type)
                if isinstance(outcome, Suggestion):
                    suggestions.append(outcome)
                else:
                    errors.append(
                        RowError(
                            row=item.row_number,
                            message=outcome.reason,
                            error_type=ErrorType.VALIDATION,
                        )
                    )
    except Exception as e:
        # 途中までの結果は破棄しない
        logger.error(f"Critical error during network import ({name}): {e}", exc_info=True)
        errors.append(RowError.critical(str(e)))

    logger.info(f"{name}: {len(suggestions)} valid networks, {len(errors)} errors")
    if error_log is not None:
        error_log.extend(name, errors)
    return CollectResult(suggestions=tuple(suggestions), errors=tuple(errors))


def import_and_register(
    source: CsvSource,
    registrar: BulkRegistrar,
    encoding: str = "utf-8",
    error_log: ErrorLogBuffer | None = None,
) -> ImportResult:
    """Collect suggestions and register all of them in one bulk call.

    The bulk call is atomic from our point of view: a non-success status turns
    every suggestion of the call into a failure and appends
    BULK_FAILURE_MESSAGE to the error list.
    """
    collected = collect(source, encoding=encoding, error_log=error_log)
    suggestions = collected.suggestions
    failure_count = len(collected.errors)
    errors = collected.error_messages

    if suggestions:
        try:
            status = registrar.add_suggestions(suggestions)
        except Exception as e:
            logger.error(f"bulk registration raised: {e}", exc_info=True)
            status = RegistrationStatus.FAILURE

        if status is not RegistrationStatus.SUCCESS:
            logger.error(f"{BULK_FAILURE_MESSAGE}. Status: {status.value}")
            if error_log is not None:
                error_log.append(
                    source_name(source),
                    RowError(
                        row=UNKNOWN_ROW,
                        message=BULK_FAILURE_MESSAGE,
                        error_type=ErrorType.BULK_REGISTRATION,
                    ),
                )
            return ImportResult(
                success_count=0,
                failure_count=len(suggestions) + failure_count,
                errors=tuple(errors + [BULK_FAILURE_MESSAGE]),
            )

    return ImportResult(
        success_count=len(suggestions),
        failure_count=failure_count,
        errors=tuple(errors),
    )
