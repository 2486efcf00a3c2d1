from __future__ import annotations

from ..models.import_result import ImportResult
from .dispatcher import DispatchOutcome, DispatchStatus

"""Summary / status line rendering.

The SUMMARY line is always printed; full error detail is only printed on
request (--show-errors) and is otherwise left to the error log file.
"""


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for an import run.

    Format:
    SUMMARY suggested={success} failed={failure} errors={len(errors)}

    Examples:
        >>> render_summary_line(ImportResult(success_count=3, failure_count=1, errors=("Row 2: x",)))
        'SUMMARY suggested=3 failed=1 errors=1'
    """
    return (
        f"SUMMARY suggested={result.success_count} "
        f"failed={result.failure_count} "
        f"errors={len(result.errors)}"
    )


def render_import_message(result: ImportResult) -> str:
    return f"{result.success_count} networks suggested, {result.failure_count} failed."


def render_dispatch_message(outcome: DispatchOutcome) -> str:
    """Human readable status line for one dispatch call."""
    if outcome.status is DispatchStatus.BATCH_SENT:
        return f"Showing {len(outcome.batch)} networks. {outcome.remaining} remaining."
    if outcome.status is DispatchStatus.EXHAUSTED:
        return "All networks have been processed."
    if outcome.errors:
        return f"Found {len(outcome.errors)} errors. Use --show-errors for details."
    return "No networks found in CSV."
