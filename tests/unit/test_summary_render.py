from __future__ import annotations

from wifi_importer.models.import_result import ImportResult
from wifi_importer.models.row_error import RowError
from wifi_importer.models.suggestion import SecurityKind, Suggestion
from wifi_importer.services.dispatcher import DispatchOutcome, DispatchStatus
from wifi_importer.services.summary import (
    render_dispatch_message,
    render_import_message,
    render_summary_line,
)

NET = Suggestion(ssid="A", passphrase=None, security_kind=SecurityKind.OPEN)


def test_render_summary_line():
    result = ImportResult(success_count=3, failure_count=2, errors=("Row 2: x", "Row 5: y"))
    assert render_summary_line(result) == "SUMMARY suggested=3 failed=2 errors=2"


def test_render_summary_line_bulk_failure():
    result = ImportResult(success_count=0, failure_count=3, errors=("Failed to add network suggestions",))
    assert render_summary_line(result) == "SUMMARY suggested=0 failed=3 errors=1"


def test_render_import_message():
    result = ImportResult(success_count=4, failure_count=1)
    assert render_import_message(result) == "4 networks suggested, 1 failed."


def test_render_dispatch_batch():
    outcome = DispatchOutcome(status=DispatchStatus.BATCH_SENT, batch=(NET, NET), remaining=0)
    assert render_dispatch_message(outcome) == "Showing 2 networks. 0 remaining."


def test_render_dispatch_exhausted():
    assert render_dispatch_message(DispatchOutcome(DispatchStatus.EXHAUSTED)) == "All networks have been processed."


def test_render_dispatch_nothing():
    assert render_dispatch_message(DispatchOutcome(DispatchStatus.NOTHING_TO_DISPATCH)) == "No networks found in CSV."
    with_errors = DispatchOutcome(
        DispatchStatus.NOTHING_TO_DISPATCH,
        errors=(RowError(2, "a"), RowError(3, "b")),
    )
    assert render_dispatch_message(with_errors) == "Found 2 errors. Use --show-errors for details."
