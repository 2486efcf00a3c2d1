from __future__ import annotations

import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from wifi_importer.registration.mock import MockChannel
from wifi_importer.services.dispatcher import (
    BATCH_SIZE,
    BatchDispatcher,
    DispatcherState,
    DispatchStatus,
)
from wifi_importer.services.pipeline import collect

"""Unit tests for the batch dispatcher state machine."""


def test_twelve_networks_dispatch_5_5_2_then_exhausted(csv_with_networks):
    path = csv_with_networks(12)
    channel = MockChannel()
    dispatcher = BatchDispatcher(channel)
    assert dispatcher.state is DispatcherState.EMPTY

    first = dispatcher.dispatch(path)
    assert first.status is DispatchStatus.BATCH_SENT
    assert [s.ssid for s in first.batch] == ["Net0", "Net1", "Net2", "Net3", "Net4"]
    assert first.remaining == 7
    assert dispatcher.state is DispatcherState.LOADED

    second = dispatcher.dispatch(path)
    assert len(second.batch) == 5
    assert second.remaining == 2

    third = dispatcher.dispatch(path)
    assert [s.ssid for s in third.batch] == ["Net10", "Net11"]
    assert third.remaining == 0
    assert dispatcher.state is DispatcherState.EXHAUSTED

    fourth = dispatcher.dispatch(path)
    assert fourth.status is DispatchStatus.EXHAUSTED
    assert fourth.batch == ()
    assert dispatcher.state is DispatcherState.EMPTY
    assert dispatcher.position == 0
    assert dispatcher.total == 0

    assert [len(b) for b in channel.batches] == [5, 5, 2]


def test_fifth_call_behaves_as_fresh_load(csv_with_networks):
    path = csv_with_networks(12)
    collector = MagicMock(side_effect=collect)
    dispatcher = BatchDispatcher(MockChannel(), collector=collector)
    for _ in range(4):
        dispatcher.dispatch(path)
    assert collector.call_count == 1

    fifth = dispatcher.dispatch(path)
    assert collector.call_count == 2
    assert fifth.status is DispatchStatus.BATCH_SENT
    assert [s.ssid for s in fifth.batch][0] == "Net0"
    assert fifth.remaining == 7


def test_source_loaded_only_once_per_cycle(csv_with_networks, write_csv):
    path = csv_with_networks(7)
    dispatcher = BatchDispatcher(MockChannel())
    dispatcher.dispatch(path)
    # 読み込み済みなので別ファイルを渡しても現在のサイクルを継続
    other = write_csv("ssid,password,security\nOther,pw,WPA2\n", name="other.csv")
    second = dispatcher.dispatch(other)
    assert [s.ssid for s in second.batch] == ["Net5", "Net6"]


def test_nothing_to_dispatch_with_errors_stays_empty(write_csv):
    path = write_csv("ssid,password,security\n,pw,WPA2\nX,,WPA3\n")
    channel = MockChannel()
    dispatcher = BatchDispatcher(channel)
    outcome = dispatcher.dispatch(path)
    assert outcome.status is DispatchStatus.NOTHING_TO_DISPATCH
    assert [e.display for e in outcome.errors] == [
        "Row 2: Skipping network with empty SSID",
        "Row 3: Skipping WPA3 network 'X' with empty password",
    ]
    assert dispatcher.errors == outcome.errors
    assert dispatcher.state is DispatcherState.EMPTY
    assert channel.batches == []


def test_nothing_to_dispatch_for_header_only(write_csv):
    path = write_csv("ssid,password,security\n")
    outcome = BatchDispatcher(MockChannel()).dispatch(path)
    assert outcome.status is DispatchStatus.NOTHING_TO_DISPATCH
    assert outcome.errors == ()


def test_errors_reported_on_loading_call_only(sample_csv: Path):
    dispatcher = BatchDispatcher(MockChannel())
    first = dispatcher.dispatch(sample_csv)
    assert len(first.errors) == 4
    assert len(first.batch) == 3
    assert dispatcher.errors == first.errors
    second = dispatcher.dispatch(sample_csv)
    assert second.status is DispatchStatus.EXHAUSTED
    assert second.errors == ()
    assert dispatcher.errors == ()


def test_exact_multiple_of_batch_size(csv_with_networks):
    path = csv_with_networks(10)
    dispatcher = BatchDispatcher(MockChannel())
    statuses = [dispatcher.dispatch(path).status for _ in range(3)]
    assert statuses == [DispatchStatus.BATCH_SENT, DispatchStatus.BATCH_SENT, DispatchStatus.EXHAUSTED]


def test_explicit_reset(csv_with_networks):
    path = csv_with_networks(8)
    dispatcher = BatchDispatcher(MockChannel())
    dispatcher.dispatch(path)
    assert dispatcher.remaining == 3
    dispatcher.reset()
    assert dispatcher.state is DispatcherState.EMPTY
    again = dispatcher.dispatch(path)
    assert again.batch[0].ssid == "Net0"


def test_channel_failure_does_not_advance_cursor(csv_with_networks):
    path = csv_with_networks(6)
    channel = MagicMock()
    channel.send.side_effect = [RuntimeError("intent failed"), None]
    dispatcher = BatchDispatcher(channel)
    with pytest.raises(RuntimeError):
        dispatcher.dispatch(path)
    assert dispatcher.position == 0
    retry = dispatcher.dispatch(path)
    assert retry.batch[0].ssid == "Net0"


def test_invalid_batch_size():
    with pytest.raises(ValueError):
        BatchDispatcher(MockChannel(), batch_size=0)


def test_default_batch_size_is_five():
    assert BATCH_SIZE == 5
    assert BatchDispatcher(MockChannel()).batch_size == 5


def test_concurrent_dispatch_sends_every_network_once(csv_with_networks):
    path = csv_with_networks(40)
    channel = MockChannel()
    dispatcher = BatchDispatcher(channel)
    dispatcher.dispatch(path)

    def worker():
        for _ in range(3):
            dispatcher.dispatch(path)

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    sent = [s.ssid for batch in channel.batches for s in batch]
    assert sorted(sent, key=lambda n: int(n[3:])) == [f"Net{i}" for i in range(35)]
    assert len(set(sent)) == len(sent)
