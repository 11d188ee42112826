# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime, timedelta, timezone

import pytest

from logsnap_lib.core.error import LSError
from logsnap_lib.core.window import (
    SNAPSHOT_NAME_LENGTH,
    TimeWindow,
    parse_snapshot_end,
)

START = datetime(2024, 1, 1, tzinfo=UTC)


def test_window_from_start():
    window = TimeWindow.fromStart(START, timedelta(hours=1))

    assert window.start == START
    assert window.end == datetime(2024, 1, 1, 1, tzinfo=UTC)
    assert window.duration == timedelta(hours=1)


def test_window_ending_now():
    now = datetime(2024, 6, 1, 12, tzinfo=UTC)
    window = TimeWindow.endingNow(timedelta(minutes=15), now)

    assert window.end == now
    assert window.start == datetime(2024, 6, 1, 11, 45, tzinfo=UTC)


def test_window_ending_now_uses_current_time():
    before = datetime.now(UTC)
    window = TimeWindow.endingNow(timedelta(hours=1))
    after = datetime.now(UTC)

    assert before <= window.end <= after


def test_window_empty_is_allowed():
    window = TimeWindow(START, START)
    assert window.duration == timedelta()


def test_window_end_before_start_raises():
    with pytest.raises(LSError, match="before its start"):
        TimeWindow(START, START - timedelta(seconds=1))


def test_window_is_immutable():
    window = TimeWindow.fromStart(START, timedelta(hours=1))
    with pytest.raises(FrozenInstanceError):
        window.start = START  # ty: ignore[invalid-assignment]


def test_window_to_snapshot_name():
    window = TimeWindow.fromStart(START, timedelta(hours=1))

    name = window.toSnapshotName()

    assert name == "20240101T000000Z-20240101T010000Z"
    assert len(name) == SNAPSHOT_NAME_LENGTH == 33


def test_window_to_snapshot_name_converts_to_utc():
    cet = timezone(timedelta(hours=1))
    window = TimeWindow.fromStart(datetime(2024, 1, 1, 1, tzinfo=cet), timedelta(hours=1))

    assert window.toSnapshotName() == "20240101T000000Z-20240101T010000Z"


def test_parse_snapshot_end():
    end = parse_snapshot_end("20240101T000000Z-20240101T010000Z")

    assert end == datetime(2024, 1, 1, 1, tzinfo=UTC)


def test_parse_snapshot_end_ignores_start():
    assert parse_snapshot_end("XXXXXXXXXXXXXXXX-20240101T010000Z") == datetime(
        2024, 1, 1, 1, tzinfo=UTC
    )
    # start after end
    assert parse_snapshot_end("20240101T020000Z-20240101T010000Z") == datetime(
        2024, 1, 1, 1, tzinfo=UTC
    )


@pytest.mark.parametrize(
    "name",
    [
        "logs",
        "20240101T000000Z-20240101T010000",
        "20240101T000000Z-20240101T010000ZZ",
        "20240101T000000Z_20240101T010000Z",
        "2024-0101T00000Z-20240101T010000Z",
        "20240101T000000Z-20241301T010000Z",
        "20240101T00000Z-020240101T010000Z",
    ],
)
def test_parse_snapshot_end_invalid(name):
    assert parse_snapshot_end(name) is None


def test_window_str():
    window = TimeWindow.fromStart(START, timedelta(hours=1))
    assert str(window) == "2024-01-01 00:00:00 - 2024-01-01 01:00:00 UTC"
