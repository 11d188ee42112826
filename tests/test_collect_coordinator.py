# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import threading
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from logsnap_lib.collect.coordinator import Coordinator
from logsnap_lib.collect.report import SyncReport
from logsnap_lib.collect.settings import CollectionSettings, ServerTarget
from logsnap_lib.core.error import LSFatalError
from logsnap_lib.core.window import TimeWindow

WINDOW = TimeWindow.fromStart(datetime(2024, 1, 1, tzinfo=UTC), timedelta(hours=1))


@pytest.fixture(autouse=True)
def creation_time_is_modification_time(monkeypatch):
    def file_times(stat):
        modified = datetime.fromtimestamp(stat.st_mtime, tz=UTC)
        return modified, modified

    monkeypatch.setattr("logsnap_lib.collect.selector.get_file_times", file_times)


def _settings(tmp_path: Path) -> CollectionSettings:
    return CollectionSettings(
        window=WINDOW, snapshot_dir=tmp_path / "collected" / WINDOW.toSnapshotName()
    )


def _make_share(root: Path, name: str) -> Path:
    share = root / name
    share.mkdir()
    log = share / f"{name}.tmp"
    log.write_bytes(name.encode() * 10)
    ts = int((WINDOW.start + timedelta(minutes=30)).timestamp())
    os.utime(log, (ts, ts))
    return share


def test_coordinator_collects_all_servers(tmp_path):
    targets = [
        ServerTarget(name, str(_make_share(tmp_path, name)))
        for name in ["web03", "web01", "web02"]
    ]
    settings = _settings(tmp_path)

    reports = Coordinator(targets, settings).run()

    assert [r.server for r in reports] == ["web01", "web02", "web03"]
    for report in reports:
        assert report.copied == [f"{report.server}.tmp"]
        assert (settings.snapshot_dir / report.server / f"{report.server}.tmp").is_file()


def test_coordinator_unreachable_share_does_not_affect_others(tmp_path):
    targets = [
        ServerTarget("web01", str(_make_share(tmp_path, "web01"))),
        ServerTarget("web02", str(tmp_path / "unreachable")),
        ServerTarget("web03", str(_make_share(tmp_path, "web03"))),
    ]
    settings = _settings(tmp_path)

    coordinator = Coordinator(targets, settings)
    reports = {r.server: r for r in coordinator.run()}

    assert coordinator.encountered_errors == {}
    assert reports["web02"].share_error is not None
    assert reports["web01"].succeeded and reports["web01"].copied == ["web01.tmp"]
    assert reports["web03"].succeeded and reports["web03"].copied == ["web03.tmp"]


def test_coordinator_no_targets():
    coordinator = Coordinator([], MagicMock())
    assert coordinator.run() == []


def _fake_synchronizer(behavior):
    """Return a Synchronizer replacement calling `behavior(target)` in `synchronize`."""

    def factory(target, _settings):
        synchronizer = MagicMock()
        synchronizer.synchronize.side_effect = lambda: behavior(target)
        return synchronizer

    return factory


def test_coordinator_waits_for_all_servers():
    finished = []

    def behavior(target):
        time.sleep(0.05 if target.name == "slow" else 0)
        finished.append(target.name)
        return SyncReport(target.name, target.share)

    targets = [ServerTarget("slow", "/a"), ServerTarget("fast", "/b")]
    with patch(
        "logsnap_lib.collect.coordinator.Synchronizer",
        side_effect=_fake_synchronizer(behavior),
    ):
        reports = Coordinator(targets, MagicMock()).run()

    assert sorted(finished) == ["fast", "slow"]
    assert [r.server for r in reports] == ["fast", "slow"]


def test_coordinator_runs_servers_concurrently():
    barrier = threading.Barrier(3, timeout=5)

    def behavior(target):
        # deadlocks (and times out) unless all three servers run at the same time
        barrier.wait()
        return SyncReport(target.name, target.share)

    targets = [ServerTarget(f"web0{i}", f"/share{i}") for i in range(3)]
    with patch(
        "logsnap_lib.collect.coordinator.Synchronizer",
        side_effect=_fake_synchronizer(behavior),
    ):
        coordinator = Coordinator(targets, MagicMock())
        reports = coordinator.run()

    assert coordinator.encountered_errors == {}
    assert len(reports) == 3


def test_coordinator_bounds_number_of_workers():
    lock = threading.Lock()
    running = 0
    max_running = 0

    def behavior(target):
        nonlocal running, max_running
        with lock:
            running += 1
            max_running = max(max_running, running)
        time.sleep(0.02)
        with lock:
            running -= 1
        return SyncReport(target.name, target.share)

    targets = [ServerTarget(f"web{i:02d}", f"/share{i}") for i in range(6)]
    with patch(
        "logsnap_lib.collect.coordinator.Synchronizer",
        side_effect=_fake_synchronizer(behavior),
    ):
        reports = Coordinator(targets, MagicMock(), max_workers=2).run()

    assert len(reports) == 6
    assert max_running <= 2


def test_coordinator_reraises_fatal_error_after_all_servers_finished():
    finished = []

    def behavior(target):
        if target.name == "broken":
            raise LSFatalError("Cannot create destination directory.")
        time.sleep(0.02)
        finished.append(target.name)
        return SyncReport(target.name, target.share)

    targets = [ServerTarget("broken", "/a"), ServerTarget("ok", "/b")]
    with (
        patch(
            "logsnap_lib.collect.coordinator.Synchronizer",
            side_effect=_fake_synchronizer(behavior),
        ),
        pytest.raises(LSFatalError),
    ):
        Coordinator(targets, MagicMock()).run()

    assert finished == ["ok"]


def test_coordinator_passes_errors_to_handlers():
    def behavior(target):
        if target.name == "broken":
            raise LSFatalError("Cannot create destination directory.")
        if target.name == "buggy":
            raise RuntimeError("unexpected")
        return SyncReport(target.name, target.share)

    fatal_handler = MagicMock()
    generic_handler = MagicMock()

    targets = [
        ServerTarget("broken", "/a"),
        ServerTarget("buggy", "/b"),
        ServerTarget("ok", "/c"),
    ]
    with patch(
        "logsnap_lib.collect.coordinator.Synchronizer",
        side_effect=_fake_synchronizer(behavior),
    ):
        coordinator = Coordinator(targets, MagicMock())
        coordinator.onException(LSFatalError, fatal_handler)
        coordinator.onException(Exception, generic_handler)
        reports = {r.server: r for r in coordinator.run()}

    fatal_handler.assert_called_once()
    assert isinstance(fatal_handler.call_args.args[0], LSFatalError)
    assert fatal_handler.call_args.args[1] is coordinator

    generic_handler.assert_called_once()
    assert isinstance(generic_handler.call_args.args[0], RuntimeError)

    assert set(coordinator.encountered_errors) == {"broken", "buggy"}
    assert reports["broken"].fatal_error == "Cannot create destination directory."
    assert reports["buggy"].fatal_error == "unexpected"
    assert reports["ok"].succeeded
