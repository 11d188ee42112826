# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Time windows of log collections and the names of snapshot directories.

Each collection run copies files from a single time window into a snapshot
directory named `<start>-<end>`, where both timestamps use the fixed-width
snapshot format (e.g. `20240101T000000Z-20240101T010000Z`).
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Self

from .config import CFG
from .error import LSError

# length of a single snapshot timestamp, e.g. '20240101T000000Z'
SNAPSHOT_STAMP_LENGTH = 16
# length of a full snapshot directory name, e.g. '20240101T000000Z-20240101T010000Z'
SNAPSHOT_NAME_LENGTH = 2 * SNAPSHOT_STAMP_LENGTH + 1


@dataclass(frozen=True)
class TimeWindow:
    """
    Immutable range of time, in UTC, from which logs are collected.

    Attributes:
        start (datetime): Beginning of the window.
        end (datetime): End of the window.
    """

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end < self.start:
            raise LSError(
                f"End of the time window ({self.end}) is before its start ({self.start})."
            )

    @classmethod
    def fromStart(cls, start: datetime, duration: timedelta) -> Self:
        """
        Create a window beginning at `start` and lasting `duration`.
        """
        return cls(start, start + duration)

    @classmethod
    def endingNow(cls, duration: timedelta, now: datetime | None = None) -> Self:
        """
        Create a window of the given `duration` ending at the current UTC time.
        """
        now = now or datetime.now(UTC)
        return cls(now - duration, now)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def toSnapshotName(self) -> str:
        """
        Return the name of the snapshot directory for this window.
        """
        fmt = CFG.date_formats.snapshot
        start, end = self.start.astimezone(UTC), self.end.astimezone(UTC)
        return f"{start.strftime(fmt)}-{end.strftime(fmt)}"

    def __str__(self) -> str:
        fmt = CFG.date_formats.standard
        return f"{self.start.strftime(fmt)} - {self.end.strftime(fmt)} UTC"


def parse_snapshot_end(name: str) -> datetime | None:
    """
    Parse the end of the time window encoded in the name of a snapshot directory.

    Only the end timestamp is parsed. The start timestamp must have
    the correct length but its content is not checked.

    Returns:
        datetime | None: The end of the window in UTC or None if `name`
        is not a snapshot directory name.
    """
    if len(name) != SNAPSHOT_NAME_LENGTH:
        return None

    parts = name.split("-")
    if len(parts) != 2 or len(parts[1]) != SNAPSHOT_STAMP_LENGTH:
        return None

    try:
        return datetime.strptime(parts[1], CFG.date_formats.snapshot).replace(
            tzinfo=UTC
        )
    except ValueError:
        return None
