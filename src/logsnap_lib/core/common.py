# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
General utility functions for the logsnap library.

This module provides helpers for parsing and formatting durations and times,
resolving the destination of the collected logs, reading file timestamps
in a platform-independent way, YAML output, and sizing rich panels.
"""

import os
import re
import sys
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from pathlib import Path

import yaml
from rich.console import Console

from .config import CFG
from .error import LSError
from .logger import get_logger

logger = get_logger(__name__)

# number followed by a unit, e.g. "1h", "1.5m", "250ms"
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ms|us|µs|h|m|s)")

_DURATION_UNITS = {
    "h": timedelta(hours=1),
    "m": timedelta(minutes=1),
    "s": timedelta(seconds=1),
    "ms": timedelta(milliseconds=1),
    "us": timedelta(microseconds=1),
    "µs": timedelta(microseconds=1),
}


@lru_cache(maxsize=1)
def load_yaml_dumper() -> type[yaml.Dumper]:
    """Return the fastest available YAML dumper (CDumper if possible)."""
    try:
        from yaml import CDumper as Dumper  # type: ignore[attr-defined]

        logger.debug("Loaded YAML CDumper.")
    except ImportError:
        from yaml import Dumper

        logger.debug("Loaded default YAML dumper.")
    return Dumper


def parse_duration(timestr: str) -> timedelta:
    """
    Convert a duration string such as "1h", "15m" or "1h30m" to a timedelta object.

    The string is a sequence of decimal numbers, each with a unit suffix
    (h, m, s, ms, us). A plain "0" is also accepted.

    Examples:
        "1h"     -> 1 hour
        "1h30m"  -> 1 hour, 30 minutes
        "1.5h"   -> 1 hour, 30 minutes
        "90s"    -> 1 minute, 30 seconds

    Args:
        timestr (str): Input duration string.

    Returns:
        timedelta: The corresponding duration.

    Raises:
        LSError: If the string is not a valid duration or the duration is negative.
    """
    s = timestr.strip()
    if s == "0":
        return timedelta()

    if s.startswith("-"):
        raise LSError(f"Duration '{timestr}' must not be negative.")
    s = s.removeprefix("+")

    if not s or _DURATION_PART.sub("", s) != "":
        raise LSError(f"Invalid duration '{timestr}'.")

    total = timedelta()
    for number, unit in _DURATION_PART.findall(s):
        total += float(number) * _DURATION_UNITS[unit]

    return total


def format_duration(td: timedelta) -> str:
    """
    Convert a timedelta into a human-readable string showing only relevant units.

    The output string includes days, hours, minutes, and seconds, but omits
    units that are zero.

    Args:
        td (timedelta): The duration to format.

    Returns:
        str: A formatted string representing the duration, e.g., '1d 2h 3m 4s'.
    """
    total_seconds = int(td.total_seconds())

    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0 or total_seconds == 0:
        parts.append(f"{seconds}s")

    return " ".join(parts)


def parse_start_time(timestr: str) -> datetime:
    """
    Parse a UTC time in the standard logsnap format (YYYY-MM-DD HH:MM:SS).

    Returns:
        datetime: Timezone-aware datetime in UTC.

    Raises:
        LSError: If the string cannot be parsed.
    """
    try:
        return datetime.strptime(timestr, CFG.date_formats.standard).replace(
            tzinfo=UTC
        )
    except ValueError as e:
        raise LSError(f"Cannot parse start date '{timestr}': {e}.") from e


def resolve_destination(destination: str, base: Path | None = None) -> Path:
    """
    Resolve the root directory of the collected logs.

    Absolute paths are returned unchanged, relative paths are resolved
    against `base` (the current working directory by default).
    """
    path = Path(destination)
    if path.is_absolute():
        return path

    return (base or Path.cwd()) / path


def get_file_times(stat_result: os.stat_result) -> tuple[datetime, datetime]:
    """
    Get the modification and creation times of a file as UTC datetimes.

    The creation time is taken from `st_birthtime` when the platform provides it.
    On Windows, `st_ctime` is used, which holds the creation time there.
    On platforms that do not record creation time (most Linux filesystems),
    the modification time is used instead.

    Args:
        stat_result (os.stat_result): Result of `os.stat` for the file.

    Returns:
        tuple[datetime, datetime]: Modification time and creation time.
    """
    modified = datetime.fromtimestamp(stat_result.st_mtime, tz=UTC)

    if (birthtime := getattr(stat_result, "st_birthtime", None)) is not None:
        created = datetime.fromtimestamp(birthtime, tz=UTC)
    elif sys.platform == "win32":
        created = datetime.fromtimestamp(stat_result.st_ctime, tz=UTC)
    else:
        created = modified

    return modified, created


def get_panel_width(
    console: Console, factor: int, min_width: int | None, max_width: int | None
) -> int:
    """
    Calculate the width of a panel relative to the console width, constrained by
    optional minimum and maximum width values.

    Args:
        console (Console): A rich Console-like object that provides terminal size.
        factor (int): A divisor used to scale down the terminal width.
        min_width (int): The minimum allowable panel width. If None, no lower bound is applied.
        max_width (int): The maximum allowable panel width. If None, no upper bound is applied.

    Returns:
        int: The computed panel width after applying scaling and bounds.
    """
    term_width = console.size.width
    panel_width = term_width // factor
    if min_width is not None:
        panel_width = max(panel_width, min_width)
    if max_width is not None:
        panel_width = min(panel_width, max_width)

    return panel_width
