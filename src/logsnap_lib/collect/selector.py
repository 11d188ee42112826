# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Self

from logsnap_lib.core.common import get_file_times
from logsnap_lib.core.config import CFG
from logsnap_lib.core.logger import get_logger
from logsnap_lib.core.window import TimeWindow

logger = get_logger(__name__)


@dataclass(frozen=True)
class CandidateFile:
    """
    A single entry of a log share considered for collection.
    """

    name: str
    path: Path
    modified: datetime
    created: datetime
    is_dir: bool = False

    @classmethod
    def fromDirEntry(cls, entry: os.DirEntry) -> Self:
        """
        Create a candidate from an entry returned by `os.scandir`.

        Raises:
            OSError: If the entry cannot be stat-ed.
        """
        modified, created = get_file_times(entry.stat())
        return cls(
            name=entry.name,
            path=Path(entry.path),
            modified=modified,
            created=created,
            is_dir=entry.is_dir(),
        )


class FileSelector:
    """
    Decide which files of a log share belong to a time window.

    A file is selected if it was modified after the start of the window,
    created before the end of the window, and its name ends with
    the configured suffix. Directories are never selected.
    """

    def __init__(self, window: TimeWindow, suffix: str | None = None):
        self._window = window
        self._suffix = CFG.collector.suffix if suffix is None else suffix

    def isSelected(self, candidate: CandidateFile) -> bool:
        """
        Check whether the candidate file should be collected.
        """
        if candidate.is_dir:
            return False

        selected = (
            candidate.modified > self._window.start
            and candidate.created < self._window.end
            and candidate.name.endswith(self._suffix)
        )

        if not selected:
            logger.debug(
                f"Skipping '{candidate.name}' (modified {candidate.modified}, created {candidate.created})."
            )

        return selected
