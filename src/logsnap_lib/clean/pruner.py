# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import shutil
from datetime import UTC, datetime, timedelta
from pathlib import Path

from logsnap_lib.core.error import LSFatalError
from logsnap_lib.core.logger import get_logger
from logsnap_lib.core.window import parse_snapshot_end

logger = get_logger(__name__)


class Pruner:
    """
    Class to manage deleting old snapshot directories of a cluster.

    Only directories named `<start>-<end>` with an `<end>` in the snapshot
    timestamp format are considered. The age of a snapshot is determined by
    `<end>` alone. All other directories and symbolic links are left untouched.
    """

    def __init__(self, cluster_dir: Path, retention: timedelta):
        """
        Args:
            cluster_dir (Path): Directory containing the snapshot directories of a cluster.
            retention (timedelta): Snapshots whose window ended before `now - retention` are deleted.
        """
        self._cluster_dir = cluster_dir
        self._retention = retention

    def prune(self, now: datetime | None = None) -> list[Path]:
        """
        Delete all expired snapshot directories.

        Args:
            now (datetime | None): Current time. Defaults to the current UTC time.

        Returns:
            list[Path]: Paths to the deleted directories.

        Raises:
            LSFatalError: If the cluster directory cannot be read.
        """
        threshold = (now or datetime.now(UTC)) - self._retention

        deleted = []
        for snapshot in self._getSnapshots():
            end = parse_snapshot_end(snapshot.name)
            # not a snapshot directory
            if end is None:
                continue

            if end >= threshold:
                continue

            logger.info(f"Cleaning up '{snapshot}'.")
            try:
                shutil.rmtree(snapshot)
            except OSError as e:
                logger.error(f"Cannot delete folder '{snapshot}': {e}.")
                continue

            deleted.append(snapshot)

        return deleted

    def _getSnapshots(self) -> list[Path]:
        """
        List the immediate subdirectories of the cluster directory, sorted by name.
        Symbolic links are skipped.

        Raises:
            LSFatalError: If the cluster directory cannot be read.
        """
        try:
            return sorted(
                p
                for p in self._cluster_dir.iterdir()
                if p.is_dir() and not p.is_symlink()
            )
        except OSError as e:
            raise LSFatalError(
                f"Cannot read from folder '{self._cluster_dir}': {e}."
            ) from e
