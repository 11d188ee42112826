# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import gzip
import os
import time
from contextlib import AbstractContextManager, nullcontext
from pathlib import Path
from typing import BinaryIO

from logsnap_lib.core.error import (
    LSCopyFailedError,
    LSError,
    LSFatalError,
    LSShareError,
)
from logsnap_lib.core.logger import get_logger

from .copier import copy_stream
from .report import SyncReport
from .selector import CandidateFile, FileSelector
from .settings import CollectionSettings, ServerTarget

logger = get_logger(__name__, show_time=True)


class Synchronizer:
    """
    Collect the logs of a single server.

    Files from the server's log share that belong to the time window
    are copied (and optionally compressed) into `<snapshot_dir>/<server>`.
    The copies keep the modification times of the original files.
    Source files are never modified.
    """

    def __init__(self, target: ServerTarget, settings: CollectionSettings):
        """
        Args:
            target (ServerTarget): The server to collect logs from.
            settings (CollectionSettings): Settings of the collection run.
        """
        self._target = target
        self._settings = settings
        self._selector = FileSelector(settings.window, settings.suffix)
        self._destination = settings.snapshot_dir / target.name

    def synchronize(self) -> SyncReport:
        """
        Collect all suitable files from the log share of the server.

        Failures of individual files and an unreachable share are logged
        and recorded in the returned report.

        Returns:
            SyncReport: Files that were collected or failed.

        Raises:
            LSFatalError: If the destination directory cannot be created.
        """
        report = SyncReport(self._target.name, self._target.share)
        logger.info(f"[{self._target.name}] Scanning '{self._target.share}'.")

        self._prepareDestination()

        try:
            entries = self._scanShare()
        except LSShareError as e:
            logger.error(f"[{self._target.name}] {e}")
            report.share_error = str(e)
            return report

        for entry in entries:
            try:
                if entry.is_dir():
                    continue
                candidate = CandidateFile.fromDirEntry(entry)
            except OSError as e:
                logger.error(
                    f"[{self._target.name}] Cannot read file info for '{entry.name}': {e}."
                )
                report.failed.append(entry.name)
                continue

            if not self._selector.isSelected(candidate):
                continue

            try:
                self._collectFile(candidate)
            except LSError as e:
                logger.error(f"[{self._target.name}] {e}")
                report.failed.append(candidate.name)
                continue

            report.copied.append(candidate.name)

        logger.info(
            f"[{self._target.name}] Done: collected {len(report.copied)} file(s), {len(report.failed)} failed."
        )
        return report

    def _prepareDestination(self) -> None:
        """
        Create the destination directory of the server, including parents.

        Raises:
            LSFatalError: If the directory cannot be created.
        """
        try:
            self._destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LSFatalError(
                f"Cannot create destination directory '{self._destination}': {e}."
            ) from e

    def _scanShare(self) -> list[os.DirEntry]:
        """
        List the entries of the server's log share, sorted by name.

        Raises:
            LSShareError: If the share cannot be listed.
        """
        try:
            with os.scandir(self._target.share) as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise LSShareError(
                f"Unable to open '{self._target.share}': {e}."
            ) from e

    def _collectFile(self, candidate: CandidateFile) -> None:
        """
        Copy a single file into the destination directory and restore its modification time.

        Streams are closed in the order compressor, destination, source.

        Raises:
            LSError: If the file cannot be opened or copied.
        """
        destination = self._destination / self._settings.destinationName(
            candidate.name
        )

        try:
            source = open(candidate.path, "rb")
        except OSError as e:
            raise LSError(
                f"Cannot open source file '{candidate.name}': {e}."
            ) from e

        with source:
            try:
                mtime_ns = os.fstat(source.fileno()).st_mtime_ns
            except OSError as e:
                raise LSError(
                    f"Cannot read file info for '{candidate.name}': {e}."
                ) from e

            try:
                target = open(destination, "wb")
            except OSError as e:
                raise LSError(
                    f"Cannot open destination file '{destination.name}': {e}."
                ) from e

            try:
                with target, self._wrap(target, mtime_ns) as writer:
                    copy_stream(source, writer, self._settings.chunk_size)
            except (LSCopyFailedError, OSError) as e:
                self._handlePartialFile(destination)
                raise LSError(
                    f"Cannot copy source to destination '{destination.name}': {e}."
                ) from e

        self._restoreModificationTime(destination, mtime_ns)
        logger.debug(f"[{self._target.name}] Collected '{candidate.name}'.")

    def _wrap(
        self, target: BinaryIO, mtime_ns: int
    ) -> AbstractContextManager[BinaryIO]:
        """
        Wrap the destination file in a gzip writer if compression is requested.
        """
        if not self._settings.compress:
            return nullcontext(target)

        # the gzip header stores the original modification time as an unsigned
        # 32-bit value; 0 means "not available"
        mtime = mtime_ns // 1_000_000_000
        if not 0 <= mtime < 2**32:
            mtime = 0

        return gzip.GzipFile(
            fileobj=target, mode="wb", mtime=mtime
        )  # ty: ignore[invalid-return-type]

    def _handlePartialFile(self, destination: Path) -> None:
        """
        Delete a partially written destination file, if configured to do so.
        """
        if not self._settings.remove_partial_files:
            return

        try:
            destination.unlink(missing_ok=True)
        except OSError as e:
            logger.error(
                f"[{self._target.name}] Cannot remove partially written file '{destination.name}': {e}."
            )

    def _restoreModificationTime(self, destination: Path, mtime_ns: int) -> None:
        """
        Set the modification time of the destination file. Failures are only logged.
        """
        try:
            os.utime(destination, ns=(time.time_ns(), mtime_ns))
        except OSError as e:
            logger.error(
                f"[{self._target.name}] Error setting last modified date on '{destination.name}': {e}."
            )
