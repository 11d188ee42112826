# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from typing import BinaryIO

from logsnap_lib.core.config import CFG
from logsnap_lib.core.error import LSCopyFailedError


def copy_stream(
    source: BinaryIO, destination: BinaryIO, chunk_size: int | None = None
) -> int:
    """
    Copy all data from `source` to `destination` using a fixed-size buffer.

    Args:
        source (BinaryIO): Readable binary stream.
        destination (BinaryIO): Writable binary stream.
        chunk_size (int | None): Size of the buffer in bytes.
            Defaults to `collector.chunk_size` from the configuration.

    Returns:
        int: Number of bytes copied.

    Raises:
        LSCopyFailedError: If reading from the source or writing to the destination fails.
            The destination is not cleaned up.
    """
    chunk_size = chunk_size or CFG.collector.chunk_size

    copied = 0
    while True:
        try:
            chunk = source.read(chunk_size)
        except OSError as e:
            raise LSCopyFailedError("read", e) from e

        if not chunk:
            return copied

        try:
            destination.write(chunk)
        except OSError as e:
            raise LSCopyFailedError("write", e) from e

        copied += len(chunk)
