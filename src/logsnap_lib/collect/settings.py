# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from dataclasses import dataclass
from pathlib import Path
from typing import Self

from logsnap_lib.core.config import CFG, ClusterSettings
from logsnap_lib.core.window import TimeWindow


@dataclass(frozen=True)
class ServerTarget:
    """
    A server to collect logs from.

    Attributes:
        name (str): Identifier of the server, also used as the name of its destination directory.
        share (str): Path to the log share of the server.
    """

    name: str
    share: str

    @classmethod
    def fromCluster(cls, cluster: ClusterSettings) -> list[Self]:
        """
        Create targets for all servers of a cluster.
        """
        return [
            cls(name, cluster.sharePath(host)) for name, host in cluster.servers.items()
        ]


@dataclass(frozen=True)
class CollectionSettings:
    """
    Settings of a single collection run shared by all workers.

    Attributes:
        window (TimeWindow): Time window of the collected logs.
        snapshot_dir (Path): Directory into which the logs of all servers are collected.
        compress (bool): Compress the collected files using gzip.
        remove_partial_files (bool): Delete destination files which could not be fully written.
        suffix (str): Only files with this suffix are collected.
        chunk_size (int): Size of the copy buffer in bytes.
    """

    window: TimeWindow
    snapshot_dir: Path
    compress: bool = False
    remove_partial_files: bool = CFG.collector.remove_partial_files
    suffix: str = CFG.collector.suffix
    chunk_size: int = CFG.collector.chunk_size

    @classmethod
    def forCluster(
        cls, root: Path, cluster: str, window: TimeWindow, compress: bool
    ) -> Self:
        """
        Create settings collecting into `<root>/<cluster>/<snapshot name>`.
        """
        return cls(
            window=window,
            snapshot_dir=root / cluster / window.toSnapshotName(),
            compress=compress,
        )

    def destinationName(self, name: str) -> str:
        """
        Name of the collected copy of the file `name`.
        """
        return name + CFG.collector.compressed_suffix if self.compress else name
