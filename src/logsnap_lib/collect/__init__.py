# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Collection of log files from the servers of a cluster.

This module defines the `FileSelector`, which decides which files of a log share
belong to a time window, the `Synchronizer`, which copies (and optionally compresses)
the selected files of a single server while preserving their modification times,
and the `Coordinator`, which processes all servers of a cluster concurrently.
"""

from .coordinator import Coordinator
from .report import SyncReport
from .selector import CandidateFile, FileSelector
from .settings import CollectionSettings, ServerTarget
from .synchronizer import Synchronizer

__all__ = [
    "CandidateFile",
    "CollectionSettings",
    "Coordinator",
    "FileSelector",
    "ServerTarget",
    "SyncReport",
    "Synchronizer",
]
