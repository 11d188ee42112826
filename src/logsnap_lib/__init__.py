# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core implementation of the logsnap command-line tool.

This package provides the internal logic behind logsnap's log collection
workflow. It defines the selection of log files by time window, the
concurrent collection of logs from the servers of a cluster, the copying
and compression of individual files, and the clean-up of old snapshots.
All logsnap CLI commands ultimately delegate to the functionality implemented here.
"""

from .logsnap import __version__, cli

__all__ = [
    "__version__",
    "cli",
    "clean",
    "collect",
    "core",
]
