# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Clean-up of old snapshot directories.

This module defines the `Pruner` class, which deletes snapshot directories
of a cluster whose time window ended longer ago than the retention period.
Directories that do not follow the snapshot naming scheme are never touched.
"""

from .pruner import Pruner

__all__ = [
    "Pruner",
]
