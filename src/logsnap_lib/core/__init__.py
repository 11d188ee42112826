# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core infrastructure for logsnap.

This module collects the foundational classes, utilities, and helpers used
across the logsnap codebase: configuration, time windows, error handling,
and structured logging.
"""
