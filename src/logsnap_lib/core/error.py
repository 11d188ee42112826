# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Exception types used throughout logsnap.

This module defines the logsnap-specific exceptions: recoverable errors,
failures of a single file copy, unreachable shares, and fatal errors caused
by an unusable destination. Each exception carries an associated exit code
used by logsnap commands to report failures consistently.
"""

from logsnap_lib.core.config import CFG


class LSError(Exception):
    """Common exception type for all recoverable logsnap errors."""

    exit_code = CFG.exit_codes.default


class LSCopyFailedError(LSError):
    """Raised when copying data between two streams fails."""

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class LSShareError(LSError):
    """Raised when the log share of a server cannot be listed."""

    pass


class LSFatalError(Exception):
    """
    Raised when the destination of the collected logs cannot be created or read.

    Signals a misconfiguration that should halt the whole run.
    """

    exit_code = CFG.exit_codes.fatal
