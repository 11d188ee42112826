# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from typing import Any

from .logger import get_logger

logger = get_logger(__name__)


def handle_fatal_error(
    exception: BaseException,
    _metadata: Any,
) -> None:
    """
    Handle errors caused by an unusable destination of the collected logs.
    """
    logger.error(exception)


def handle_unexpected_error(
    exception: BaseException,
    _metadata: Any,
) -> None:
    """
    Handle unexpected errors raised while processing a single server.
    """
    logger.critical(exception, exc_info=exception)
