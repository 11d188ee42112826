# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Any

from logsnap_lib.core.logger import get_logger

from .report import SyncReport
from .settings import CollectionSettings, ServerTarget
from .synchronizer import Synchronizer

logger = get_logger(__name__)


class Coordinator:
    """
    Collect logs from multiple servers concurrently.

    One `Synchronizer` is started per server and the coordinator waits
    until all of them have finished. An exception raised while processing
    one server never interrupts the other servers. After all servers
    have been processed, exceptions are passed to the registered handlers;
    exceptions without a handler are re-raised.

    Attributes:
        targets (list[ServerTarget]): Servers to collect logs from.
        encountered_errors (dict[str, BaseException]): A dictionary mapping
            server names to exceptions encountered while processing them.
    """

    def __init__(
        self,
        targets: list[ServerTarget],
        settings: CollectionSettings,
        max_workers: int | None = None,
    ):
        """
        Args:
            targets (list[ServerTarget]): Servers to collect logs from.
            settings (CollectionSettings): Settings shared by all servers.
            max_workers (int | None): Maximal number of servers processed at the same time.
                If None or 0, every server gets its own thread.
        """
        self.targets = targets
        self.encountered_errors: dict[str, BaseException] = {}

        self._settings = settings
        self._max_workers = max_workers or len(targets)
        self._handlers: dict[type[BaseException], Callable[..., Any]] = {}

    def onException(self, exc_type: type[BaseException], handler: Callable) -> None:
        """
        Register a handler function for a specific exception type.

        Args:
            exc_type (type[BaseException]): The exception type to handle.
                Subclasses of the type are handled as well unless they have their own handler.
            handler (Callable): Function to call when `exc_type` is raised.
                The handler must accept two arguments:
                - BaseException: The caught exception instance.
                - Coordinator: Reference to this `Coordinator` instance.
        """
        self._handlers[exc_type] = handler

    def run(self) -> list[SyncReport]:
        """
        Collect logs from all servers and wait for all of them to finish.

        Returns:
            list[SyncReport]: Reports for all servers, sorted by server name.

        Raises:
            Exception: The first exception raised by a server that has no registered handler.
        """
        if not self.targets:
            logger.warning("No servers to collect logs from.")
            return []

        reports: dict[str, SyncReport] = {}
        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="logsnap"
        ) as executor:
            futures: dict[Future, ServerTarget] = {
                executor.submit(Synchronizer(target, self._settings).synchronize): target
                for target in self.targets
            }

            for future in as_completed(futures):
                target = futures[future]
                try:
                    reports[target.name] = future.result()
                except Exception as e:
                    self.encountered_errors[target.name] = e
                    reports[target.name] = SyncReport(
                        target.name, target.share, fatal_error=str(e)
                    )

        for exception in self.encountered_errors.values():
            handler = self._getHandler(exception)
            if handler is None:
                raise exception
            handler(exception, self)

        return [reports[name] for name in sorted(reports)]

    def _getHandler(self, exception: BaseException) -> Callable | None:
        """
        Find the handler registered for the exception's type or its closest base type.
        """
        for exc_type in type(exception).__mro__:
            if exc_type in self._handlers:
                return self._handlers[exc_type]

        return None
