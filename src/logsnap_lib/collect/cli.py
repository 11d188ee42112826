# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand
from rich.console import Console

from logsnap_lib.core.common import (
    parse_duration,
    parse_start_time,
    resolve_destination,
)
from logsnap_lib.core.config import CFG
from logsnap_lib.core.error import LSError, LSFatalError
from logsnap_lib.core.error_handlers import (
    handle_fatal_error,
    handle_unexpected_error,
)
from logsnap_lib.core.logger import get_logger
from logsnap_lib.core.window import TimeWindow

from .coordinator import Coordinator
from .presenter import ReportPresenter
from .settings import CollectionSettings, ServerTarget

logger = get_logger(__name__)


@click.command(
    short_help="Collect logs from all servers of a cluster.",
    help=f"""Collect log files from all servers of a cluster into a new snapshot directory.

Only files ending with '{CFG.collector.suffix}' that were modified after the start
of the time window and created before its end are collected.

The logs are stored in `<destination>/<cluster>/<start>-<end>/<server>`.
The collected files keep the modification times of the original files.
""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.option(
    "-c",
    "--cluster",
    type=str,
    default=None,
    help="Cluster to gather logs from. Defaults to the cluster set in the configuration.",
)
@click.option(
    "-s",
    "--start",
    type=str,
    default=None,
    help="Time in UTC (YYYY-MM-DD HH:MM:SS) from when to collect the logs. Defaults to the current UTC time minus the duration.",
)
@click.option(
    "-d",
    "--duration",
    type=str,
    default=None,
    help=f"Duration of the period to collect the logs for (1h = 1 hour, 15m = 15 minutes, etc.). Defaults to '{CFG.defaults.duration}'.",
)
@click.option(
    "-z",
    "--compress",
    is_flag=True,
    help="Gzip compress the individual log files.",
)
@click.option(
    "-w",
    "--max-workers",
    type=click.IntRange(min=0),
    default=None,
    help="Maximal number of servers processed at the same time. 0 means all servers at once.",
)
@click.option("--yaml", is_flag=True, help="Print the report in YAML format.")
def collect(
    cluster: str | None,
    start: str | None,
    duration: str | None,
    compress: bool,
    max_workers: int | None,
    yaml: bool,
) -> NoReturn:
    """
    Collect logs from all servers of a cluster.
    """
    try:
        cluster = cluster or CFG.defaults.cluster
        targets = _get_targets(cluster)
        window = _get_window(start, duration or CFG.defaults.duration)

        settings = CollectionSettings.forCluster(
            resolve_destination(CFG.defaults.destination), cluster, window, compress
        )
        logger.info(
            f"Collecting logs of cluster '{cluster}' from {window} into '{settings.snapshot_dir}'."
        )

        coordinator = Coordinator(
            targets,
            settings,
            CFG.collector.max_workers if max_workers is None else max_workers,
        )
        coordinator.onException(LSFatalError, handle_fatal_error)
        coordinator.onException(Exception, handle_unexpected_error)
        reports = coordinator.run()

        presenter = ReportPresenter(reports, settings)
        if yaml:
            presenter.dumpYaml()
        else:
            console = Console(record=False, markup=False)
            console.print(presenter.createReportPanel(console))

        sys.exit(_get_exit_code(coordinator))
    except LSError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)


def _get_targets(cluster: str) -> list[ServerTarget]:
    """
    Get the servers of the specified cluster.

    Raises:
        LSError: If the cluster is not specified or not defined in the configuration.
    """
    if not cluster:
        raise LSError(
            "No cluster specified. Use the '--cluster' option or set 'defaults.cluster' in the configuration."
        )

    if cluster not in CFG.clusters:
        raise LSError(f"Cluster '{cluster}' is not defined in the configuration.")

    return ServerTarget.fromCluster(CFG.clusters[cluster])


def _get_window(start: str | None, duration: str) -> TimeWindow:
    """
    Construct the time window of the collection.

    Raises:
        LSError: If the start or the duration cannot be parsed.
    """
    length = parse_duration(duration)
    if start:
        return TimeWindow.fromStart(parse_start_time(start), length)

    return TimeWindow.endingNow(length)


def _get_exit_code(coordinator: Coordinator) -> int:
    """
    Get the exit code of the run. Failures of individual files do not affect it.
    """
    errors = coordinator.encountered_errors.values()
    if any(isinstance(e, LSFatalError) for e in errors):
        return CFG.exit_codes.fatal
    if errors:
        return CFG.exit_codes.unexpected_error
    return 0
