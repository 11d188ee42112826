# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand

from logsnap_lib.core.common import (
    format_duration,
    parse_duration,
    resolve_destination,
)
from logsnap_lib.core.config import CFG
from logsnap_lib.core.error import LSError, LSFatalError
from logsnap_lib.core.logger import get_logger

from .pruner import Pruner

logger = get_logger(__name__)


@click.command(
    short_help="Delete old snapshots of a cluster.",
    help=f"""Delete snapshot directories of a cluster whose time window ended
more than DURATION ago.

Only directories created by `{CFG.binary_name} collect` (named `<start>-<end>`) are considered.
Other directories in the cluster's destination are never deleted.
""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.option(
    "-c",
    "--cluster",
    type=str,
    default=None,
    help="Cluster to clean up. Defaults to the cluster set in the configuration.",
)
@click.option(
    "-d",
    "--duration",
    type=str,
    default=None,
    help=f"Retention period of the snapshots (1h = 1 hour, 15m = 15 minutes, etc.). Defaults to '{CFG.defaults.duration}'.",
)
def clean(cluster: str | None, duration: str | None) -> NoReturn:
    """
    Delete old snapshots of a cluster.
    """
    try:
        cluster = cluster or CFG.defaults.cluster
        if not cluster:
            raise LSError(
                "No cluster specified. Use the '--cluster' option or set 'defaults.cluster' in the configuration."
            )

        retention = parse_duration(duration or CFG.defaults.duration)
        cluster_dir = resolve_destination(CFG.defaults.destination) / cluster

        logger.info(
            f"Starting clean-up of snapshots older than {format_duration(retention)} in '{cluster_dir}'."
        )
        deleted = Pruner(cluster_dir, retention).prune()
        logger.info(f"Finished: deleted {len(deleted)} snapshot(s).")
        sys.exit(0)
    except LSFatalError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.fatal)
    except LSError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
