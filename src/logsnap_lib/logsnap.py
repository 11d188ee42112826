# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys

import click
from click_help_colors import HelpColorsGroup

from logsnap_lib.clean.cli import clean
from logsnap_lib.collect.cli import collect

__version__ = "0.1.0"

# support both --help and -h
_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(
    cls=HelpColorsGroup,
    help_options_color="bright_blue",
    invoke_without_command=True,
    context_settings=_CONTEXT_SETTINGS,
)
@click.option(
    "--version",
    is_flag=True,
    help="Print the current version of logsnap and exit.",
)
@click.pass_context
def cli(ctx: click.Context, version: bool):
    """
    Run any logsnap command.

    logsnap collects log files written during a time window from the servers
    of a cluster into a central snapshot directory and cleans up old snapshots.
    """
    if version:
        print(__version__)
        sys.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        sys.exit(0)


cli.add_command(collect)
cli.add_command(clean)
