# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Configuration system for logsnap.

This module defines dataclasses representing all configurable aspects of logsnap,
including the collection defaults, collector tuning, environment variables,
exit codes, presentation settings, and the cluster/server definitions.

The `Config` class loads user configuration from a TOML file (if available)
and provides a globally accessible `CFG` instance.
"""

import os
import tomllib
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Self, get_args, get_origin


@dataclass
class Defaults:
    """Values used when not specified on the command line."""

    # Root directory of the collected logs. Relative paths are resolved against the working directory.
    destination: str = "collected"
    # Cluster to collect logs from.
    cluster: str = ""
    # Length of the collection window (and retention period for cleaning).
    duration: str = "1h"


@dataclass
class CollectorSettings:
    """Settings for the log collector."""

    # Only files with this suffix are collected.
    suffix: str = ".tmp"
    # Size of the buffer (in bytes) used when copying files.
    chunk_size: int = 1024
    # Maximal number of servers processed at the same time. 0 means one thread per server.
    max_workers: int = 0
    # Delete destination files that were only partially written.
    remove_partial_files: bool = False
    # Suffix appended to compressed files.
    compressed_suffix: str = ".gz"


@dataclass
class ClusterSettings:
    """Definition of a single cluster."""

    # Share on each server containing the logs.
    logshare: str = "SPSS_DIMENSIONS_LOGS"
    # Mapping of server names to hosts.
    servers: dict[str, str] = field(default_factory=dict)

    def sharePath(self, host: str) -> str:
        """
        Construct the path to the log share of the given host.

        Hosts that are already absolute paths (e.g., local mounts) are joined
        with the log share directly, all other hosts are treated as network hosts.
        """
        if Path(host).is_absolute():
            return str(Path(host) / self.logshare)
        return f"//{host}/{self.logshare}"


@dataclass
class EnvironmentVariables:
    """Environment variable names used by logsnap."""

    # Enables logsnap debug mode.
    debug_mode: str = "LOGSNAP_DEBUG"
    # Path to the logsnap configuration file.
    config: str = "LOGSNAP_CONFIG"


@dataclass
class DateFormats:
    """Date and time format strings."""

    # Standard date format used by logsnap (also used for `--start`).
    standard: str = "%Y-%m-%d %H:%M:%S"
    # Format of the timestamps encoded in snapshot directory names.
    snapshot: str = "%Y%m%dT%H%M%SZ"


@dataclass
class ExitCodes:
    """Exit codes used for various errors."""

    # Default error code for failures of logsnap commands.
    default: int = 1
    # Returned when the destination cannot be created or read.
    fatal: int = 2
    # Returned on an unexpected or unhandled error.
    unexpected_error: int = 99


@dataclass
class ReportPresenterSettings:
    """Settings for ReportPresenter."""

    # Maximal width of the report panel.
    max_width: int | None = None
    # Minimal width of the report panel.
    min_width: int | None = 60
    # Style used for border lines.
    border_style: str = "white"
    # Style used for the title.
    title_style: str = "white bold"
    # Style used for table headers.
    headers_style: str = "default"
    # Style used for table values.
    main_style: str = "white"
    # Style used for servers that were processed without errors.
    success_style: str = "bright_green"
    # Style used for servers with failed files.
    warning_style: str = "bright_yellow"
    # Style used for servers with an unreachable share.
    error_style: str = "bright_red"
    # Code used to signify "total".
    sum_code: str = "Σ"


@dataclass
class Config:
    """Main configuration for logsnap."""

    defaults: Defaults = field(default_factory=Defaults)
    collector: CollectorSettings = field(default_factory=CollectorSettings)
    env_vars: EnvironmentVariables = field(default_factory=EnvironmentVariables)
    date_formats: DateFormats = field(default_factory=DateFormats)
    exit_codes: ExitCodes = field(default_factory=ExitCodes)
    report_presenter: ReportPresenterSettings = field(
        default_factory=ReportPresenterSettings
    )
    clusters: dict[str, ClusterSettings] = field(default_factory=dict)

    # Name of the logsnap binary.
    binary_name: str = "logsnap"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """
        Load configuration from TOML file or use defaults.

        Args:
            config_path: Explicit path to config file. If None, searches standard locations.

        Returns:
            Config instance with loaded or default values.
        """
        if config_path is None:
            config_path = Config._get_config_path()

        try:
            if config_path and config_path.exists():
                with config_path.open("rb") as f:
                    config_data = tomllib.load(f)
                return _dict_to_dataclass(cls, config_data)
        except Exception as e:
            raise ValueError(f"Could not read logsnap config '{config_path}': {e}.")

        # no config found - use defaults
        return cls()

    @staticmethod
    def _get_config_path() -> Path | None:
        """
        Search for config file in standard locations (XDG compliant).
        Returns the first existing config file, or None.
        """
        config_locations: list[Path | None] = [
            # 1. Explicit environment variable (highest priority)
            Path(env_path) if (env_path := os.getenv("LOGSNAP_CONFIG")) else None,
            # 2. Current working directory
            Path.cwd() / "logsnap_config.toml",
            # 3. XDG config home (standard user config location)
            Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
            / "logsnap"
            / "config.toml",
        ]

        for path in config_locations:
            if path and path.is_file():
                return path

        return None


def _dict_to_dataclass(cls, data: dict[str, Any]):
    """
    Recursively convert a dictionary to a dataclass instance.
    Handles nested dataclasses and dictionaries of dataclasses.
    """
    if not is_dataclass(cls):
        return data

    field_values = {}
    for field_info in fields(cls):
        field_name = field_info.name
        field_type = field_info.type

        if field_name not in data:
            continue

        value = data[field_name]
        if is_dataclass(field_type) and isinstance(value, dict):
            field_values[field_name] = _dict_to_dataclass(field_type, value)
        elif get_origin(field_type) is dict and isinstance(value, dict):
            # e.g. dict[str, ClusterSettings]
            value_type = get_args(field_type)[1]
            field_values[field_name] = {
                k: _dict_to_dataclass(value_type, v)
                if is_dataclass(value_type) and isinstance(v, dict)
                else v
                for k, v in value.items()
            }
        else:
            field_values[field_name] = value

    return cls(**field_values)


# Global configuration for logsnap.
CFG = Config.load()
