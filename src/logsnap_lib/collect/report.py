# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from dataclasses import dataclass, field

import yaml

from logsnap_lib.core.common import load_yaml_dumper

Dumper: type[yaml.Dumper] = load_yaml_dumper()


@dataclass
class SyncReport:
    """
    Outcome of collecting logs from a single server.

    Attributes:
        server (str): Identifier of the server.
        share (str): Path to the log share of the server.
        copied (list[str]): Names of the collected files.
        failed (list[str]): Names of the files that could not be collected.
        share_error (str | None): Description of the error if the share could not be listed.
        fatal_error (str | None): Description of the error if the destination could not be prepared.
    """

    server: str
    share: str
    copied: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    share_error: str | None = None
    fatal_error: str | None = None

    @property
    def succeeded(self) -> bool:
        """True if the share was listed and no file failed."""
        return (
            self.share_error is None and self.fatal_error is None and not self.failed
        )

    def toDict(self) -> dict[str, object]:
        return {
            "Server": self.server,
            "Share": self.share,
            "Copied": list(self.copied),
            "Failed": list(self.failed),
            "Share error": self.share_error,
            "Fatal error": self.fatal_error,
        }

    def toYaml(self) -> str:
        """
        Return the YAML representation of the report.
        """
        return yaml.dump(
            self.toDict(), default_flow_style=False, sort_keys=False, Dumper=Dumper
        )
