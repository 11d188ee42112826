# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from logsnap_lib.core.common import get_panel_width
from logsnap_lib.core.config import CFG

from .report import SyncReport
from .settings import CollectionSettings


class ReportPresenter:
    """
    Presents the outcome of a collection run.
    """

    def __init__(self, reports: list[SyncReport], settings: CollectionSettings):
        """
        Initialize the presenter.

        Args:
            reports (list[SyncReport]): Reports of the individual servers.
            settings (CollectionSettings): Settings of the collection run.
        """
        self._reports = reports
        self._settings = settings

    def dumpYaml(self) -> None:
        """
        Print the YAML representation of all reports to stdout.
        """
        for report in self._reports:
            print(report.toYaml())

    def createReportPanel(self, console: Console | None = None) -> Group:
        """
        Create a Rich panel summarizing the collection run.

        Args:
            console (Console | None): Optional Rich Console instance.
                If None, a new Console will be created.

        Returns:
            Group: Rich Group containing the report table.
        """
        console = console or Console()

        content = Group(
            Text(
                f"{self._settings.window}  →  {self._settings.snapshot_dir}",
                style=CFG.report_presenter.main_style,
                justify="center",
            ),
            Text(""),
            self._createReportTable(),
        )

        panel = Panel(
            content,
            title=Text(
                "COLLECTED LOGS",
                style=CFG.report_presenter.title_style,
                justify="center",
            ),
            border_style=CFG.report_presenter.border_style,
            padding=(1, 1),
            width=get_panel_width(
                console,
                1,
                CFG.report_presenter.min_width,
                CFG.report_presenter.max_width,
            ),
            expand=False,
        )

        return Group(Text(""), panel, Text(""))

    def _createReportTable(self) -> Table:
        """
        Construct a Rich Table with the number of collected and failed files per server.
        """
        table = Table(
            show_header=True,
            box=None,
            padding=(0, 1),
        )

        for header, justify in [
            ("Server", "left"),
            ("Collected", "right"),
            ("Failed", "right"),
            ("Note", "left"),
        ]:
            table.add_column(
                header=Text(
                    header,
                    justify="center",
                    style=CFG.report_presenter.headers_style,
                ),
                justify=justify,
            )

        for report in self._reports:
            style = self._getStyle(report)
            table.add_row(
                Text(report.server, style=style),
                Text(str(len(report.copied)), style=CFG.report_presenter.main_style),
                Text(str(len(report.failed)), style=style),
                Text(
                    report.fatal_error or report.share_error or "",
                    style=CFG.report_presenter.error_style,
                ),
            )

        table.add_row(
            Text(CFG.report_presenter.sum_code, style=CFG.report_presenter.main_style),
            Text(
                str(sum(len(r.copied) for r in self._reports)),
                style=CFG.report_presenter.main_style,
            ),
            Text(
                str(sum(len(r.failed) for r in self._reports)),
                style=CFG.report_presenter.main_style,
            ),
            Text(""),
        )

        return table

    @staticmethod
    def _getStyle(report: SyncReport) -> str:
        if report.fatal_error or report.share_error:
            return CFG.report_presenter.error_style
        if report.failed:
            return CFG.report_presenter.warning_style
        return CFG.report_presenter.success_style
