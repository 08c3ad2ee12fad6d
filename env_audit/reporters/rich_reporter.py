"""
Rich 终端报告器 - 使用 Rich 库输出彩色终端格式

One table per issue kind, then skipped files, then a severity summary.
"""

from io import StringIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markup import escape
from rich.text import Text

from env_audit.core.scanner.models import Issue, IssueKind, ScanReport, Severity


SEVERITY_STYLE = {
    Severity.ERROR: ("x", "red"),
    Severity.WARNING: ("!", "yellow"),
    Severity.INFO: ("i", "cyan"),
}

# Locations shown per issue before collapsing into "+N more"
MAX_LOCATIONS = 3

SECTIONS = [
    (IssueKind.MISSING, "MISSING ENV VARS", "red", "Used In"),
    (IssueKind.UNUSED, "UNUSED ENV VARS", "yellow", "Defined In"),
    (IssueKind.NAMING, "NAMING ISSUES", "cyan", "Suggestion"),
]


class RichReporter:
    """Rich 终端报告器"""

    def __init__(self, console: Console | None = None, show_suggestions: bool = True):
        self.console = console or Console()
        self.show_suggestions = show_suggestions

    def report(self, report: ScanReport, target: str) -> None:
        """生成 Rich 格式报告"""
        console = self.console
        console.print()
        console.print(f"[bold]env-audit[/bold] scan results for [cyan]{escape(target)}[/cyan]")
        console.print()
        self._print_stats(console, report)

        if not report.issues:
            console.print("[bold green]No issues found![/bold green]")
        else:
            for kind, title, color, column in SECTIONS:
                issues = report.issues_of(kind)
                if issues:
                    self._print_section(console, issues, title, color, column)

        if report.diagnostics:
            self._print_diagnostics(console, report)

        self._print_summary(console, report)

    def render(self, report: ScanReport, target: str) -> str:
        """Plain-text rendering, for writing to a file."""
        buffer = StringIO()
        console = Console(file=buffer, no_color=True, width=120, highlight=False)
        RichReporter(console, self.show_suggestions).report(report, target)
        return buffer.getvalue()

    def _print_stats(self, console: Console, report: ScanReport) -> None:
        s = report.summary
        console.print(
            f"Files scanned: {s.files_scanned}  |  Env files: {s.env_files_found}  "
            f"|  Duration: {s.duration_ms}ms",
            highlight=False,
        )
        console.print(
            f"Vars defined: {s.vars_defined}  |  Vars used: {s.vars_used}",
            highlight=False,
        )
        console.print()

    def _location_cell(self, issue: Issue) -> str:
        shown = [escape(str(loc)) for loc in issue.locations[:MAX_LOCATIONS]]
        extra = len(issue.locations) - MAX_LOCATIONS
        if extra > 0:
            shown.append(f"(+{extra} more)")
        return "\n".join(shown)

    def _detail_cell(self, issue: Issue) -> str:
        if issue.kind != IssueKind.NAMING:
            return self._location_cell(issue)
        text = escape(issue.message)
        if self.show_suggestions and issue.suggestion:
            text += f"\n→ use {escape(issue.suggestion)}"
        return text

    def _print_section(
        self,
        console: Console,
        issues: list[Issue],
        title: str,
        color: str,
        column: str,
    ) -> None:
        console.print(f"[bold {color}]{title}[/bold {color}] ({len(issues)})")
        table = Table(show_header=True, header_style="bold")
        table.add_column("", width=1)
        table.add_column("Variable", style="bold")
        if issues[0].kind == IssueKind.NAMING:
            table.add_column("Kind")
            table.add_column("Defined In")
        table.add_column(column)

        for issue in issues:
            symbol, style = SEVERITY_STYLE[issue.severity]
            row = [Text(symbol, style=style), issue.var_name]
            if issue.kind == IssueKind.NAMING:
                row.append(issue.naming_kind.value if issue.naming_kind else "")
                row.append(self._location_cell(issue))
            row.append(self._detail_cell(issue))
            table.add_row(*row)
        console.print(table)
        console.print()

    def _print_diagnostics(self, console: Console, report: ScanReport) -> None:
        lines = "\n".join(escape(f"{d.path}: {d.message}") for d in report.diagnostics)
        console.print(Panel(
            lines,
            title=f"[yellow]Skipped files ({len(report.diagnostics)})[/yellow]",
            border_style="yellow",
        ))
        console.print()

    def _print_summary(self, console: Console, report: ScanReport) -> None:
        s = report.summary
        errors = f"[red]Errors: {s.errors}[/red]" if s.errors else f"Errors: {s.errors}"
        warnings = (
            f"[yellow]Warnings: {s.warnings}[/yellow]" if s.warnings else f"Warnings: {s.warnings}"
        )
        infos = f"[cyan]Info: {s.infos}[/cyan]"
        console.print("[bold]SUMMARY[/bold]")
        console.print(f"  {errors}  |  {warnings}  |  {infos}", highlight=False)
        hidden = s.raw_total - s.total_issues
        if hidden > 0:
            console.print(f"  [dim]{hidden} issue(s) below the minimum severity not shown[/dim]")
        console.print()
