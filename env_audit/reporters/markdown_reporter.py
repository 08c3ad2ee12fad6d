"""
Markdown 报告器 - 输出适合 PR 评论的 Markdown 报告
"""

import sys
from typing import TextIO

from env_audit.core.scanner.models import Issue, IssueKind, ScanReport, Severity


SEVERITY_EMOJI = {
    Severity.ERROR: ":x:",
    Severity.WARNING: ":warning:",
    Severity.INFO: ":information_source:",
}

MAX_LOCATIONS = 3


def _locations(issue: Issue, limit: int | None = MAX_LOCATIONS) -> str:
    shown = issue.locations if limit is None else issue.locations[:limit]
    text = ", ".join(f"`{loc}`" for loc in shown)
    extra = len(issue.locations) - len(shown)
    if extra > 0:
        text += f" (+{extra} more)"
    return text


class MarkdownReporter:
    """Markdown 报告器"""

    def __init__(self, output: TextIO | None = None, show_suggestions: bool = True):
        self.output = output or sys.stdout
        self.show_suggestions = show_suggestions

    def render(self, report: ScanReport, target: str) -> str:
        s = report.summary
        lines = [
            "# env-audit Report",
            "",
            f"Target: `{target}`",
            "",
            "## Summary",
            "",
            f"- **Files scanned:** {s.files_scanned}",
            f"- **Env files found:** {s.env_files_found}",
            f"- **Variables defined:** {s.vars_defined}",
            f"- **Variables used:** {s.vars_used}",
            f"- **Scan duration:** {s.duration_ms}ms",
            "",
            "### Issues",
            "",
            "| Severity | Count |",
            "|----------|-------|",
            f"| :x: Errors | {s.errors} |",
            f"| :warning: Warnings | {s.warnings} |",
            f"| :information_source: Info | {s.infos} |",
            "",
        ]

        if not report.issues:
            lines.append("> **No issues found!** :tada:")
        else:
            lines.extend(self._missing(report.issues_of(IssueKind.MISSING)))
            lines.extend(self._unused(report.issues_of(IssueKind.UNUSED)))
            lines.extend(self._naming(report.issues_of(IssueKind.NAMING)))

        if report.diagnostics:
            lines.extend(["## Skipped Files", ""])
            lines.extend(f"- `{d.path}`: {d.message}" for d in report.diagnostics)
            lines.append("")

        return "\n".join(lines).rstrip() + "\n"

    def report(self, report: ScanReport, target: str) -> None:
        self.output.write(self.render(report, target))

    def _missing(self, issues: list[Issue]) -> list[str]:
        if not issues:
            return []
        lines = [
            "## Missing Environment Variables",
            "",
            "These variables are used in code but not defined in any `.env` file.",
            "",
            "| | Variable | Used In |",
            "|---|----------|---------|",
        ]
        for issue in issues:
            lines.append(
                f"| {SEVERITY_EMOJI[issue.severity]} | `{issue.var_name}` | {_locations(issue)} |"
            )
        lines.append("")
        return lines

    def _unused(self, issues: list[Issue]) -> list[str]:
        if not issues:
            return []
        lines = [
            "## Unused Environment Variables",
            "",
            "These variables are defined in `.env` files but never used in code.",
            "",
            "| | Variable | Defined In |",
            "|---|----------|------------|",
        ]
        for issue in issues:
            lines.append(
                f"| {SEVERITY_EMOJI[issue.severity]} | `{issue.var_name}` "
                f"| {_locations(issue, None)} |"
            )
        lines.append("")
        return lines

    def _naming(self, issues: list[Issue]) -> list[str]:
        if not issues:
            return []
        lines = [
            "## Naming Convention Issues",
            "",
            "These variables could be renamed for better consistency.",
            "",
            "| | Variable | Kind | Suggestion |",
            "|---|----------|------|------------|",
        ]
        for issue in issues:
            suggestion = issue.message
            if self.show_suggestions and issue.suggestion:
                suggestion = f"Use `{issue.suggestion}`"
            kind = issue.naming_kind.value if issue.naming_kind else ""
            lines.append(
                f"| {SEVERITY_EMOJI[issue.severity]} | `{issue.var_name}` | {kind} | {suggestion} |"
            )
        lines.append("")
        return lines
