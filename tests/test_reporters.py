"""Tests for report rendering."""

import io
import json

import pytest
from rich.console import Console

from env_audit.config import AuditConfig
from env_audit.core.engine import run_scan
from env_audit.core.scanner.models import ScanReport
from env_audit.reporters import JsonReporter, MarkdownReporter, RichReporter


@pytest.fixture
def report(sample_project) -> ScanReport:
    return run_scan(sample_project)


class TestRichReporter:
    """Terminal output."""

    def test_sections(self, report):
        text = RichReporter().render(report, "demo")
        assert "env-audit scan results for demo" in text
        assert "MISSING ENV VARS (1)" in text
        assert "UNUSED ENV VARS (1)" in text
        assert "NAMING ISSUES (1)" in text
        assert "API_TOKEN" in text
        assert "app.py:3:19" in text
        assert "Errors: 1" in text
        assert "Warnings: 2" in text

    def test_suggestions_can_be_hidden(self, report):
        shown = RichReporter(show_suggestions=True).render(report, "demo")
        hidden = RichReporter(show_suggestions=False).render(report, "demo")
        assert "use DATABASE_URL" in shown
        assert "use DATABASE_URL" not in hidden

    def test_clean_project(self):
        text = RichReporter().render(ScanReport(), "demo")
        assert "No issues found!" in text

    def test_hidden_issue_count(self, sample_project):
        config = AuditConfig().with_overrides(min_severity="error")
        text = RichReporter().render(run_scan(sample_project, config), "demo")
        assert "2 issue(s) below the minimum severity not shown" in text

    def test_report_writes_to_console(self, report):
        buffer = io.StringIO()
        RichReporter(Console(file=buffer, width=120)).report(report, "demo")
        assert "MISSING ENV VARS" in buffer.getvalue()

    def test_bracketed_paths_are_shown_literally(self, make_project):
        root = make_project({
            ".env": "UNUSED=1\n",
            "app/[id]/page.tsx": "const a = process.env.SECRET_ID;\n",
        })
        text = RichReporter().render(run_scan(root), "[demo]")
        assert "app/[id]/page.tsx:1:" in text
        assert "scan results for [demo]" in text

    def test_diagnostics_panel(self, make_project):
        root = make_project({"blob.py": b"\x00\x00"})
        text = RichReporter().render(run_scan(root), "demo")
        assert "Skipped files (1)" in text
        assert "blob.py: binary content" in text


class TestJsonReporter:
    """Machine-readable output."""

    def test_render(self, report):
        data = json.loads(JsonReporter().render(report, "demo"))
        assert data["target"] == "demo"
        assert data["passed"] is False
        assert data["summary"]["total_issues"] == 3
        assert [i["var_name"] for i in data["issues"]] == ["API_TOKEN", "UNUSED_FLAG", "DB_URL"]

    def test_report_writes_output(self, report):
        out = io.StringIO()
        JsonReporter(output=out).report(report, "demo")
        assert json.loads(out.getvalue())["target"] == "demo"

    def test_clean_report_passes(self):
        data = json.loads(JsonReporter().render(ScanReport(), "demo"))
        assert data["passed"] is True
        assert data["issues"] == []


class TestMarkdownReporter:
    """PR-comment output."""

    def test_render(self, report):
        text = MarkdownReporter().render(report, "demo")
        assert text.startswith("# env-audit Report\n")
        assert "| :x: Errors | 1 |" in text
        assert "## Missing Environment Variables" in text
        assert "| :x: | `API_TOKEN` | `app.py:3:19` |" in text
        assert "## Unused Environment Variables" in text
        assert "| conflict | Use `DATABASE_URL` |" in text

    def test_without_suggestions(self, report):
        text = MarkdownReporter(show_suggestions=False).render(report, "demo")
        assert "are both defined; prefer 'DATABASE_URL'" in text

    def test_clean_project(self):
        text = MarkdownReporter().render(ScanReport(), "demo")
        assert "**No issues found!**" in text
        assert "## Missing" not in text

    def test_many_locations_are_collapsed(self, make_project):
        root = make_project({"a.py": "os.getenv('X')\n" * 5})
        text = MarkdownReporter().render(run_scan(root), "demo")
        assert "(+2 more)" in text
