"""
Reporters Layer - 报告层

包含 Rich 终端报告器、JSON 报告器和 Markdown 报告器。
"""

from env_audit.reporters.base import Reporter
from env_audit.reporters.rich_reporter import RichReporter
from env_audit.reporters.json_reporter import JsonReporter
from env_audit.reporters.markdown_reporter import MarkdownReporter

__all__ = [
    "Reporter",
    "RichReporter",
    "JsonReporter",
    "MarkdownReporter",
]
