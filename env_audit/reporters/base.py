"""
报告器基类 - 定义报告器接口
"""

from typing import Protocol

from env_audit.core.scanner.models import ScanReport


class Reporter(Protocol):
    """报告器协议"""

    def render(self, report: ScanReport, target: str) -> str:
        """Render the report as text."""
        ...

    def report(self, report: ScanReport, target: str) -> None:
        """Render the report and write it to the reporter's output."""
        ...
