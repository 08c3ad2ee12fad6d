"""
JSON 报告器 - 输出 JSON 格式报告
"""

import json
import sys
from typing import TextIO

from env_audit.core.scanner.models import ScanReport


class JsonReporter:
    """JSON 报告器"""

    def __init__(self, output: TextIO | None = None, indent: int | None = 2):
        self.output = output or sys.stdout
        self.indent = indent

    def render(self, report: ScanReport, target: str) -> str:
        data = {"target": target}
        data.update(report.to_dict())
        data["passed"] = report.summary.errors == 0
        return json.dumps(data, indent=self.indent, ensure_ascii=False)

    def report(self, report: ScanReport, target: str) -> None:
        """生成 JSON 格式报告"""
        print(self.render(report, target), file=self.output)
