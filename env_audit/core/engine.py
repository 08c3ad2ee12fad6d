"""
Scan engine

Discovery -> definition parsing and usage extraction -> analysis -> report.
The configuration is passed in explicitly; nothing here keeps state between
calls. There is no mid-scan timeout: a scan always runs to completion.
"""

import logging
import time
from pathlib import Path
from typing import Iterable, Optional

from env_audit.config import AuditConfig
from env_audit.core.analyzer import (
    ALL_CHECKS,
    analyze,
    count_by_severity,
    filter_by_severity,
)
from env_audit.core.rules import compile_ignore_patterns
from env_audit.core.scanner.core import (
    ProgressCallback,
    load_definitions,
    scan_code_files,
)
from env_audit.core.scanner.models import IssueKind, ScanReport, ScanSummary, Severity
from env_audit.core.scanner.walker import FileWalker
from env_audit.errors import RootPathError

logger = logging.getLogger(__name__)


def resolve_root(root: Path) -> Path:
    """
    Validate the scan root

    Raises:
        RootPathError: the path is missing or not a directory
    """
    if not root.exists():
        raise RootPathError(root, "Path does not exist")
    if not root.is_dir():
        raise RootPathError(root, "Path is not a directory")
    return root.resolve()


def make_walker(root: Path, config: AuditConfig) -> FileWalker:
    return FileWalker(
        root,
        exclude=config.scan.exclude,
        env_file_names=config.scan.env_files,
        languages=config.scan.languages,
    )


def run_scan(
    root: Path,
    config: Optional[AuditConfig] = None,
    checks: Iterable[IssueKind] = ALL_CHECKS,
    on_file: Optional[ProgressCallback] = None,
) -> ScanReport:
    """
    Scan a project tree

    Args:
        root: project directory
        config: resolved configuration (defaults when omitted)
        checks: which issue kinds to look for
        on_file: progress callback, called once per scanned source file

    Returns:
        The report; issues are filtered by config.output.min_severity while
        the raw_* summary counts cover every issue found

    Raises:
        RootPathError: root is missing or not a directory
    """
    config = config or AuditConfig()
    start = time.perf_counter()
    root = resolve_root(root)

    walker = make_walker(root, config)
    source_files, env_files = walker.discover()
    logger.debug(
        f"Discovered {len(source_files)} source files and {len(env_files)} env files under {root}"
    )

    definitions, env_diagnostics = load_definitions(env_files)

    ignore = compile_ignore_patterns(config.naming.ignore_patterns)
    code = scan_code_files(source_files, ignore, jobs=config.scan.jobs, on_file=on_file)

    raw_issues = analyze(
        definitions,
        code.usages,
        config.naming.rules(),
        ignore,
        checks,
    )
    issues = filter_by_severity(raw_issues, config.output.min_severity)

    raw_counts = count_by_severity(raw_issues)
    counts = count_by_severity(issues)
    summary = ScanSummary(
        files_scanned=code.files_scanned,
        env_files_found=len(env_files),
        vars_defined=len({d.name for d in definitions}),
        vars_used=len({u.name for u in code.usages}),
        total_issues=len(issues),
        errors=counts[Severity.ERROR],
        warnings=counts[Severity.WARNING],
        infos=counts[Severity.INFO],
        raw_total=len(raw_issues),
        raw_errors=raw_counts[Severity.ERROR],
        raw_warnings=raw_counts[Severity.WARNING],
        raw_infos=raw_counts[Severity.INFO],
        duration_ms=int((time.perf_counter() - start) * 1000),
    )

    return ScanReport(
        summary=summary,
        issues=issues,
        definitions=definitions,
        usages=code.usages,
        diagnostics=walker.diagnostics + env_diagnostics + code.diagnostics,
        env_files=[f.relative for f in env_files],
    )
