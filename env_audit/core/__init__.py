"""
Core Layer - 核心层

包含扫描器、命名规则和分析器。扫描引擎见 env_audit.core.engine。
"""

from env_audit.core.scanner import (
    Severity,
    IssueKind,
    NamingKind,
    Language,
    Location,
    DefinitionSite,
    UsageSite,
    Issue,
    FileDiagnostic,
    ScanSummary,
    ScanReport,
    extract_usages,
    parse_dotenv_content,
    FileWalker,
)
from env_audit.core.rules import (
    NamingRule,
    BUILTIN_RULES,
    get_all_rules,
)
from env_audit.core.analyzer import (
    analyze,
    find_missing_vars,
    find_unused_vars,
    find_naming_issues,
    filter_by_severity,
)

__all__ = [
    # scanner
    "Severity",
    "IssueKind",
    "NamingKind",
    "Language",
    "Location",
    "DefinitionSite",
    "UsageSite",
    "Issue",
    "FileDiagnostic",
    "ScanSummary",
    "ScanReport",
    "extract_usages",
    "parse_dotenv_content",
    "FileWalker",
    # rules
    "NamingRule",
    "BUILTIN_RULES",
    "get_all_rules",
    # analyzer
    "analyze",
    "find_missing_vars",
    "find_unused_vars",
    "find_naming_issues",
    "filter_by_severity",
]
