"""
Data models

Every record produced during a scan. All of them are created fresh per
invocation and discarded once the report has been rendered.
"""

import json
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional


class Severity(str, Enum):
    """Issue severity, ordered INFO < WARNING < ERROR."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: "str | Severity") -> "Severity":
        """Parse a severity name, case-insensitively."""
        if isinstance(value, Severity):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown severity {value!r} (expected one of: error, warning, info)"
            ) from None

    def __ge__(self, other: "Severity") -> bool:  # type: ignore[override]
        return self.rank >= other.rank

    def __gt__(self, other: "Severity") -> bool:  # type: ignore[override]
        return self.rank > other.rank

    def __le__(self, other: "Severity") -> bool:  # type: ignore[override]
        return self.rank <= other.rank

    def __lt__(self, other: "Severity") -> bool:  # type: ignore[override]
        return self.rank < other.rank


_SEVERITY_RANK = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}


class IssueKind(str, Enum):
    """Issue categories, declared in report order."""
    MISSING = "missing"
    UNUSED = "unused"
    NAMING = "naming"

    @property
    def order(self) -> int:
        return list(IssueKind).index(self)


class NamingKind(str, Enum):
    CONFLICT = "conflict"
    SUGGESTION = "suggestion"


class Language(str, Enum):
    """Language families that usages are extracted from."""
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    RUST = "rust"
    GO = "go"
    RUBY = "ruby"
    PHP = "php"
    JAVA = "java"
    CSHARP = "csharp"


@dataclass(frozen=True)
class Location:
    """
    Source location

    Attributes:
        path: file path, relative to the scanned root
        line: line number (1-based)
        column: column number (1-based), None for definition files
    """
    path: str
    line: int
    column: Optional[int] = None

    @property
    def sort_key(self) -> tuple[str, int, int]:
        return (self.path, self.line, self.column or 0)

    def __str__(self) -> str:
        if self.column is None:
            return f"{self.path}:{self.line}"
        return f"{self.path}:{self.line}:{self.column}"


@dataclass(frozen=True)
class DefinitionSite:
    """
    One assignment of a variable in a definition (.env) file

    Attributes:
        name: variable name as written
        location: where the assignment is
        source_file: the definition file it came from
        value: raw value with surrounding quotes removed
    """
    name: str
    location: Location
    source_file: str
    value: Optional[str] = None


@dataclass(frozen=True)
class UsageSite:
    """
    One read of a variable in source code

    Attributes:
        name: variable name as written
        location: where the name appears
        language: language family of the source file
        pattern: name of the extraction pattern that matched
    """
    name: str
    location: Location
    language: Language
    pattern: str = ""


@dataclass(frozen=True)
class Issue:
    """
    A finding

    Attributes:
        kind: missing, unused or naming
        severity: error, warning or info
        var_name: the offending variable
        locations: every site that backs the finding, sorted
        message: human-readable description
        suggestion: preferred replacement name (naming issues only)
        naming_kind: conflict or suggestion (naming issues only)
        rule: name of the naming rule that fired (naming issues only)
    """
    kind: IssueKind
    severity: Severity
    var_name: str
    locations: tuple[Location, ...]
    message: str
    suggestion: Optional[str] = None
    naming_kind: Optional[NamingKind] = None
    rule: Optional[str] = None

    @property
    def sort_key(self) -> tuple:
        first = self.locations[0].sort_key if self.locations else ("", 0, 0)
        return (self.kind.order, self.var_name, first)


@dataclass(frozen=True)
class FileDiagnostic:
    """A file that could not be read. Never fatal."""
    path: str
    message: str


@dataclass
class ScanSummary:
    """
    Summary counters

    The plain severity counts describe the filtered issue list; the raw_*
    counts are taken before the minimum-severity filter is applied.
    """
    files_scanned: int = 0
    env_files_found: int = 0
    vars_defined: int = 0
    vars_used: int = 0
    total_issues: int = 0
    errors: int = 0
    warnings: int = 0
    infos: int = 0
    raw_total: int = 0
    raw_errors: int = 0
    raw_warnings: int = 0
    raw_infos: int = 0
    duration_ms: int = 0


@dataclass
class ScanReport:
    """
    Scan result

    Attributes:
        summary: counters
        issues: findings at or above the minimum severity, ordered
        definitions: every definition site, in env-file order
        usages: every usage site, sorted by path, line, column
        diagnostics: files that were skipped
        env_files: definition files that were parsed, in order
    """
    summary: ScanSummary = field(default_factory=ScanSummary)
    issues: list[Issue] = field(default_factory=list)
    definitions: list[DefinitionSite] = field(default_factory=list)
    usages: list[UsageSite] = field(default_factory=list)
    diagnostics: list[FileDiagnostic] = field(default_factory=list)
    env_files: list[str] = field(default_factory=list)

    def issues_of(self, kind: IssueKind) -> list[Issue]:
        return [i for i in self.issues if i.kind == kind]

    def to_dict(self) -> dict:
        """Plain-data form, enums flattened to their values."""
        return _plain(asdict(self))

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
