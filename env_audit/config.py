"""Configuration.

Settings come from a TOML file (`.env-audit.toml` by default) and are held in
frozen dataclasses; command-line overrides produce a new value via
`dataclasses.replace` instead of mutating a shared one.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

# Handle tomllib/tomli for different Python versions
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from env_audit.core.rules import NamingRule, get_all_rules
from env_audit.core.scanner.dotenv import DEFAULT_ENV_FILES
from env_audit.core.scanner.models import Language, Severity
from env_audit.core.scanner.patterns import parse_language
from env_audit.errors import ConfigError
from env_audit.filters.pathspec_filter import DEFAULT_EXCLUDE_PATTERNS

CONFIG_FILE_NAME = ".env-audit.toml"

OUTPUT_FORMATS = ("terminal", "json", "markdown")


@dataclass(frozen=True)
class ScanConfig:
    """File selection."""
    env_files: tuple[str, ...] = tuple(DEFAULT_ENV_FILES)
    exclude: tuple[str, ...] = tuple(DEFAULT_EXCLUDE_PATTERNS)
    languages: Optional[tuple[Language, ...]] = None
    jobs: Optional[int] = None


@dataclass(frozen=True)
class NamingConfig:
    """Naming checks and name filtering."""
    builtin_rules: bool = True
    custom_rules: tuple[NamingRule, ...] = ()
    ignore_patterns: tuple[str, ...] = ()

    def rules(self) -> list[NamingRule]:
        return get_all_rules(self.custom_rules, builtin=self.builtin_rules)


@dataclass(frozen=True)
class OutputConfig:
    """Rendering."""
    format: str = "terminal"
    show_suggestions: bool = True
    min_severity: Severity = Severity.INFO
    output_file: Optional[str] = None


@dataclass(frozen=True)
class AuditConfig:
    scan: ScanConfig = field(default_factory=ScanConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def with_overrides(
        self,
        env_files: Optional[list[str]] = None,
        ignore_patterns: Optional[list[str]] = None,
        languages: Optional[list[str]] = None,
        min_severity: Optional[str] = None,
        jobs: Optional[int] = None,
        output_format: Optional[str] = None,
        output_file: Optional[str] = None,
    ) -> "AuditConfig":
        """Return a copy with command-line values applied. Lists are appended."""
        scan = self.scan
        naming = self.naming
        output = self.output
        try:
            if env_files:
                extra = tuple(f for f in env_files if f not in scan.env_files)
                scan = replace(scan, env_files=scan.env_files + extra)
            if languages:
                scan = replace(scan, languages=tuple(parse_language(l) for l in languages))
            if jobs is not None:
                scan = replace(scan, jobs=_positive_int(jobs, "jobs"))
            if ignore_patterns:
                naming = replace(
                    naming, ignore_patterns=naming.ignore_patterns + tuple(ignore_patterns)
                )
            if min_severity is not None:
                output = replace(output, min_severity=Severity.parse(min_severity))
            if output_format is not None:
                output = replace(output, format=_output_format(output_format))
            if output_file is not None:
                output = replace(output, output_file=output_file)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return replace(self, scan=scan, naming=naming, output=output)


def _positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def _output_format(value: str) -> str:
    value = value.lower()
    if value not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unknown output format {value!r} (expected one of: {', '.join(OUTPUT_FORMATS)})"
        )
    return value


def _string_list(table: dict, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = table.get(key)
    if value is None:
        return default
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return tuple(value)


def _custom_rule(raw: Any, index: int) -> NamingRule:
    if not isinstance(raw, dict):
        raise ValueError(f"naming.custom_rules[{index}] must be a table")
    if "preferred" not in raw or not isinstance(raw["preferred"], str):
        raise ValueError(f"naming.custom_rules[{index}] needs a string 'preferred'")
    name = raw.get("name") or raw["preferred"].lower().replace("_", "-")
    return NamingRule(
        name=name,
        alternatives=_string_list(raw, "alternatives", ()),
        preferred=raw["preferred"],
        severity=Severity.parse(raw.get("severity", "warning")),
        description=raw.get("description"),
    )


def parse_config(data: dict) -> AuditConfig:
    """
    Build a configuration from parsed TOML data.

    Raises:
        ConfigError: a value has the wrong type or an unknown name
    """
    try:
        scan_table = data.get("scan", {})
        naming_table = data.get("naming", {})
        output_table = data.get("output", {})

        languages = None
        if scan_table.get("languages") is not None:
            languages = tuple(
                parse_language(l) for l in _string_list(scan_table, "languages", ())
            )
        jobs = scan_table.get("jobs")
        scan = ScanConfig(
            env_files=_string_list(scan_table, "env_files", tuple(DEFAULT_ENV_FILES)),
            exclude=_string_list(scan_table, "exclude", tuple(DEFAULT_EXCLUDE_PATTERNS)),
            languages=languages,
            jobs=_positive_int(jobs, "jobs") if jobs is not None else None,
        )

        naming = NamingConfig(
            builtin_rules=bool(naming_table.get("builtin_rules", True)),
            custom_rules=tuple(
                _custom_rule(raw, i)
                for i, raw in enumerate(naming_table.get("custom_rules", []))
            ),
            ignore_patterns=_string_list(naming_table, "ignore_patterns", ()),
        )

        output = OutputConfig(
            format=_output_format(output_table.get("format", "terminal")),
            show_suggestions=bool(output_table.get("show_suggestions", True)),
            min_severity=Severity.parse(output_table.get("min_severity", "info")),
            output_file=output_table.get("output_file"),
        )
    except (ValueError, AttributeError, TypeError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    return AuditConfig(scan=scan, naming=naming, output=output)


def load_config(path: Path) -> AuditConfig:
    """
    Load configuration from a TOML file.

    A missing file yields the defaults.

    Raises:
        ConfigError: the file cannot be read, parsed or validated
    """
    if not path.exists():
        return AuditConfig()
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e
    return parse_config(data)


DEFAULT_CONFIG_TEMPLATE = """\
# env-audit configuration file

[scan]
# Env files to parse (relative to project root), in precedence order
env_files = [".env", ".env.local", ".env.example"]

# Glob patterns to exclude from scan (gitignore syntax)
exclude = [
    "**/node_modules/**",
    "**/target/**",
    "**/vendor/**",
    "**/.git/**",
    "**/dist/**",
    "**/build/**",
    "**/__pycache__/**",
    "**/venv/**",
    "**/.venv/**",
]

# Languages to scan (comment out for all supported languages)
# languages = ["javascript", "python", "rust", "go", "ruby", "php", "java", "csharp"]

# Worker threads for source scanning (default: min(32, cpu count + 4))
# jobs = 8

[naming]
# Use built-in naming conflict rules
builtin_rules = true

# Patterns to ignore (regex) - matching vars are never reported
ignore_patterns = ["^_", "^INTERNAL_"]

# Custom naming rules
# [[naming.custom_rules]]
# name = "database-url"
# description = "Database connection URL naming"
# alternatives = ["DB_URL", "DB_CONNECTION"]
# preferred = "DATABASE_URL"
# severity = "warning"

[output]
# Default output format: "terminal", "json", "markdown"
format = "terminal"

# Show suggestions for fixing issues
show_suggestions = true

# Minimum severity to report: "error", "warning", "info"
min_severity = "info"

# Output file path for non-terminal formats (optional)
# output_file = "env-audit-report.json"
"""
