"""
Extraction pattern tables

Language support is data: each language family maps to an ordered list of
patterns. Order is precedence, most specific first; when two matches overlap
in the source text the earlier-registered pattern wins.
"""

import re
from dataclasses import dataclass

from env_audit.core.scanner.models import Language

# Names are captured loosely and validated afterwards against IDENTIFIER
_NAME = r'([A-Za-z0-9_]+)'
_Q = r'["\']'

IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


@dataclass(frozen=True)
class ExtractionPattern:
    """
    One way of reading an environment variable

    Attributes:
        name: short identifier, reported on each usage
        regex: compiled pattern
        group: capture group holding the variable name
        destructure: the group holds a `{ A, B: alias }` list instead of one name
    """
    name: str
    regex: re.Pattern
    group: int = 1
    destructure: bool = False


def _p(name: str, pattern: str, group: int = 1, destructure: bool = False) -> ExtractionPattern:
    return ExtractionPattern(name, re.compile(pattern), group, destructure)


ENV_VAR_PATTERNS: dict[Language, list[ExtractionPattern]] = {
    Language.JAVASCRIPT: [
        _p("process.env.bracket", r'process\.env\s*\[\s*' + _Q + _NAME + _Q + r'\s*\]'),
        _p("process.env.dot", r'process\.env\.' + _NAME),
        _p("import.meta.env", r'import\.meta\.env\.' + _NAME),
        _p(
            "process.env.destructure",
            r'(?:const|let|var)\s*\{([^}]+)\}\s*=\s*process\.env\b(?!\s*[.\[])',
            destructure=True,
        ),
    ],
    Language.PYTHON: [
        _p("os.environ.get", r'os\.environ\.get\s*\(\s*' + _Q + _NAME + _Q),
        _p("os.environ", r'os\.environ\s*\[\s*' + _Q + _NAME + _Q + r'\s*\]'),
        _p("os.getenv", r'os\.getenv\s*\(\s*' + _Q + _NAME + _Q),
        # from os import environ / getenv
        _p("environ.get", r'\benviron\.get\s*\(\s*' + _Q + _NAME + _Q),
        _p("environ", r'\benviron\s*\[\s*' + _Q + _NAME + _Q + r'\s*\]'),
        _p("getenv", r'\bgetenv\s*\(\s*' + _Q + _NAME + _Q),
    ],
    Language.RUST: [
        _p("option_env!", r'\boption_env!\s*\(\s*"' + _NAME + r'"'),
        _p("env!", r'\benv!\s*\(\s*"' + _NAME + r'"'),
        _p("env::var_os", r'(?:std::)?env::var_os\s*\(\s*"' + _NAME + r'"'),
        _p("env::var", r'(?:std::)?env::var\s*\(\s*"' + _NAME + r'"'),
    ],
    Language.GO: [
        _p("os.Getenv", r'os\.Getenv\s*\(\s*"' + _NAME + r'"'),
        _p("os.LookupEnv", r'os\.LookupEnv\s*\(\s*"' + _NAME + r'"'),
        _p("os.Setenv", r'os\.Setenv\s*\(\s*"' + _NAME + r'"'),
    ],
    Language.RUBY: [
        _p("ENV.fetch", r'\bENV\.fetch\s*\(?\s*' + _Q + _NAME + _Q),
        _p("ENV", r'\bENV\s*\[\s*' + _Q + _NAME + _Q + r'\s*\]'),
    ],
    Language.PHP: [
        _p("$_ENV", r'\$_ENV\s*\[\s*' + _Q + _NAME + _Q + r'\s*\]'),
        _p("$_SERVER", r'\$_SERVER\s*\[\s*' + _Q + _NAME + _Q + r'\s*\]'),
        _p("getenv", r'\bgetenv\s*\(\s*' + _Q + _NAME + _Q),
        # Laravel env() helper
        _p("env", r'\benv\s*\(\s*' + _Q + _NAME + _Q),
    ],
    Language.JAVA: [
        _p("System.getenv", r'System\.getenv\s*\(\s*"' + _NAME + r'"'),
        _p("System.getProperty", r'System\.getProperty\s*\(\s*"' + _NAME + r'"'),
    ],
    Language.CSHARP: [
        _p(
            "Environment.GetEnvironmentVariable",
            r'Environment\.GetEnvironmentVariable\s*\(\s*"' + _NAME + r'"',
        ),
        _p(
            "ConfigurationManager.AppSettings",
            r'ConfigurationManager\.AppSettings\s*\[\s*' + _Q + _NAME + _Q + r'\s*\]',
        ),
    ],
}

# Lowercase extension (with dot) to language family
EXTENSION_TO_LANGUAGE: dict[str, Language] = {
    ".js": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".ts": Language.JAVASCRIPT,
    ".mts": Language.JAVASCRIPT,
    ".cts": Language.JAVASCRIPT,
    ".tsx": Language.JAVASCRIPT,
    ".py": Language.PYTHON,
    ".rs": Language.RUST,
    ".go": Language.GO,
    ".rb": Language.RUBY,
    ".php": Language.PHP,
    ".java": Language.JAVA,
    ".cs": Language.CSHARP,
}

LANGUAGE_ALIASES: dict[str, Language] = {
    "javascript": Language.JAVASCRIPT,
    "js": Language.JAVASCRIPT,
    "typescript": Language.JAVASCRIPT,
    "ts": Language.JAVASCRIPT,
    "python": Language.PYTHON,
    "py": Language.PYTHON,
    "rust": Language.RUST,
    "rs": Language.RUST,
    "go": Language.GO,
    "golang": Language.GO,
    "ruby": Language.RUBY,
    "rb": Language.RUBY,
    "php": Language.PHP,
    "java": Language.JAVA,
    "csharp": Language.CSHARP,
    "cs": Language.CSHARP,
    "c#": Language.CSHARP,
}


def language_for_suffix(suffix: str) -> Language | None:
    """Classify a file extension (with its leading dot)."""
    return EXTENSION_TO_LANGUAGE.get(suffix.lower())


def parse_language(name: str) -> Language:
    """Resolve a user-supplied language name or alias."""
    try:
        return LANGUAGE_ALIASES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unsupported language: {name!r}") from None
