"""
Naming rules

A rule names a family of spellings for one setting and the spelling that
should win. Built-in rules come first, custom rules follow in configuration
order; when several rules list the same name, the first one applies.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from env_audit.core.scanner.models import Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamingRule:
    """
    Naming convention

    Attributes:
        name: rule identifier
        alternatives: discouraged spellings
        preferred: the spelling to use instead
        severity: severity of the resulting issues
        description: optional text shown with suggestions
    """
    name: str
    alternatives: tuple[str, ...]
    preferred: str
    severity: Severity = Severity.WARNING
    description: Optional[str] = None

    def matches(self, var_name: str) -> bool:
        return var_name in self.alternatives and var_name != self.preferred


def _rule(name, description, alternatives, preferred, severity) -> NamingRule:
    return NamingRule(name, tuple(alternatives), preferred, severity, description)


BUILTIN_RULES: tuple[NamingRule, ...] = (
    _rule("database-url", "Database connection URL",
          ["DB_URL", "DB_CONNECTION", "DB_HOST"], "DATABASE_URL", Severity.WARNING),
    _rule("redis-url", "Redis connection URL",
          ["REDIS_HOST", "REDIS_CONNECTION"], "REDIS_URL", Severity.WARNING),
    _rule("api-key", "API key naming",
          ["APIKEY", "API_SECRET"], "API_KEY", Severity.INFO),
    _rule("secret-key", "Secret key naming",
          ["SECRET", "APP_SECRET"], "SECRET_KEY", Severity.INFO),
    _rule("port", "Application port",
          ["APP_PORT", "SERVER_PORT", "HTTP_PORT"], "PORT", Severity.INFO),
    _rule("log-level", "Logging level",
          ["LOGLEVEL", "LOGGING_LEVEL"], "LOG_LEVEL", Severity.INFO),
    _rule("aws-region", "AWS region",
          ["REGION", "AMAZON_REGION"], "AWS_REGION", Severity.INFO),
    _rule("jwt-secret", "JWT signing secret",
          ["JWT_KEY", "TOKEN_SECRET"], "JWT_SECRET", Severity.INFO),
)


def get_all_rules(
    custom_rules: Iterable[NamingRule] = (),
    builtin: bool = True,
) -> list[NamingRule]:
    """Merge built-in and custom rules into one ordered list."""
    rules: list[NamingRule] = list(BUILTIN_RULES) if builtin else []
    rules.extend(custom_rules)
    check_rules(rules)
    return rules


def check_rules(rules: list[NamingRule]) -> list[str]:
    """
    Log rules that can never fire or whose precedence is ambiguous

    Nothing here is an error: evaluation always uses the first matching rule.

    Returns:
        The logged messages
    """
    problems: list[str] = []
    for index, rule in enumerate(rules):
        if rule.preferred in rule.alternatives:
            problems.append(
                f"Naming rule '{rule.name}' lists its preferred name "
                f"'{rule.preferred}' as an alternative"
            )
        for other in rules[:index] + rules[index + 1:]:
            if rule.preferred in other.alternatives:
                problems.append(
                    f"Naming rule '{rule.name}' prefers '{rule.preferred}', "
                    f"which rule '{other.name}' treats as an alternative"
                )
    for message in problems:
        logger.warning(message)
    return problems


def compile_ignore_patterns(patterns: Iterable[str]) -> list[re.Pattern]:
    """Compile ignore-name regexes, skipping (and logging) invalid ones."""
    compiled: list[re.Pattern] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            logger.warning(f"Ignoring invalid ignore pattern {pattern!r}: {e}")
    return compiled
