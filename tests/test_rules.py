"""Tests for naming rules and ignore patterns."""

import logging

from env_audit.core.rules import (
    BUILTIN_RULES,
    NamingRule,
    check_rules,
    compile_ignore_patterns,
    get_all_rules,
)
from env_audit.core.scanner.models import Severity


class TestBuiltinRules:
    """The shipped rule table."""

    def test_order(self):
        assert [r.name for r in BUILTIN_RULES] == [
            "database-url",
            "redis-url",
            "api-key",
            "secret-key",
            "port",
            "log-level",
            "aws-region",
            "jwt-secret",
        ]

    def test_database_rule(self):
        rule = BUILTIN_RULES[0]
        assert rule.preferred == "DATABASE_URL"
        assert rule.alternatives == ("DB_URL", "DB_CONNECTION", "DB_HOST")
        assert rule.severity == Severity.WARNING

    def test_builtin_table_is_consistent(self):
        assert check_rules(list(BUILTIN_RULES)) == []


class TestRuleMerge:
    """Built-in and custom rules in one ordered list."""

    def test_custom_rules_follow_builtins(self):
        custom = NamingRule("svc", ("SVC_ADDR",), "SERVICE_URL")
        rules = get_all_rules([custom])
        assert rules[: len(BUILTIN_RULES)] == list(BUILTIN_RULES)
        assert rules[-1] == custom

    def test_builtins_can_be_disabled(self):
        custom = NamingRule("svc", ("SVC_ADDR",), "SERVICE_URL")
        assert get_all_rules([custom], builtin=False) == [custom]

    def test_ambiguous_preferred_name_is_logged(self, caplog):
        custom = NamingRule("db-host", ("DATABASE_URL",), "DB_HOST")
        with caplog.at_level(logging.WARNING, logger="env_audit.core.rules"):
            problems = check_rules(list(BUILTIN_RULES) + [custom])
        assert any("'database-url' prefers 'DATABASE_URL'" in p for p in problems)
        assert any("'db-host' prefers 'DB_HOST'" in p for p in problems)
        assert len(caplog.records) == len(problems)

    def test_self_referencing_rule_is_logged(self):
        rule = NamingRule("odd", ("PORT",), "PORT")
        problems = check_rules([rule])
        assert problems == ["Naming rule 'odd' lists its preferred name 'PORT' as an alternative"]

    def test_matches(self):
        rule = NamingRule("r", ("A", "B"), "C")
        assert rule.matches("A")
        assert not rule.matches("C")
        assert not rule.matches("a")


class TestIgnorePatterns:
    """Ignore-name regex compilation."""

    def test_compiles_valid_patterns(self):
        compiled = compile_ignore_patterns(["^_", "^INTERNAL_"])
        assert [p.pattern for p in compiled] == ["^_", "^INTERNAL_"]

    def test_invalid_pattern_is_skipped_and_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="env_audit.core.rules"):
            compiled = compile_ignore_patterns(["(unclosed", "^OK"])
        assert [p.pattern for p in compiled] == ["^OK"]
        assert "(unclosed" in caplog.text
