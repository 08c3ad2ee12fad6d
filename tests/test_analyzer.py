"""Tests for the analysis pass."""

import re

import pytest

from conftest import definition, usage
from env_audit.core.analyzer import (
    analyze,
    count_by_severity,
    filter_by_severity,
    find_missing_vars,
    find_naming_issues,
    find_unused_vars,
)
from env_audit.core.rules import BUILTIN_RULES, NamingRule
from env_audit.core.scanner.models import IssueKind, NamingKind, Severity

DB_RULE = NamingRule(
    "database-url", ("DB_URL", "DB_HOST"), "DATABASE_URL", Severity.WARNING
)


class TestScenarios:
    """End-to-end analysis over small definition and usage sets."""

    def test_used_but_not_defined(self):
        issues = analyze([definition("API_KEY")], [usage("API_KEY"), usage("REDIS_URL")], [])
        assert [(i.kind, i.var_name) for i in issues] == [(IssueKind.MISSING, "REDIS_URL")]
        assert issues[0].severity == Severity.ERROR

    def test_defined_but_not_used(self):
        issues = analyze([definition("OLD_API_KEY")], [], [])
        assert [(i.kind, i.var_name) for i in issues] == [(IssueKind.UNUSED, "OLD_API_KEY")]
        assert issues[0].severity == Severity.WARNING

    def test_naming_suggestion(self):
        issues = find_naming_issues([definition("DB_URL")], [DB_RULE])
        assert len(issues) == 1
        issue = issues[0]
        assert issue.naming_kind == NamingKind.SUGGESTION
        assert issue.suggestion == "DATABASE_URL"
        assert issue.severity == Severity.WARNING
        assert issue.rule == "database-url"
        assert issue.message == "'DB_URL' could be renamed to 'DATABASE_URL' for consistency"

    def test_naming_conflict(self):
        defs = [definition("DB_URL"), definition("DATABASE_URL", line=2)]
        issues = find_naming_issues(defs, [DB_RULE])
        assert [(i.var_name, i.naming_kind) for i in issues] == [
            ("DB_URL", NamingKind.CONFLICT)
        ]
        assert issues[0].message == (
            "'DB_URL' and 'DATABASE_URL' are both defined; prefer 'DATABASE_URL'"
        )

    def test_ignored_usage_is_not_missing(self):
        ignore = [re.compile("^_")]
        issues = analyze([], [usage("_INTERNAL_DEBUG")], [], ignore)
        assert issues == []

    def test_empty_inputs(self):
        assert analyze([], [], list(BUILTIN_RULES)) == []


class TestMissing:
    """Used-but-undefined names."""

    def test_one_issue_per_name_with_every_site(self):
        usages = [
            usage("TOKEN", "b.py", 3),
            usage("TOKEN", "a.py", 7),
            usage("TOKEN", "a.py", 2),
        ]
        issues = find_missing_vars([], usages)
        assert len(issues) == 1
        assert [str(loc) for loc in issues[0].locations] == ["a.py:2:1", "a.py:7:1", "b.py:3:1"]
        assert issues[0].message == "'TOKEN' is used in 3 locations but not defined in any .env file"

    def test_single_location_message(self):
        issues = find_missing_vars([], [usage("TOKEN")])
        assert issues[0].message == "'TOKEN' is used in code but not defined in any .env file"

    def test_defined_anywhere_is_enough(self):
        defs = [definition("TOKEN", path="svc/.env")]
        assert find_missing_vars(defs, [usage("TOKEN")]) == []


class TestUnused:
    """Defined-but-unused names."""

    def test_duplicate_definitions_are_grouped(self):
        defs = [definition("FLAG", ".env", 1), definition("FLAG", ".env.local", 4)]
        issues = find_unused_vars(defs, [])
        assert len(issues) == 1
        assert [str(loc) for loc in issues[0].locations] == [".env:1", ".env.local:4"]

    def test_ignored_definition_is_not_reported(self):
        issues = find_unused_vars([definition("_SECRET")], [], [re.compile("^_")])
        assert issues == []


class TestNaming:
    """Rule evaluation."""

    def test_first_matching_rule_wins(self):
        first = NamingRule("first", ("HOST",), "APP_HOST", Severity.INFO)
        second = NamingRule("second", ("HOST",), "SERVER_HOST", Severity.ERROR)
        issues = find_naming_issues([definition("HOST")], [first, second])
        assert [(i.rule, i.suggestion, i.severity) for i in issues] == [
            ("first", "APP_HOST", Severity.INFO)
        ]

    def test_preferred_name_in_alternatives_never_fires(self):
        rule = NamingRule("odd", ("PORT", "APP_PORT"), "PORT")
        issues = find_naming_issues([definition("PORT")], [rule])
        assert issues == []

    def test_naming_is_checked_once_per_name(self):
        defs = [definition("DB_URL", ".env", 1), definition("DB_URL", ".env.local", 1)]
        issues = find_naming_issues(defs, [DB_RULE])
        assert len(issues) == 1
        assert len(issues[0].locations) == 2

    def test_ignored_names_skip_naming(self):
        issues = find_naming_issues([definition("DB_URL")], [DB_RULE], [re.compile("^DB_")])
        assert issues == []

    def test_rule_severity_is_used(self):
        issues = find_naming_issues([definition("APIKEY")], list(BUILTIN_RULES))
        assert issues[0].severity == Severity.INFO
        assert issues[0].suggestion == "API_KEY"


class TestProperties:
    """Invariants over the combined result."""

    @pytest.fixture
    def mixed(self):
        defs = [definition("A"), definition("B", line=2), definition("DB_URL", line=3)]
        usages = [usage("B"), usage("C"), usage("C", line=5), usage("DB_URL")]
        return defs, usages

    def test_no_double_count(self, mixed):
        defs, usages = mixed
        issues = analyze(defs, usages, [DB_RULE])
        flagged = {i.var_name for i in issues if i.kind != IssueKind.NAMING}
        assert "B" not in flagged
        assert "DB_URL" not in flagged

    def test_order_is_kind_then_name(self, mixed):
        defs, usages = mixed
        issues = analyze(defs, usages, [DB_RULE])
        assert [(i.kind, i.var_name) for i in issues] == [
            (IssueKind.MISSING, "C"),
            (IssueKind.UNUSED, "A"),
            (IssueKind.NAMING, "DB_URL"),
        ]

    def test_usage_order_does_not_matter(self, mixed):
        defs, usages = mixed
        assert analyze(defs, usages, [DB_RULE]) == analyze(defs, list(reversed(usages)), [DB_RULE])

    def test_checks_can_be_restricted(self, mixed):
        defs, usages = mixed
        issues = analyze(defs, usages, [DB_RULE], checks={IssueKind.UNUSED})
        assert {i.kind for i in issues} == {IssueKind.UNUSED}

    def test_severity_filter_is_monotonic(self, mixed):
        defs, usages = mixed
        info_rule = NamingRule("info", ("DB_URL",), "DATABASE_URL", Severity.INFO)
        issues = analyze(defs, usages, [info_rule])
        counts = [
            len(filter_by_severity(issues, level))
            for level in (Severity.INFO, Severity.WARNING, Severity.ERROR)
        ]
        assert counts == [3, 2, 1]

    def test_count_by_severity(self, mixed):
        defs, usages = mixed
        counts = count_by_severity(analyze(defs, usages, [DB_RULE]))
        assert counts == {Severity.ERROR: 1, Severity.WARNING: 2, Severity.INFO: 0}
