"""
Analysis

Reconciles definitions with usages and evaluates naming rules. Everything here
is a pure function of its inputs.
"""

import re
from collections import defaultdict
from typing import Iterable

from env_audit.core.rules import NamingRule
from env_audit.core.scanner.extractor import is_ignored
from env_audit.core.scanner.models import (
    DefinitionSite,
    Issue,
    IssueKind,
    Location,
    NamingKind,
    Severity,
    UsageSite,
)

ALL_CHECKS: frozenset[IssueKind] = frozenset(IssueKind)


def _group_locations(sites) -> dict[str, list[Location]]:
    grouped: dict[str, list[Location]] = defaultdict(list)
    for site in sites:
        grouped[site.name].append(site.location)
    for locations in grouped.values():
        locations.sort(key=lambda loc: loc.sort_key)
    return grouped


def find_missing_vars(
    definitions: list[DefinitionSite],
    usages: list[UsageSite],
    ignore: Iterable[re.Pattern] = (),
) -> list[Issue]:
    """One error per name that is used but never defined, with every usage site."""
    ignore = list(ignore)
    defined = {d.name for d in definitions}
    used = _group_locations(u for u in usages if not is_ignored(u.name, ignore))

    issues: list[Issue] = []
    for name, locations in used.items():
        if name in defined:
            continue
        if len(locations) == 1:
            message = f"'{name}' is used in code but not defined in any .env file"
        else:
            message = (
                f"'{name}' is used in {len(locations)} locations "
                f"but not defined in any .env file"
            )
        issues.append(Issue(
            kind=IssueKind.MISSING,
            severity=Severity.ERROR,
            var_name=name,
            locations=tuple(locations),
            message=message,
        ))
    return issues


def find_unused_vars(
    definitions: list[DefinitionSite],
    usages: list[UsageSite],
    ignore: Iterable[re.Pattern] = (),
) -> list[Issue]:
    """One warning per name that is defined but never used, with every definition site."""
    ignore = list(ignore)
    used = {u.name for u in usages}
    defined = _group_locations(d for d in definitions if not is_ignored(d.name, ignore))

    issues: list[Issue] = []
    for name, locations in defined.items():
        if name in used:
            continue
        issues.append(Issue(
            kind=IssueKind.UNUSED,
            severity=Severity.WARNING,
            var_name=name,
            locations=tuple(locations),
            message=f"'{name}' is defined but never used in code",
        ))
    return issues


def find_naming_issues(
    definitions: list[DefinitionSite],
    rules: list[NamingRule],
    ignore: Iterable[re.Pattern] = (),
) -> list[Issue]:
    """
    Evaluate naming rules against the defined names

    Each defined name is checked against the rules in order and only the
    first matching rule produces an issue. When the preferred spelling is
    defined as well the issue is a conflict, otherwise a suggestion; both
    use the rule's severity.
    """
    ignore = list(ignore)
    defined = _group_locations(definitions)

    issues: list[Issue] = []
    for name in sorted(defined):
        if is_ignored(name, ignore):
            continue
        rule = next((r for r in rules if r.matches(name)), None)
        if rule is None:
            continue

        if rule.preferred in defined:
            naming_kind = NamingKind.CONFLICT
            message = f"'{name}' and '{rule.preferred}' are both defined; prefer '{rule.preferred}'"
        else:
            naming_kind = NamingKind.SUGGESTION
            message = f"'{name}' could be renamed to '{rule.preferred}' for consistency"

        issues.append(Issue(
            kind=IssueKind.NAMING,
            severity=rule.severity,
            var_name=name,
            locations=tuple(defined[name]),
            message=message,
            suggestion=rule.preferred,
            naming_kind=naming_kind,
            rule=rule.name,
        ))
    return issues


def analyze(
    definitions: list[DefinitionSite],
    usages: list[UsageSite],
    rules: list[NamingRule],
    ignore: Iterable[re.Pattern] = (),
    checks: Iterable[IssueKind] = ALL_CHECKS,
) -> list[Issue]:
    """
    Run the enabled checks

    Returns:
        All issues, unfiltered, ordered by kind, variable name and first location
    """
    ignore = list(ignore)
    checks = set(checks)
    issues: list[Issue] = []
    if IssueKind.MISSING in checks:
        issues.extend(find_missing_vars(definitions, usages, ignore))
    if IssueKind.UNUSED in checks:
        issues.extend(find_unused_vars(definitions, usages, ignore))
    if IssueKind.NAMING in checks:
        issues.extend(find_naming_issues(definitions, rules, ignore))
    issues.sort(key=lambda i: i.sort_key)
    return issues


def filter_by_severity(issues: list[Issue], min_severity: Severity) -> list[Issue]:
    """Keep issues at or above min_severity, preserving order."""
    return [i for i in issues if i.severity >= min_severity]


def count_by_severity(issues: list[Issue]) -> dict[Severity, int]:
    counts = {severity: 0 for severity in Severity}
    for issue in issues:
        counts[issue.severity] += 1
    return counts
