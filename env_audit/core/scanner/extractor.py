"""
Usage extraction

Regex-based extraction of environment variable reads from source text. Only
literal names are recognized; a name assembled at runtime is invisible here.
"""

import bisect
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from env_audit.core.scanner.models import Language, Location, UsageSite
from env_audit.core.scanner.patterns import (
    ENV_VAR_PATTERNS,
    IDENTIFIER,
    ExtractionPattern,
)


@dataclass(frozen=True)
class _Match:
    start: int
    end: int
    rank: int
    name: str
    name_start: int
    pattern: str


def _destructured_names(match: re.Match, group: int) -> Iterable[tuple[str, int]]:
    """Yield (key, absolute offset) for each key of `{ A, B: alias, C = 1 }`."""
    body = match.group(group)
    base = match.start(group)
    offset = 0
    for part in body.split(","):
        key = re.split(r"[:=]", part, maxsplit=1)[0]
        stripped = key.strip()
        if stripped and not stripped.startswith("..."):
            yield stripped, base + offset + key.index(stripped)
        offset += len(part) + 1


def _collect_matches(content: str, patterns: list[ExtractionPattern]) -> list[_Match]:
    matches: list[_Match] = []
    for rank, pattern in enumerate(patterns):
        for m in pattern.regex.finditer(content):
            if pattern.destructure:
                # One candidate per key, spanning just the key
                for name, pos in _destructured_names(m, pattern.group):
                    matches.append(_Match(pos, pos + len(name), rank, name, pos, pattern.name))
            else:
                matches.append(_Match(
                    m.start(), m.end(), rank,
                    m.group(pattern.group), m.start(pattern.group), pattern.name,
                ))
    return matches


def dedupe_overlapping(matches: list[_Match]) -> list[_Match]:
    """
    Drop overlapping matches in one sweep

    Matches are ordered by start offset. A match that overlaps the last
    accepted one is dropped unless it comes from an earlier-registered
    pattern, in which case it replaces the accepted match.
    """
    accepted: list[_Match] = []
    for current in sorted(matches, key=lambda m: (m.start, m.rank)):
        if accepted and current.start < accepted[-1].end:
            if current.rank < accepted[-1].rank:
                accepted[-1] = current
            continue
        accepted.append(current)
    return accepted


def is_ignored(name: str, ignore: Iterable[re.Pattern]) -> bool:
    return any(p.search(name) for p in ignore)


class _LineIndex:
    """Offset -> (line, column) lookup, both 1-based."""

    def __init__(self, content: str):
        self._starts = [0]
        for i, char in enumerate(content):
            if char == "\n":
                self._starts.append(i + 1)

    def position(self, offset: int) -> tuple[int, int]:
        line = bisect.bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1


def extract_usages(
    content: str,
    file_path: str,
    language: Language,
    ignore: Optional[Iterable[re.Pattern]] = None,
) -> list[UsageSite]:
    """
    Extract environment variable usages from one file's text

    Args:
        content: file text
        file_path: path reported on each usage
        language: language family selecting the pattern table
        ignore: compiled ignore-name patterns; matching names are dropped

    Returns:
        Usage sites in text order, at most one per overlapping match group
    """
    patterns = ENV_VAR_PATTERNS.get(language, [])
    if not patterns:
        return []

    ignore = list(ignore or [])
    index = _LineIndex(content)
    usages: list[UsageSite] = []
    for match in dedupe_overlapping(_collect_matches(content, patterns)):
        if not IDENTIFIER.match(match.name):
            continue
        if is_ignored(match.name, ignore):
            continue
        line, column = index.position(match.name_start)
        usages.append(UsageSite(
            name=match.name,
            location=Location(file_path, line, column),
            language=language,
            pattern=match.pattern,
        ))
    return usages
