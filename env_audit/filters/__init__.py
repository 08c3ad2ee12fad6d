"""File filtering for env-audit.

This module provides pathspec-based gitignore and exclude-glob filtering
using the mature pathspec library.
"""

from env_audit.filters.pathspec_filter import (
    PathspecFilter,
    DEFAULT_EXCLUDE_PATTERNS,
)

__all__ = [
    "PathspecFilter",
    "DEFAULT_EXCLUDE_PATTERNS",
]
