"""Pathspec-based path filtering.

Ignore decisions for discovery: root and nested .gitignore files,
.git/info/exclude and the configured exclude globs, all matched with
pathspec.GitIgnoreSpec using gitignore semantics (negation and ** included).
"""

import logging
from pathlib import Path
from typing import Iterable

import pathspec

logger = logging.getLogger(__name__)


# Default exclude globs when the configuration does not supply any
DEFAULT_EXCLUDE_PATTERNS: list[str] = [
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


def _read_spec(path: Path) -> "pathspec.GitIgnoreSpec | None":
    try:
        with open(path, encoding="utf-8") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read ignore file {path}: {e}")
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


class PathspecFilter:
    """Path filter combining gitignore files and exclude globs.

    Nested .gitignore files are registered while the tree is walked, so a
    directory's rules are known before any of its entries are checked.
    """

    def __init__(self, root: Path, exclude: Iterable[str] = ()):
        """
        Initialize the filter.

        Args:
            root: Project root; all matching is done on root-relative paths
            exclude: Exclude globs from configuration
        """
        self.root = root
        self._exclude_spec = pathspec.GitIgnoreSpec.from_lines(list(exclude))
        # Specs applying from the root (.git/info/exclude)
        self._root_specs: list[pathspec.GitIgnoreSpec] = []
        # Directory (relative posix path, "" for root) -> its .gitignore spec
        self._ignore_specs: dict[str, pathspec.GitIgnoreSpec] = {}
        self._load_git_exclude()
        self.register_directory(root)

    def _load_git_exclude(self) -> None:
        """Load .git/info/exclude, which applies from the root."""
        exclude_file = self.root / ".git" / "info" / "exclude"
        if exclude_file.is_file():
            spec = _read_spec(exclude_file)
            if spec is not None:
                self._root_specs.append(spec)

    def register_directory(self, directory: Path) -> None:
        """Load the .gitignore of a directory, if it has one."""
        gitignore = directory / ".gitignore"
        if not gitignore.is_file():
            return
        spec = _read_spec(gitignore)
        if spec is not None:
            self._ignore_specs[self._relative(directory)] = spec

    def _relative(self, path: Path) -> str:
        rel = path.relative_to(self.root).as_posix()
        return "" if rel == "." else rel

    def should_ignore(self, path: Path, is_dir: bool = False) -> bool:
        """
        Check if a path should be skipped.

        A gitignore file applies to its own directory and everything below
        it; patterns are matched against the path relative to that directory.
        """
        try:
            relative = self._relative(path)
        except ValueError:
            return False
        if not relative:
            return False

        candidate = relative + "/" if is_dir else relative
        if self._exclude_spec.match_file(candidate):
            return True

        if any(spec.match_file(candidate) for spec in self._root_specs):
            return True

        for base, spec in self._ignore_specs.items():
            if base == "":
                sub_path = candidate
            elif candidate.startswith(base + "/"):
                sub_path = candidate[len(base) + 1:]
            else:
                continue
            if sub_path and spec.match_file(sub_path):
                return True
        return False
