"""
File discovery

Walks a project tree, honoring gitignore files and configured exclude globs,
and classifies each surviving file as source code (by extension) or as a
definition file (by name).
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from env_audit.core.scanner.models import FileDiagnostic, Language
from env_audit.core.scanner.patterns import language_for_suffix
from env_audit.filters.pathspec_filter import PathspecFilter

logger = logging.getLogger(__name__)

# Never descended into, regardless of ignore rules
ALWAYS_SKIPPED_DIRS = {".git", ".hg", ".svn"}


@dataclass(frozen=True)
class DiscoveredFile:
    """
    A candidate file

    Attributes:
        path: absolute path on disk
        relative: root-relative posix path, used in reports
        language: language family for source files, None for definition files
    """
    path: Path
    relative: str
    language: Optional[Language] = None

    @property
    def is_env_file(self) -> bool:
        return self.language is None


class FileWalker:
    """Walks a project tree, respecting .gitignore and config exclusions."""

    def __init__(
        self,
        root: Path,
        exclude: Iterable[str] = (),
        env_file_names: Iterable[str] = (),
        languages: Optional[Iterable[Language]] = None,
    ):
        self.root = root
        self.exclude = list(exclude)
        self.env_file_names = list(env_file_names)
        self.languages = frozenset(languages) if languages is not None else None
        self.diagnostics: list[FileDiagnostic] = []

    def walk(self) -> Iterator[DiscoveredFile]:
        """
        Lazily yield candidate files

        Every call starts a fresh walk. Symlinked directories are followed;
        a directory already visited under another path is skipped, so
        symlink cycles terminate.
        """
        self.diagnostics = []
        path_filter = PathspecFilter(self.root, self.exclude)
        visited: set[tuple[int, int]] = set()
        yield from self._walk_dir(self.root, path_filter, visited)

    def _walk_dir(
        self,
        directory: Path,
        path_filter: PathspecFilter,
        visited: set[tuple[int, int]],
    ) -> Iterator[DiscoveredFile]:
        try:
            st = os.stat(directory)
            key = (st.st_dev, st.st_ino)
            if key in visited:
                logger.debug(f"Skipping already visited directory {directory}")
                return
            visited.add(key)
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            self._record(directory, f"cannot list directory: {e}")
            return

        path_filter.register_directory(directory)

        for entry in entries:
            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError as e:
                self._record(entry, f"cannot stat: {e}")
                continue

            if is_dir:
                if entry.name in ALWAYS_SKIPPED_DIRS:
                    continue
                if path_filter.should_ignore(entry, is_dir=True):
                    continue
                yield from self._walk_dir(entry, path_filter, visited)
            elif is_file:
                if path_filter.should_ignore(entry):
                    continue
                discovered = self._classify(entry)
                if discovered is not None:
                    yield discovered

    def _classify(self, path: Path) -> Optional[DiscoveredFile]:
        relative = path.relative_to(self.root).as_posix()
        if path.name in self.env_file_names:
            return DiscoveredFile(path, relative)
        language = language_for_suffix(path.suffix)
        if language is None:
            return None
        if self.languages is not None and language not in self.languages:
            return None
        return DiscoveredFile(path, relative, language)

    def _record(self, path: Path, message: str) -> None:
        logger.warning(f"{path}: {message}")
        try:
            shown = path.relative_to(self.root).as_posix()
        except ValueError:
            shown = str(path)
        self.diagnostics.append(FileDiagnostic(shown, message))

    def discover(self) -> tuple[list[DiscoveredFile], list[DiscoveredFile]]:
        """
        Walk once and split the result

        Returns:
            (source files, definition files). Source files are deduplicated
            by their resolved path and kept in walk order. Definition files
            start with the configured names at the root, in configuration
            order, read even when ignored (a local .env is usually
            gitignored); files with a configured name in subdirectories
            follow, sorted by path.
        """
        env_files: list[DiscoveredFile] = []
        for name in self.env_file_names:
            candidate = self.root / name
            if candidate.is_file():
                env_files.append(DiscoveredFile(candidate, Path(name).as_posix()))
        root_level = {f.relative for f in env_files}

        seen: set[Path] = set()
        sources: list[DiscoveredFile] = []
        nested: list[DiscoveredFile] = []
        for found in self.walk():
            if found.is_env_file:
                if "/" in found.relative and found.relative not in root_level:
                    nested.append(found)
                continue
            resolved = found.path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            sources.append(found)

        env_files.extend(sorted(nested, key=lambda f: f.relative))
        return sources, env_files

    def find_source_files(self) -> list[DiscoveredFile]:
        return self.discover()[0]

    def find_env_files(self) -> list[DiscoveredFile]:
        return self.discover()[1]
