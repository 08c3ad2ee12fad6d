"""
Scanning

Extraction runs on a thread pool, one task per source file. Each task returns
its own list; results are merged and sorted once every task has finished.
Definition files are few and are parsed sequentially, in order.
"""

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional

from env_audit.core.scanner.dotenv import parse_dotenv_content
from env_audit.core.scanner.extractor import extract_usages
from env_audit.core.scanner.models import DefinitionSite, FileDiagnostic, UsageSite
from env_audit.core.scanner.walker import DiscoveredFile
from env_audit.errors import UnreadableFileError

logger = logging.getLogger(__name__)

# Bytes inspected for NUL when sniffing binary content
BINARY_SNIFF_SIZE = 8192

# Progress callback: (relative path, language)
ProgressCallback = Callable[[str, str], None]


def default_jobs() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


def read_text_file(path: Path) -> str:
    """
    Read a file as UTF-8 text

    Raises:
        UnreadableFileError: permission problem, binary or non-UTF-8 content
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise UnreadableFileError(e.strerror or str(e)) from e
    if b"\x00" in data[:BINARY_SNIFF_SIZE]:
        raise UnreadableFileError("binary content")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise UnreadableFileError(f"not valid UTF-8 ({e.reason} at byte {e.start})") from e


@dataclass
class CodeScanResult:
    usages: list[UsageSite] = field(default_factory=list)
    diagnostics: list[FileDiagnostic] = field(default_factory=list)
    files_scanned: int = 0


def _scan_one(
    found: DiscoveredFile,
    ignore: list[re.Pattern],
) -> tuple[list[UsageSite], Optional[FileDiagnostic]]:
    try:
        content = read_text_file(found.path)
    except UnreadableFileError as e:
        logger.warning(f"Skipping {found.relative}: {e}")
        return [], FileDiagnostic(found.relative, str(e))
    return extract_usages(content, found.relative, found.language, ignore), None


def scan_code_files(
    files: list[DiscoveredFile],
    ignore: Iterable[re.Pattern] = (),
    jobs: Optional[int] = None,
    on_file: Optional[ProgressCallback] = None,
) -> CodeScanResult:
    """
    Extract usages from every source file

    Args:
        files: source files from discovery
        ignore: compiled ignore-name patterns
        jobs: worker threads (defaults to min(32, cpu + 4))
        on_file: called with (relative path, language) after each file

    Returns:
        Usages sorted by path, line and column, plus per-file diagnostics
    """
    result = CodeScanResult(files_scanned=len(files))
    if not files:
        return result

    ignore = list(ignore)
    workers = max(1, min(jobs or default_jobs(), len(files)))
    partials: list[list[UsageSite]] = []

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(_scan_one, f, ignore): f for f in files}
        for future in as_completed(futures):
            found = futures[future]
            usages, diagnostic = future.result()
            partials.append(usages)
            if diagnostic is not None:
                result.diagnostics.append(diagnostic)
            if on_file:
                on_file(found.relative, found.language.value)

    for usages in partials:
        result.usages.extend(usages)
    result.usages.sort(key=lambda u: u.location.sort_key)
    result.diagnostics.sort(key=lambda d: d.path)
    return result


def load_definitions(
    env_files: list[DiscoveredFile],
) -> tuple[list[DefinitionSite], list[FileDiagnostic]]:
    """Parse definition files in order; unreadable ones become diagnostics."""
    definitions: list[DefinitionSite] = []
    diagnostics: list[FileDiagnostic] = []
    for env_file in env_files:
        try:
            content = read_text_file(env_file.path)
        except UnreadableFileError as e:
            logger.warning(f"Skipping env file {env_file.relative}: {e}")
            diagnostics.append(FileDiagnostic(env_file.relative, str(e)))
            continue
        sites = parse_dotenv_content(content, env_file.relative)
        logger.debug(f"Parsed {len(sites)} definitions from {env_file.relative}")
        definitions.extend(sites)
    return definitions, diagnostics
