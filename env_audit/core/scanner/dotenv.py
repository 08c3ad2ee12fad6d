"""
DotEnv file parsing

Turns `.env`-style definition files into DefinitionSites. Values are kept for
display and comparison only; detection never looks at them.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from env_audit.core.scanner.models import DefinitionSite, Location

logger = logging.getLogger(__name__)

# Default definition files, in precedence order
DEFAULT_ENV_FILES = [
    ".env",
    ".env.local",
    ".env.example",
]

_KEY = re.compile(r'^[A-Za-z0-9_]+$')


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def parse_dotenv_line(line: str) -> Optional[tuple[str, str]]:
    """
    Parse a single definition line

    Returns:
        (key, value) for `KEY=VALUE` or `export KEY=VALUE`, None for blank
        lines, comments and anything malformed
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return None

    if line.startswith('export') and line[6:7].isspace():
        line = line[6:].lstrip()

    key, sep, value = line.partition('=')
    if not sep:
        return None
    key = key.strip()
    if not key or not _KEY.match(key):
        return None
    return key, _strip_quotes(value)


def parse_dotenv_content(content: str, file_path: str = "") -> list[DefinitionSite]:
    """Parse definition file text into sites, in line order."""
    sites: list[DefinitionSite] = []
    for line_num, line in enumerate(content.splitlines(), 1):
        parsed = parse_dotenv_line(line)
        if parsed is None:
            continue
        name, value = parsed
        sites.append(DefinitionSite(
            name=name,
            location=Location(file_path, line_num),
            source_file=file_path,
            value=value,
        ))
    return sites


def parse_dotenv_file(file_path: Path, display_path: Optional[str] = None) -> list[DefinitionSite]:
    """
    Read and parse one definition file

    Args:
        file_path: file on disk
        display_path: path recorded on each site (defaults to file_path)

    Raises:
        OSError, UnicodeDecodeError: the file cannot be read as UTF-8 text
    """
    content = file_path.read_text(encoding='utf-8-sig')
    sites = parse_dotenv_content(content, display_path or str(file_path))
    logger.debug(f"Parsed {len(sites)} definitions from {file_path}")
    return sites
