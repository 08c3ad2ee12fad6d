"""
Pytest configuration and shared fixtures for env_audit tests.

Provides helpers that lay out small project trees under tmp_path.
"""

from pathlib import Path
from typing import Callable

import pytest

from env_audit.core.scanner.models import DefinitionSite, Language, Location, UsageSite


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create files (with parent directories) below root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[dict], Path]:
    """Factory fixture: make_project({"app.py": "...", ".env": "..."}) -> root."""
    def _make(files: dict[str, str | bytes]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        return write_tree(root, files)
    return _make


@pytest.fixture
def sample_project(make_project) -> Path:
    """A small mixed-language project with one of each issue kind."""
    return make_project({
        ".env": "DATABASE_URL=postgres://localhost/app\nDB_URL=postgres://old\nUNUSED_FLAG=1\n",
        "app.py": "import os\nurl = os.getenv('DATABASE_URL')\nkey = os.environ['API_TOKEN']\n",
        "web/server.js": "const port = process.env.DB_URL;\n",
    })


def definition(name: str, path: str = ".env", line: int = 1, value: str = "x") -> DefinitionSite:
    return DefinitionSite(name, Location(path, line), path, value)


def usage(name: str, path: str = "app.py", line: int = 1, column: int = 1) -> UsageSite:
    return UsageSite(name, Location(path, line, column), Language.PYTHON, "os.getenv")
