"""Pytest configuration and fixtures for LegacyGraph CLI tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    """Point the config file at a temp location so a user's config.toml never leaks in."""
    monkeypatch.setattr("legacygraph_cli.config.CONFIG_FILE", tmp_path / "home" / "config.toml")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_scripts_path() -> Path:
    """Get path to the sample script tree."""
    return Path(__file__).parent / "fixtures" / "sample_scripts"


@pytest.fixture
def make_scripts(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative_path: content}`` under a fresh root and return the root."""

    def _make(files: Dict[str, str]) -> Path:
        root = temp_dir / "scripts"
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture
def loop_scripts(make_scripts) -> Path:
    """main.bat -> a.bat -> main.bat, plus an external missing.exe."""
    return make_scripts({
        "main.bat": "@echo off\ncall a.bat\ncall missing.exe\n",
        "a.bat": "@echo off\ncall main.bat\n",
    })


SAMPLE_TREE = """\
main.bat
  cleanup.bat
    cleanmgr.exe (external)
  notepad.exe (external)
  report.pl
    helper.pl
      common.bat
        main.bat (LOOP/ALREADY VISITED)
    ipconfig.exe (external)
  setup.cmd
    common.bat (LOOP/ALREADY VISITED)
"""


@pytest.fixture
def sample_tree_text() -> str:
    """Expected call tree of the sample script tree starting at main.bat."""
    return SAMPLE_TREE
