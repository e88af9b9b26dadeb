from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from gomoddirectivecomments.modfile import parse_modfile
from gomoddirectivecomments.syntax import ModFile



@pytest.fixture
def modfile():
    def _parse(text: str, *, name: str = "go.mod") -> ModFile:
        return parse_modfile(name, text)

    return _parse


@pytest.fixture
def write_gomod(tmp_path: Path):
    def _write(text: str, *, name: str = "go.mod") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
