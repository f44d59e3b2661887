from pathlib import Path
from typing import Dict

import pytest


@pytest.fixture
def make_tree(tmp_path):
    """Write ``{relative_path: text}`` under tmp_path and return the root."""

    def _make(files: Dict[str, str]) -> Path:
        for rel, text in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return tmp_path

    return _make
