import shutil
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
SAMPLE_SRC = REPO_ROOT / "src"


@pytest.fixture
def site_root(tmp_path):
    """A throwaway project root holding a copy of the example site sources."""
    shutil.copytree(SAMPLE_SRC, tmp_path / "src")
    return tmp_path


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
