from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from quiethours.services.loader import clear_cache

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@pytest.fixture(autouse=True)
def reset_loader_cache():
    """Each test starts with no cached datasets (and no lock bound to an old event loop)."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def data_copy(tmp_path: Path) -> Path:
    """A writable copy of the repository fixture data."""
    target = tmp_path / "data"
    shutil.copytree(DATA_DIR, target)
    return target
