from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from substore.core.store import COLLECTIONS_KEY, SUBS_KEY, JsonStore  # noqa: E402


def build_store(path, subs=None, collections=None) -> JsonStore:
    store = JsonStore(path)
    store.ensure_defaults()
    if subs is not None:
        store.write(subs, SUBS_KEY)
    if collections is not None:
        store.write(collections, COLLECTIONS_KEY)
    return store


@pytest.fixture
def store(tmp_path) -> JsonStore:
    return build_store(tmp_path / "sub-store.json")
