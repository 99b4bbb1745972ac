from __future__ import annotations

import copy
import json
import logging
import os
import threading
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from .settings import S

logger = logging.getLogger(__name__)

SUBS_KEY = "subs"
COLLECTIONS_KEY = "collections"


class JsonStore:
    """Key-value store persisted as a single JSON document.

    ``read`` hands out deep copies, so callers mutate their own snapshot
    and must ``write`` the whole value back.  Read-modify-write sequences
    that must not interleave belong inside ``transaction()``.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._data: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        if self._data is None:
            if self.path.exists():
                text = self.path.read_text(encoding="utf-8")
                self._data = json.loads(text) if text.strip() else {}
            else:
                self._data = {}
        return self._data

    def _flush(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self.path)

    def read(self, key: str, default: Any = None) -> Any:
        with self._lock:
            data = self._load()
            if key not in data:
                return default
            return copy.deepcopy(data[key])

    def write(self, value: Any, key: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = copy.deepcopy(value)
            self._flush(data)

    @contextmanager
    def transaction(self) -> Iterator["JsonStore"]:
        with self._lock:
            yield self

    def ensure_defaults(self) -> None:
        with self._lock:
            for key in (SUBS_KEY, COLLECTIONS_KEY):
                if not self.read(key):
                    self.write([], key)


@lru_cache(maxsize=1)
def get_store() -> JsonStore:
    store = JsonStore(S.data_path)
    store.ensure_defaults()
    logger.info("Using data file %s", store.path.resolve())
    return store
