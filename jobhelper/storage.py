"""
Key-value stores backing the verification cache and the settings.

Every store offers `get(key)` and `set(key, value)` over JSON-compatible
values. Each call is atomic for its slot; callers doing read-modify-write
across calls must serialize themselves.
"""

import copy
import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from .logger import get_logger

logger = get_logger()


class MemoryStore:
    """Process-local store, mostly for tests and one-shot CLI runs."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def keys(self):
        with self._lock:
            return list(self._data.keys())


def load_store(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return {}
            data = json.loads(content)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning("Unreadable store file, starting empty", path=str(path), error=str(e))
        return {}
    if not isinstance(data, dict):
        logger.warning("Store file is not a JSON object, starting empty", path=str(path))
        return {}
    return data


def save_store(path: Path, store: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(store, f, indent=2, ensure_ascii=False)


class JsonFileStore:
    """All slots kept in one JSON document on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            return load_store(self.path).get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            store = load_store(self.path)
            store[key] = value
            save_store(self.path, store)

    def keys(self):
        with self._lock:
            return list(load_store(self.path).keys())
