"""
Keyed counter stores backing the generation quota.
The in-memory store lives for the process; the file store persists across restarts.
"""

import json
import threading
from pathlib import Path
from typing import Dict, Protocol

from app.utils.logger import get_logger

logger = get_logger(__name__)


class QuotaStore(Protocol):
    """Keyed integer counters."""

    def get(self, key: str) -> int:
        ...

    def set(self, key: str, value: int) -> None:
        ...


class InMemoryQuotaStore:
    """Dict-backed counters. Lost on restart."""

    def __init__(self):
        self._counts: Dict[str, int] = {}

    def get(self, key: str) -> int:
        return self._counts.get(key, 0)

    def set(self, key: str, value: int) -> None:
        self._counts[key] = value


class LocalFileQuotaStore:
    """JSON-file-backed counters that survive process restarts."""

    FILE_NAME = "quota.json"

    def __init__(self, data_dir: str):
        self._lock = threading.Lock()
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._path = self._data_dir / self.FILE_NAME
        self._counts: Dict[str, int] = self._load()

    def _load(self) -> Dict[str, int]:
        if not self._path.exists():
            return {}
        with open(self._path) as f:
            raw = json.load(f)
        logger.info("Loaded %d quota counters from %s", len(raw), self._path)
        return {str(k): int(v) for k, v in raw.items()}

    def _persist(self) -> None:
        tmp_path = self._path.with_suffix(".tmp")
        with open(tmp_path, "w") as f:
            json.dump(self._counts, f, indent=2)
        tmp_path.replace(self._path)

    def get(self, key: str) -> int:
        with self._lock:
            return self._counts.get(key, 0)

    def set(self, key: str, value: int) -> None:
        with self._lock:
            self._counts[key] = value
            self._persist()
