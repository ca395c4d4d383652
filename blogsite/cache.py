from __future__ import annotations

import hashlib
import json
import logging
import threading
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CACHE_VERSION = 1


def hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def hash_text(text: str) -> str:
    return hash_bytes(text.encode("utf-8"))


def load_lock(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable cache file %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def write_lock(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=True, sort_keys=True), encoding="utf-8")


class RenderCache:
    """Rendered HTML keyed on a source file's mtime and content hash.

    An entry is reused only when both match, so a stale cache can never
    change what gets published.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.Lock()
        state = load_lock(path)
        if state.get("version") != CACHE_VERSION:
            state = {}
        self._entries: dict = state.get("posts", {})
        self.hits = 0

    def get(self, key: str, mtime: float, digest: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if not entry or entry.get("mtime") != mtime or entry.get("hash") != digest:
                return None
            self.hits += 1
        logger.debug("Render cache hit for %s", key)
        return entry.get("html")

    def put(self, key: str, mtime: float, digest: str, html: str) -> None:
        with self._lock:
            self._entries[key] = {"mtime": mtime, "hash": digest, "html": html}

    def prune(self, keep: set[str]) -> None:
        with self._lock:
            self._entries = {key: value for key, value in self._entries.items() if key in keep}

    def save(self) -> None:
        with self._lock:
            data = {"version": CACHE_VERSION, "posts": dict(self._entries)}
        write_lock(self.path, data)
