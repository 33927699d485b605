"""Best-effort key-value persistence.

Every logical collection is one JSON blob.  ``load`` never raises: a missing,
unreadable or malformed blob yields the caller's default.  ``save`` never
raises either; failures are logged and dropped.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Protocol

from loguru import logger

KEYS = {
    "commands": "cmdbrain.commands.v1",
    "brain_runs": "cmdbrain.brainruns.v1",
    "snippets": "cmdbrain.snippets.v1",
    "dictionary": "cmdbrain.dictionary.v1",
}


class KeyValueStore(Protocol):
    def load(self, key: str, default: Any) -> Any:
        ...

    def save(self, key: str, value: Any) -> None:
        ...


class JsonFileStore:
    """One ``<key>.json`` file per key under ``root``; writes are atomic."""

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def load(self, key: str, default: Any) -> Any:
        path = self._path(key)
        try:
            if not path.exists():
                return default
            text = path.read_text(encoding="utf-8")
            return json.loads(text) if text.strip() else default
        except Exception as e:
            # corrupt or unreadable file
            logger.warning(f"[kv] load {key} failed, using default: {e}")
            return default

    def save(self, key: str, value: Any) -> None:
        tmpname = None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            data = json.dumps(value, indent=2, ensure_ascii=False)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.root, suffix=".tmp", delete=False
            ) as tf:
                tmpname = tf.name
                tf.write(data)
            os.replace(tmpname, self._path(key))
        except Exception as e:
            logger.warning(f"[kv] save {key} failed: {e}")
            if tmpname:
                try:
                    os.unlink(tmpname)
                except OSError as ue:
                    logger.debug(f"[kv] could not remove {tmpname}: {ue}")


class MemoryStore:
    """In-process store; values are kept JSON-encoded like on disk."""

    def __init__(self):
        self.data: Dict[str, str] = {}

    def load(self, key: str, default: Any) -> Any:
        raw = self.data.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except Exception:
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            self.data[key] = json.dumps(value, ensure_ascii=False)
        except Exception as e:
            logger.warning(f"[kv] save {key} failed: {e}")
