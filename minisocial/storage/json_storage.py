"""
JSON-file key/value storage.

Each key is one JSON document under the data directory. Loading never
raises: a missing, unreadable or malformed blob yields the caller's
fallback. Saving replaces the whole blob atomically; there is no
transaction spanning several keys.
"""

from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import Any

from ..utils.logger import get_logger

logger = get_logger(__name__)


class JsonStorage:
    """Durable named blobs backed by one JSON file per key"""

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
        return self.data_dir / f"{safe}.json"

    def load(self, key: str, fallback: Any) -> Any:
        """Return the stored value for key, or fallback if absent or corrupt."""
        path = self.path_for(key)
        if not path.exists():
            return fallback
        try:
            with open(path, "r", encoding="utf-8") as f:
                value = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("Discarding unreadable blob", key=key, path=str(path), error=str(e))
            return fallback
        if value is None:
            return fallback
        return value

    def save(self, key: str, value: Any) -> None:
        """Atomically overwrite the blob for key."""
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w", dir=str(path.parent), delete=False, encoding="utf-8", suffix=".tmp"
        ) as tf:
            json.dump(value, tf, indent=2, ensure_ascii=False, default=str)
            temp_path = Path(tf.name)
        try:
            shutil.move(str(temp_path), str(path))
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

    def delete(self, key: str) -> None:
        """Remove the blob for key (idempotent)."""
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
