from __future__ import annotations

import json
import os
from pathlib import Path

from .logger import get_logger

_logger = get_logger("storage")

KEY_PREFIX = "code-chrono-"
_DEFAULT_PATH = Path.home() / ".code_chrono" / "local_storage.json"


def storage_key(name: str) -> str:
    """Namespace a preference name, e.g. ``theme`` -> ``code-chrono-theme``."""
    return f"{KEY_PREFIX}{name}"


def default_storage_path() -> str:
    env = (os.getenv("CODE_CHRONO_STORAGE") or "").strip()
    if env:
        return str(Path(env).expanduser())
    return str(_DEFAULT_PATH)


class LocalStorage:
    """String-keyed, string-valued durable storage backed by one JSON file.

    Every write is flushed to disk immediately so a preference change is
    durable as soon as ``set_item`` returns.
    """

    def __init__(self, storage_path: str | None = None):
        self.storage_path = storage_path or default_storage_path()
        self._items: dict[str, str] = {}
        self.load()

    def load(self) -> None:
        try:
            if os.path.exists(self.storage_path):
                with open(self.storage_path, encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    self._items = {str(k): str(v) for k, v in data.items() if isinstance(v, str)}
                    _logger.debug("storage loaded: %s", self.storage_path)
                    return
                _logger.warning("storage file is not an object, ignoring: %s", self.storage_path)
        except Exception as e:
            _logger.warning("storage load failed: %s", e)
        self._items = {}

    def save(self) -> None:
        try:
            parent = os.path.dirname(self.storage_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            tmp_path = f"{self.storage_path}.tmp"
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._items, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.storage_path)
            _logger.debug("storage saved: %s", self.storage_path)
        except Exception as e:
            _logger.error("storage save failed: %s", e)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)
        self.save()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self.save()

    def has(self, key: str) -> bool:
        return key in self._items

    @property
    def data(self) -> dict[str, str]:
        return dict(self._items)
