"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        """Return `key` as int, falling back to `default` on bad values."""
        try:
            return int(self.get(key, default) or default)
        except (ValueError, TypeError):
            logger.warning("Invalid integer for setting {}; using {}", key, default)
            return default

    def get_float(self, key: str, default: float) -> float:
        """Return `key` as float, falling back to `default` on bad values."""
        try:
            return float(self.get(key, default) or default)
        except (ValueError, TypeError):
            logger.warning("Invalid number for setting {}; using {}", key, default)
            return default

    def get_path(self, key: str, default: str | Path) -> Path:
        """Return `key` as a path with `~` and environment variables expanded."""
        raw = self.get(key, None)
        if not isinstance(raw, str) or not raw.strip():
            raw = str(default)
        return Path(os.path.expanduser(os.path.expandvars(raw)))
