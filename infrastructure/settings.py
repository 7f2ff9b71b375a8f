"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access.

    A missing file is an error unless `required=False`, in which case every
    lookup returns its default.
    """

    def __init__(self, settings_path: str | Path, required: bool = True) -> None:
        self._path = Path(settings_path)
        self._data: dict[str, Any] = {}
        if not self._path.exists():
            if required:
                raise FileNotFoundError(f"settings.json not found: {self._path}")
            logger.info("No settings file at {}, using defaults", self._path)
            return
        with self._path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            self._data = data
        else:
            logger.warning("Ignoring settings file {}: top level is not an object", self._path)

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
            return int(self.get(key, default))
        except (ValueError, TypeError):
            logger.warning("Invalid integer for {}: {!r}", key, self.get(key))
            return default

    def get_float_pair(self, key: str, default: tuple[float, float]) -> tuple[float, float]:
        """Return `key` as a two-float tuple, e.g. `[45.0, -90.0]`."""
        raw = self.get(key, None)
        if raw is None:
            return default
        try:
            first, second = raw
            return float(first), float(second)
        except (ValueError, TypeError):
            logger.warning("Invalid pair for {}: {!r}", key, raw)
            return default
