"""
Durable key/value storage for the viewer.

``LocalStorage`` keeps string values in a single JSON file, the same
shape a browser's ``localStorage`` offers. ``JokeCache`` stores the last
successfully fetched joke collection under one key and replaces it
wholesale on every save.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile

from pydantic import TypeAdapter, ValidationError

from jokes_shared.models import Joke

logger = logging.getLogger(__name__)

CACHE_KEY = "cachedJokes"

_JOKE_LIST = TypeAdapter(list[Joke])


class LocalStorage:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f"{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False)
            os.replace(temp_name, self._path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)


class JokeCache:
    def __init__(self, storage: LocalStorage, *, key: str = CACHE_KEY) -> None:
        self._storage = storage
        self._key = key

    def load(self) -> list[Joke] | None:
        raw = self._storage.get_item(self._key)
        if raw is None:
            return None
        try:
            jokes = _JOKE_LIST.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding corrupt joke cache: %s", exc)
            return None
        return jokes or None

    def save(self, jokes: list[Joke]) -> None:
        self._storage.set_item(self._key, _JOKE_LIST.dump_json(jokes).decode("utf-8"))
