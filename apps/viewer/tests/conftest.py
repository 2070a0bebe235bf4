from collections.abc import Iterator
from pathlib import Path

import pytest

from jokes_viewer.config import get_viewer_settings
from jokes_viewer.storage import JokeCache, LocalStorage


@pytest.fixture(autouse=True)
def reset_viewer_settings() -> Iterator[None]:
    get_viewer_settings.cache_clear()
    yield
    get_viewer_settings.cache_clear()


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage.json")


@pytest.fixture
def cache(storage: LocalStorage) -> JokeCache:
    return JokeCache(storage)
