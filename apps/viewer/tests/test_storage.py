import json

from jokes_shared.models import Joke
from jokes_viewer.storage import CACHE_KEY, JokeCache, LocalStorage


def test_load_returns_none_without_cache(cache: JokeCache) -> None:
    assert cache.load() is None


def test_save_overwrites_previous_collection(cache: JokeCache, storage: LocalStorage) -> None:
    cache.save([Joke(id=1, title="old", body="old")])
    cache.save([Joke(id=2, title="new", body="new"), Joke(id=3, title="newer", body="newer")])

    assert [joke.id for joke in cache.load()] == [2, 3]
    stored = json.loads(storage.get_item(CACHE_KEY))
    assert stored[0] == {"id": 2, "title": "new", "body": "new"}


def test_other_keys_are_preserved(cache: JokeCache, storage: LocalStorage) -> None:
    storage.set_item("theme", "dark")

    cache.save([Joke(id=1, title="A", body="B")])

    assert storage.get_item("theme") == "dark"


def test_corrupt_cache_value_is_ignored(cache: JokeCache, storage: LocalStorage) -> None:
    storage.set_item(CACHE_KEY, "[{\"id\": \"not-a-number\"}]")

    assert cache.load() is None


def test_unreadable_storage_file_is_treated_as_empty(storage: LocalStorage) -> None:
    storage.path.write_text("{not json", encoding="utf-8")

    assert storage.get_item(CACHE_KEY) is None


def test_storage_creates_parent_directories(tmp_path) -> None:
    storage = LocalStorage(tmp_path / "nested" / "dir" / "storage.json")

    storage.set_item("key", "value")

    assert storage.path.exists()
    assert storage.get_item("key") == "value"


def test_writes_leave_no_temporary_files(tmp_path) -> None:
    storage = LocalStorage(tmp_path / "storage.json")

    storage.set_item("first", "1")
    storage.set_item("second", "2")

    assert sorted(path.name for path in tmp_path.iterdir()) == ["storage.json"]
    assert storage.get_item("first") == "1"
