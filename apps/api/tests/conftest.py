from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from jokes_api.config import get_settings
from jokes_api.main import app
from jokes_api.db import Base
from jokes_api.models import JokeRecord


@pytest.fixture(autouse=True)
def reset_api_caches() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    app.dependency_overrides.clear()
    app.state.store = None


@pytest.fixture
def database_url(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> str:
    url = f"sqlite+pysqlite:///{tmp_path / 'jokes-tests.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("STATIC_DIR", str(tmp_path / "dist"))
    return url


@pytest.fixture
def client(database_url: str) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        Base.metadata.create_all(bind=app.state.store.engine)
        yield test_client


@pytest.fixture
def seed_jokes(client: TestClient):
    def _seed(*jokes: tuple[str, str]) -> None:
        with Session(app.state.store.engine) as session:
            session.add_all([JokeRecord(title=title, body=body) for title, body in jokes])
            session.commit()

    return _seed
