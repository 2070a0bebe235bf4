import pytest
from fastapi.testclient import TestClient

from jokes_api.config import get_settings
from jokes_api.main import app, get_store
from jokes_api.store import StoreQueryError, StoreUnavailableError
from jokes_shared.models import Joke


class FakeStore:
    def __init__(self, jokes: list[Joke] | None = None, error: Exception | None = None) -> None:
        self._jokes = jokes or []
        self._error = error
        self.calls = 0

    def fetch_all(self) -> list[Joke]:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return list(self._jokes)


def test_post_returns_all_rows(client: TestClient, seed_jokes) -> None:
    seed_jokes(("A", "B"), ("Knock knock", "Who's there?"), ("Pun", "Intended"))

    response = client.get("/post")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "success"
    assert len(payload["data"]) == 3
    assert payload["data"][0] == {"id": 1, "title": "A", "body": "B"}
    assert [joke["title"] for joke in payload["data"]] == ["A", "Knock knock", "Pun"]


def test_post_returns_404_for_empty_table(client: TestClient) -> None:
    response = client.get("/post")

    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "No jokes found"}


def test_post_returns_500_with_details_outside_production(client: TestClient) -> None:
    app.dependency_overrides[get_store] = lambda: FakeStore(
        error=StoreUnavailableError("Database connection failed")
    )

    response = client.get("/post")

    assert response.status_code == 500
    assert response.json() == {
        "status": "error",
        "message": "Internal server error",
        "details": "Database connection failed",
    }


def test_post_hides_details_in_production(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    get_settings.cache_clear()
    app.dependency_overrides[get_store] = lambda: FakeStore(
        error=StoreQueryError("Failed to fetch jokes")
    )

    response = client.get("/post")

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Internal server error"}


def test_post_uses_injected_store(client: TestClient) -> None:
    fake = FakeStore(jokes=[Joke(id=7, title="Injected", body="Store")])
    app.dependency_overrides[get_store] = lambda: fake

    response = client.get("/post")

    assert response.status_code == 200
    assert response.json()["data"] == [{"id": 7, "title": "Injected", "body": "Store"}]
    assert fake.calls == 1


def test_query_failures_do_not_leak_connections(database_url: str) -> None:
    # No table is created, so every query fails.
    with TestClient(app) as client:
        engine = app.state.store.engine
        baseline = engine.pool.checkedout()

        for _ in range(15):
            response = client.get("/post")
            assert response.status_code == 500
            assert response.json()["message"] == "Internal server error"

        assert engine.pool.checkedout() == baseline


def test_cors_allows_any_origin_with_credentials(client: TestClient, seed_jokes) -> None:
    seed_jokes(("A", "B"))

    response = client.get("/post", headers={"Origin": "http://example.test"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-credentials"] == "true"
    assert response.headers["access-control-allow-origin"] in {"*", "http://example.test"}


def test_unexpected_errors_become_generic_500(database_url: str) -> None:
    app.dependency_overrides[get_store] = lambda: FakeStore(error=KeyError("title"))

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/post")

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Internal server error"}
