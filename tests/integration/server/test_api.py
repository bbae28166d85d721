"""Integration tests for the HTTP API and web UI."""

from collections.abc import Generator
from pathlib import Path

import orjson
import pytest
from fastapi.testclient import TestClient

from cap_manager.server import ServerSession, create_app
from cap_manager.store import RequirementStore


class ManualClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def store_file(project_dir: Path) -> Path:
    path = project_dir / "progress.json"
    _ = RequirementStore(path).init()
    return path


@pytest.fixture
def client(store_file: Path) -> Generator[TestClient]:
    with TestClient(create_app(store_file)) as test_client:
        yield test_client


@pytest.fixture
def seeded(client: TestClient) -> TestClient:
    for payload in (
        {"title": "Login", "description": "Users can log in"},
        {
            "title": "Logout",
            "description": "Users can log out",
            "externalLink": "https://example.com/2",
        },
        {"title": "Profile", "description": "Users can edit a profile"},
    ):
        assert client.post("/api/requirements", json=payload).status_code == 201
    _ = client.put("/api/requirements/1", json={"status": "Completed"})
    return client


def _ids(response_body: dict[str, object]) -> list[object]:
    data = response_body["data"]
    assert isinstance(data, list)
    return [item["id"] for item in data]


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Server is healthy"}

    def test_ping(self, client: TestClient) -> None:
        response = client.post("/api/ping")

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestCreate:
    def test_creates_requirement(self, client: TestClient, store_file: Path) -> None:
        response = client.post(
            "/api/requirements",
            json={"title": "Login", "description": "Users can log in"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Successfully created requirement #1"
        assert body["data"]["id"] == 1
        assert body["data"]["status"] == "Not Started"
        assert "externalLink" not in body["data"]
        assert orjson.loads(store_file.read_bytes())[0]["title"] == "Login"

    def test_creates_with_link(self, client: TestClient) -> None:
        response = client.post(
            "/api/requirements",
            json={
                "title": "Login",
                "description": "x",
                "externalLink": "https://example.com/1",
            },
        )

        assert response.json()["data"]["externalLink"] == "https://example.com/1"

    def test_missing_title(self, client: TestClient, store_file: Path) -> None:
        before = store_file.read_bytes()

        response = client.post("/api/requirements", json={"description": "x"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Title is required"}
        assert store_file.read_bytes() == before

    def test_invalid_link(self, client: TestClient) -> None:
        response = client.post(
            "/api/requirements",
            json={"title": "Login", "description": "x", "externalLink": "nope"},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid URL format")

    def test_rejects_unknown_fields(self, client: TestClient) -> None:
        response = client.post(
            "/api/requirements",
            json={"title": "Login", "description": "x", "priority": "high"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "priority" in response.json()["error"]

    def test_rejects_wrong_types(self, client: TestClient) -> None:
        response = client.post(
            "/api/requirements", json={"title": 5, "description": "x"}
        )

        assert response.status_code == 400
        assert "title" in response.json()["error"]


@pytest.mark.usefixtures("seeded")
class TestRead:
    def test_lists_all_in_id_order(self, client: TestClient) -> None:
        response = client.get("/api/requirements")

        assert response.status_code == 200
        assert _ids(response.json()) == [1, 2, 3]

    def test_filters_and_sorts(self, client: TestClient) -> None:
        by_status = client.get("/api/requirements", params={"status": "Not Started"})
        linked = client.get("/api/requirements", params={"linked": "true"})
        unlinked_desc = client.get(
            "/api/requirements", params={"unlinked": "true", "order": "desc"}
        )

        assert _ids(by_status.json()) == [2, 3]
        assert _ids(linked.json()) == [2]
        assert _ids(unlinked_desc.json()) == [3, 1]

    def test_sort_by_updated(self, client: TestClient) -> None:
        response = client.get(
            "/api/requirements", params={"sort": "updated", "order": "desc"}
        )

        assert _ids(response.json())[0] == 1

    def test_invalid_status_filter(self, client: TestClient) -> None:
        response = client.get("/api/requirements", params={"status": "Done"})

        assert response.status_code == 400
        assert 'Invalid status "Done"' in response.json()["error"]

    def test_invalid_since(self, client: TestClient) -> None:
        response = client.get("/api/requirements", params={"since": "whenever"})

        assert response.status_code == 400

    def test_get_single(self, client: TestClient) -> None:
        response = client.get("/api/requirements/2")

        assert response.status_code == 200
        assert response.json()["data"]["externalLink"] == "https://example.com/2"

    def test_get_missing(self, client: TestClient) -> None:
        response = client.get("/api/requirements/99")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Requirement #99 not found",
        }

    def test_non_numeric_id(self, client: TestClient) -> None:
        response = client.get("/api/requirements/abc")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid requirement ID"


@pytest.mark.usefixtures("seeded")
class TestUpdate:
    def test_updates_fields(self, client: TestClient) -> None:
        response = client.put(
            "/api/requirements/3",
            json={"status": "In Progress", "notes": "Started on the form"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Successfully updated requirement #3"
        assert body["data"]["status"] == "In Progress"
        assert body["data"]["notes"] == "Started on the form"
        assert body["data"]["created"] <= body["data"]["updated"]

    def test_null_fields_are_unchanged(self, client: TestClient) -> None:
        response = client.put(
            "/api/requirements/2", json={"notes": "n", "externalLink": None}
        )

        assert response.json()["data"]["externalLink"] == "https://example.com/2"

    def test_empty_link_removes_it(self, client: TestClient, store_file: Path) -> None:
        response = client.put("/api/requirements/2", json={"externalLink": ""})

        assert response.status_code == 200
        assert "externalLink" not in response.json()["data"]
        assert "externalLink" not in orjson.loads(store_file.read_bytes())[1]

    def test_invalid_status(self, client: TestClient, store_file: Path) -> None:
        before = store_file.read_bytes()

        response = client.put("/api/requirements/1", json={"status": "done"})

        assert response.status_code == 400
        assert response.json()["error"].startswith('Invalid status "done"')
        assert store_file.read_bytes() == before

    def test_missing(self, client: TestClient) -> None:
        response = client.put("/api/requirements/42", json={"status": "Completed"})

        assert response.status_code == 404


@pytest.mark.usefixtures("seeded")
class TestDelete:
    def test_deletes(self, client: TestClient) -> None:
        response = client.delete("/api/requirements/2")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Successfully deleted requirement #2",
        }
        assert client.get("/api/requirements/2").status_code == 404

    def test_missing(self, client: TestClient) -> None:
        assert client.delete("/api/requirements/8").status_code == 404


class TestStoreErrors:
    def test_missing_store_is_server_error(
        self, client: TestClient, store_file: Path
    ) -> None:
        store_file.unlink()

        response = client.get("/api/requirements")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Failed to access requirements"
        assert "progress.json" in body["message"]

    def test_corrupt_store_is_server_error(
        self, client: TestClient, store_file: Path
    ) -> None:
        _ = store_file.write_text("{", encoding="utf-8")

        assert client.get("/api/requirements/1").status_code == 500

    def test_unexpected_error_uses_json_envelope(
        self, store_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def explode(*_args: object, **_kwargs: object) -> None:
            msg = "query engine exploded"
            raise RuntimeError(msg)

        monkeypatch.setattr(RequirementStore, "list", explode)

        with TestClient(
            create_app(store_file), raise_server_exceptions=False
        ) as test_client:
            response = test_client.get("/api/requirements")

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {
            "success": False,
            "error": "Internal server error",
            "message": "query engine exploded",
        }


class TestWebUi:
    def test_index_page(self, client: TestClient) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "progress.json" in response.text
        assert "In Progress" in response.text


class TestSession:
    def test_ping_resets_inactivity(self, store_file: Path) -> None:
        clock = ManualClock()
        session = ServerSession(timeout=10, check_interval=3600, clock=clock)

        with TestClient(create_app(store_file, session=session)) as client:
            clock.now = 8
            _ = client.post("/api/ping")
            clock.now = 15

            assert session.idle_seconds == 7
            assert not session.is_expired()

    def test_lifespan_starts_and_stops_watchdog(self, store_file: Path) -> None:
        session = ServerSession(timeout=10, check_interval=3600)

        with TestClient(create_app(store_file, session=session)):
            assert session._task is not None  # pyright: ignore[reportPrivateUsage]

        assert session._task is None  # pyright: ignore[reportPrivateUsage]
