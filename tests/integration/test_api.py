"""
HTTP-level tests for the realm and profile endpoints.

The app runs with an in-memory gateway and record stores under tmp_path, so
these tests need no network access.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from realmsapi.api import SERVER_ERROR_MESSAGE, create_app
from realmsapi.config import Settings
from realmsapi.errors import UpstreamError

INVITE_CODE = "AbCdEfGhIjK"
REALM_ID_CODE = "ABCD1234"
XUID = "2535416409123456"


@pytest.fixture
def client(test_settings: Settings, fake_gateway):
    app = create_app(settings=test_settings, gateway=fake_gateway)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


class TestRealmEndpoints:
    def test_documentation_document(self, client: TestClient) -> None:
        response = client.get("/api/realms/")

        assert response.status_code == 200
        body = response.json()["realmsapi"]
        assert set(body) == {"documentation", "endpoints", "schemas"}
        assert "Realm" in body["schemas"]

    def test_lookup_returns_full_record_and_persists(
        self, client: TestClient, test_settings: Settings
    ) -> None:
        response = client.get(f"/api/realms/{INVITE_CODE}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "4412345"
        assert body["invite"]["codeurl"] == f"https://realms.gg/{INVITE_CODE}"
        assert body["server"]["protocol"] == "1.21.50"
        assert body["owner"]["gamerScore"] == 12345
        assert body["thumbnailId"] is None

        stored = json.loads(test_settings.realms_db_path.read_text(encoding="utf-8"))
        assert stored[-1]["request_id"] == body["request_id"]

    def test_realm_id_length_code_returns_stub(
        self, client: TestClient, fake_gateway, test_settings: Settings
    ) -> None:
        response = client.get(f"/api/realms/{REALM_ID_CODE}")

        assert response.status_code == 200
        assert response.json() == {"id": REALM_ID_CODE, "name": REALM_ID_CODE}
        assert fake_gateway.calls == []
        assert not test_settings.realms_db_path.exists()

    def test_unresolvable_code_answers_200_with_error_body(
        self, client: TestClient, fake_gateway
    ) -> None:
        fake_gateway.errors["resolve_descriptor"] = UpstreamError("Invalid link")

        response = client.get("/api/realms/xyz-real-1")

        assert response.status_code == 200
        assert response.json() == {
            "name": False,
            "realmCode": "xyz-real-1",
            "valid": False,
            "error": "Invalid link",
        }

    def test_store_failure_is_a_server_fault(
        self, test_settings: Settings, fake_gateway, monkeypatch
    ) -> None:
        app = create_app(settings=test_settings, gateway=fake_gateway)
        with TestClient(app, raise_server_exceptions=False) as client:
            store = app.state.services.realm_store

            def fail(records):
                raise OSError("read-only file system")

            monkeypatch.setattr(store, "_write", fail)
            response = client.get(f"/api/realms/{INVITE_CODE}")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == 500
        assert body["message"] == SERVER_ERROR_MESSAGE
        assert body["request_id"]


class TestXboxEndpoint:
    def test_profile_is_annotated(self, client: TestClient, test_settings: Settings) -> None:
        response = client.get(f"/api/xbox/{XUID}")

        assert response.status_code == 200
        body = response.json()
        assert body["people"][0]["xuid"] == XUID
        assert body["request_id"]
        assert body["timestamp"]

        stored = json.loads(test_settings.xbox_users_db_path.read_text(encoding="utf-8"))
        assert stored == [{"people": body["people"]}]

    def test_profile_failure_answers_500(self, client: TestClient, fake_gateway) -> None:
        fake_gateway.errors["get_profile"] = UpstreamError("xbl.people answered 400")

        response = client.get(f"/api/xbox/{XUID}")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to fetch Xbox user data"
        assert body["message"] == "xbl.people answered 400"
        assert body["request_id"]


def test_unknown_route_answers_404(client: TestClient) -> None:
    response = client.get("/api/nothing/here")

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == 404
    assert body["message"] == "Page Not Found"
    assert body["request_id"]


def test_existing_records_are_loaded_on_startup(test_settings: Settings, fake_gateway) -> None:
    test_settings.realms_db_path.write_text(json.dumps([{"id": "old"}]), encoding="utf-8")
    app = create_app(settings=test_settings, gateway=fake_gateway)

    with TestClient(app) as client:
        client.get(f"/api/realms/{INVITE_CODE}")
        records = app.state.services.realm_store.records

    assert [r["id"] for r in records] == ["old", "4412345"]


@pytest.mark.parametrize("path", ["/api/realms/AbCdEfGhIjK", "/api/xbox/123", "/api/realms/"])
def test_unsupported_method_answers_404(client: TestClient, path: str) -> None:
    response = client.post(path)

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == 404
    assert body["message"] == "Page Not Found"
