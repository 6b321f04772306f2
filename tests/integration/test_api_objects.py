"""Tests for the tracked object API endpoints."""

import base64
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

from qr_tracker.services.qr_render import EMPTY_IMAGE, PNG_DATA_URI_PREFIX, QROptions


@pytest.mark.integration
class TestObjectsAPI:
    def test_create_object_success(self, client: TestClient):
        response = client.post("/v1/objects", json={"name": "Notebook Dell"})

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Notebook Dell"
        assert data["identity_token"].startswith("QR_NOTEBOOK_DELL_")
        assert data["last_location"] is None
        assert data["last_seen"] is None
        assert data["history_length"] == 0
        assert "id" in data
        assert "created_at" in data

    @pytest.mark.parametrize("name", ["", "   "])
    def test_create_object_empty_name(self, client: TestClient, registry, name):
        response = client.post("/v1/objects", json={"name": name})

        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")
        assert len(registry) == 0

    def test_create_object_missing_name(self, client: TestClient):
        response = client.post("/v1/objects", json={})
        assert response.status_code == 422

    def test_same_name_twice_gives_distinct_tokens(self, client: TestClient):
        first = client.post("/v1/objects", json={"name": "Camera"}).json()
        second = client.post("/v1/objects", json={"name": "Camera"}).json()

        assert first["identity_token"] != second["identity_token"]

    def test_list_objects_in_registration_order(self, client: TestClient):
        for name in ["Bike", "Amp", "Camera"]:
            client.post("/v1/objects", json={"name": name})

        response = client.get("/v1/objects")

        assert response.status_code == 200
        assert [o["name"] for o in response.json()["objects"]] == ["Bike", "Amp", "Camera"]

    def test_get_object(self, client: TestClient, registry):
        obj = registry.register("Camera")

        response = client.get(f"/v1/objects/{obj.id}")

        assert response.status_code == 200
        assert response.json()["identity_token"] == obj.identity_token

    def test_get_object_not_found(self, client: TestClient):
        response = client.get("/v1/objects/does-not-exist")

        assert response.status_code == 404
        data = response.json()
        assert data["title"] == "Object Not Found"
        assert data["status"] == 404

    def test_history_of_seeded_object(self, client: TestClient, registry):
        registry.seed_demo_objects()
        notebook = registry.find_by_token("QR_NOTEBOOK_001")

        response = client.get(f"/v1/objects/{notebook.id}/history")

        assert response.status_code == 200
        samples = response.json()["samples"]
        assert [s["address"] for s in samples] == ["São Paulo, SP", "Avenida Paulista, SP"]

    def test_seeded_object_reports_last_seen(self, client: TestClient, registry):
        registry.seed_demo_objects()
        notebook = registry.find_by_token("QR_NOTEBOOK_001")

        data = client.get(f"/v1/objects/{notebook.id}").json()

        assert data["last_location"]["latitude"] == -23.5505
        assert data["history_length"] == 2
        assert data["last_seen"]


@pytest.mark.integration
class TestQRExportAPI:
    def test_download_png(self, client: TestClient, registry):
        obj = registry.register("Notebook Dell")

        response = client.get(f"/v1/objects/{obj.id}/qr")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["content-disposition"] == 'attachment; filename="QR_Notebook_Dell.png"'
        assert response.content.startswith(b"\x89PNG")

    def test_download_png_with_non_latin_name(self, client: TestClient, registry):
        obj = registry.register("相机 Canon")

        response = client.get(f"/v1/objects/{obj.id}/qr")

        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="QR____Canon.png"' in disposition
        assert f"filename*=UTF-8''{quote('QR_相机_Canon.png', safe='')}" in disposition
        assert response.content.startswith(b"\x89PNG")

    def test_download_png_with_quote_in_name(self, client: TestClient, registry):
        obj = registry.register('Box "A"')

        response = client.get(f"/v1/objects/{obj.id}/qr")

        assert response.status_code == 200
        assert response.headers["content-disposition"] == (
            'attachment; filename="QR_Box_\\"A\\".png"; filename*=UTF-8\'\'QR_Box_%22A%22.png'
        )

    def test_data_uri(self, client: TestClient, registry):
        obj = registry.register("Camera")

        data = client.get(f"/v1/objects/{obj.id}/qr/data-uri").json()

        assert data["identity_token"] == obj.identity_token
        assert data["filename"] == "QR_Camera.png"
        assert data["data_uri"].startswith(PNG_DATA_URI_PREFIX)
        assert base64.b64decode(data["data_uri"][len(PNG_DATA_URI_PREFIX):]).startswith(b"\x89PNG")

    def test_print_document(self, client: TestClient, registry):
        obj = registry.register("Camera")

        response = client.get(f"/v1/objects/{obj.id}/print")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert obj.identity_token in response.text
        assert PNG_DATA_URI_PREFIX in response.text

    def test_qr_for_unknown_object(self, client: TestClient):
        assert client.get("/v1/objects/nope/qr").status_code == 404
        assert client.get("/v1/objects/nope/print").status_code == 404

    def test_render_failure_is_problem_details(self, client: TestClient, registry, services):
        obj = registry.register("Camera")
        services.qr_options = QROptions(dark_color="not-a-color")

        response = client.get(f"/v1/objects/{obj.id}/qr")

        assert response.status_code == 500
        assert response.json()["title"] == "QR Rendering Failed"
        assert len(registry) == 1

    def test_data_uri_render_failure_returns_empty_image(self, client: TestClient, registry, services):
        obj = registry.register("Camera")
        services.qr_options = QROptions(dark_color="not-a-color")

        response = client.get(f"/v1/objects/{obj.id}/qr/data-uri")

        assert response.status_code == 200
        data = response.json()
        assert data["data_uri"] == EMPTY_IMAGE
        assert data["identity_token"] == obj.identity_token


@pytest.mark.integration
class TestHealthAPI:
    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client: TestClient):
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json()["checks"] == {"config": True, "services": True}

    def test_unknown_route_is_problem_details(self, client: TestClient):
        response = client.get("/v1/nothing-here")
        assert response.status_code == 404
        assert response.json()["title"] == "Not Found"
