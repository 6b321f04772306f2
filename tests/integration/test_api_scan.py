"""Tests for the scan API endpoints."""

import pytest
from fastapi.testclient import TestClient

from qr_tracker.core.enums import ScanState


@pytest.mark.integration
class TestScanAPI:
    def test_scan_with_reported_position(self, client: TestClient, registry, clock):
        obj = registry.register("Camera")
        clock.advance(60)

        response = client.post(
            "/v1/scan",
            json={"frame": obj.identity_token, "position": {"latitude": 10.5, "longitude": -20.25}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["kind"] == "matched"
        assert data["object_id"] == obj.id
        assert data["sample"]["address"] == "10.5000, -20.2500"
        assert obj.last_location.latitude == 10.5
        assert len(obj.location_history) == 1

    def test_scan_falls_back_to_configured_provider(self, client: TestClient, registry):
        obj = registry.register("Notebook Dell")

        response = client.post("/v1/scan", json={"frame": obj.identity_token})

        assert response.status_code == 200
        assert obj.last_location.latitude == -23.5505
        assert obj.last_location.longitude == -46.6333

    def test_two_scans_newest_first(self, client: TestClient, registry, clock):
        obj = registry.register("Camera")
        for lat in (1.0, 2.0):
            clock.advance(60)
            client.post(
                "/v1/scan",
                json={"frame": obj.identity_token, "position": {"latitude": lat, "longitude": 0.0}},
            )

        samples = client.get(f"/v1/objects/{obj.id}/history").json()["samples"]

        assert [s["latitude"] for s in samples] == [2.0, 1.0]

    def test_unmatched_scan(self, client: TestClient, registry):
        obj = registry.register("Camera")

        response = client.post("/v1/scan", json={"frame": "QR_UNKNOWN_1"})

        assert response.status_code == 404
        data = response.json()
        assert data["title"] == "No Matching Object"
        assert data["kind"] == "unmatched"
        assert data["token"] == "QR_UNKNOWN_1"
        assert obj.location_history == ()

    def test_permission_denied(self, client: TestClient, registry):
        obj = registry.register("Camera")

        response = client.post(
            "/v1/scan", json={"frame": obj.identity_token, "position_error": "permission_denied"}
        )

        assert response.status_code == 503
        data = response.json()
        assert data["kind"] == "acquisition_failed"
        assert data["reason"] == "permission_denied"
        assert obj.location_history == ()

    def test_position_and_error_together_rejected(self, client: TestClient):
        response = client.post(
            "/v1/scan",
            json={
                "frame": "QR_A_1",
                "position": {"latitude": 1.0, "longitude": 1.0},
                "position_error": "timeout",
            },
        )
        assert response.status_code == 422

    def test_out_of_range_position_rejected(self, client: TestClient):
        response = client.post(
            "/v1/scan", json={"frame": "QR_A_1", "position": {"latitude": 91.0, "longitude": 0.0}}
        )
        assert response.status_code == 422

    def test_scan_state_reports_last_outcome(self, client: TestClient, registry):
        assert client.get("/v1/scan/state").json() == {"state": "idle", "last_outcome": None}

        obj = registry.register("Camera")
        client.post("/v1/scan", json={"frame": obj.identity_token})

        data = client.get("/v1/scan/state").json()
        assert data["state"] == "idle"
        assert data["last_outcome"]["kind"] == "matched"
        assert data["last_outcome"]["object_id"] == obj.id

    def test_scan_while_acquiring_is_conflict(self, client: TestClient, registry, workflow):
        obj = registry.register("Camera")
        workflow._state = ScanState.ACQUIRING
        try:
            response = client.post("/v1/scan", json={"frame": obj.identity_token})
        finally:
            workflow._state = ScanState.IDLE

        assert response.status_code == 409
        assert response.headers["content-type"].startswith("application/problem+json")
        data = response.json()
        assert data["title"] == "Scan In Progress"
        assert data["status"] == 409
        assert obj.location_history == ()
        assert workflow.last_outcome is None
