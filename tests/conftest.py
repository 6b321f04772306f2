"""Pytest configuration and shared fixtures."""

import os

# Must be set before qr_tracker is imported: logging and config read them on first use
os.environ.setdefault("QR_TRACKER_LOG_TO_FILE", "0")
os.environ.setdefault("QR_TRACKER_CONFIG_FILE", os.path.join(os.path.dirname(__file__), "no-such-config.json"))

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from qr_tracker.config import reset_config
from qr_tracker.domain.identity import IdentityCodec
from qr_tracker.services.container import TrackerServices
from qr_tracker.services.decoder import PayloadDecoder
from qr_tracker.services.geolocation import StaticGeolocationProvider
from qr_tracker.services.qr_render import QROptions
from qr_tracker.services.registry import ObjectRegistry
from qr_tracker.services.scan_workflow import ScanWorkflow

from tests.helpers.fakes import FakeClock

SAO_PAULO = (-23.5505, -46.6333)


@pytest.fixture(autouse=True)
def _fresh_config():
    """Each test starts from configuration freshly read from the environment."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(clock) -> ObjectRegistry:
    """Empty registry driven by the fake clock."""
    return ObjectRegistry(codec=IdentityCodec(clock_ms=clock.epoch_ms), clock=clock)


@pytest.fixture
def workflow(registry, clock) -> ScanWorkflow:
    """Workflow reading the frame as the token, positioned in São Paulo."""
    return ScanWorkflow(
        registry=registry,
        decoder=PayloadDecoder(),
        geolocation=StaticGeolocationProvider(*SAO_PAULO),
        timeout_ms=1_000,
        clock=clock,
    )


@pytest.fixture
def services(registry, workflow) -> TrackerServices:
    return TrackerServices(registry=registry, workflow=workflow, qr_options=QROptions(size_px=150))


@pytest.fixture
def client(services) -> Generator[TestClient, None, None]:
    """Create a test client bound to a fresh, empty set of services."""
    from qr_tracker.main import app
    from qr_tracker.api.dependencies import get_tracker_services

    app.dependency_overrides[get_tracker_services] = lambda: services

    with TestClient(app) as test_client:
        yield test_client

    # Clear overrides to avoid affecting other tests
    app.dependency_overrides.clear()
