"""Process-wide service instances built from configuration."""

from dataclasses import dataclass
from typing import Optional

from ..config import TrackerConfig, get_config
from ..utils.logging_config import get_logger
from .decoder import FixedTokenDecoder, PayloadDecoder, TokenDecoder
from .geolocation import (
    GeolocationProvider,
    StaticGeolocationProvider,
    UnsupportedGeolocationProvider,
)
from .qr_render import QROptions
from .registry import ObjectRegistry
from .scan_workflow import ScanWorkflow

logger = get_logger('main')


@dataclass
class TrackerServices:
    """Container for the registry, the scan workflow and rendering defaults."""

    registry: ObjectRegistry
    workflow: ScanWorkflow
    qr_options: QROptions


def build_decoder(config: TrackerConfig) -> TokenDecoder:
    scan = config.scan
    if scan.decoder == "fixed":
        if not scan.demo_token:
            raise ValueError("The fixed decoder needs scan.demo_token to be set")
        return FixedTokenDecoder(scan.demo_token, delay_seconds=scan.capture_delay_seconds)
    if scan.decoder == "payload":
        return PayloadDecoder()
    raise ValueError(f"Unknown decoder '{scan.decoder}'")


def build_geolocation(config: TrackerConfig) -> GeolocationProvider:
    scan = config.scan
    if scan.geolocation == "static":
        return StaticGeolocationProvider(scan.static_latitude, scan.static_longitude)
    if scan.geolocation == "unsupported":
        return UnsupportedGeolocationProvider()
    raise ValueError(f"Unknown geolocation provider '{scan.geolocation}'")


def build_services(config: Optional[TrackerConfig] = None) -> TrackerServices:
    """Create a fresh, empty registry and a workflow wired to it."""
    config = config or get_config()

    registry = ObjectRegistry()
    if config.app.seed_demo_data:
        registry.seed_demo_objects()

    workflow = ScanWorkflow(
        registry=registry,
        decoder=build_decoder(config),
        geolocation=build_geolocation(config),
        high_accuracy=config.scan.high_accuracy,
        timeout_ms=config.scan.timeout_ms,
        max_cache_age_ms=config.scan.max_cache_age_ms,
    )
    qr_options = QROptions(
        size_px=config.qr.size_px,
        margin_modules=config.qr.margin_modules,
        dark_color=config.qr.dark_color,
        light_color=config.qr.light_color,
    )

    logger.info(
        f"Services ready: decoder={config.scan.decoder}, geolocation={config.scan.geolocation}, "
        f"objects={len(registry)}"
    )
    return TrackerServices(registry=registry, workflow=workflow, qr_options=qr_options)


_services: Optional[TrackerServices] = None


def get_services() -> TrackerServices:
    """Get the process-wide services, building them on first use."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def reset_services() -> None:
    """Forget the process-wide services; the next get_services() starts empty."""
    global _services
    _services = None
