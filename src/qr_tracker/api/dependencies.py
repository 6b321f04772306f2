"""Dependency injection for the API layer."""

from fastapi import Depends

from ..services.container import TrackerServices, get_services
from ..services.qr_render import QROptions
from ..services.registry import ObjectRegistry
from ..services.scan_workflow import ScanWorkflow


def get_tracker_services() -> TrackerServices:
    """Main dependency injection point; override this in tests."""
    return get_services()


def get_registry(services: TrackerServices = Depends(get_tracker_services)) -> ObjectRegistry:
    """Get the object registry."""
    return services.registry


def get_scan_workflow(services: TrackerServices = Depends(get_tracker_services)) -> ScanWorkflow:
    """Get the scan workflow."""
    return services.workflow


def get_qr_options(services: TrackerServices = Depends(get_tracker_services)) -> QROptions:
    """Get the QR rendering defaults."""
    return services.qr_options
