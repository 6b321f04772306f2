"""Unit tests for component logger resolution."""

import pytest

from qr_tracker.utils.logging_config import ComponentLogger, get_logger, get_module_logger


@pytest.mark.unit
class TestComponentResolution:
    @pytest.mark.parametrize(
        "module,component",
        [
            ("qr_tracker.api.objects", "api"),
            ("qr_tracker.main", "api"),
            ("qr_tracker.services.registry", "registry"),
            ("qr_tracker.repositories.memory_impl", "registry"),
            ("qr_tracker.services.scan_workflow", "scan"),
            ("qr_tracker.services.qr_render", "render"),
            ("qr_tracker.services.export", "render"),
            ("qr_tracker.launcher", "main"),
            ("qr_tracker.config", "main"),
            ("scan", "scan"),
        ],
    )
    def test_resolve_component(self, module, component):
        assert ComponentLogger.resolve_component(module) == component

    def test_module_logger_shares_component_logger(self):
        assert get_module_logger("qr_tracker.services.scan_workflow") is get_logger("scan")
        assert get_logger("scan").name == "qr_tracker.scan"

    def test_unknown_component_is_created_on_demand(self):
        logger = get_logger("diagnostics")
        assert logger.name == "qr_tracker.diagnostics"
        assert logger.handlers
