"""Enums for the QR tracker application."""

from enum import Enum


class ScanState(str, Enum):
    """States of the scan workflow."""

    IDLE = "idle"
    ACQUIRING = "acquiring"
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    ACQUISITION_FAILED = "acquisition_failed"


class AcquisitionFailure(str, Enum):
    """Reasons a geolocation provider can fail."""

    UNSUPPORTED = "unsupported"
    PERMISSION_DENIED = "permission_denied"
    TIMEOUT = "timeout"
    POSITION_UNAVAILABLE = "position_unavailable"


# Terminal states a scan attempt can finish in
SCAN_RESULT_STATES = frozenset(
    {ScanState.MATCHED, ScanState.UNMATCHED, ScanState.ACQUISITION_FAILED}
)
