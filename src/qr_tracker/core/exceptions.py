"""Error taxonomy for the QR tracker core.

Every error here is recoverable and leaves previously stored state intact.
"""

from typing import Optional

from .enums import AcquisitionFailure, ScanState


class TrackerError(Exception):
    """Base class for all QR tracker errors."""


class ValidationError(TrackerError):
    """Input rejected before any mutation, e.g. an empty object name."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AcquisitionError(TrackerError):
    """The geolocation provider could not deliver a position."""

    def __init__(self, reason: AcquisitionFailure, message: Optional[str] = None):
        self.reason = AcquisitionFailure(reason)
        super().__init__(message or f"Position acquisition failed: {self.reason.value}")


class NoMatchError(TrackerError):
    """The scanned token does not belong to any registered object."""

    def __init__(self, token: Optional[str]):
        self.token = token
        if token is None:
            message = "No identity token could be decoded from the capture"
        else:
            message = f"No registered object has identity token '{token}'"
        super().__init__(message)


class RenderError(TrackerError):
    """QR image generation failed."""


class InvalidTransitionError(TrackerError):
    """The scan workflow was asked to move along an edge it does not have."""

    def __init__(self, current: ScanState, target: ScanState):
        self.current = current
        self.target = target
        super().__init__(f"Invalid scan transition {current.value} -> {target.value}")
