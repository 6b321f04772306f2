"""Geolocation capability providers."""

from abc import ABC, abstractmethod
from typing import Optional

from ..core.enums import AcquisitionFailure
from ..core.exceptions import AcquisitionError
from ..domain.location import PositionReading


class GeolocationProvider(ABC):
    """Source of the device's current position."""

    @abstractmethod
    async def get_current_position(
        self, high_accuracy: bool, timeout_ms: int, max_cache_age_ms: int
    ) -> PositionReading:
        """Return the current position.

        Raises:
            AcquisitionError: With the reason the position could not be read
        """
        pass


class StaticGeolocationProvider(GeolocationProvider):
    """Always reports the same configured position."""

    def __init__(self, latitude: float, longitude: float):
        self.reading = PositionReading(latitude=latitude, longitude=longitude)

    async def get_current_position(
        self, high_accuracy: bool, timeout_ms: int, max_cache_age_ms: int
    ) -> PositionReading:
        return self.reading


class UnsupportedGeolocationProvider(GeolocationProvider):
    """Stands in for a host with no geolocation capability."""

    async def get_current_position(
        self, high_accuracy: bool, timeout_ms: int, max_cache_age_ms: int
    ) -> PositionReading:
        raise AcquisitionError(AcquisitionFailure.UNSUPPORTED, "Geolocation is not supported")


class ReportedPositionProvider(GeolocationProvider):
    """Replays what a client's own geolocation returned: a reading or an error."""

    def __init__(
        self,
        reading: Optional[PositionReading] = None,
        error: Optional[AcquisitionFailure] = None,
    ):
        if (reading is None) == (error is None):
            raise ValueError("Exactly one of reading or error must be given")
        self.reading = reading
        self.error = error

    async def get_current_position(
        self, high_accuracy: bool, timeout_ms: int, max_cache_age_ms: int
    ) -> PositionReading:
        if self.error is not None:
            raise AcquisitionError(self.error)
        return self.reading
