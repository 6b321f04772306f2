"""Deterministic stand-ins for clocks, decoders and geolocation providers."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from qr_tracker.core.enums import AcquisitionFailure
from qr_tracker.core.exceptions import AcquisitionError
from qr_tracker.domain.location import PositionReading
from qr_tracker.services.decoder import TokenDecoder
from qr_tracker.services.geolocation import GeolocationProvider

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1.0) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now

    def epoch_ms(self) -> int:
        return int(self.now.timestamp() * 1000)


class ScriptedDecoder(TokenDecoder):
    """Returns queued tokens in order, then None."""

    def __init__(self, *tokens: Optional[str]):
        self.tokens = list(tokens)
        self.frames: List[Any] = []

    async def decode(self, frame: Any) -> Optional[str]:
        self.frames.append(frame)
        return self.tokens.pop(0) if self.tokens else None


class SequenceGeolocationProvider(GeolocationProvider):
    """Returns queued readings in order; records the request arguments."""

    def __init__(self, *readings: PositionReading):
        self.readings = list(readings)
        self.calls: List[dict] = []

    async def get_current_position(self, high_accuracy, timeout_ms, max_cache_age_ms):
        self.calls.append(
            {"high_accuracy": high_accuracy, "timeout_ms": timeout_ms, "max_cache_age_ms": max_cache_age_ms}
        )
        return self.readings.pop(0)


class FailingGeolocationProvider(GeolocationProvider):
    def __init__(self, reason: AcquisitionFailure):
        self.reason = reason

    async def get_current_position(self, high_accuracy, timeout_ms, max_cache_age_ms):
        raise AcquisitionError(self.reason)


class GatedGeolocationProvider(GeolocationProvider):
    """Blocks until released, so a scan can be held in the ACQUIRING state."""

    def __init__(self, reading: PositionReading):
        self.reading = reading
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls = 0

    async def get_current_position(self, high_accuracy, timeout_ms, max_cache_age_ms):
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return self.reading


class SlowGeolocationProvider(GeolocationProvider):
    def __init__(self, delay_seconds: float):
        self.delay_seconds = delay_seconds

    async def get_current_position(self, high_accuracy, timeout_ms, max_cache_age_ms):
        await asyncio.sleep(self.delay_seconds)
        return PositionReading(0.0, 0.0)
