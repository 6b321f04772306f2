"""Scan workflow: decode a token, acquire a position and record it on the matched object.

The workflow is a small state machine::

    IDLE -> ACQUIRING -> {MATCHED, UNMATCHED, ACQUISITION_FAILED} -> IDLE

A trigger that arrives while a scan is ACQUIRING is ignored rather than queued.
"""

import asyncio
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, FrozenSet, List, Optional

from ..core.enums import SCAN_RESULT_STATES, AcquisitionFailure, ScanState
from ..core.exceptions import (
    AcquisitionError,
    InvalidTransitionError,
    NoMatchError,
    TrackerError,
)
from ..domain.location import PositionReading, make_location_sample
from ..domain.models import LocationSample
from ..utils.logging_config import get_logger, log_exception
from .decoder import TokenDecoder
from .geolocation import GeolocationProvider
from .registry import ObjectRegistry

TRANSITIONS: Dict[ScanState, FrozenSet[ScanState]] = {
    ScanState.IDLE: frozenset({ScanState.ACQUIRING}),
    ScanState.ACQUIRING: SCAN_RESULT_STATES | {ScanState.IDLE},
    **{result: frozenset({ScanState.IDLE}) for result in SCAN_RESULT_STATES},
}


@dataclass(frozen=True)
class ScanOutcome:
    """Result of one completed scan attempt."""

    kind: ScanState
    started_at: datetime
    finished_at: datetime
    token: Optional[str] = None
    object_id: Optional[str] = None
    sample: Optional[LocationSample] = None
    error: Optional[TrackerError] = None

    @property
    def matched(self) -> bool:
        return self.kind == ScanState.MATCHED

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


ScanListener = Callable[[ScanOutcome], None]


class ScanWorkflow:
    """Serializes scans and commits each matched sample atomically."""

    def __init__(
        self,
        registry: ObjectRegistry,
        decoder: TokenDecoder,
        geolocation: GeolocationProvider,
        high_accuracy: bool = True,
        timeout_ms: int = 10_000,
        max_cache_age_ms: int = 60_000,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.registry = registry
        self.decoder = decoder
        self.geolocation = geolocation
        self.high_accuracy = high_accuracy
        self.timeout_ms = timeout_ms
        self.max_cache_age_ms = max_cache_age_ms
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = get_logger(__name__)

        self._state = ScanState.IDLE
        self._last_outcome: Optional[ScanOutcome] = None
        self._listeners: List[ScanListener] = []

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state != ScanState.IDLE

    @property
    def last_outcome(self) -> Optional[ScanOutcome]:
        return self._last_outcome

    def subscribe(self, listener: ScanListener) -> Callable[[], None]:
        """Register a callback for every finished scan. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, target: ScanState) -> None:
        if target not in TRANSITIONS[self._state]:
            raise InvalidTransitionError(self._state, target)
        self.logger.debug(f"Scan state {self._state.value} -> {target.value}")
        self._state = target

    async def trigger(
        self, frame: Any = None, geolocation: Optional[GeolocationProvider] = None
    ) -> Optional[ScanOutcome]:
        """Run one scan attempt.

        Args:
            frame: Captured frame handed to the decoder
            geolocation: Provider for this attempt only; defaults to the configured one

        Returns:
            The outcome, or None if a scan was already in progress
        """
        if self._state != ScanState.IDLE:
            self.logger.info(f"Scan trigger ignored: workflow is {self._state.value}")
            return None

        self._transition(ScanState.ACQUIRING)
        started_at = self.clock()
        try:
            outcome = await self._acquire_and_commit(frame, geolocation or self.geolocation, started_at)
            self._transition(outcome.kind)
        finally:
            # Back to idle whatever happened, including unexpected errors
            self._state = ScanState.IDLE

        self._last_outcome = outcome
        self._notify(outcome)
        return outcome

    async def _acquire_and_commit(
        self, frame: Any, provider: GeolocationProvider, started_at: datetime
    ) -> ScanOutcome:
        token = await self.decoder.decode(frame)

        try:
            reading = await self._read_position(provider)
            sample = make_location_sample(reading, self.clock())
        except AcquisitionError as e:
            self.logger.warning(f"Scan failed to acquire a position: {e.reason.value}")
            return self._finish(ScanState.ACQUISITION_FAILED, started_at, token=token, error=e)
        except ValueError as e:
            error = AcquisitionError(AcquisitionFailure.POSITION_UNAVAILABLE, str(e))
            self.logger.warning(f"Scan received an unusable position: {e}")
            return self._finish(ScanState.ACQUISITION_FAILED, started_at, token=token, error=error)

        obj = self.registry.find_by_token(token) if token else None
        if obj is None:
            self.logger.info(f"Scanned token {token!r} does not match any registered object")
            return self._finish(
                ScanState.UNMATCHED, started_at, token=token, sample=sample, error=NoMatchError(token)
            )

        head = obj.last_location
        if head is not None and sample.timestamp < head.timestamp:
            # Wall clock stepped back since the previous scan; keep the ledger ordered
            self.logger.warning(
                f"Clock is behind the latest sample of {obj.id}; "
                f"recording at {head.timestamp.isoformat()} instead of {sample.timestamp.isoformat()}"
            )
            sample = replace(sample, timestamp=head.timestamp)

        self.registry.commit_sample(obj, sample)
        return self._finish(ScanState.MATCHED, started_at, token=token, object_id=obj.id, sample=sample)

    async def _read_position(self, provider: GeolocationProvider) -> PositionReading:
        try:
            return await asyncio.wait_for(
                provider.get_current_position(
                    high_accuracy=self.high_accuracy,
                    timeout_ms=self.timeout_ms,
                    max_cache_age_ms=self.max_cache_age_ms,
                ),
                timeout=self.timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError:
            raise AcquisitionError(
                AcquisitionFailure.TIMEOUT,
                f"No position within {self.timeout_ms} ms",
            )

    def _finish(self, kind: ScanState, started_at: datetime, **fields) -> ScanOutcome:
        return ScanOutcome(kind=kind, started_at=started_at, finished_at=self.clock(), **fields)

    def _notify(self, outcome: ScanOutcome) -> None:
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception as e:
                log_exception("scan", e, {"listener": getattr(listener, "__name__", repr(listener))})
