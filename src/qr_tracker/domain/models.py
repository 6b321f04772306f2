"""Tracked objects and their location history ledger."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Tuple

# Set once by __init__; reassigning them afterwards is an error
_WRITE_ONCE_FIELDS = frozenset({"id", "identity_token", "created_at"})


@dataclass(frozen=True)
class LocationSample:
    """A single time-stamped position reading."""

    latitude: float
    longitude: float
    timestamp: datetime
    address: Optional[str] = None


@dataclass(eq=False)
class TrackedObject:
    """A registered physical object and its newest-first location ledger.

    ``last_location`` is derived from the head of the ledger, so the two are
    always replaced together by a single assignment in :meth:`record`.
    """

    id: str
    name: str
    identity_token: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _history: Tuple[LocationSample, ...] = field(default=(), repr=False)

    @classmethod
    def with_history(
        cls,
        id: str,
        name: str,
        identity_token: str,
        created_at: datetime,
        samples: Iterable[LocationSample],
    ) -> "TrackedObject":
        """Build an object with a pre-existing ledger (samples given newest first)."""
        obj = cls(id=id, name=name, identity_token=identity_token, created_at=created_at)
        # Replay oldest first so ordering is checked the same way as live scans
        for sample in reversed(list(samples)):
            obj.record(sample)
        return obj

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _WRITE_ONCE_FIELDS and name in self.__dict__:
            raise AttributeError(f"TrackedObject.{name} cannot be changed after creation")
        super().__setattr__(name, value)

    @property
    def location_history(self) -> Tuple[LocationSample, ...]:
        return self._history

    @property
    def last_location(self) -> Optional[LocationSample]:
        return self._history[0] if self._history else None

    def record(self, sample: LocationSample) -> None:
        """Prepend a sample to the ledger.

        Raises:
            ValueError: If the sample is older than the current newest sample
        """
        head = self.last_location
        if head is not None and sample.timestamp < head.timestamp:
            raise ValueError(
                f"Sample at {sample.timestamp.isoformat()} is older than the latest "
                f"sample at {head.timestamp.isoformat()} for object {self.id}"
            )
        self._history = (sample,) + self._history

    def __repr__(self) -> str:
        return (
            f"<TrackedObject(id={self.id}, name='{self.name}', "
            f"token='{self.identity_token}', samples={len(self._history)})>"
        )
