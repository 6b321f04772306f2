"""Abstract repository interface for tracked objects."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..domain.models import LocationSample, TrackedObject


class TrackedObjectRepository(ABC):
    """Repository interface for TrackedObject entities."""

    @abstractmethod
    def add(self, obj: TrackedObject) -> None:
        """Add a new object.

        Raises:
            ValueError: If the id or identity token is already taken
        """
        pass

    @abstractmethod
    def get_by_id(self, object_id: str) -> Optional[TrackedObject]:
        """Get an object by ID."""
        pass

    @abstractmethod
    def get_by_token(self, identity_token: str) -> Optional[TrackedObject]:
        """Get an object by its identity token."""
        pass

    @abstractmethod
    def list_all(self) -> List[TrackedObject]:
        """Get all objects in insertion order."""
        pass

    @abstractmethod
    def append_sample(self, obj: TrackedObject, sample: LocationSample) -> None:
        """Prepend a sample to the object's ledger."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of stored objects."""
        pass
