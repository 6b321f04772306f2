"""In-memory implementation of the tracked object repository."""

import threading
from typing import Dict, List, Optional

from .interfaces import TrackedObjectRepository
from ..domain.models import LocationSample, TrackedObject


class MemoryTrackedObjectRepository(TrackedObjectRepository):
    """In-memory implementation of TrackedObjectRepository.

    Writes are serialized with a lock; reads return snapshots.
    """

    def __init__(self):
        self._objects: Dict[str, TrackedObject] = {}  # insertion ordered
        self._token_index: Dict[str, str] = {}
        self._write_lock = threading.Lock()

    def add(self, obj: TrackedObject) -> None:
        """Add a new object."""
        with self._write_lock:
            if obj.id in self._objects:
                raise ValueError(f"Object id '{obj.id}' already exists")
            if obj.identity_token in self._token_index:
                raise ValueError(f"Identity token '{obj.identity_token}' already exists")
            self._objects[obj.id] = obj
            self._token_index[obj.identity_token] = obj.id

    def get_by_id(self, object_id: str) -> Optional[TrackedObject]:
        """Get an object by ID."""
        return self._objects.get(object_id)

    def get_by_token(self, identity_token: str) -> Optional[TrackedObject]:
        """Get an object by its identity token."""
        object_id = self._token_index.get(identity_token)
        if object_id:
            return self._objects.get(object_id)
        return None

    def list_all(self) -> List[TrackedObject]:
        """Get all objects in insertion order."""
        return list(self._objects.values())

    def append_sample(self, obj: TrackedObject, sample: LocationSample) -> None:
        """Prepend a sample to the object's ledger."""
        with self._write_lock:
            if self._objects.get(obj.id) is not obj:
                raise ValueError(f"Object '{obj.id}' is not stored in this repository")
            obj.record(sample)

    def count(self) -> int:
        """Number of stored objects."""
        return len(self._objects)
