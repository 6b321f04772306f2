"""Object registry service: registration, lookup and ledger commits."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from ..core.exceptions import ValidationError
from ..domain.identity import IdentityCodec
from ..domain.models import LocationSample, TrackedObject
from ..repositories.interfaces import TrackedObjectRepository
from ..repositories.memory_impl import MemoryTrackedObjectRepository
from ..utils.logging_config import get_logger

MAX_NAME_LENGTH = 100


class ObjectRegistry:
    """Owns the collection of tracked objects.

    ``register`` and ``commit_sample`` are the only write paths.
    """

    def __init__(
        self,
        repository: Optional[TrackedObjectRepository] = None,
        codec: Optional[IdentityCodec] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository or MemoryTrackedObjectRepository()
        self.codec = codec or IdentityCodec()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = get_logger(__name__)

    def register(self, name: str) -> TrackedObject:
        """Register a new object and give it a fresh identity token.

        Raises:
            ValidationError: If the name is empty after trimming or too long
        """
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Object name must not be empty", field="name")
        if len(cleaned) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"Object name must be at most {MAX_NAME_LENGTH} characters", field="name"
            )

        obj = TrackedObject(
            id=str(uuid.uuid4()),
            name=cleaned,
            identity_token=self.codec.generate(cleaned),
            created_at=self.clock(),
        )
        self.repository.add(obj)

        self.logger.info(f"Registered object '{obj.name}' ({obj.id}) with token {obj.identity_token}")
        return obj

    def list(self) -> List[TrackedObject]:
        """Snapshot of all objects in registration order."""
        return self.repository.list_all()

    def get(self, object_id: str) -> Optional[TrackedObject]:
        return self.repository.get_by_id(object_id)

    def find_by_token(self, identity_token: str) -> Optional[TrackedObject]:
        """Exact-match lookup used to resolve scans."""
        return self.repository.get_by_token(identity_token)

    def commit_sample(self, obj: TrackedObject, sample: LocationSample) -> None:
        """Set the object's last location and prepend the sample in one step."""
        self.repository.append_sample(obj, sample)
        self.logger.info(
            f"Recorded location ({sample.latitude}, {sample.longitude}) for "
            f"'{obj.name}' ({obj.id}); history now {len(obj.location_history)} samples"
        )

    def __len__(self) -> int:
        return self.repository.count()

    def seed_demo_objects(self) -> List[TrackedObject]:
        """Load the two demonstration objects with their sample histories."""
        now = self.clock()
        notebook_seen = now - timedelta(hours=2)
        notebook = TrackedObject.with_history(
            id=str(uuid.uuid4()),
            name="Notebook Dell",
            identity_token="QR_NOTEBOOK_001",
            created_at=now - timedelta(days=7),
            samples=[
                LocationSample(-23.5505, -46.6333, notebook_seen, "São Paulo, SP"),
                LocationSample(-23.5489, -46.6388, now - timedelta(hours=24), "Avenida Paulista, SP"),
            ],
        )
        camera = TrackedObject.with_history(
            id=str(uuid.uuid4()),
            name="Câmera Canon",
            identity_token="QR_CAMERA_002",
            created_at=now - timedelta(days=3),
            samples=[
                LocationSample(-22.9068, -43.1729, now - timedelta(hours=5), "Rio de Janeiro, RJ"),
            ],
        )

        seeded = []
        for obj in (notebook, camera):
            if self.repository.get_by_token(obj.identity_token) is not None:
                continue
            self.repository.add(obj)
            seeded.append(obj)

        self.logger.info(f"Seeded {len(seeded)} demonstration objects")
        return seeded
