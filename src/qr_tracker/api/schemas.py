"""Pydantic models for API request/response validation."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator  # type: ignore

from ..core.enums import AcquisitionFailure, ScanState
from ..domain.models import TrackedObject
from ..services.scan_workflow import ScanOutcome
from ..utils.time_format import format_time_ago


# Base response models
class BaseResponse(BaseModel):
    """Base response model with common fields."""

    model_config = ConfigDict(from_attributes=True)


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details for HTTP APIs."""

    type: str = Field(description="A URI reference that identifies the problem type")
    title: str = Field(
        description="A short, human-readable summary of the problem type"
    )
    status: int = Field(description="The HTTP status code")
    detail: Optional[str] = Field(
        None, description="A human-readable explanation specific to this occurrence"
    )
    instance: Optional[str] = Field(
        None, description="A URI reference that identifies the specific occurrence"
    )


# Object-related schemas
class ObjectCreate(BaseModel):
    """Schema for registering a new object."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(description="Object name", min_length=1, max_length=100)


class LocationSampleResponse(BaseResponse):
    """Schema for a single location sample."""

    latitude: float
    longitude: float
    timestamp: datetime
    address: Optional[str] = None


class TrackedObjectResponse(BaseResponse):
    """Schema for object response."""

    id: str
    name: str
    identity_token: str
    created_at: datetime
    last_location: Optional[LocationSampleResponse] = None
    last_seen: Optional[str] = Field(None, description="How long ago the object was last scanned")
    history_length: int = 0

    @classmethod
    def from_object(cls, obj: TrackedObject) -> "TrackedObjectResponse":
        last = obj.last_location
        return cls(
            id=obj.id,
            name=obj.name,
            identity_token=obj.identity_token,
            created_at=obj.created_at,
            last_location=LocationSampleResponse.model_validate(last) if last else None,
            last_seen=format_time_ago(last.timestamp) if last else None,
            history_length=len(obj.location_history),
        )


class ObjectListResponse(BaseResponse):
    """Schema for listing objects."""

    objects: List[TrackedObjectResponse]


class LocationHistoryResponse(BaseResponse):
    """Schema for an object's location history, newest first."""

    object_id: str
    samples: List[LocationSampleResponse]


class QRDataUriResponse(BaseModel):
    """Schema for a rendered QR code."""

    identity_token: str
    data_uri: str
    filename: str


# Scan-related schemas
class PositionPayload(BaseModel):
    """Position reported by the client's own geolocation."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class ScanRequest(BaseModel):
    """Schema for triggering a scan."""

    frame: Optional[str] = Field(
        None, description="Captured payload handed to the token decoder"
    )
    position: Optional[PositionPayload] = Field(
        None, description="Position from the client's geolocation"
    )
    position_error: Optional[AcquisitionFailure] = Field(
        None, description="Error the client's geolocation reported instead of a position"
    )

    @model_validator(mode="after")
    def check_position_xor_error(self) -> "ScanRequest":
        if self.position is not None and self.position_error is not None:
            raise ValueError("Send either position or position_error, not both")
        return self


class ScanOutcomeResponse(BaseModel):
    """Schema for a finished scan."""

    kind: ScanState
    token: Optional[str] = None
    object_id: Optional[str] = None
    sample: Optional[LocationSampleResponse] = None
    reason: Optional[AcquisitionFailure] = None
    detail: Optional[str] = None
    started_at: datetime
    finished_at: datetime

    @classmethod
    def from_outcome(cls, outcome: ScanOutcome) -> "ScanOutcomeResponse":
        return cls(
            kind=outcome.kind,
            token=outcome.token,
            object_id=outcome.object_id,
            sample=LocationSampleResponse.model_validate(outcome.sample) if outcome.sample else None,
            reason=getattr(outcome.error, "reason", None),
            detail=str(outcome.error) if outcome.error else None,
            started_at=outcome.started_at,
            finished_at=outcome.finished_at,
        )

    def to_problem_fields(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"detail"})


class ScanStateResponse(BaseModel):
    """Schema for the scan workflow state."""

    state: ScanState
    last_outcome: Optional[ScanOutcomeResponse] = None
