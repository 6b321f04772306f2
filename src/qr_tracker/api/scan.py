"""Scan workflow API endpoints."""

from fastapi import APIRouter, Depends, status

from ..core.enums import ScanState
from ..domain.location import PositionReading
from ..services.geolocation import ReportedPositionProvider
from ..services.scan_workflow import ScanWorkflow
from .dependencies import get_scan_workflow
from .middleware import ProblemDetailsException
from .schemas import (
    ProblemDetails,
    ScanOutcomeResponse,
    ScanRequest,
    ScanStateResponse,
)

router = APIRouter(prefix="/v1/scan", tags=["scan"])


@router.post(
    "",
    response_model=ScanOutcomeResponse,
    responses={
        200: {"description": "Location recorded on the matched object"},
        404: {"model": ProblemDetails, "description": "Scanned token matches no object"},
        409: {"model": ProblemDetails, "description": "A scan is already in progress"},
        503: {"model": ProblemDetails, "description": "Position could not be acquired"},
    },
)
async def trigger_scan(
    payload: ScanRequest, workflow: ScanWorkflow = Depends(get_scan_workflow)
) -> ScanOutcomeResponse:
    """
    Scan a QR code and record the current position on the matching object.

    The client may forward what its own geolocation returned, either a
    ``position`` or a ``position_error``. Without either, the server's
    configured geolocation provider is used.
    """
    provider = None
    if payload.position is not None:
        provider = ReportedPositionProvider(
            reading=PositionReading(payload.position.latitude, payload.position.longitude)
        )
    elif payload.position_error is not None:
        provider = ReportedPositionProvider(error=payload.position_error)

    outcome = await workflow.trigger(frame=payload.frame, geolocation=provider)
    if outcome is None:
        raise ProblemDetailsException(
            status_code=status.HTTP_409_CONFLICT,
            title="Scan In Progress",
            detail="Another scan is still acquiring a position; try again when it finishes",
        )

    response = ScanOutcomeResponse.from_outcome(outcome)
    if outcome.kind == ScanState.UNMATCHED:
        raise ProblemDetailsException(
            status_code=status.HTTP_404_NOT_FOUND,
            title="No Matching Object",
            detail=response.detail,
            **response.to_problem_fields(),
        )
    if outcome.kind == ScanState.ACQUISITION_FAILED:
        raise ProblemDetailsException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            title="Position Unavailable",
            detail=response.detail,
            **response.to_problem_fields(),
        )
    return response


@router.get("/state", response_model=ScanStateResponse)
async def get_scan_state(workflow: ScanWorkflow = Depends(get_scan_workflow)) -> ScanStateResponse:
    """Current workflow state and the outcome of the last finished scan."""
    last = workflow.last_outcome
    return ScanStateResponse(
        state=workflow.state,
        last_outcome=ScanOutcomeResponse.from_outcome(last) if last else None,
    )
