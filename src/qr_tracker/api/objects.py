"""Tracked object API endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse, Response

from ..core.exceptions import RenderError, ValidationError
from ..domain.models import TrackedObject
from ..services.export import (
    build_print_document,
    content_disposition,
    data_uri_to_bytes,
    download_filename,
)
from ..services.qr_render import QROptions, render_qr_data_uri, safe_render
from ..services.registry import ObjectRegistry
from ..utils.logging_config import get_logger, log_exception
from .dependencies import get_qr_options, get_registry
from .middleware import ProblemDetailsException
from .schemas import (
    LocationHistoryResponse,
    LocationSampleResponse,
    ObjectCreate,
    ObjectListResponse,
    ProblemDetails,
    QRDataUriResponse,
    TrackedObjectResponse,
)

router = APIRouter(prefix="/v1/objects", tags=["objects"])
logger = get_logger('api')


def _get_object_or_404(registry: ObjectRegistry, object_id: str) -> TrackedObject:
    obj = registry.get(object_id)
    if obj is None:
        raise ProblemDetailsException(
            status_code=status.HTTP_404_NOT_FOUND,
            title="Object Not Found",
            detail=f"Object with ID {object_id} does not exist",
        )
    return obj


def _render_failed(obj: TrackedObject, exc: RenderError) -> ProblemDetailsException:
    log_exception('render', exc, {"object_id": obj.id, "token": obj.identity_token})
    return ProblemDetailsException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        title="QR Rendering Failed",
        detail=str(exc),
    )


@router.post(
    "",
    response_model=TrackedObjectResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Object registered successfully"},
        422: {"model": ProblemDetails, "description": "Invalid object name"},
    },
)
async def create_object(
    payload: ObjectCreate, registry: ObjectRegistry = Depends(get_registry)
) -> TrackedObjectResponse:
    """
    Register a new object.

    A unique identity token is derived from the name; registering the same
    name twice yields two objects with different tokens.
    """
    try:
        obj = registry.register(payload.name)
    except ValidationError as e:
        raise ProblemDetailsException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            title="Validation Error",
            detail=str(e),
            field=e.field,
        )
    return TrackedObjectResponse.from_object(obj)


@router.get("", response_model=ObjectListResponse)
async def list_objects(registry: ObjectRegistry = Depends(get_registry)) -> ObjectListResponse:
    """List all objects in registration order."""
    return ObjectListResponse(
        objects=[TrackedObjectResponse.from_object(obj) for obj in registry.list()]
    )


@router.get(
    "/{object_id}",
    response_model=TrackedObjectResponse,
    responses={404: {"model": ProblemDetails, "description": "Object not found"}},
)
async def get_object(
    object_id: str, registry: ObjectRegistry = Depends(get_registry)
) -> TrackedObjectResponse:
    """Get a single object."""
    return TrackedObjectResponse.from_object(_get_object_or_404(registry, object_id))


@router.get(
    "/{object_id}/history",
    response_model=LocationHistoryResponse,
    responses={404: {"model": ProblemDetails, "description": "Object not found"}},
)
async def get_object_history(
    object_id: str, registry: ObjectRegistry = Depends(get_registry)
) -> LocationHistoryResponse:
    """Get an object's location history, newest first."""
    obj = _get_object_or_404(registry, object_id)
    return LocationHistoryResponse(
        object_id=obj.id,
        samples=[LocationSampleResponse.model_validate(s) for s in obj.location_history],
    )


@router.get(
    "/{object_id}/qr",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "QR code image"},
        404: {"model": ProblemDetails, "description": "Object not found"},
        500: {"model": ProblemDetails, "description": "QR rendering failed"},
    },
)
async def download_qr_code(
    object_id: str,
    registry: ObjectRegistry = Depends(get_registry),
    options: QROptions = Depends(get_qr_options),
) -> Response:
    """Download the object's QR code as a PNG file."""
    obj = _get_object_or_404(registry, object_id)
    try:
        png = data_uri_to_bytes(render_qr_data_uri(obj.identity_token, options))
    except RenderError as e:
        raise _render_failed(obj, e)

    filename = download_filename(obj.name)
    logger.info(f"Serving QR download {filename} for object {obj.id}")
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.get(
    "/{object_id}/qr/data-uri",
    response_model=QRDataUriResponse,
    responses={404: {"model": ProblemDetails, "description": "Object not found"}},
)
async def get_qr_data_uri(
    object_id: str,
    registry: ObjectRegistry = Depends(get_registry),
    options: QROptions = Depends(get_qr_options),
) -> QRDataUriResponse:
    """Get the object's QR code as an embeddable data URI.

    If rendering fails the failure is logged and ``data_uri`` is empty, so a
    client showing the code displays nothing rather than an error page.
    """
    obj = _get_object_or_404(registry, object_id)
    return QRDataUriResponse(
        identity_token=obj.identity_token,
        data_uri=safe_render(obj.identity_token, options),
        filename=download_filename(obj.name),
    )


@router.get(
    "/{object_id}/print",
    response_class=HTMLResponse,
    responses={
        404: {"model": ProblemDetails, "description": "Object not found"},
        500: {"model": ProblemDetails, "description": "QR rendering failed"},
    },
)
async def print_qr_code(
    object_id: str,
    registry: ObjectRegistry = Depends(get_registry),
    options: QROptions = Depends(get_qr_options),
) -> HTMLResponse:
    """Printable label with the object's name, token and QR code."""
    obj = _get_object_or_404(registry, object_id)
    try:
        data_uri = render_qr_data_uri(obj.identity_token, options)
    except RenderError as e:
        raise _render_failed(obj, e)

    return HTMLResponse(content=build_print_document(obj, data_uri))
