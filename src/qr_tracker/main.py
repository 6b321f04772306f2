"""Main FastAPI application for the QR tracker."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api import objects, scan
from .api.middleware import (
    ProblemDetailsException,
    ProblemDetailsMiddleware,
    RequestSizeLimitMiddleware,
    http_exception_handler,
    problem_details_handler,
    validation_exception_handler,
)
from .config import config_manager, get_config
from .services.container import get_services

# Create FastAPI app
app = FastAPI(
    title="QR Tracker",
    description="Register objects, print their QR codes and record where each one was scanned",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add custom middleware in correct order (innermost first)
app.add_middleware(ProblemDetailsMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)

config = get_config()
if config.app.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    )

app.add_exception_handler(ProblemDetailsException, problem_details_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Register API routers
app.include_router(objects.router)
app.include_router(scan.router)


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to the API docs."""
    return RedirectResponse(url="/docs")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "qr-tracker", "version": __version__}


@app.get("/ready")
async def readiness_check():
    """Readiness check: configuration is valid and services are built."""
    checks = {"config": False, "services": False}
    errors = []

    issues = config_manager.validate_config()
    if issues:
        errors.extend(issues)
    else:
        checks["config"] = True

    try:
        services = get_services()
        checks["services"] = True
    except ValueError as e:
        services = None
        errors.append(f"Service setup failed: {e}")

    all_ready = all(checks.values())
    response = {
        "status": "ready" if all_ready else "not_ready",
        "service": "qr-tracker",
        "version": __version__,
        "checks": checks,
    }
    if services is not None:
        response["objects"] = len(services.registry)
        response["scan_state"] = services.workflow.state.value
    if errors:
        response["errors"] = errors

    return JSONResponse(content=response, status_code=200 if all_ready else 503)
