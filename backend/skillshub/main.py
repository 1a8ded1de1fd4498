import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from skillshub.config import get_settings
from skillshub.errors import AppError, ErrorKind
from skillshub.routers import (
    applications,
    auth,
    employer,
    files,
    freelancers,
    health,
    jobs,
    locations,
    messages,
    notifications,
    profile,
    seeker,
    talents,
)

logger = logging.getLogger(__name__)
settings = get_settings()


def _scheduler_enabled() -> bool:
    # Only in production or when explicitly enabled, so --reload doesn't start duplicates
    return settings.is_production or settings.enable_scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    if _scheduler_enabled():
        from skillshub.scheduler import start_scheduler
        start_scheduler()
    yield
    if _scheduler_enabled():
        from skillshub.scheduler import shutdown_scheduler
        shutdown_scheduler()


app = FastAPI(
    title="Salone SkillsHub",
    description="Job and talent marketplace for Sierra Leone",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(freelancers.router, prefix="/api/freelancers", tags=["freelancers"])
app.include_router(talents.router, prefix="/api/talents", tags=["talents"])
app.include_router(employer.router, prefix="/api/employer", tags=["employer"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(seeker.router, prefix="/api/seeker", tags=["seeker"])
app.include_router(messages.router, prefix="/api/messages", tags=["messages"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(profile.router, prefix="/api/profile", tags=["profile"])
app.include_router(files.router, prefix="/api", tags=["files"])
app.include_router(locations.router, prefix="/api/locations", tags=["locations"])


# Error handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.kind == ErrorKind.INFRASTRUCTURE:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = error.get("msg", "Invalid value").removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request shape errors are client errors: 400 with a readable reason."""
    return JSONResponse(status_code=400, content={"detail": _format_validation_errors(exc)})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with a JSON 500."""
    # Log the exception with request context for debugging
    logger.exception(
        "Unhandled exception: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    content = {"detail": "Internal server error"}
    if not settings.is_production:
        content["error"] = str(exc)
        content["trace"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=content)
