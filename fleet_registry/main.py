"""FastAPI main application exposing the aircraft and company registry."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Config
from .errors import (
    Conflict,
    DependencyFailure,
    InvalidArgument,
    NotFound,
    RegistryError,
    StorageUnavailable,
    StorageWriteError,
)
from .logger import configure_logging
from .routes import aircraft_router, company_router, health_router
from .services.singleton import get_registry, reset_registry

logger = logging.getLogger(__name__)

# Typed failure -> HTTP status
ERROR_STATUS = {
    InvalidArgument: 400,
    NotFound: 404,
    Conflict: 409,
    DependencyFailure: 424,
    StorageUnavailable: 503,
    StorageWriteError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the registry at startup, seed it, and release it at shutdown."""
    config = Config()
    configure_logging(config.LOG_LEVEL, config.LOG_FILE)

    registry = get_registry()
    registry.seed_from_config()
    logger.info("Fleet registry API started")

    yield

    reset_registry()
    logger.info("Fleet registry API stopped")


# Initialize FastAPI app
app = FastAPI(title="Fleet Registry API", version="1.0.0", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def status_for(error: RegistryError) -> int:
    """Map a typed failure to its HTTP status (500 for unknown kinds)."""
    for error_type in type(error).__mro__:
        if error_type in ERROR_STATUS:
            return ERROR_STATUS[error_type]
    return 500


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    """Translate store failures into JSON error responses."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": type(exc).__name__, "details": exc.details},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies or parameters are plain 400s."""
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid JSON body",
            "error": "InvalidArgument",
            "details": {"errors": [str(err.get("msg")) for err in exc.errors()]},
        },
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Fleet Registry API", "status": "running"}


app.include_router(aircraft_router)
app.include_router(company_router)
app.include_router(health_router)


if __name__ == "__main__":
    import uvicorn

    settings = Config()
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
