import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from shortlink_app.api.v1 import aliases, analytics, redirect
from shortlink_app.click_processor.click_worker import ClickRecorder
from shortlink_app.config import settings
from shortlink_app.database.connection import Base, engine
from shortlink_app.dependencies import get_click_storage
from shortlink_app.errors import (
    SERVICE_UNAVAILABLE,
    SERVICE_UNAVAILABLE_MESSAGE,
    ServiceError,
    TransientStoreError,
    ValidationError,
)
from shortlink_app.logging_config import configure_logging
from shortlink_app.schemas.response import error

# Import models to ensure they're registered with Base
from shortlink_app.models import Alias, Click  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and run the click workers for the lifetime of the app"""
    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)

    recorder = ClickRecorder(storage=get_click_storage())
    app.state.click_recorder = recorder
    await recorder.start()
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)
    try:
        yield
    finally:
        await recorder.stop()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="URL shortener with cache-aside resolution and click analytics",
    debug=settings.debug,
    lifespan=lifespan
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if isinstance(exc, TransientStoreError):
        logger.error("Store unavailable on %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=error(exc.code, exc.description))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(part) for part in err["loc"][1:]) or "body" for err in exc.errors())
    bad_format = ValidationError.bad_format(f"Invalid request: bad format in {fields}")
    return JSONResponse(status_code=bad_format.status_code,
                        content=error(bad_format.code, bad_format.description))


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Unhandled store error on %s %s", request.method, request.url.path,
                     exc_info=exc)
    return JSONResponse(status_code=503, content=error(SERVICE_UNAVAILABLE, SERVICE_UNAVAILABLE_MESSAGE))


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(aliases.router, prefix="/v1")
app.include_router(redirect.router, prefix="/v1")
app.include_router(analytics.router, prefix="/v1")
