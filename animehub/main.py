from contextlib import asynccontextmanager
import logging
import time
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse, PlainTextResponse

from animehub.api.v1.router import api_router
from animehub.core.exceptions import (
    AppError,
    ConflictError,
    EntityNotFoundError,
    IntegrityAnomalyError,
    InvalidOperationError,
)
from animehub.core.logging import RequestIdFilter, StructuredJsonFormatter
from animehub.core.metrics import get_metrics_payload
from animehub.core.request_context import reset_request_id, set_request_id
from animehub.core.settings import settings
from animehub.db.base import Base
from animehub.db.seed import seed_reference_data
from animehub.db.session import get_engine, get_sessionmaker, init_engine


logger = logging.getLogger("animehub")

_ERROR_STATUS: dict[type[AppError], int] = {
    EntityNotFoundError: 404,
    ConflictError: 409,
    InvalidOperationError: 400,
    IntegrityAnomalyError: 409,
}


def _configure_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    formatter = StructuredJsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    stream_handler.addFilter(RequestIdFilter())
    root_logger.addHandler(stream_handler)

    # request_complete logs replace the access log.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(RequestIdFilter())
        root_logger.addHandler(file_handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _configure_logging()
    init_engine(settings.database_url)

    if settings.db_auto_create and settings.database_url.startswith("sqlite"):
        Base.metadata.create_all(bind=get_engine())
        with get_sessionmaker()() as db:
            seed_reference_data(db)

    yield


app = FastAPI(title="AnimeHub", lifespan=lifespan)

app.mount(
    settings.media_url_prefix,
    StaticFiles(directory=settings.media_root, check_dir=False),
    name="media",
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id
    token = set_request_id(request_id)
    start = time.perf_counter()
    try:
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                "request_failed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                },
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        request_logger = logger.debug if request.url.path in {"/health", "/metrics"} else logger.info
        request_logger(
            "request_complete",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        response.headers["x-request-id"] = request_id
        return response
    finally:
        reset_request_id(token)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    request_id = getattr(request.state, "request_id", None)
    status_code = next(
        (code for error_type, code in _ERROR_STATUS.items() if isinstance(exc, error_type)),
        500,
    )
    log = logger.error if isinstance(exc, IntegrityAnomalyError) else logger.info
    log(
        "app_error",
        extra={"error_type": type(exc).__name__, "status": status_code, "error": str(exc)},
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.detail, "request_id": request_id},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "request_id": request_id},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/metrics")
def metrics_endpoint():
    return PlainTextResponse(get_metrics_payload(), media_type="text/plain; version=0.0.4; charset=utf-8")


app.include_router(api_router)
