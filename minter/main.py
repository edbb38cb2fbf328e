import sys
import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from loguru import logger

from minter.config import Settings, settings
from minter.routes.health import router as health_router
from minter.routes.mint import router as mint_router
from minter.services.pinata import PinataClient


def _configure_logging(app_settings: Settings) -> None:
    logger.configure(patcher=lambda record: record["extra"].setdefault("request_id", "-"))
    logger.remove()
    logger.add(
        sys.stderr,
        level=app_settings.log_level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | req={extra[request_id]} | {name}:{function}:{line} | {message}",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings = settings
    _configure_logging(app_settings)
    app.state.settings = app_settings
    pinning = PinataClient(app_settings.pinata_credentials())
    app.state.pinning = pinning
    logger.bind(request_id="-").info(
        "Starting app app_name={} environment={} debug={} log_level={} cors_origins={}",
        app_settings.app_name,
        app_settings.environment,
        app_settings.debug,
        app_settings.log_level,
        app_settings.cors_origins,
    )
    yield
    await pinning.aclose()
    logger.bind(request_id="-").info("Shutting down app app_name={}", app_settings.app_name)


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.include_router(health_router)
app.include_router(mint_router)


@app.middleware("http")
async def reject_foreign_origins(request: Request, call_next) -> Response:
    origin = request.headers.get("origin")
    if origin is not None and origin not in settings.cors_origins:
        logger.warning("Origin rejected origin={} method={} path={}", origin, request.method, request.url.path)
        return JSONResponse(status_code=403, content={"status": False, "msg": "origin not allowed"})
    return await call_next(request)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_context(request: Request, call_next) -> Response:
    request_id = request.headers.get("x-request-id", str(uuid4()))
    bound_logger = logger.bind(request_id=request_id)
    start = time.perf_counter()
    bound_logger.info("Request start method={} path={}", request.method, request.url.path)
    with logger.contextualize(request_id=request_id):
        try:
            response = await call_next(request)
        except Exception:
            bound_logger.exception("Request failed method={} path={}", request.method, request.url.path)
            raise
    duration_ms = (time.perf_counter() - start) * 1000
    bound_logger.info(
        "Request finish method={} path={} status={} duration_ms={:.2f}",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    response.headers["X-Request-ID"] = request_id
    return response
