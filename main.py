import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from config import media_cfg
from config.config import settings
from db import close_mongo_client, ensure_indexes, get_db
from routes import register_routes
from services.media.build_client_srv import build_media_provider
from utils.errors_ut import AppError, UpstreamError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("vidhub")

# Toggle built-in API docs
docs_url    = "/docs" if settings.API_DOCS_ENABLED else None
redoc_url   = "/redoc" if settings.API_DOCS_ENABLED else None
openapi_url = "/openapi.json" if settings.API_DOCS_ENABLED else None


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.media = build_media_provider(kind=media_cfg.MEDIA_PROVIDER)
    await ensure_indexes(get_db())
    logger.info("Startup complete media=%s", media_cfg.MEDIA_PROVIDER)
    yield
    close_mongo_client()


app = FastAPI(
    lifespan=lifespan,
    title="VidHub",
    version="0.1.0",
    docs_url=docs_url,
    redoc_url=redoc_url,
    openapi_url=openapi_url,
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed status=%s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


# Driver failures the services let through still get the error envelope
@app.exception_handler(PyMongoError)
async def mongo_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.warning("%s %s database error: %s", request.method, request.url.path, exc)
    err = UpstreamError("Database request failed")
    return JSONResponse(err.to_dict(), status_code=err.status_code)


# Local media is served by the app only when nginx is not in front
_media_url = media_cfg.MEDIA_PUBLIC_BASE_URL.rstrip("/")
if media_cfg.MEDIA_PROVIDER == "local" and _media_url.startswith("/") and os.path.isdir(media_cfg.MEDIA_FS_ROOT):
    app.mount(_media_url, StaticFiles(directory=media_cfg.MEDIA_FS_ROOT), name="media")


# Proxy / headers (behind reverse proxy)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["127.0.0.1", "::1"])


# Register routes
register_routes(app)
