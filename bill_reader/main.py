import logging
import re
from contextlib import asynccontextmanager
from typing import Optional
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from bill_reader.api.routes import router
from bill_reader.core.config import Settings, get_settings
from bill_reader.core.errors import BillReaderError

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("bill_reader.api")

CORS_REJECTED_MESSAGE = (
    "The CORS policy for this site does not allow access from the specified Origin."
)


def origin_allowed(origin: Optional[str], settings: Settings) -> bool:
    """No Origin (curl, server-to-server) passes; browsers must be listed or hosted."""
    if not origin:
        return True
    if origin.rstrip("/") in settings.allowed_origins:
        return True
    parsed = urlparse(origin)
    host = parsed.hostname or ""
    return parsed.scheme == "https" and host.endswith(settings.CORS_ORIGIN_SUFFIX)


@asynccontextmanager
async def lifespan(_: FastAPI):
    settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    logger.info(
        "startup provider=%s model=%s upload_dir=%s",
        settings.GENERATION_PROVIDER, settings.GENERATION_MODEL, settings.UPLOAD_DIR,
    )
    yield


app = FastAPI(title="Legislative Bill Reader API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_origin_regex=r"https://[^/]+" + re.escape(settings.CORS_ORIGIN_SUFFIX),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def reject_foreign_origins(request: Request, call_next):
    origin = request.headers.get("origin")
    if not origin_allowed(origin, settings):
        logger.warning("cors_rejected origin=%s path=%s", origin, request.url.path)
        return JSONResponse(status_code=403, content={"error": CORS_REJECTED_MESSAGE})
    return await call_next(request)


@app.exception_handler(BillReaderError)
async def bill_reader_error_handler(request: Request, exc: BillReaderError):
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        level, "request_failed path=%s error=%s status=%d message=%s",
        request.url.path, type(exc).__name__, exc.status_code, exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception path=%s error=%s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred on the server", "message": str(exc)},
    )


app.include_router(router)


def run() -> None:
    uvicorn.run("bill_reader.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
