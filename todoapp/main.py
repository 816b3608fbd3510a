import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import auth, config, todos
from .database import init_db
from .logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("Initializing database...")
    init_db()
    yield
    logger.info("Shutting down application...")


app = FastAPI(
    title="Todo API",
    description="Per-user todo lists behind session cookie authentication",
    version="1.0.0",
    lifespan=lifespan,
)


if config.APP_ENV != "test":
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f'"{request.method} {request.url.path}" {response.status_code} ({elapsed_ms:.0f}ms)'
        )
        return response


def _format_issue(error: dict) -> dict:
    return {
        "path": [part for part in error.get("loc", ()) if part != "body"],
        "message": error.get("msg", ""),
        "type": error.get("type", ""),
    }


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Debug level: the offending input may contain personal data
    logger.debug(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({
            "error": "Invalid request",
            "issues": [_format_issue(error) for error in exc.errors()],
        }),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=exc.headers,
    )


app.include_router(auth.router)
app.include_router(todos.router)

# Mounted last so it only sees paths no API route claimed
if os.path.isdir(config.STATIC_DIR):
    app.mount("/", StaticFiles(directory=config.STATIC_DIR, html=True), name="static")
else:
    logger.debug(f"Static directory {config.STATIC_DIR} not found, not serving client files")
