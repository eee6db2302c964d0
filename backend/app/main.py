"""FastAPI Application Entry Point.

Configures the app, lifespan, CORS, error rendering and includes the
screenshot route.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from figshot.config import API_HOST, API_PORT, get_service_config
from figshot.errors import MissingParameters
from figshot.logging_config import get_api_logger, get_figshot_logger

logger = get_api_logger()
get_figshot_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load service config once and warn about missing credentials."""
    config = get_service_config()
    missing = config.missing()
    if missing:
        logger.warning(
            f"Missing configuration: {', '.join(missing)}. "
            "/api/screenshot will fail until these are set."
        )
    yield


app = FastAPI(title="Figma Screenshot API", version="1.0.0", lifespan=lifespan)

# CORS configuration, configurable via CORS_ORIGINS env var (comma-separated)
CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors (405, unknown routes) as {"error": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """A body that is not a JSON object, or has non-string fields, counts as missing."""
    logger.warning(f"Rejected request body on {request.url.path}: {exc.errors()}")
    err = MissingParameters()
    return JSONResponse(status_code=err.status_code, content=err.to_body())


# Include routers
from .routes.screenshot import router as screenshot_router  # noqa: E402

app.include_router(screenshot_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "ok"}


def run() -> None:
    """Local development server (serverless deployments import ``app`` directly)."""
    import uvicorn

    uvicorn.run("app.main:app", host=API_HOST, port=API_PORT)
