# =============================================================================
# File: main.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from snipvault.app_init import APP_SETTINGS
from snipvault.exceptions import SnipVaultBaseException
from snipvault.logger import get_logger
from snipvault.routers import model, search, snippets
from snipvault.utils.error_handler import ErrorHandler
from snipvault.utils.log_sanitizer import sanitize_for_log

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    logger.info(
        "Starting %s (model=%s, models_root=%s)",
        APP_SETTINGS.app.name,
        APP_SETTINGS.model.name,
        APP_SETTINGS.model.models_root,
    )
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=APP_SETTINGS.app.name,
    description=APP_SETTINGS.app.description,
    version=APP_SETTINGS.app.version,
    openapi_url="/api/v1/openapi.json",
    docs_url="/api/v1/docs",
    lifespan=lifespan,
)


@app.exception_handler(SnipVaultBaseException)
async def snipvault_exception_handler(request: Request, exc: SnipVaultBaseException):
    """Handle custom snippet vault exceptions."""
    status_code = ErrorHandler.get_http_status(exc)
    logger.warning(
        "Snippet vault exception in %s: %s",
        sanitize_for_log(str(request.url)),
        sanitize_for_log(exc.message),
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": exc.message,
            "error_code": exc.error_code,
            "detail": exc.message,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    error_response = ErrorHandler.handle_exception(
        exc, f"request to {sanitize_for_log(str(request.url))}", include_traceback=True
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "error_code": error_response["error_code"],
            "detail": "An unexpected error occurred",
        },
    )


app.include_router(snippets.router, prefix="/api/v1", tags=["Snippets"])
app.include_router(search.router, prefix="/api/v1", tags=["Search"])
app.include_router(model.router, prefix="/api/v1", tags=["Model"])


def run_server() -> None:
    import uvicorn

    uvicorn.run(
        "snipvault.main:app",
        host=APP_SETTINGS.server.host,
        port=APP_SETTINGS.server.port,
        reload=False,
    )


if __name__ == "__main__":
    run_server()
