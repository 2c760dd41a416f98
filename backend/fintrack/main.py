"""
Application factory.

Run with:
  uvicorn fintrack.main:create_app --factory
"""
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fintrack.config import Settings
from fintrack.routes import api_router
from fintrack.storage import (
    AccountInUseError,
    BalanceOverflowError,
    StorageBackendError,
    StorageError,
    StorageInterface,
    build_storage,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AccountInUseError)
    async def account_in_use_handler(request: Request, exc: AccountInUseError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(BalanceOverflowError)
    async def balance_overflow_handler(request: Request, exc: BalanceOverflowError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(StorageBackendError)
    async def backend_failure_handler(request: Request, exc: StorageBackendError):
        logger.error(f"Storage backend failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Internal storage failure."})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Internal storage failure."})


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[StorageInterface] = None,
) -> FastAPI:
    """
    Compose the API around an explicitly owned storage instance.

    Args:
        settings: Settings to use. Read from the environment when omitted.
        storage: Prebuilt storage. Built from settings when omitted.
    """
    settings = settings or Settings()
    _configure_logging(settings.log_level)

    app = FastAPI(
        title="Fintrack API",
        description="API for Fintrack (personal finance tracking)",
        version="0.1.0",
        docs_url="/docs" if settings.api_docs_enabled else None,
        redoc_url="/redoc" if settings.api_docs_enabled else None,
        openapi_url="/openapi.json" if settings.api_docs_enabled else None,
    )
    app.state.settings = settings
    app.state.storage = storage if storage is not None else build_storage(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app
