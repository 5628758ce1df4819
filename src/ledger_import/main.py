from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from ledger_import.api.middleware.error_handler import (
    handle_generic_error,
    handle_import_processing_error,
    handle_integrity_error,
    handle_validation_error,
)
from ledger_import.api.middleware.logging import RequestLoggingMiddleware, configure_logging
from ledger_import.api.v1 import router as v1_router
from ledger_import.api.v1.health import router as health_router
from ledger_import.config import settings
from ledger_import.core.exceptions import ImportProcessingError


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Family Ledger Import API",
        description="Card statement upload, review and confirmation into the household ledger",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Most specific first.
    app.add_exception_handler(ImportProcessingError, handle_import_processing_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
