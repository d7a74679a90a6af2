import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError

from expense_tracker import __version__
from expense_tracker.api.middleware.error_handler import (
    handle_domain_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from expense_tracker.api.middleware.logging import RequestLoggingMiddleware
from expense_tracker.api.v1 import router as v1_router
from expense_tracker.api.v1.health import router as health_router
from expense_tracker.config import settings
from expense_tracker.core.exceptions import ExpenseTrackerError
from expense_tracker.core.logging import setup_logging
from expense_tracker.db.session import async_engine
from expense_tracker.models.base import BaseModel

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings)
    if settings.auto_create_tables:
        async with async_engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.create_all)
    logger.info(f"Expense tracker API started ({settings.app_env})")
    yield
    # Shutdown
    await async_engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Expense Tracker API",
        description="Personal income and expense tracking",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Middleware (last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(ExpenseTrackerError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    # Register routers
    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    uvicorn.run(
        "expense_tracker.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
