"""FastAPI application entry point for the resale gate."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from dotenv import load_dotenv
from fastapi import FastAPI

from resale_gate import __version__
from resale_gate.api.error_handlers import register_exception_handlers
from resale_gate.api.middleware.logging_middleware import LoggingMiddleware
from resale_gate.api.routes.health import router as health_router
from resale_gate.api.routes.listings import router as listings_router
from resale_gate.api.routes.metrics import router as metrics_router
from resale_gate.api.startup import (
    configure_logging,
    initialize_admission_dependencies,
    record_service_startup,
    validate_admission_configuration,
)
from resale_gate.bootstrap.database import close_database_engine

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    validate_admission_configuration()
    initialize_admission_dependencies()
    record_service_startup()
    yield
    await close_database_engine()


app = FastAPI(
    title="Resale Gate API",
    description="Ticket authenticity checks and listing admission for student resale",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
register_exception_handlers(app)

app.include_router(health_router)
app.include_router(listings_router)
app.include_router(metrics_router)
