# catalog_service/main.py

"""
FastAPI Product Catalog API.
Manages catalog products: creation, retrieval, partial updates and deletion,
with every request validated and normalized before it reaches the database.

Run with: uvicorn catalog_service.main:app
"""
import logging
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from . import config
from .db import Database
from .errors import InvalidRequest, invalid_request_handler, unhandled_exception_handler
from .products import router as products_router
from .schemas import ApiStatus

# -----------------------------
# Configure Logging
# -----------------------------
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)


def open_database(
    database: Database,
    max_retries: int = config.DB_CONNECT_RETRIES,
    retry_delay_seconds: float = config.DB_CONNECT_RETRY_DELAY,
) -> None:
    """
    Opens the database handle and ensures the tables exist.
    Retries while the database is not accepting connections yet.
    """
    database.open()
    for i in range(max_retries):
        try:
            logger.info(
                f"Attempting to connect to the database and create tables (attempt {i+1}/{max_retries})..."
            )
            database.create_tables()
            logger.info("Successfully connected to the database and ensured tables exist.")
            return
        except OperationalError as e:
            logger.warning(f"Failed to connect to the database: {e}")
            if i < max_retries - 1:
                logger.info(f"Retrying in {retry_delay_seconds} seconds...")
                time.sleep(retry_delay_seconds)
    database.close()
    raise RuntimeError(f"Could not connect to the database after {max_retries} attempts.")


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Builds the application around `database`, which the application lifespan
    opens on startup and closes on shutdown.
    """
    if database is None:
        database = Database(config.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            open_database(database)
        except Exception as e:
            logger.critical(f"Database startup failed: {e}. Exiting application.", exc_info=True)
            sys.exit(1)  # Critical failure: exit if DB connection is unavailable
        try:
            yield
        finally:
            logger.info("Shutting down, closing database.")
            database.close()

    app = FastAPI(
        title="API Catálogo de Produtos",
        description="REST API for managing a product catalog",
        version="1.0.0",
        docs_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.database = database

    # Enable CORS (for frontend dev/testing)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Use specific origins in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InvalidRequest, invalid_request_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get(
        "/",
        response_model=ApiStatus,
        status_code=status.HTTP_200_OK,
        summary="API status",
        tags=["Status"],
    )
    async def read_root():
        return ApiStatus(
            status="ok",
            message="API Catálogo de Produtos funcionando!",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @app.get(
        "/health",
        status_code=status.HTTP_200_OK,
        summary="Health check endpoint",
        tags=["Status"],
    )
    async def health_check():
        """
        A simple health check endpoint to verify the service is running.
        """
        return {"status": "ok", "service": "catalog-service"}

    app.include_router(products_router, prefix=config.API_PREFIX)
    return app


app = create_app()
