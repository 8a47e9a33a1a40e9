import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from . import config
from . import models  # noqa: F401 - registers tables on Base.metadata
from .database import Database, create_database
from .domain.analytics.router import router as analytics_router
from .domain.catalog.router import router as catalog_router
from .domain.catalog.sources import CatalogReferenceError
from .domain.notifications.router import router as notifications_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    database: Optional[Database] = app.state.database

    if database is not None:
        try:
            database.create_all()
            logger.info("Database tables verified")
        except SQLAlchemyError as e:
            # Catalog keeps serving from the static snapshot
            logger.error(f"❌ Database unavailable at startup: {e}")

    if config.RATE_LIMIT_ENABLED:
        try:
            from .rate_limiter import get_redis_client

            get_redis_client()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed - catalog rate limiting will fail open: {e}")

    yield

    logger.info("Application shutting down...")
    if database is not None:
        database.dispose()


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the API around an explicit data-access handle.

    When ``database`` is omitted one is created from DATABASE_URL; without a
    URL the app runs catalog-only on static data.
    """
    app = FastAPI(title="GigConnect API", version="1.0.0", lifespan=lifespan)
    app.state.database = database if database is not None else create_database()

    @app.exception_handler(CatalogReferenceError)
    async def catalog_reference_handler(request: Request, exc: CatalogReferenceError):
        logger.error(f"Catalog integrity error on {request.url.path}: {exc}")
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"❌ {request.method} {request.url.path} - Database error: {exc}")
        return JSONResponse(
            status_code=503,
            content={"detail": "Data is temporarily unavailable. Please try again later."},
        )

    logger.info(f"CORS allowed origins: {config.ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(catalog_router)
    app.include_router(analytics_router)
    app.include_router(notifications_router)

    @app.get("/")
    def root():
        return {"message": "GigConnect API is running"}

    @app.get("/health")
    def health(request: Request):
        db_handle: Optional[Database] = request.app.state.database
        if db_handle is None:
            return {"status": "healthy", "database": "not configured"}

        try:
            with db_handle.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            database_status = "connected"
        except SQLAlchemyError as e:
            logger.warning(f"⚠️ Health check could not reach database: {e}")
            database_status = "unreachable"
        return {"status": "healthy", "database": database_status}

    return app


app = create_app()
