import logging
import time
from collections.abc import Iterator
from typing import Optional

from fastapi import HTTPException, Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from . import config

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Data-access handle: one engine (connection pool) plus its session factory.

    Constructed once by the application factory and closed with ``dispose()``
    at shutdown. Components receive sessions from it through dependencies.
    """

    def __init__(self, engine: Engine, log_slow_queries: bool = False, slow_query_threshold: float = 1.0):
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        if log_slow_queries:
            self._install_slow_query_logging(slow_query_threshold)

    def _install_slow_query_logging(self, threshold: float) -> None:
        @event.listens_for(self.engine, "before_cursor_execute")
        def before_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
            conn.info.setdefault("query_start_time", []).append(time.time())

        @event.listens_for(self.engine, "after_cursor_execute")
        def after_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
            total = time.time() - conn.info["query_start_time"].pop(-1)
            if total > threshold:
                logger.warning(f"🐌 Slow query ({total:.2f}s): {statement[:200]}...")

        logger.info(f"📊 Slow query logging enabled (threshold: {threshold}s)")

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine, checkfirst=True)

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connection pool closed")


def create_database(database_url: Optional[str] = None) -> Optional[Database]:
    """Build the pooled Database handle from configuration.

    Returns None when no database URL is configured.
    """
    database_url = database_url or config.DATABASE_URL
    if not database_url:
        logger.warning("⚠️ DATABASE_URL not set - catalog will serve static data, analytics disabled")
        return None

    try:
        engine = create_engine(
            database_url,
            pool_pre_ping=True,  # Test connections before using
            pool_recycle=config.DB_POOL_RECYCLE,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_timeout=config.DB_POOL_TIMEOUT,
            echo=False,
        )
        logger.info("✅ Database engine created successfully")
        logger.info(
            f"📊 Connection pool: size={config.DB_POOL_SIZE}, "
            f"max_overflow={config.DB_MAX_OVERFLOW}, timeout={config.DB_POOL_TIMEOUT}s"
        )
    except Exception as e:
        logger.error(f"❌ Failed to create database engine: {e}")
        raise

    return Database(
        engine,
        log_slow_queries=config.DB_LOG_SLOW_QUERIES,
        slow_query_threshold=config.DB_SLOW_QUERY_THRESHOLD,
    )


def get_database(request: Request) -> Optional[Database]:
    return getattr(request.app.state, "database", None)


def get_db(request: Request) -> Iterator[Session]:
    """Request-scoped session; 503 when no database is configured"""
    database = get_database(request)
    if database is None:
        raise HTTPException(status_code=503, detail="Database is not configured")

    db = database.session()
    try:
        yield db
    finally:
        db.close()


def get_optional_db(request: Request) -> Iterator[Optional[Session]]:
    """Request-scoped session, or None when running without a database"""
    database = get_database(request)
    if database is None:
        yield None
        return

    db = database.session()
    try:
        yield db
    finally:
        db.close()
