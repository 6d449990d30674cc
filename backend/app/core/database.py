"""
Database configuration and session management
"""
import logging
import time
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.logging_config import LoggingConfig
from app.core.metrics import db_queries_total, db_query_duration_seconds

# Lazy initialization - don't create engine at module level
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None

# Base class for models (can be created immediately)
Base = declarative_base()

_TABLE_KEYWORDS = {
    'select': 'FROM',
    'insert': 'INTO',
    'delete': 'FROM',
}


def _statement_table(operation: str, words: list) -> str:
    """Best-effort table name extraction for metric labels"""
    if operation == 'update':
        return words[1].lower().strip(';"') if len(words) > 1 else "unknown"
    keyword = _TABLE_KEYWORDS.get(operation)
    if keyword is None:
        return "unknown"
    for i, word in enumerate(words[:-1]):
        if word.upper() == keyword:
            return words[i + 1].lower().strip(';"')
    return "unknown"


def _setup_db_metrics(engine: Engine):
    """Setup SQLAlchemy event listeners for database metrics"""

    @event.listens_for(engine, "before_cursor_execute")
    def receive_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault('query_start_time', []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def receive_after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        if not conn.info.get('query_start_time'):
            return
        duration = time.time() - conn.info['query_start_time'].pop()

        words = statement.strip().split()
        operation = words[0].lower() if words else "unknown"
        table = _statement_table(operation, words)

        db_queries_total.labels(operation=operation, table=table).inc()
        db_query_duration_seconds.labels(operation=operation, table=table).observe(duration)


def _enable_sqlite_foreign_keys(engine: Engine):
    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_engine() -> Engine:
    """Get or create database engine (lazy initialization)"""
    global _engine
    if _engine is None:
        settings = get_settings()
        LoggingConfig.configure()

        if settings.is_sqlite:
            kwargs = {"connect_args": {"check_same_thread": False}}
            # In-memory databases live as long as their single connection
            if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs = {
                "pool_size": settings.database_pool_size,
                "max_overflow": settings.database_max_overflow,
                "pool_pre_ping": True,
                "connect_args": {"connect_timeout": 5},
            }

        _engine = create_engine(
            settings.database_url,
            echo=settings.log_sqlalchemy,
            **kwargs
        )

        if not settings.log_sqlalchemy:
            sqlalchemy_logger = logging.getLogger("sqlalchemy.engine")
            sqlalchemy_logger.setLevel(logging.WARNING)
            sqlalchemy_logger.propagate = False

        if settings.is_sqlite:
            _enable_sqlite_foreign_keys(_engine)
        _setup_db_metrics(_engine)

    return _engine


def get_session_local() -> sessionmaker:
    """Get or create session factory (lazy initialization)"""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def __getattr__(name):
    """Expose engine and SessionLocal as lazily created module attributes"""
    if name == 'engine':
        return get_engine()
    elif name == 'SessionLocal':
        return get_session_local()
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database session
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
