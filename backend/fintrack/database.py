"""
Database configuration using SQLAlchemy.
This mirrors the Drizzle schema.ts table layout of the web client.
"""
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def _begin_immediate_on_sqlite(engine: Engine) -> None:
    """
    Make every SQLite transaction start with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first DML statement, so reads made before
    a write would run outside the transaction. Turning off the driver's own
    transaction handling and emitting BEGIN IMMEDIATE takes the write lock
    before the first read.
    """
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite is accepted for local use and tests. File-backed SQLite serializes
    writers through BEGIN IMMEDIATE. In-memory SQLite URLs get a single shared
    connection (StaticPool) so every session sees the same database; sessions
    then share one connection's commits and rollbacks, so those URLs are only
    suitable for single-threaded tests.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": 30}, "echo": echo}
        if database_url in IN_MEMORY_SQLITE_URLS:
            logger.warning(
                f"[STORAGE] {database_url} shares one connection across sessions; "
                "use it for tests only"
            )
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
        _begin_immediate_on_sqlite(engine)
        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=20,
        echo=echo,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def create_tables(engine: Engine) -> None:
    """Create all tables. Migrations normally own the schema; this is for dev and tests."""
    # Register the models on Base.metadata
    from fintrack import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
