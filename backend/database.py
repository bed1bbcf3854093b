import logging
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from backend.core.config import Settings


Base = declarative_base()

logger = logging.getLogger(__name__)


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _is_memory_sqlite(database_url: str) -> bool:
    return database_url in {"sqlite://", "sqlite:///:memory:"} or "mode=memory" in database_url


def _ssl_connect_args(database_url: str) -> dict:
    if database_url.startswith("postgresql"):
        return {"sslmode": "require"}
    if database_url.startswith("mysql"):
        return {"ssl": {"check_hostname": True}}
    return {}


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(settings: Settings) -> Engine:
    database_url = settings.database_url

    if _is_sqlite(database_url):
        engine_kwargs = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(database_url):
            # every session has to see the same in-memory database
            engine_kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **engine_kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    connect_args = _ssl_connect_args(database_url) if settings.db_ssl else {}

    # Requests beyond pool_size wait in the pool queue for up to pool_timeout.
    return create_engine(
        database_url,
        connect_args=connect_args,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_db(engine: Engine) -> None:
    # models must be imported so their tables are registered on Base
    from backend.models import test_result, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


def check_connection(engine: Engine) -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Error connecting to database pool. Check DATABASE_URL and credentials.")
        return False

    logger.info("Database pool connected (%s)", engine.url.get_backend_name())
    return True


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
