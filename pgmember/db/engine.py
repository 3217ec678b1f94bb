"""Database engine configuration for the continuous inserter."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine

from .schema import metadata

# Connection defaults for the local member - no password, trust auth
DB_HOST = "127.0.0.1"
DB_NAME = "postgres"
DB_USER = "postgres"


def database_url(host: str = DB_HOST, dbname: str = DB_NAME, user: str = DB_USER) -> URL:
    """Build the psycopg URL for the given connection parameters."""
    return URL.create(
        "postgresql+psycopg",
        username=user,
        host=host,
        database=dbname,
    )


def create_db_engine(url) -> Engine:
    """Create an engine holding at most the one connection we use."""
    return create_engine(
        url,
        echo=False,
        pool_size=1,
        max_overflow=0,
    )


def init_models(engine: Engine) -> None:
    """Create the times table if it doesn't exist yet."""
    metadata.create_all(bind=engine)


@contextmanager
def connect(engine: Engine) -> Generator[Connection, None, None]:
    """Get a single database connection, released on exit."""
    conn = engine.connect()
    try:
        yield conn
    finally:
        conn.close()
