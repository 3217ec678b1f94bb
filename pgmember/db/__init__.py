"""Database package for the continuous inserter."""

from .engine import DB_HOST, DB_NAME, DB_USER, connect, create_db_engine, database_url, init_models
from .schema import metadata, times

__all__ = [
    "DB_HOST",
    "DB_NAME",
    "DB_USER",
    "connect",
    "create_db_engine",
    "database_url",
    "init_models",
    "metadata",
    "times",
]
