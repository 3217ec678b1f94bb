"""Database schema for the continuous inserter."""

from sqlalchemy import Column, DateTime, MetaData, Table

metadata = MetaData()

# Append-only, no primary key: one row per insert, nothing else.
times = Table(
    "times",
    metadata,
    Column("time", DateTime(timezone=True), nullable=False),
)
