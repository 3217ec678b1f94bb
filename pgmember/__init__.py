"""Operational scripts for a Postgres member: a write-throughput prober and a continuous inserter."""
