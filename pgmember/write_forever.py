#!/usr/bin/env python3
"""
Continuous inserter - writes the server's now() into the times table every
half second over a single connection, until interrupted.

Useful to put a steady trickle of writes on a member and to watch them show up
on replicas. There's no reconnect: if the connection drops, the script dies.
"""

import argparse
import signal
import sys
import threading
from datetime import datetime
from typing import List, Optional, TextIO

from sqlalchemy import func, insert as sql_insert
from sqlalchemy.engine import Connection

from pgmember.db import DB_HOST, DB_NAME, DB_USER, connect, create_db_engine, database_url, init_models
from pgmember.db.schema import times

INTERVAL = 0.5


def insert(conn: Connection, out: TextIO = sys.stdout) -> None:
    """Log the attempt, then insert the current database time."""
    print(f"[{datetime.now().astimezone()}] Inserting...", file=out, flush=True)
    conn.execute(sql_insert(times).values(time=func.now()))
    conn.commit()


def write_forever(
    conn: Connection,
    interval: float,
    stop: threading.Event,
    max_iterations: Optional[int] = None,
    out: TextIO = sys.stdout,
    waiting: Optional[threading.Event] = None,
) -> int:
    """
    Insert, wait, repeat until stop is set. Returns the number of inserts.

    `waiting` is set only while sleeping between inserts, so a signal handler
    can tell an idle loop from a blocked database call.
    """
    inserted = 0
    while not stop.is_set() and (max_iterations is None or inserted < max_iterations):
        insert(conn, out)
        inserted += 1
        if max_iterations is not None and inserted >= max_iterations:
            break
        if waiting is not None:
            waiting.set()
        try:
            stop.wait(interval)
        finally:
            if waiting is not None:
                waiting.clear()
    return inserted


def install_stop_handlers(stop: threading.Event, waiting: threading.Event) -> None:
    """
    Make SIGINT/SIGTERM stop the loop.

    While the loop sleeps the first signal just sets stop. Outside the sleep
    (a hung connect or insert) or on a second signal the process exits.
    """
    def signal_handler(signum, frame):
        already_stopping = stop.is_set()
        stop.set()
        if already_stopping or not waiting.is_set():
            sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Insert now() into the times table forever")
    parser.add_argument("--host", default=DB_HOST, help=f"Database host (default: {DB_HOST})")
    parser.add_argument("--dbname", default=DB_NAME, help=f"Database name (default: {DB_NAME})")
    parser.add_argument("--user", default=DB_USER, help=f"Database user (default: {DB_USER})")
    parser.add_argument("--interval", type=float, default=INTERVAL,
                        help=f"Seconds between inserts (default: {INTERVAL})")
    parser.add_argument("--count", type=int, help="Stop after this many inserts (default: never)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main inserter function."""
    args = parse_args(argv)

    stop = threading.Event()
    waiting = threading.Event()
    install_stop_handlers(stop, waiting)

    engine = create_db_engine(database_url(args.host, args.dbname, args.user))
    print(f"🌐 Database: {args.user}@{args.host}/{args.dbname}", file=sys.stderr)
    try:
        init_models(engine)
        with connect(engine) as conn:
            inserted = write_forever(conn, args.interval, stop, args.count, waiting=waiting)
    finally:
        engine.dispose()

    if stop.is_set():
        print("\n🛑 Received stop signal", file=sys.stderr)
    print(f"✅ Stopped after {inserted} inserts", file=sys.stderr)


if __name__ == "__main__":
    main()
