"""DuckDB storage for published namespace configurations.

One row per namespace holding its exported JSON payload. Saving mirrors
the state: namespaces that are no longer present (purged or renamed) lose
their row. Loading returns the payloads in display order, ready for
``hydrate``.
"""

import json
from pathlib import Path

import duckdb
from loguru import logger

from src.console.config import StoreConfig
from src.console.store import State, export_payloads, hydrate

DEFAULT_DB_PATH = "data/console.duckdb"


def get_connection(path: str = DEFAULT_DB_PATH) -> duckdb.DuckDBPyConnection:
    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(path)


def init_db(conn: duckdb.DuckDBPyConnection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS namespaces (
            name     VARCHAR PRIMARY KEY,
            position INTEGER NOT NULL,
            payload  VARCHAR NOT NULL,
            saved_at TIMESTAMP DEFAULT current_timestamp
        )
    """)


def save_namespaces(conn: duckdb.DuckDBPyConnection, state: State) -> tuple[int, int]:
    """Persist the state and return (saved, deleted) row counts.

    Records marked for deletion are purged before saving, and internal
    flags never reach the stored payload.
    """
    payloads = export_payloads(state)
    names = [p.name for p in payloads]

    conn.begin()
    try:
        if names:
            deleted = conn.execute(
                "SELECT count(*) FROM namespaces WHERE NOT list_contains(?, name)", [names],
            ).fetchone()[0]
            conn.execute("DELETE FROM namespaces WHERE NOT list_contains(?, name)", [names])
        else:
            deleted = conn.execute("SELECT count(*) FROM namespaces").fetchone()[0]
            conn.execute("DELETE FROM namespaces")

        for position, payload in enumerate(payloads):
            conn.execute(
                "INSERT OR REPLACE INTO namespaces (name, position, payload) VALUES (?, ?, ?)",
                [payload.name, position, json.dumps(payload.model_dump(mode="json", by_alias=True))],
            )
        conn.commit()
    except duckdb.Error:
        conn.rollback()
        raise

    logger.info(f"Saved {len(payloads)} namespaces, deleted {deleted}")
    return len(payloads), deleted


def load_namespaces(conn: duckdb.DuckDBPyConnection) -> list[dict]:
    rows = conn.execute("SELECT payload FROM namespaces ORDER BY position").fetchall()
    return [json.loads(row[0]) for row in rows]


def load_state(conn: duckdb.DuckDBPyConnection, config: StoreConfig | None = None) -> State:
    payloads = load_namespaces(conn)
    logger.info(f"Loaded {len(payloads)} namespaces from warehouse")
    return hydrate(payloads, config)
