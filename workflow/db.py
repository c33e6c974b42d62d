"""SQLite connection helpers for the audit store."""

import os
import sqlite3


def get_connection(db_path: str) -> sqlite3.Connection:
    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path, timeout=10.0)
    conn.row_factory = sqlite3.Row
    return conn


def execute(sql: str, params: tuple = (), db_path: str = "") -> int:
    """Execute a write operation. Returns lastrowid."""
    conn = get_connection(db_path)
    try:
        cur = conn.execute(sql, params)
        conn.commit()
        return cur.lastrowid
    finally:
        conn.close()
