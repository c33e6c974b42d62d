"""Append-only audit log of completed analyses."""

import json
import logging
import sqlite3

from workflow.db import execute, get_connection
from workflow.errors import AuditWriteError

logger = logging.getLogger(__name__)


class SqliteAuditStore:
    """
    Stores each analysis as one JSON document row in `risk_analyses`.

    Rows are only ever inserted. `created_at` is assigned by the database,
    never by the caller.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._table_ready = False

    def ensure_table(self) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS risk_analyses (
                    record_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    agent_email TEXT,
                    issue_type TEXT,
                    risk_level TEXT,
                    document TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()
        self._table_ready = True

    def append(self, record: dict) -> int:
        """Insert one audit record. Returns its record_id."""
        try:
            if not self._table_ready:
                self.ensure_table()
            return execute(
                """
                INSERT INTO risk_analyses (agent_email, issue_type, risk_level, document)
                VALUES (?, ?, ?, ?)
                """,
                (
                    record.get("agent_email"),
                    record.get("issue_type"),
                    record.get("risk_level"),
                    json.dumps(record),
                ),
                db_path=self.db_path,
            )
        except (sqlite3.Error, OSError, TypeError, ValueError) as exc:
            logger.error("Audit write failed: %s", exc)
            raise AuditWriteError(f"Audit write failed: {exc}") from exc
