"""
Local durable key-value slots (SQLite).

Each slot holds one JSON blob, written whole and read back verbatim.
"""
import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import structlog

from counselor_dashboard.config import LOCAL_STORE_FILE

logger = structlog.get_logger(__name__)


@contextmanager
def get_conn(db_file: Path):
    conn = sqlite3.connect(db_file, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _create_table(db_file: Path) -> None:
    with get_conn(db_file) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS slots (
                name TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )


class LocalSlot:
    def __init__(self, name: str, db_file: Optional[Path] = None):
        self.name = name
        self.db_file = Path(db_file) if db_file is not None else LOCAL_STORE_FILE
        self.db_file.parent.mkdir(parents=True, exist_ok=True)
        _create_table(self.db_file)

    def load(self) -> Optional[dict]:
        with get_conn(self.db_file) as conn:
            row = conn.execute("SELECT value FROM slots WHERE name = ?", (self.name,)).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except ValueError:
            # corrupt blob reads as an empty slot
            logger.warning("slot_unreadable", slot=self.name)
            return None

    def save(self, state: dict) -> None:
        with get_conn(self.db_file) as conn:
            conn.execute(
                """
                INSERT INTO slots(name, value) VALUES(?, ?)
                ON CONFLICT(name) DO UPDATE SET value=excluded.value
                """,
                (self.name, json.dumps(state, ensure_ascii=False)),
            )

    def clear(self) -> None:
        with get_conn(self.db_file) as conn:
            conn.execute("DELETE FROM slots WHERE name = ?", (self.name,))
