from __future__ import annotations

from sqlite3 import Connection, Row
from typing import List, Optional


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )


def insert_missing(conn: Connection, key: str, value: str, now: str):
    conn.execute(
        "INSERT INTO settings(key, value, updated_at) VALUES(?, ?, ?) "
        "ON CONFLICT(key) DO NOTHING",
        (key, value, now),
    )


def upsert(conn: Connection, key: str, value: str, now: str):
    conn.execute(
        "INSERT INTO settings(key, value, updated_at) VALUES(?, ?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
        (key, value, now),
    )


def get_one(conn: Connection, key: str) -> Optional[Row]:
    return conn.execute("SELECT key, value, updated_at FROM settings WHERE key=?", (key,)).fetchone()


def list_all(conn: Connection) -> List[Row]:
    return conn.execute("SELECT key, value, updated_at FROM settings ORDER BY key").fetchall()
