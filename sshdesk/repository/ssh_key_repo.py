from __future__ import annotations

from sqlite3 import Connection, Row
from typing import List, Optional

_COLUMNS = "id, name, path, is_default, created_at, updated_at"


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS ssh_keys (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            path TEXT NOT NULL UNIQUE,
            is_default INTEGER NOT NULL DEFAULT 0 CHECK (is_default IN (0, 1)),
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )


def insert(conn: Connection, name: str, path: str, is_default: bool, now: str) -> int:
    cur = conn.execute(
        "INSERT INTO ssh_keys(name, path, is_default, created_at, updated_at) VALUES(?, ?, ?, ?, ?)",
        (name, path, 1 if is_default else 0, now, now),
    )
    return int(cur.lastrowid)


def get_one(conn: Connection, key_id: int) -> Optional[Row]:
    return conn.execute(f"SELECT {_COLUMNS} FROM ssh_keys WHERE id=?", (key_id,)).fetchone()


def list_all(conn: Connection) -> List[Row]:
    return conn.execute(f"SELECT {_COLUMNS} FROM ssh_keys ORDER BY id").fetchall()


def get_path(conn: Connection, key_id: int) -> Optional[str]:
    row = conn.execute("SELECT path FROM ssh_keys WHERE id=?", (key_id,)).fetchone()
    return row["path"] if row else None


def clear_default(conn: Connection, now: str) -> int:
    cur = conn.execute("UPDATE ssh_keys SET is_default=0, updated_at=? WHERE is_default=1", (now,))
    return cur.rowcount


def mark_default(conn: Connection, key_id: int, now: str) -> int:
    cur = conn.execute("UPDATE ssh_keys SET is_default=1, updated_at=? WHERE id=?", (now, key_id))
    return cur.rowcount


def count_default(conn: Connection) -> int:
    return conn.execute("SELECT COUNT(1) AS cnt FROM ssh_keys WHERE is_default=1").fetchone()["cnt"]


def remove(conn: Connection, key_id: int) -> int:
    cur = conn.execute("DELETE FROM ssh_keys WHERE id=?", (key_id,))
    return cur.rowcount
