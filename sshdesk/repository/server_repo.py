from __future__ import annotations

from sqlite3 import Connection, Row
from typing import List, Optional

_COLUMNS = "id, name, host, port, username, ssh_key_id, description, created_at, updated_at"


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS servers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            host TEXT NOT NULL,
            port INTEGER NOT NULL DEFAULT 22 CHECK (port BETWEEN 1 AND 65535),
            username TEXT NOT NULL,
            ssh_key_id INTEGER REFERENCES ssh_keys(id) ON DELETE SET NULL,
            description TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )


def insert(conn: Connection, fields: dict, now: str) -> int:
    cur = conn.execute(
        "INSERT INTO servers(name, host, port, username, ssh_key_id, description, created_at, updated_at) "
        "VALUES(:name, :host, :port, :username, :ssh_key_id, :description, :now, :now)",
        {**fields, "now": now},
    )
    return int(cur.lastrowid)


def update(conn: Connection, server_id: int, fields: dict, now: str) -> int:
    cur = conn.execute(
        "UPDATE servers SET name=:name, host=:host, port=:port, username=:username, "
        "ssh_key_id=:ssh_key_id, description=:description, updated_at=:now WHERE id=:id",
        {**fields, "now": now, "id": server_id},
    )
    return cur.rowcount


def get_one(conn: Connection, server_id: int) -> Optional[Row]:
    return conn.execute(f"SELECT {_COLUMNS} FROM servers WHERE id=?", (server_id,)).fetchone()


def list_all(conn: Connection) -> List[Row]:
    return conn.execute(f"SELECT {_COLUMNS} FROM servers ORDER BY id").fetchall()


def remove(conn: Connection, server_id: int) -> int:
    cur = conn.execute("DELETE FROM servers WHERE id=?", (server_id,))
    return cur.rowcount
