from __future__ import annotations

# sshdesk/db.py
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import os
import yaml

# DB path resolution order:
# 1) env SSHDESK_DB_PATH (highest priority)
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path
# 4) fallback: ~/.sshdesk/sshdesk.db
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_CONFIG_KEYS = ("db_path", "test_db_path", "ssh_keygen")


def default_data_dir() -> str:
    return os.path.join(os.path.expanduser("~"), ".sshdesk")


def read_config_yaml() -> dict:
    cfg_path = os.environ.get("SSHDESK_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    out = {}
    for k in _CONFIG_KEYS:
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = os.path.expanduser(v.strip())
    return out


def get_db_path() -> str:
    env_path = os.environ.get("SSHDESK_DB_PATH")
    cfg = read_config_yaml()
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg.get("test_db_path"):
        path = cfg["test_db_path"]
    elif cfg.get("db_path"):
        path = cfg["db_path"]
    else:
        path = os.path.join(default_data_dir(), "sshdesk.db")

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection for one command. Uses the explicit db_path when given,
    otherwise get_db_path().

    The connection runs in autocommit mode with foreign keys on and sqlite3.Row rows;
    use atomic() for multi-statement writes.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


@contextmanager
def atomic(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements in one write transaction; roll back on any exception."""
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    conn.execute("COMMIT")


def init_database(db_path: str | None = None) -> str:
    """Create every table if absent. Returns the database path in use."""
    from .logs import DDL as LOG_DDL
    from .repository import server_repo, setting_repo, ssh_key_repo

    path = db_path or get_db_path()
    with get_conn(path) as conn:
        ssh_key_repo.ensure_schema(conn)
        server_repo.ensure_schema(conn)
        setting_repo.ensure_schema(conn)
        conn.executescript(LOG_DDL)
    return path
