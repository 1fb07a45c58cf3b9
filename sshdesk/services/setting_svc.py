# sshdesk/services/setting_svc.py
from __future__ import annotations

from typing import Dict

from ..db import get_conn
from ..errors import NotFound, storage_errors
from ..models import Setting
from ..repository import setting_repo
from .utils import now_iso

DEFAULTS = {
    "theme": "system",
    "language": "en",
    "default_port": "22",
    "default_username": "root",
    "connect_timeout": "10",
}


def ensure_default_settings():
    """Insert missing default settings; existing values are kept."""
    now = now_iso()
    with storage_errors("init_default_settings"), get_conn() as conn:
        for k, v in DEFAULTS.items():
            setting_repo.insert_missing(conn, k, v, now)


def get_setting(key: str) -> Setting:
    with storage_errors("get_setting", key=key), get_conn() as conn:
        row = setting_repo.get_one(conn, key)
    if row is None:
        raise NotFound(f"Setting '{key}' not found", entity="setting", key=key)
    return Setting.from_row(row)


def get_settings() -> Dict[str, str]:
    with storage_errors("get_settings"), get_conn() as conn:
        rows = setting_repo.list_all(conn)
    return {r["key"]: r["value"] for r in rows}


def update_setting(key: str, value: str) -> Setting:
    with storage_errors("update_setting", key=key), get_conn() as conn:
        setting_repo.upsert(conn, key, None if value is None else str(value), now_iso())
        row = setting_repo.get_one(conn, key)
    return Setting.from_row(row)
