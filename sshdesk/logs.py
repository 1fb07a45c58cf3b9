"""
Operation log for commands that change state.

Each mutating command is recorded once, whichever front end ran it (route,
invoke endpoint or CLI), with the entity kind it touched, its arguments and
its outcome. Read-only commands are not recorded.
"""
from __future__ import annotations

import datetime as dt
import json
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .db import get_conn
from .errors import SshDeskError

DDL = """
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  command TEXT NOT NULL,
  entity_type TEXT NOT NULL,
  entity_id TEXT,
  request_id TEXT NOT NULL,
  args_json TEXT,
  result TEXT NOT NULL CHECK (result IN ('OK', 'ERROR')),
  error_kind TEXT,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_oplog_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_oplog_entity ON operation_log(entity_type, entity_id);
"""

# Mutating commands and the entity kind each one touches.
ENTITY_BY_COMMAND = {
    "init_app": "app",
    "add_ssh_key": "ssh_key",
    "set_default_ssh_key": "ssh_key",
    "delete_ssh_key": "ssh_key",
    "generate_ssh_key": "ssh_key",
    "add_server": "server",
    "update_server": "server",
    "delete_server": "server",
    "update_setting": "setting",
}


def is_recorded(command: str) -> bool:
    return command in ENTITY_BY_COMMAND


def _error_kind(err: BaseException) -> str:
    if isinstance(err, SshDeskError):
        return err.kind
    if isinstance(err, (TypeError, ValueError)):
        return "InvalidArguments"
    return type(err).__name__


class Operation:
    """One in-flight command; the entity id comes from the args or from the id a create returns."""

    def __init__(self, command: str, args: Dict[str, Any]):
        self.command = command
        self.entity_type = ENTITY_BY_COMMAND[command]
        self.args = args
        ref = args.get("id", args.get("key"))
        self.entity_id = None if ref is None else str(ref)
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()

    def done(self, result: Any):
        if self.command.startswith("add_") and isinstance(result, int):
            self.entity_id = str(result)

    def write(self, err: Optional[BaseException] = None):
        rec = {
            "ts": dt.datetime.now().astimezone().isoformat(),
            "command": self.command,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "args_json": json.dumps(self.args, ensure_ascii=False, default=str) if self.args else None,
            "result": "OK" if err is None else "ERROR",
            "error_kind": None if err is None else _error_kind(err),
            "err_msg": None if err is None else str(err),
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }
        with get_conn() as conn:
            conn.execute(
                """INSERT INTO operation_log
                (ts,command,entity_type,entity_id,request_id,args_json,result,error_kind,err_msg,latency_ms)
                VALUES(:ts,:command,:entity_type,:entity_id,:request_id,:args_json,:result,:error_kind,:err_msg,:latency_ms)""",
                rec,
            )


class _Unrecorded:
    def done(self, result: Any):
        pass


@contextmanager
def record(command: str, args: Optional[Dict[str, Any]] = None) -> Iterator[Any]:
    """Write one operation_log row for the enclosed command; failures are recorded then re-raised."""
    if not is_recorded(command):
        yield _Unrecorded()
        return
    op = Operation(command, dict(args or {}))
    try:
        yield op
    except Exception as e:
        op.write(e)
        raise
    op.write()


def _decode(row) -> Dict[str, Any]:
    item = dict(row)
    raw = item.pop("args_json")
    item["args"] = json.loads(raw) if raw else {}
    return item


def search_logs(
    command: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    query: Optional[str] = None,
    ts_from: Optional[str] = None,
    ts_to: Optional[str] = None,
    page: int = 1,
    size: int = 20,
) -> Tuple[int, List[Dict[str, Any]]]:
    where = []
    params: Dict[str, Any] = {}
    if command:
        where.append("command = :command")
        params["command"] = command
    if entity_type:
        where.append("entity_type = :entity_type")
        params["entity_type"] = entity_type
    if entity_id is not None:
        where.append("entity_id = :entity_id")
        params["entity_id"] = str(entity_id)
    if query:
        where.append("(args_json LIKE :q OR err_msg LIKE :q)")
        params["q"] = f"%{query}%"
    if ts_from:
        where.append("ts >= :from")
        params["from"] = ts_from
    if ts_to:
        where.append("ts <= :to")
        params["to"] = ts_to
    wh = " WHERE " + " AND ".join(where) if where else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM operation_log{wh}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM operation_log{wh} ORDER BY id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (page - 1) * size},
        ).fetchall()
    return total, [_decode(r) for r in rows]
