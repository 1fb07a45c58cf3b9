from __future__ import annotations

import logging
from typing import List

from ..db import get_conn
from ..errors import NotFound, storage_errors
from ..models import Server, ServerInput
from ..repository import server_repo
from .utils import now_iso

logger = logging.getLogger(__name__)


def add_server(server: ServerInput) -> int:
    with storage_errors("add_server", name=server.name), get_conn() as conn:
        server_id = server_repo.insert(conn, server.model_dump(), now_iso())
    logger.info("Server '%s' added with id %s", server.name, server_id)
    return server_id


def get_server(id: int) -> Server:
    with storage_errors("get_server", id=id), get_conn() as conn:
        row = server_repo.get_one(conn, id)
    if row is None:
        raise NotFound(f"Server {id} not found", entity="server", id=id)
    return Server.from_row(row)


def get_servers() -> List[Server]:
    with storage_errors("get_servers"), get_conn() as conn:
        rows = server_repo.list_all(conn)
    return [Server.from_row(r) for r in rows]


def update_server(id: int, server: ServerInput) -> None:
    with storage_errors("update_server", id=id), get_conn() as conn:
        changed = server_repo.update(conn, id, server.model_dump(), now_iso())
    if changed == 0:
        raise NotFound(f"Server {id} not found", entity="server", id=id)
    logger.info("Server %s updated", id)


def delete_server(id: int) -> None:
    with storage_errors("delete_server", id=id), get_conn() as conn:
        removed = server_repo.remove(conn, id)
    if removed == 0:
        raise NotFound(f"Server {id} not found", entity="server", id=id)
    logger.info("Server %s deleted", id)
