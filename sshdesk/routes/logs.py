from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Query

from ..logs import search_logs

router = APIRouter()

EntityKind = Literal["app", "ssh_key", "server", "setting"]


@router.get("/api/logs/search")
def api_logs_search(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    command: Optional[str] = None,
    entity_type: Optional[EntityKind] = None,
    entity_id: Optional[str] = None,
    query: Optional[str] = None,
    ts_from: Optional[str] = None,
    ts_to: Optional[str] = None,
):
    total, items = search_logs(command, entity_type, entity_id, query, ts_from, ts_to, page, size)
    return {"total": total, "items": items}


@router.get("/api/logs/{entity_type}/{entity_id}")
def api_logs_for_entity(entity_type: EntityKind, entity_id: str, size: int = Query(50, ge=1, le=200)):
    """History of one key, server or setting, newest first."""
    total, items = search_logs(entity_type=entity_type, entity_id=entity_id, size=size)
    return {"total": total, "items": items}
