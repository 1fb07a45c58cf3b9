from __future__ import annotations

from fastapi import APIRouter, HTTPException

from ..errors import SshDeskError
from ..logs import record
from ..models import ServerInput
from ..services.server_svc import add_server, delete_server, get_server, get_servers, update_server

router = APIRouter()


@router.get("/api/servers")
def api_servers():
    try:
        return {"items": [s.model_dump() for s in get_servers()]}
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/api/servers/{server_id}")
def api_server_get(server_id: int):
    try:
        return get_server(server_id).model_dump()
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.post("/api/servers/add", status_code=201)
def api_server_add(body: ServerInput):
    try:
        with record("add_server", body.model_dump()) as op:
            server_id = add_server(body)
            op.done(server_id)
        return {"message": "ok", "id": server_id}
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.post("/api/servers/{server_id}/update")
def api_server_update(server_id: int, body: ServerInput):
    try:
        with record("update_server", {"id": server_id, **body.model_dump()}):
            update_server(server_id, body)
        return {"message": "ok"}
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.delete("/api/servers/{server_id}")
def api_server_delete(server_id: int):
    try:
        with record("delete_server", {"id": server_id}):
            delete_server(server_id)
        return {"message": "ok"}
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
