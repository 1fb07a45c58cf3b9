from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..errors import SshDeskError
from ..logs import record
from ..services.keygen import KeyGenerator, SshKeygen
from ..services.ssh_key_svc import (
    add_ssh_key,
    delete_ssh_key,
    generate_ssh_key,
    get_ssh_key,
    get_ssh_keys,
    set_default_ssh_key,
)

router = APIRouter()


def get_key_generator() -> KeyGenerator:
    return SshKeygen()


class SshKeyCreate(BaseModel):
    name: str
    path: str
    is_default: bool = False


class SshKeyGenerate(BaseModel):
    name: str


def _http_error(e: SshDeskError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/api/ssh-keys")
def api_ssh_keys():
    try:
        return {"items": [k.model_dump() for k in get_ssh_keys()]}
    except SshDeskError as e:
        raise _http_error(e)


@router.get("/api/ssh-keys/{key_id}")
def api_ssh_key_get(key_id: int):
    try:
        return get_ssh_key(key_id).model_dump()
    except SshDeskError as e:
        raise _http_error(e)


@router.post("/api/ssh-keys/add", status_code=201)
def api_ssh_key_add(body: SshKeyCreate):
    try:
        with record("add_ssh_key", body.model_dump()) as op:
            key_id = add_ssh_key(body.name, body.path, body.is_default)
            op.done(key_id)
        return {"message": "ok", "id": key_id}
    except SshDeskError as e:
        raise _http_error(e)


@router.post("/api/ssh-keys/{key_id}/default")
def api_ssh_key_set_default(key_id: int):
    try:
        with record("set_default_ssh_key", {"id": key_id}):
            set_default_ssh_key(key_id)
        return {"message": "ok"}
    except SshDeskError as e:
        raise _http_error(e)


@router.delete("/api/ssh-keys/{key_id}")
def api_ssh_key_delete(key_id: int, delete_file: bool = False):
    try:
        with record("delete_ssh_key", {"id": key_id, "delete_file": delete_file}):
            delete_ssh_key(key_id, delete_file)
        return {"message": "ok"}
    except SshDeskError as e:
        raise _http_error(e)


@router.post("/api/ssh-keys/generate", status_code=201)
def api_ssh_key_generate(body: SshKeyGenerate, generator: KeyGenerator = Depends(get_key_generator)):
    try:
        with record("generate_ssh_key", body.model_dump()):
            path = generate_ssh_key(body.name, generator)
        return {"message": "ok", "path": path}
    except SshDeskError as e:
        raise _http_error(e)
