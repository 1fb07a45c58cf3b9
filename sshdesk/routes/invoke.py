from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException

from ..commands import command_names, invoke
from ..errors import SshDeskError

router = APIRouter()


@router.get("/api/invoke")
def api_invoke_list():
    return {"commands": command_names()}


@router.post("/api/invoke/{command}")
def api_invoke(command: str, args: Optional[Dict[str, Any]] = Body(None)):
    try:
        return {"result": invoke(command, args or {})}
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail={"kind": "InvalidArguments", "message": str(e), "context": {"command": command}})
