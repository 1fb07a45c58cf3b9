from fastapi import APIRouter, HTTPException

from .. import __version__
from ..errors import SshDeskError
from ..logs import record
from ..services.app_svc import init_app

router = APIRouter()

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/version")
def version():
    return {"app": "sshdesk-api", "version": __version__}

@router.post("/api/app/init")
def api_init_app():
    try:
        with record("init_app"):
            message = init_app()
        return {"message": message}
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
