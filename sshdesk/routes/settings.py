from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..errors import SshDeskError
from ..logs import record
from ..services.setting_svc import get_setting, get_settings, update_setting

router = APIRouter()


@router.get("/api/settings")
def api_settings_all():
    try:
        return get_settings()
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/api/settings/{key}")
def api_setting_get(key: str):
    try:
        return get_setting(key).model_dump()
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


class SettingUpdateBody(BaseModel):
    key: str
    value: str


@router.post("/api/settings/update")
def api_settings_update(body: SettingUpdateBody):
    try:
        with record("update_setting", body.model_dump()):
            setting = update_setting(body.key, body.value)
        return {"message": "ok", "setting": setting.model_dump()}
    except SshDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
