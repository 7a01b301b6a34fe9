from __future__ import annotations

from fastapi import APIRouter, Depends

from memberhub.core.tokens import TokenClaims
from memberhub.routers.deps import current_claims, ok
from memberhub.schemas import BioAuthRequest, NotifySettingRequest
from memberhub.services.serializers import setting_to_dict
from memberhub.services.setting_service import SettingService

router = APIRouter(prefix="/api/setting", tags=["setting"])
setting_service = SettingService()


@router.get("/find")
def get_settings_for_user(claims: TokenClaims = Depends(current_claims)):
    return ok(setting_to_dict(setting_service.get(claims.user_id)), "Settings loaded.")


@router.post("/bioAuth")
def set_bio_auth(body: BioAuthRequest, claims: TokenClaims = Depends(current_claims)):
    setting = setting_service.set_bio_auth(claims.user_id, body.is_on())
    return ok(setting_to_dict(setting), "Biometric login setting updated.")


@router.post("/notifySetting")
def set_notify(body: NotifySettingRequest, claims: TokenClaims = Depends(current_claims)):
    setting = setting_service.set_notify(claims.user_id, body.is_on())
    return ok(setting_to_dict(setting), "Notification setting updated.")
