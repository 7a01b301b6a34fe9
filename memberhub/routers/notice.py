from __future__ import annotations

from fastapi import APIRouter, Depends

from memberhub.core.tokens import TokenClaims
from memberhub.routers.deps import current_claims, ok
from memberhub.schemas import NoticeRequest
from memberhub.services.notice_service import NoticeService
from memberhub.services.serializers import notice_to_dict

router = APIRouter(prefix="/api/notice", tags=["notice"])
notice_service = NoticeService()


@router.post("/write")
def write_notice(body: NoticeRequest, claims: TokenClaims = Depends(current_claims)):
    notice = notice_service.create(claims.user_id, body.values())
    return ok(notice_to_dict(notice), "Notice created.", 201)


@router.put("/update/{notice_id}")
def update_notice(notice_id: int, body: NoticeRequest, claims: TokenClaims = Depends(current_claims)):
    notice = notice_service.update(claims.user_id, notice_id, body.values())
    return ok(notice_to_dict(notice), "Notice updated.")


@router.get("/findAll")
def list_public_notices():
    return ok([notice_to_dict(n) for n in notice_service.list_public()], "Notices loaded.")


@router.get("/findOne/{notice_id}")
def get_notice(notice_id: int):
    return ok(notice_to_dict(notice_service.get(notice_id)), "Notice loaded.")


@router.get("/PRIVATE")
def list_private_notices(claims: TokenClaims = Depends(current_claims)):
    notices = notice_service.list_private(claims.user_id)
    return ok([notice_to_dict(n) for n in notices], "Private notices loaded.")


@router.delete("/delete/{notice_id}")
def delete_notice(notice_id: int, claims: TokenClaims = Depends(current_claims)):
    notice_service.delete(claims.user_id, notice_id)
    return ok({"id": notice_id}, "Notice deleted.")
