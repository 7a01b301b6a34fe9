from __future__ import annotations

from fastapi import APIRouter, Depends

from memberhub.core.tokens import TokenClaims
from memberhub.routers.deps import current_claims, ok
from memberhub.services.notification_service import NotificationBatch, NotificationService
from memberhub.services.serializers import notification_to_dict

router = APIRouter(prefix="/api/notify", tags=["notify"])
notification_service = NotificationService()


def _batch(batch: NotificationBatch):
    if batch.muted:
        return ok({"muted": True, "created": []}, "Notifications are turned off.")
    created = [notification_to_dict(n) for n in batch.created]
    message = "New notifications created." if created else "Nothing new."
    return ok({"muted": False, "created": created}, message, 201 if created else 200)


@router.get("/notify")
def notify_notices(claims: TokenClaims = Depends(current_claims)):
    return _batch(notification_service.notify_notices(claims.user_id))


@router.get("/MembershipForStore")
def notify_store_memberships(claims: TokenClaims = Depends(current_claims)):
    return _batch(notification_service.notify_store_memberships(claims.user_id))


@router.get("/MembershipForInfluencer")
def notify_influencer_memberships(claims: TokenClaims = Depends(current_claims)):
    return _batch(notification_service.notify_influencer_memberships(claims.user_id))


@router.get("/list")
def list_notifications(claims: TokenClaims = Depends(current_claims)):
    items = notification_service.list_for(claims.user_id)
    return ok([notification_to_dict(n) for n in items], "Notifications loaded.")


@router.put("/read/{notification_id}")
def mark_read(notification_id: int, claims: TokenClaims = Depends(current_claims)):
    notification = notification_service.mark_read(claims.user_id, notification_id)
    return ok(notification_to_dict(notification), "Notification marked as read.")
