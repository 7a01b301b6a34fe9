from __future__ import annotations

from fastapi import APIRouter, Depends

from memberhub.core.tokens import TokenClaims
from memberhub.domain import targets
from memberhub.routers.deps import current_claims, ok
from memberhub.schemas import SubscriptionRequest
from memberhub.services.serializers import edge_to_dict
from memberhub.services.subscription_service import SubscriptionService

router = APIRouter(prefix="/api/subscription", tags=["subscription"])
subscription_service = SubscriptionService()


def _toggle(target_type: str, body: SubscriptionRequest, claims: TokenClaims):
    result = subscription_service.toggle(claims.user_id, target_type, body.target_id(target_type))
    message = "Subscribed." if result.created else "Unsubscribed."
    data = {"state": result.state, "target_type": target_type, "target_id": result.target_id, "id": result.record_id}
    return ok(data, message, result.status_code)


@router.post("/Influencer")
def subscribe_influencer(body: SubscriptionRequest, claims: TokenClaims = Depends(current_claims)):
    return _toggle(targets.INFLUENCER, body, claims)


@router.post("/Store")
def subscribe_store(body: SubscriptionRequest, claims: TokenClaims = Depends(current_claims)):
    return _toggle(targets.STORE, body, claims)


@router.get("/findAll")
def list_subscriptions(claims: TokenClaims = Depends(current_claims)):
    subs = subscription_service.list_all(claims.user_id)
    return ok([edge_to_dict(s) for s in subs], "Subscriptions loaded.")


@router.get("/findListForInf")
def subscribed_influencers(claims: TokenClaims = Depends(current_claims)):
    return ok(subscription_service.list_for(claims.user_id, targets.INFLUENCER), "Subscriptions loaded.")


@router.get("/findListForStore")
def subscribed_stores(claims: TokenClaims = Depends(current_claims)):
    return ok(subscription_service.list_for(claims.user_id, targets.STORE), "Subscriptions loaded.")
