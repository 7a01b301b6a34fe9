from __future__ import annotations

from fastapi import APIRouter, Depends

from memberhub.core.tokens import TokenClaims
from memberhub.domain import targets
from memberhub.routers.deps import current_claims, ok
from memberhub.schemas import LikeRequest
from memberhub.services.like_service import LikeService

router = APIRouter(prefix="/api/like", tags=["like"])
like_service = LikeService()


def _toggle(target_type: str, body: LikeRequest, claims: TokenClaims):
    result = like_service.toggle(claims.user_id, target_type, body.target_id(target_type))
    message = "Like added." if result.created else "Like removed."
    data = {"state": result.state, "target_type": target_type, "target_id": result.target_id, "id": result.record_id}
    return ok(data, message, result.status_code)


def _list(target_type: str, claims: TokenClaims):
    return ok(like_service.list_for(claims.user_id, target_type), "Likes loaded.")


@router.post("/likeNotice")
def like_notice(body: LikeRequest, claims: TokenClaims = Depends(current_claims)):
    return _toggle(targets.NOTICE, body, claims)


@router.post("/likeInfluencer")
def like_influencer(body: LikeRequest, claims: TokenClaims = Depends(current_claims)):
    return _toggle(targets.INFLUENCER, body, claims)


@router.post("/likeStore")
def like_store(body: LikeRequest, claims: TokenClaims = Depends(current_claims)):
    return _toggle(targets.STORE, body, claims)


@router.post("/likeMembership")
def like_membership(body: LikeRequest, claims: TokenClaims = Depends(current_claims)):
    return _toggle(targets.MEMBERSHIP, body, claims)


@router.get("/likeNoticeList")
def liked_notices(claims: TokenClaims = Depends(current_claims)):
    return _list(targets.NOTICE, claims)


@router.get("/likeInfluencerList")
def liked_influencers(claims: TokenClaims = Depends(current_claims)):
    return _list(targets.INFLUENCER, claims)


@router.get("/likeStoreList")
def liked_stores(claims: TokenClaims = Depends(current_claims)):
    return _list(targets.STORE, claims)


@router.get("/likeMembershipList")
def liked_memberships(claims: TokenClaims = Depends(current_claims)):
    return _list(targets.MEMBERSHIP, claims)
