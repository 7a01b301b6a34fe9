from __future__ import annotations

from fastapi import APIRouter, Depends

from memberhub.core.tokens import TokenClaims
from memberhub.routers.deps import current_claims, ok
from memberhub.schemas import InfluencerRequest
from memberhub.services.influencer_service import InfluencerService
from memberhub.services.serializers import influencer_to_dict

router = APIRouter(prefix="/api/influencer", tags=["influencer"])
influencer_service = InfluencerService()


@router.post("/join")
def create_influencer(body: InfluencerRequest, claims: TokenClaims = Depends(current_claims)):
    influencer = influencer_service.create(claims.user_id, body.values())
    return ok(influencer_to_dict(influencer), "Influencer created.", 201)


@router.get("/findAll")
def list_influencers():
    return ok([influencer_to_dict(i) for i in influencer_service.list_all()], "Influencers loaded.")


@router.get("/findOne/{influencer_id}")
def get_influencer(influencer_id: int):
    return ok(influencer_to_dict(influencer_service.get(influencer_id)), "Influencer loaded.")


@router.put("/enabled/{influencer_id}")
def toggle_influencer(influencer_id: int, claims: TokenClaims = Depends(current_claims)):
    influencer = influencer_service.toggle_enabled(claims.user_id, influencer_id)
    return ok(influencer_to_dict(influencer), "Influencer enabled." if influencer.enabled else "Influencer disabled.")


@router.put("/update/{influencer_id}")
def update_influencer(influencer_id: int, body: InfluencerRequest, claims: TokenClaims = Depends(current_claims)):
    influencer = influencer_service.update(claims.user_id, influencer_id, body.values())
    return ok(influencer_to_dict(influencer), "Influencer updated.")


@router.delete("/delete/{influencer_id}")
def delete_influencer(influencer_id: int, claims: TokenClaims = Depends(current_claims)):
    influencer_service.delete(claims.user_id, influencer_id)
    return ok({"id": influencer_id}, "Influencer deleted.")
