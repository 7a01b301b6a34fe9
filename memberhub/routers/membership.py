from __future__ import annotations

from fastapi import APIRouter, Depends

from memberhub.core.tokens import TokenClaims
from memberhub.routers.deps import current_claims, ok
from memberhub.schemas import MembershipRequest
from memberhub.services.membership_service import MembershipService
from memberhub.services.serializers import membership_to_dict

router = APIRouter(prefix="/api/membership", tags=["membership"])
membership_service = MembershipService()


@router.post("/create")
def create_membership(body: MembershipRequest, claims: TokenClaims = Depends(current_claims)):
    membership = membership_service.create(claims.user_id, body.values())
    return ok(membership_to_dict(membership), "Membership created.", 201)


@router.get("/findAll")
def list_memberships():
    return ok([membership_to_dict(m) for m in membership_service.list_all()], "Memberships loaded.")


@router.get("/findOne/{membership_id}")
def get_membership(membership_id: int):
    return ok(membership_to_dict(membership_service.get(membership_id)), "Membership loaded.")


@router.put("/update/{membership_id}")
def update_membership(membership_id: int, body: MembershipRequest, claims: TokenClaims = Depends(current_claims)):
    membership = membership_service.update(claims.user_id, membership_id, body.values())
    return ok(membership_to_dict(membership), "Membership updated.")


@router.delete("/delete/{membership_id}")
def delete_membership(membership_id: int, claims: TokenClaims = Depends(current_claims)):
    membership_service.delete(claims.user_id, membership_id)
    return ok({"id": membership_id}, "Membership deleted.")
