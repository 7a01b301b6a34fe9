from __future__ import annotations

from fastapi import APIRouter, Depends

from memberhub.core.tokens import TokenClaims
from memberhub.routers.deps import current_claims, ok
from memberhub.schemas import StoreRequest
from memberhub.services.serializers import store_to_dict
from memberhub.services.store_service import StoreService

router = APIRouter(prefix="/api/store", tags=["store"])
store_service = StoreService()


@router.post("/join")
def create_store(body: StoreRequest, claims: TokenClaims = Depends(current_claims)):
    store = store_service.create(claims.user_id, body.values())
    return ok(store_to_dict(store), "Store created.", 201)


@router.get("/findAll")
def list_stores():
    return ok([store_to_dict(s) for s in store_service.list_all()], "Stores loaded.")


@router.get("/findOne/{store_id}")
def get_store(store_id: int):
    return ok(store_to_dict(store_service.get(store_id)), "Store loaded.")


@router.get("/map/{lat}/{lng}/{radius}")
def stores_nearby(lat: float, lng: float, radius: float):
    stores = store_service.within_radius(lat, lng, radius)
    return ok([store_to_dict(s) for s in stores], "Nearby stores loaded.")


@router.put("/enabled/{store_id}")
def toggle_store(store_id: int, claims: TokenClaims = Depends(current_claims)):
    store = store_service.toggle_enabled(claims.user_id, store_id)
    return ok(store_to_dict(store), "Store enabled." if store.enabled else "Store disabled.")


@router.put("/update/{store_id}")
def update_store(store_id: int, body: StoreRequest, claims: TokenClaims = Depends(current_claims)):
    store = store_service.update(claims.user_id, store_id, body.values())
    return ok(store_to_dict(store), "Store updated.")


@router.delete("/delete/{store_id}")
def delete_store(store_id: int, claims: TokenClaims = Depends(current_claims)):
    store_service.delete(claims.user_id, store_id)
    return ok({"id": store_id}, "Store deleted.")
