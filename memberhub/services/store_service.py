"""Store registration, lookup, moderation and the map radius search."""
from __future__ import annotations

import structlog
from sqlalchemy.exc import IntegrityError

from memberhub.domain import targets
from memberhub.domain.geo import distance_km
from memberhub.domain.validation import is_valid_phone
from memberhub.repositories.sql_repository import SQLRepository
from memberhub.services.access import load_actor, require_admin, require_owner_or_admin
from memberhub.services.errors import ConflictError, InvalidRequestError, NotFoundError

logger = structlog.get_logger(__name__)

STORE_FIELDS = (
    "name",
    "country",
    "zip_code",
    "address",
    "address_etc",
    "phone",
    "open_time",
    "close_time",
    "open_days",
    "website",
    "images",
    "discount_rate",
    "kind",
    "referral_code",
    "lat",
    "lng",
)


def _clean(data: dict) -> dict:
    values = {key: data[key] for key in STORE_FIELDS if data.get(key) is not None}
    for key, value in list(values.items()):
        if isinstance(value, str):
            values[key] = value.strip()
    phone = values.get("phone")
    if phone and not is_valid_phone(phone):
        raise InvalidRequestError("Phone number is not valid.", "invalid_phone")
    return values


class StoreService:
    def __init__(self) -> None:
        self.repository = SQLRepository()

    def create(self, user_id: int, data: dict):
        user = load_actor(self.repository, user_id)
        if self.repository.get_influencer_by_owner(user_id):
            raise ConflictError(
                "This account is already registered as an influencer.", "already_influencer"
            )
        values = _clean(data)
        if not values.get("name") or not values.get("address"):
            raise InvalidRequestError("Store name and address are required.", "missing_fields")
        if self.repository.get_store_by_owner(user_id):
            raise ConflictError("This account already owns a store.", "store_exists")
        try:
            store = self.repository.create_store(user_id, **values)
        except IntegrityError:
            raise ConflictError("A store with this name already exists.", "name_taken")
        if user.role == targets.ROLE_USER:
            self.repository.set_user_role(user_id, targets.ROLE_STORE)
        logger.info("store.created", store_id=store.id, user_id=user_id)
        return store

    def get(self, store_id: int):
        store = self.repository.get_store(store_id)
        if not store:
            raise NotFoundError("Store not found.")
        return store

    def list_all(self):
        return self.repository.list_stores()

    def within_radius(self, lat: float, lng: float, radius_km: float):
        """Enabled stores within radius_km of (lat, lng), nearest first."""
        if radius_km < 0:
            raise InvalidRequestError("Radius must not be negative.", "invalid_radius")
        found = []
        for store in self.repository.list_enabled_stores_with_coordinates():
            distance = distance_km(lat, lng, store.lat, store.lng)
            if distance <= radius_km:
                found.append((distance, store))
        found.sort(key=lambda item: item[0])
        return [store for _, store in found]

    def toggle_enabled(self, user_id: int, store_id: int):
        require_admin(self.repository, user_id)
        store = self.repository.toggle_store_enabled(store_id)
        if not store:
            raise NotFoundError("Store not found.")
        logger.info("store.enabled_changed", store_id=store_id, enabled=store.enabled)
        return store

    def update(self, user_id: int, store_id: int, data: dict):
        store = self.get(store_id)
        require_owner_or_admin(self.repository, user_id, store.user_id)
        values = _clean(data)
        if "name" in values and not values["name"]:
            raise InvalidRequestError("Store name cannot be empty.", "missing_fields")
        if "address" in values and not values["address"]:
            raise InvalidRequestError("Store address cannot be empty.", "missing_fields")
        try:
            return self.repository.update_store(store_id, **values)
        except IntegrityError:
            raise ConflictError("A store with this name already exists.", "name_taken")

    def delete(self, user_id: int, store_id: int) -> None:
        store = self.get(store_id)
        require_owner_or_admin(self.repository, user_id, store.user_id)
        self.repository.delete_store(store_id)
        owner = self.repository.get_user(store.user_id)
        if owner and owner.role == targets.ROLE_STORE:
            self.repository.set_user_role(owner.id, targets.ROLE_USER)
        logger.info("store.deleted", store_id=store_id, user_id=user_id)
