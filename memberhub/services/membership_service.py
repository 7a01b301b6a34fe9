"""Memberships issued by enabled stores and influencers."""
from __future__ import annotations

import structlog

from memberhub.repositories.sql_repository import SQLRepository
from memberhub.services.access import load_actor, require_owner_or_admin
from memberhub.services.errors import ForbiddenError, InvalidRequestError, NotFoundError

logger = structlog.get_logger(__name__)

MEMBERSHIP_FIELDS = ("subject", "image", "description", "expiration_period", "discount_rate", "price", "issuer")


def _clean(data: dict) -> dict:
    values = {key: data[key] for key in MEMBERSHIP_FIELDS if data.get(key) is not None}
    for key, value in list(values.items()):
        if isinstance(value, str):
            values[key] = value.strip()
    return values


class MembershipService:
    def __init__(self) -> None:
        self.repository = SQLRepository()

    def _issuer_of(self, user_id: int):
        """The caller's enabled store, else enabled influencer profile."""
        store = self.repository.get_store_by_owner(user_id)
        if store and store.enabled:
            return store, None
        influencer = self.repository.get_influencer_by_owner(user_id)
        if influencer and influencer.enabled:
            return None, influencer
        return None, None

    def _owner_id(self, membership) -> int | None:
        if membership.store_id:
            store = self.repository.get_store(membership.store_id)
            return store.user_id if store else None
        if membership.influencer_id:
            influencer = self.repository.get_influencer(membership.influencer_id)
            return influencer.user_id if influencer else None
        return None

    def create(self, user_id: int, data: dict):
        load_actor(self.repository, user_id)
        store, influencer = self._issuer_of(user_id)
        if not store and not influencer:
            raise ForbiddenError(
                "Only an approved store or influencer can issue memberships.", "issuer_not_enabled"
            )
        values = _clean(data)
        if not values.get("subject"):
            raise InvalidRequestError("Membership subject is required.", "missing_fields")
        if store:
            values.setdefault("issuer", store.name)
            values["store_id"] = store.id
        else:
            values.setdefault("issuer", influencer.account)
            values["influencer_id"] = influencer.id
        membership = self.repository.create_membership(**values)
        logger.info(
            "membership.created",
            membership_id=membership.id,
            store_id=membership.store_id,
            influencer_id=membership.influencer_id,
        )
        return membership

    def get(self, membership_id: int):
        membership = self.repository.get_membership(membership_id)
        if not membership:
            raise NotFoundError("Membership not found.")
        return membership

    def list_all(self):
        return self.repository.list_memberships()

    def update(self, user_id: int, membership_id: int, data: dict):
        membership = self.get(membership_id)
        require_owner_or_admin(self.repository, user_id, self._owner_id(membership))
        values = _clean(data)
        if "subject" in values and not values["subject"]:
            raise InvalidRequestError("Membership subject cannot be empty.", "missing_fields")
        return self.repository.update_membership(membership_id, **values)

    def delete(self, user_id: int, membership_id: int) -> None:
        membership = self.get(membership_id)
        require_owner_or_admin(self.repository, user_id, self._owner_id(membership))
        self.repository.delete_membership(membership_id)
        logger.info("membership.deleted", membership_id=membership_id, user_id=user_id)
