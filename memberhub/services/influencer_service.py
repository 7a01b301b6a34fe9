"""Influencer profiles."""
from __future__ import annotations

import structlog
from sqlalchemy.exc import IntegrityError

from memberhub.domain import targets
from memberhub.domain.validation import is_valid_website
from memberhub.repositories.sql_repository import SQLRepository
from memberhub.services.access import load_actor, require_admin, require_owner_or_admin
from memberhub.services.errors import ConflictError, InvalidRequestError, NotFoundError

logger = structlog.get_logger(__name__)

INFLUENCER_FIELDS = ("account", "image_url", "contents", "referral_code", "website")


def _clean(data: dict) -> dict:
    values = {key: data[key] for key in INFLUENCER_FIELDS if data.get(key) is not None}
    for key, value in list(values.items()):
        if isinstance(value, str):
            values[key] = value.strip()
    if "website" in values:
        if not is_valid_website(values["website"]):
            raise InvalidRequestError(
                "Website must be one of instagram, tiktok, twitter or facebook.", "invalid_website"
            )
        values["website"] = values["website"].lower()
    return values


class InfluencerService:
    def __init__(self) -> None:
        self.repository = SQLRepository()

    def create(self, user_id: int, data: dict):
        user = load_actor(self.repository, user_id)
        if self.repository.get_store_by_owner(user_id):
            raise ConflictError("This account is already registered as a store.", "already_store")
        values = _clean(data)
        if not values.get("account"):
            raise InvalidRequestError("Influencer account is required.", "missing_fields")
        if self.repository.get_influencer_by_owner(user_id):
            raise ConflictError("This account already has an influencer profile.", "influencer_exists")
        try:
            influencer = self.repository.create_influencer(user_id, **values)
        except IntegrityError:
            raise ConflictError("This influencer account is already registered.", "account_taken")
        if user.role == targets.ROLE_USER:
            self.repository.set_user_role(user_id, targets.ROLE_INFLUENCER)
        logger.info("influencer.created", influencer_id=influencer.id, user_id=user_id)
        return influencer

    def get(self, influencer_id: int):
        influencer = self.repository.get_influencer(influencer_id)
        if not influencer:
            raise NotFoundError("Influencer not found.")
        return influencer

    def list_all(self):
        return self.repository.list_influencers()

    def toggle_enabled(self, user_id: int, influencer_id: int):
        require_admin(self.repository, user_id)
        influencer = self.repository.toggle_influencer_enabled(influencer_id)
        if not influencer:
            raise NotFoundError("Influencer not found.")
        logger.info("influencer.enabled_changed", influencer_id=influencer_id, enabled=influencer.enabled)
        return influencer

    def update(self, user_id: int, influencer_id: int, data: dict):
        influencer = self.get(influencer_id)
        require_owner_or_admin(self.repository, user_id, influencer.user_id)
        values = _clean(data)
        if "account" in values and not values["account"]:
            raise InvalidRequestError("Influencer account cannot be empty.", "missing_fields")
        try:
            return self.repository.update_influencer(influencer_id, **values)
        except IntegrityError:
            raise ConflictError("This influencer account is already registered.", "account_taken")

    def delete(self, user_id: int, influencer_id: int) -> None:
        influencer = self.get(influencer_id)
        require_owner_or_admin(self.repository, user_id, influencer.user_id)
        self.repository.delete_influencer(influencer_id)
        owner = self.repository.get_user(influencer.user_id)
        if owner and owner.role == targets.ROLE_INFLUENCER:
            self.repository.set_user_role(owner.id, targets.ROLE_USER)
        logger.info("influencer.deleted", influencer_id=influencer_id, user_id=user_id)
