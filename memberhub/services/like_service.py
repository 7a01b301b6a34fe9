"""Likes on notices, influencers, stores and memberships."""
from __future__ import annotations

import structlog

from memberhub.domain import targets
from memberhub.repositories.sql_repository import SQLRepository
from memberhub.services.access import load_actor
from memberhub.services.errors import InvalidRequestError, NotFoundError
from memberhub.services.toggle import ToggleResult, from_toggle

logger = structlog.get_logger(__name__)


class LikeService:
    def __init__(self) -> None:
        self.repository = SQLRepository()
        self._lookups = {
            targets.NOTICE: self.repository.get_notice,
            targets.INFLUENCER: self.repository.get_influencer,
            targets.STORE: self.repository.get_store,
            targets.MEMBERSHIP: self.repository.get_membership,
        }

    def _check_type(self, target_type: str) -> None:
        if target_type not in targets.LIKE_TARGETS:
            raise InvalidRequestError(f"Cannot like a {target_type}.", "invalid_target")

    def toggle(self, user_id: int, target_type: str, target_id: int | None) -> ToggleResult:
        load_actor(self.repository, user_id)
        self._check_type(target_type)
        if not target_id:
            raise InvalidRequestError(f"A {target_type} id is required.", "missing_target")
        if not self._lookups[target_type](target_id):
            raise NotFoundError(f"{target_type.capitalize()} not found.")
        entity, created = self.repository.toggle_like(user_id, target_type, target_id)
        logger.info("like.toggled", user_id=user_id, target_type=target_type, target_id=target_id, created=created)
        return from_toggle(entity, created, target_type, target_id)

    def list_for(self, user_id: int, target_type: str) -> list[int]:
        load_actor(self.repository, user_id)
        self._check_type(target_type)
        return [like.target_id for like in self.repository.list_likes(user_id, target_type)]
