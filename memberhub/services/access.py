"""Caller lookups shared by the catalog services."""
from __future__ import annotations

from memberhub.domain import targets
from memberhub.repositories.sql_repository import SQLRepository
from memberhub.services.errors import ForbiddenError, UnauthorizedError


def load_actor(repository: SQLRepository, user_id: int):
    """Return the caller's row; the role is read from the database, never from the token."""
    user = repository.get_user(user_id)
    if not user or user.disabled:
        raise UnauthorizedError("Account is not active.", "inactive_account")
    return user


def is_admin(user) -> bool:
    return (user.role or "") == targets.ROLE_ADMIN


def require_admin(repository: SQLRepository, user_id: int):
    user = load_actor(repository, user_id)
    if not is_admin(user):
        raise ForbiddenError("Administrator permission is required.", "admin_only")
    return user


def require_owner_or_admin(repository: SQLRepository, user_id: int, owner_id: int | None):
    user = load_actor(repository, user_id)
    if owner_id != user.id and not is_admin(user):
        raise ForbiddenError("Only the owner can change this resource.", "not_owner")
    return user
