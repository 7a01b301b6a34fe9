"""Announcements written by administrators."""
from __future__ import annotations

import structlog

from memberhub.domain.validation import NOTICE_STATUSES
from memberhub.repositories.sql_repository import SQLRepository
from memberhub.services.access import require_admin
from memberhub.services.errors import InvalidRequestError, NotFoundError

logger = structlog.get_logger(__name__)

NOTICE_FIELDS = ("subject", "contents", "status", "start_date", "end_date")


def _clean(data: dict) -> dict:
    values = {key: data[key] for key in NOTICE_FIELDS if data.get(key) is not None}
    for key in ("subject", "contents", "status"):
        if key in values:
            values[key] = str(values[key]).strip()
    if "status" in values:
        values["status"] = values["status"].upper()
        if values["status"] not in NOTICE_STATUSES:
            raise InvalidRequestError("Notice status must be PUBLIC or PRIVATE.", "invalid_status")
    return values


class NoticeService:
    def __init__(self) -> None:
        self.repository = SQLRepository()

    def create(self, user_id: int, data: dict):
        require_admin(self.repository, user_id)
        values = _clean(data)
        if not values.get("subject") or not values.get("contents"):
            raise InvalidRequestError("Notice subject and contents are required.", "missing_fields")
        values.setdefault("status", "PUBLIC")
        notice = self.repository.create_notice(user_id=user_id, **values)
        logger.info("notice.created", notice_id=notice.id, status=notice.status)
        return notice

    def get(self, notice_id: int):
        if notice_id <= 0:
            raise InvalidRequestError("Notice id must be a positive number.", "invalid_id")
        notice = self.repository.get_notice(notice_id)
        if not notice:
            raise NotFoundError("Notice not found.")
        return notice

    def list_public(self):
        return self.repository.list_notices("PUBLIC")

    def list_private(self, user_id: int):
        require_admin(self.repository, user_id)
        return self.repository.list_notices("PRIVATE")

    def update(self, user_id: int, notice_id: int, data: dict):
        require_admin(self.repository, user_id)
        self.get(notice_id)
        values = _clean(data)
        for key in ("subject", "contents"):
            if key in values and not values[key]:
                raise InvalidRequestError(f"Notice {key} cannot be empty.", "missing_fields")
        return self.repository.update_notice(notice_id, **values)

    def delete(self, user_id: int, notice_id: int) -> None:
        require_admin(self.repository, user_id)
        self.get(notice_id)
        self.repository.delete_notice(notice_id)
        logger.info("notice.deleted", notice_id=notice_id)
