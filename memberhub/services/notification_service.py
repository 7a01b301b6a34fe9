"""
Materializes notifications from recent notices and memberships.

Each generator looks back NOTIFICATION_WINDOW_HOURS and creates at most one
notification per (user, notice) and per (user, membership).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

import structlog

from memberhub.core.config import get_settings
from memberhub.core.utils import utcnow
from memberhub.domain import targets
from memberhub.repositories.sql_repository import SQLRepository
from memberhub.services.access import load_actor
from memberhub.services.errors import NotFoundError
from memberhub.services.setting_service import SettingService

logger = structlog.get_logger(__name__)


@dataclass
class NotificationBatch:
    created: list = field(default_factory=list)
    muted: bool = False


class NotificationService:
    def __init__(self) -> None:
        self.repository = SQLRepository()
        self.settings_service = SettingService()

    def _since(self):
        return utcnow() - timedelta(hours=get_settings().notification_window_hours)

    def _muted(self, user_id: int) -> bool:
        load_actor(self.repository, user_id)
        if self.settings_service.notifications_muted(user_id):
            logger.info("notify.muted", user_id=user_id)
            return True
        return False

    def notify_notices(self, user_id: int) -> NotificationBatch:
        if self._muted(user_id):
            return NotificationBatch(muted=True)
        seen = self.repository.notified_ids(user_id, "notice_id")
        rows = [
            {
                "user_id": user_id,
                "title": "Notice",
                "message": f"New notice: {notice.subject}",
                "notice_id": notice.id,
            }
            for notice in self.repository.list_notices_since(self._since())
            if notice.id not in seen
        ]
        created = self.repository.create_notifications(rows)
        logger.info("notify.notices", user_id=user_id, created=len(created))
        return NotificationBatch(created=created)

    def _notify_memberships(self, user_id: int, target_type: str) -> NotificationBatch:
        if self._muted(user_id):
            return NotificationBatch(muted=True)
        target_ids = self.repository.active_subscription_target_ids(user_id, target_type)
        if target_type == targets.STORE:
            memberships = self.repository.list_memberships_since(self._since(), store_ids=target_ids)
        else:
            memberships = self.repository.list_memberships_since(self._since(), influencer_ids=target_ids)
        seen = self.repository.notified_ids(user_id, "membership_id")
        rows = []
        for membership in memberships:
            if membership.id in seen:
                continue
            source = membership.issuer or f"{target_type} #{membership.store_id or membership.influencer_id}"
            rows.append(
                {
                    "user_id": user_id,
                    "title": "New membership",
                    "message": f"{source} published a new membership: {membership.subject}",
                    "membership_id": membership.id,
                    "store_id": membership.store_id,
                    "influencer_id": membership.influencer_id,
                }
            )
        created = self.repository.create_notifications(rows)
        logger.info("notify.memberships", user_id=user_id, target_type=target_type, created=len(created))
        return NotificationBatch(created=created)

    def notify_store_memberships(self, user_id: int) -> NotificationBatch:
        return self._notify_memberships(user_id, targets.STORE)

    def notify_influencer_memberships(self, user_id: int) -> NotificationBatch:
        return self._notify_memberships(user_id, targets.INFLUENCER)

    def list_for(self, user_id: int):
        return self.repository.list_notifications(user_id)

    def mark_read(self, user_id: int, notification_id: int):
        notification = self.repository.mark_notification_read(user_id, notification_id)
        if not notification:
            raise NotFoundError("Notification not found.")
        return notification
