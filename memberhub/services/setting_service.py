"""Per-user preferences (biometric login, notifications)."""
from __future__ import annotations

from memberhub.repositories.sql_repository import SQLRepository
from memberhub.services.access import load_actor

ON = "ON"
OFF = "OFF"


def _flag(enabled: bool) -> str:
    return ON if enabled else OFF


class SettingService:
    def __init__(self) -> None:
        self.repository = SQLRepository()

    def get(self, user_id: int):
        setting = self.repository.get_user_setting(user_id)
        if setting:
            return setting
        load_actor(self.repository, user_id)
        return self.repository.upsert_user_setting(user_id)

    def set_bio_auth(self, user_id: int, enabled: bool):
        load_actor(self.repository, user_id)
        return self.repository.upsert_user_setting(user_id, bio_auth=_flag(enabled))

    def set_notify(self, user_id: int, enabled: bool):
        load_actor(self.repository, user_id)
        return self.repository.upsert_user_setting(user_id, notify=_flag(enabled))

    def notifications_muted(self, user_id: int) -> bool:
        setting = self.repository.get_user_setting(user_id)
        return bool(setting and setting.notify == OFF)
