from __future__ import annotations

from datetime import timedelta

import pytest

from memberhub.core.utils import utcnow
from memberhub.domain import targets
from memberhub.services.errors import NotFoundError
from memberhub.services.notification_service import NotificationService
from memberhub.services.setting_service import SettingService


@pytest.fixture()
def enabled_store(repo, make_user):
    owner = make_user("owner@example.com")
    store = repo.create_store(owner.id, name="Shop", address="x")
    repo.toggle_store_enabled(store.id)
    return store


def test_notice_notifications_are_created_once(repo, make_user, admin):
    user = make_user("reader@example.com")
    fresh = repo.create_notice(user_id=admin.id, subject="Fresh", contents="c")
    repo.create_notice(user_id=admin.id, subject="Hidden", contents="c", status="PRIVATE")
    repo.create_notice(
        user_id=admin.id, subject="Old", contents="c", created_at=utcnow() - timedelta(hours=30)
    )
    svc = NotificationService()

    batch = svc.notify_notices(user.id)
    assert batch.muted is False
    assert [n.notice_id for n in batch.created] == [fresh.id]
    assert svc.notify_notices(user.id).created == []
    assert len(svc.list_for(user.id)) == 1



def test_concurrent_notice_notify_does_not_duplicate(repo, make_user, admin, monkeypatch):
    user = make_user("reader@example.com")
    repo.create_notice(user_id=admin.id, subject="Fresh", contents="c")
    svc = NotificationService()
    assert len(svc.notify_notices(user.id).created) == 1

    # a request that read the seen ids before the first one committed
    monkeypatch.setattr(svc.repository, "notified_ids", lambda user_id, column: set())
    assert svc.notify_notices(user.id).created == []
    assert len(svc.list_for(user.id)) == 1

def test_membership_notifications_follow_active_subscriptions(repo, make_user, enabled_store):
    fan = make_user("fan@example.com")
    creator = make_user("creator@example.com")
    influencer = repo.create_influencer(creator.id, account="@c")
    repo.toggle_subscription(fan.id, targets.STORE, enabled_store.id)
    repo.toggle_subscription(fan.id, targets.INFLUENCER, influencer.id)
    store_membership = repo.create_membership(subject="Gold", issuer="Shop", store_id=enabled_store.id)
    repo.create_membership(subject="Fan", issuer="@c", influencer_id=influencer.id)
    svc = NotificationService()

    batch = svc.notify_store_memberships(fan.id)
    assert [n.membership_id for n in batch.created] == [store_membership.id]
    assert batch.created[0].store_id == enabled_store.id
    assert svc.notify_store_memberships(fan.id).created == []

    # the influencer is not enabled, so its subscription is not active
    assert svc.notify_influencer_memberships(fan.id).created == []
    repo.toggle_influencer_enabled(influencer.id)
    assert len(svc.notify_influencer_memberships(fan.id).created) == 1


def test_unsubscribed_user_gets_nothing(repo, make_user, enabled_store):
    user = make_user("lurker@example.com")
    repo.create_membership(subject="Gold", store_id=enabled_store.id)
    assert NotificationService().notify_store_memberships(user.id).created == []


def test_muted_user_gets_nothing(repo, make_user, admin, enabled_store):
    user = make_user("quiet@example.com")
    SettingService().set_notify(user.id, False)
    repo.create_notice(user_id=admin.id, subject="News", contents="c")
    repo.toggle_subscription(user.id, targets.STORE, enabled_store.id)
    repo.create_membership(subject="Gold", store_id=enabled_store.id)
    svc = NotificationService()

    assert svc.notify_notices(user.id).muted is True
    assert svc.notify_store_memberships(user.id).muted is True
    assert svc.list_for(user.id) == []


def test_mark_read_only_own_notifications(repo, make_user, admin):
    user = make_user("reader@example.com")
    other = make_user("other@example.com")
    repo.create_notice(user_id=admin.id, subject="News", contents="c")
    svc = NotificationService()
    notification = svc.notify_notices(user.id).created[0]

    with pytest.raises(NotFoundError):
        svc.mark_read(other.id, notification.id)
    assert svc.mark_read(user.id, notification.id).is_read is True
    with pytest.raises(NotFoundError):
        svc.mark_read(user.id, 999)
