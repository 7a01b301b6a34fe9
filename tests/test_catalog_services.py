from __future__ import annotations

import pytest

from memberhub.domain import targets
from memberhub.services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
)
from memberhub.services.influencer_service import InfluencerService
from memberhub.services.membership_service import MembershipService
from memberhub.services.notice_service import NoticeService
from memberhub.services.setting_service import SettingService
from memberhub.services.store_service import StoreService


# -------------------------- stores --------------------------
def test_store_create_sets_role_and_starts_disabled(repo, make_user):
    user = make_user("shop@example.com")
    store = StoreService().create(user.id, {"name": " Cafe ", "address": "Main St", "phone": "010-1234-5678"})
    assert store.name == "Cafe"
    assert store.enabled is False
    assert repo.get_user(user.id).role == targets.ROLE_STORE


def test_store_create_validation(make_user):
    svc = StoreService()
    user = make_user("shop@example.com")
    with pytest.raises(InvalidRequestError):
        svc.create(user.id, {"name": "No address"})
    with pytest.raises(InvalidRequestError):
        svc.create(user.id, {"name": "Cafe", "address": "x", "phone": "555"})
    svc.create(user.id, {"name": "Cafe", "address": "x"})
    with pytest.raises(ConflictError):
        svc.create(user.id, {"name": "Second", "address": "y"})
    other = make_user("other@example.com")
    with pytest.raises(ConflictError):
        svc.create(other.id, {"name": "Cafe", "address": "z"})


def test_influencer_cannot_open_store_and_vice_versa(repo, make_user):
    creator = make_user("creator@example.com")
    InfluencerService().create(creator.id, {"account": "@c", "website": "tiktok"})
    with pytest.raises(ConflictError):
        StoreService().create(creator.id, {"name": "Shop", "address": "x"})

    owner = make_user("owner@example.com")
    StoreService().create(owner.id, {"name": "Shop", "address": "x"})
    with pytest.raises(ConflictError):
        InfluencerService().create(owner.id, {"account": "@o", "website": "instagram"})


def test_store_enable_is_admin_only(make_user, admin):
    svc = StoreService()
    owner = make_user("owner@example.com")
    store = svc.create(owner.id, {"name": "Shop", "address": "x"})
    with pytest.raises(ForbiddenError):
        svc.toggle_enabled(owner.id, store.id)
    assert svc.toggle_enabled(admin.id, store.id).enabled is True
    assert svc.toggle_enabled(admin.id, store.id).enabled is False
    with pytest.raises(NotFoundError):
        svc.toggle_enabled(admin.id, 999)


def test_store_update_and_delete_owner_or_admin(repo, make_user, admin):
    svc = StoreService()
    owner = make_user("owner@example.com")
    stranger = make_user("stranger@example.com")
    store = svc.create(owner.id, {"name": "Shop", "address": "x"})
    with pytest.raises(ForbiddenError):
        svc.update(stranger.id, store.id, {"kind": "cafe"})
    assert svc.update(owner.id, store.id, {"kind": "cafe"}).kind == "cafe"
    assert svc.update(admin.id, store.id, {"open_days": "Mon-Fri"}).open_days == "Mon-Fri"
    with pytest.raises(ForbiddenError):
        svc.delete(stranger.id, store.id)
    svc.delete(owner.id, store.id)
    with pytest.raises(NotFoundError):
        svc.get(store.id)
    assert repo.get_user(owner.id).role == targets.ROLE_USER


def test_within_radius_filters_enabled_stores(make_user, admin):
    svc = StoreService()
    near = svc.create(make_user("a@example.com").id, {"name": "Near", "address": "a", "lat": 37.4979, "lng": 127.0276})
    far = svc.create(make_user("b@example.com").id, {"name": "Far", "address": "b", "lat": 35.1796, "lng": 129.0756})
    hidden = svc.create(make_user("c@example.com").id, {"name": "Hidden", "address": "c", "lat": 37.5665, "lng": 126.978})
    svc.create(make_user("d@example.com").id, {"name": "Nowhere", "address": "d"})
    svc.toggle_enabled(admin.id, near.id)
    svc.toggle_enabled(admin.id, far.id)

    found = svc.within_radius(37.5663, 126.9779, 10)
    assert [s.id for s in found] == [near.id]
    assert hidden.id not in [s.id for s in svc.within_radius(37.5663, 126.9779, 1000)]
    assert len(svc.within_radius(37.5663, 126.9779, 1000)) == 2
    with pytest.raises(InvalidRequestError):
        svc.within_radius(0, 0, -1)


# -------------------------- influencers --------------------------
def test_influencer_validation_and_duplicates(make_user):
    svc = InfluencerService()
    user = make_user("creator@example.com")
    with pytest.raises(InvalidRequestError):
        svc.create(user.id, {"account": "@c", "website": "myspace"})
    with pytest.raises(InvalidRequestError):
        svc.create(user.id, {"website": "instagram"})
    influencer = svc.create(user.id, {"account": "@c", "website": "Instagram"})
    assert influencer.website == "instagram"
    with pytest.raises(ConflictError):
        svc.create(user.id, {"account": "@c2"})
    other = make_user("other@example.com")
    with pytest.raises(ConflictError):
        svc.create(other.id, {"account": "@c"})


# -------------------------- memberships --------------------------
def test_membership_requires_enabled_issuer(make_user, admin):
    owner = make_user("owner@example.com")
    store = StoreService().create(owner.id, {"name": "Shop", "address": "x"})
    svc = MembershipService()
    with pytest.raises(ForbiddenError):
        svc.create(owner.id, {"subject": "Gold"})
    StoreService().toggle_enabled(admin.id, store.id)
    membership = svc.create(owner.id, {"subject": "Gold", "price": "10000"})
    assert membership.store_id == store.id
    assert membership.issuer == "Shop"
    with pytest.raises(InvalidRequestError):
        svc.create(owner.id, {"price": "1"})
    with pytest.raises(ForbiddenError):
        svc.create(make_user("nobody@example.com").id, {"subject": "Silver"})


def test_membership_from_influencer_and_owner_edits(make_user, admin):
    creator = make_user("creator@example.com")
    influencer = InfluencerService().create(creator.id, {"account": "@c"})
    InfluencerService().toggle_enabled(admin.id, influencer.id)
    svc = MembershipService()
    membership = svc.create(creator.id, {"subject": "Fan club"})
    assert membership.influencer_id == influencer.id
    assert membership.issuer == "@c"

    with pytest.raises(ForbiddenError):
        svc.update(make_user("x@example.com").id, membership.id, {"price": "5"})
    assert svc.update(creator.id, membership.id, {"price": "5"}).price == "5"
    svc.delete(admin.id, membership.id)
    with pytest.raises(NotFoundError):
        svc.get(membership.id)



def test_disabled_owner_cannot_issue_memberships(repo, make_user, admin):
    owner = make_user("owner@example.com")
    store = StoreService().create(owner.id, {"name": "Shop", "address": "x"})
    StoreService().toggle_enabled(admin.id, store.id)
    repo.set_user_disabled(owner.id, True)
    with pytest.raises(UnauthorizedError):
        MembershipService().create(owner.id, {"subject": "Gold"})
    assert repo.list_memberships() == []


# -------------------------- notices --------------------------
def test_notice_writes_are_admin_only(make_user, admin):
    svc = NoticeService()
    user = make_user("user@example.com")
    with pytest.raises(ForbiddenError):
        svc.create(user.id, {"subject": "Hi", "contents": "There"})
    with pytest.raises(InvalidRequestError):
        svc.create(admin.id, {"subject": "Hi"})
    public = svc.create(admin.id, {"subject": "Hi", "contents": "There"})
    private = svc.create(admin.id, {"subject": "Staff", "contents": "Only", "status": "private"})
    assert public.status == "PUBLIC"
    assert [n.id for n in svc.list_public()] == [public.id]
    assert [n.id for n in svc.list_private(admin.id)] == [private.id]
    with pytest.raises(ForbiddenError):
        svc.list_private(user.id)
    with pytest.raises(ForbiddenError):
        svc.update(user.id, public.id, {"subject": "x"})
    assert svc.update(admin.id, public.id, {"subject": "Hello"}).subject == "Hello"
    with pytest.raises(InvalidRequestError):
        svc.update(admin.id, public.id, {"status": "DRAFT"})
    svc.delete(admin.id, public.id)
    with pytest.raises(NotFoundError):
        svc.get(public.id)
    with pytest.raises(InvalidRequestError):
        svc.get(0)


def test_notice_role_comes_from_database(repo, make_user):
    user = make_user("promoted@example.com")
    svc = NoticeService()
    with pytest.raises(ForbiddenError):
        svc.create(user.id, {"subject": "a", "contents": "b"})
    repo.set_user_role(user.id, targets.ROLE_ADMIN)
    assert svc.create(user.id, {"subject": "a", "contents": "b"}).user_id == user.id


# -------------------------- settings --------------------------
def test_settings_defaults_and_updates(make_user):
    user = make_user("set@example.com")
    svc = SettingService()
    setting = svc.get(user.id)
    assert (setting.bio_auth, setting.notify) == ("OFF", "ON")
    assert svc.set_bio_auth(user.id, True).bio_auth == "ON"
    assert svc.set_notify(user.id, False).notify == "OFF"
    assert svc.notifications_muted(user.id) is True
    assert svc.get(user.id).bio_auth == "ON"
