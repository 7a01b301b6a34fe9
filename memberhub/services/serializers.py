"""Plain-dict views of ORM rows for JSON responses."""
from __future__ import annotations

from datetime import datetime

from memberhub.core.utils import as_utc


def _ts(value: datetime | None) -> str | None:
    value = as_utc(value)
    return value.isoformat() if value else None


def user_to_dict(user) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "referral_code": user.referral_code,
        "disabled": bool(user.disabled),
        "created_at": _ts(user.created_at),
    }


def store_to_dict(store) -> dict:
    return {
        "id": store.id,
        "user_id": store.user_id,
        "name": store.name,
        "country": store.country,
        "zip_code": store.zip_code,
        "address": store.address,
        "address_etc": store.address_etc,
        "phone": store.phone,
        "open_time": store.open_time,
        "close_time": store.close_time,
        "open_days": store.open_days,
        "website": store.website,
        "images": store.images,
        "discount_rate": store.discount_rate,
        "kind": store.kind,
        "referral_code": store.referral_code,
        "lat": store.lat,
        "lng": store.lng,
        "enabled": bool(store.enabled),
        "created_at": _ts(store.created_at),
    }


def influencer_to_dict(influencer) -> dict:
    return {
        "id": influencer.id,
        "user_id": influencer.user_id,
        "account": influencer.account,
        "image_url": influencer.image_url,
        "contents": influencer.contents,
        "referral_code": influencer.referral_code,
        "website": influencer.website,
        "enabled": bool(influencer.enabled),
        "created_at": _ts(influencer.created_at),
    }


def membership_to_dict(membership) -> dict:
    return {
        "id": membership.id,
        "subject": membership.subject,
        "image": membership.image,
        "description": membership.description,
        "expiration_period": _ts(membership.expiration_period),
        "discount_rate": membership.discount_rate,
        "price": membership.price,
        "issuer": membership.issuer,
        "store_id": membership.store_id,
        "influencer_id": membership.influencer_id,
        "created_at": _ts(membership.created_at),
    }


def notice_to_dict(notice) -> dict:
    return {
        "id": notice.id,
        "user_id": notice.user_id,
        "subject": notice.subject,
        "contents": notice.contents,
        "status": notice.status,
        "start_date": _ts(notice.start_date),
        "end_date": _ts(notice.end_date),
        "created_at": _ts(notice.created_at),
    }


def edge_to_dict(edge) -> dict:
    """Likes and subscriptions share the same shape."""
    return {
        "id": edge.id,
        "user_id": edge.user_id,
        "target_type": edge.target_type,
        "target_id": edge.target_id,
        "created_at": _ts(edge.created_at),
    }


def notification_to_dict(notification) -> dict:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "is_read": bool(notification.is_read),
        "notice_id": notification.notice_id,
        "membership_id": notification.membership_id,
        "store_id": notification.store_id,
        "influencer_id": notification.influencer_id,
        "created_at": _ts(notification.created_at),
    }


def setting_to_dict(setting) -> dict:
    return {"user_id": setting.user_id, "bio_auth": setting.bio_auth, "notify": setting.notify}
