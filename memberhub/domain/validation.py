"""Domain helpers for input validation (emails, phone numbers, enums)."""
from __future__ import annotations

import re

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
KOREAN_PHONE_PATTERN = re.compile(
    r"01[016789]-\d{3,4}-\d{4}|02-\d{3,4}-\d{4}|0[3-9]\d-\d{3,4}-\d{4}"
)
INFLUENCER_WEBSITES = {"instagram", "tiktok", "twitter", "facebook"}
NOTICE_STATUSES = {"PUBLIC", "PRIVATE"}


def is_valid_email(value: str | None) -> bool:
    """Return True when value looks like local@domain.tld."""
    if not value:
        return False
    return bool(EMAIL_PATTERN.fullmatch(value.strip()))


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def is_valid_phone(value: str | None) -> bool:
    if not value:
        return False
    return bool(KOREAN_PHONE_PATTERN.fullmatch(value.strip()))


def is_valid_website(value: str | None) -> bool:
    return (value or "").strip().lower() in INFLUENCER_WEBSITES
