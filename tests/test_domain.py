from __future__ import annotations

import pytest

from memberhub.core.security import generate_code, hash_code, verify_code
from memberhub.core.tokens import bearer_token, sign_access_token, verify_access_token, verify_refresh_token
from memberhub.domain.geo import distance_km, within_radius
from memberhub.domain.validation import is_valid_email, is_valid_phone, is_valid_website


def test_email_validation():
    assert is_valid_email("a@b.co")
    assert not is_valid_email("a@b")
    assert not is_valid_email("a b@c.com")
    assert not is_valid_email("")


@pytest.mark.parametrize("number", ["010-1234-5678", "02-123-4567", "031-123-4567"])
def test_korean_phone_numbers(number):
    assert is_valid_phone(number)


def test_phone_and_website_rejections():
    assert not is_valid_phone("12345")
    assert is_valid_website("Instagram")
    assert not is_valid_website("youtube")


def test_haversine_distance():
    # Seoul City Hall to Gangnam station is roughly 8.8 km
    d = distance_km(37.5663, 126.9779, 37.4979, 127.0276)
    assert 8.0 < d < 9.5
    assert distance_km(10, 10, 10, 10) == 0
    assert within_radius(37.5663, 126.9779, 37.4979, 127.0276, 10)
    assert not within_radius(37.5663, 126.9779, 37.4979, 127.0276, 5)
    assert not within_radius(0, 0, None, 0, 100)


def test_code_hashing():
    code = generate_code()
    stored = hash_code(code)
    assert verify_code(code, stored)
    assert not verify_code("other", stored)
    assert not verify_code(code, "plain")


def test_tokens_round_trip_and_type_check(temp_db):
    token = sign_access_token({"id": "7", "email": "x@example.com", "role": "user"})
    claims = verify_access_token(token)
    assert claims.user_id == 7
    assert verify_refresh_token(token) is None
    assert verify_access_token(token + "x") is None
    assert bearer_token(f"Bearer {token}") == token
    assert bearer_token(token) == token
    assert bearer_token(None) == ""


def test_verification_email_templates_render():
    from memberhub.core.mailer import render

    html_body = render("verification_code.html", code="ab12cd34", minutes=3)
    text_body = render("verification_code.txt", code="ab12cd34", minutes=1)
    assert "ab12cd34" in html_body
    assert "3 minutes" in html_body
    assert "1 minute." in text_body


def test_send_email_without_smtp_returns_false(temp_db):
    from memberhub.core.mailer import send_email

    assert send_email("Subject", "to@example.com", "<p>hi</p>") is False
