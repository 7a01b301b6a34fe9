from __future__ import annotations

from datetime import timedelta

import pytest

from memberhub.core.tokens import verify_access_token, verify_refresh_token
from memberhub.core.utils import as_utc, utcnow
from memberhub.services.auth_service import AuthService
from memberhub.services.errors import (
    ConflictError,
    DeliveryError,
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
)

ADMIN_EMAIL = "admin@example.com"


def _register(outbox, email="dana@example.com", name="Dana"):
    svc = AuthService()
    svc.send_code(email)
    return svc.register(email, name, outbox[email])


def test_send_code_stores_hash_and_emails_code(repo, outbox):
    result = AuthService().send_code("  Dana@Example.com ")
    assert result.email == "dana@example.com"
    assert result.email_sent is True
    assert result.dev_code is None
    code = outbox["dana@example.com"]
    assert len(code) == 8 and code.isalnum() and code == code.lower()
    entry = repo.get_verification_code("dana@example.com")
    assert entry.code_hash.startswith("argon2$")
    assert code not in entry.code_hash


def test_send_code_rejects_bad_email(temp_db, outbox):
    with pytest.raises(InvalidRequestError):
        AuthService().send_code("not-an-email")


def test_send_code_without_smtp_returns_dev_code(temp_db):
    result = AuthService().send_code("eve@example.com")
    assert result.email_sent is False
    assert result.dev_code


def test_send_code_without_smtp_in_prod_fails(temp_db, monkeypatch, repo):
    monkeypatch.setenv("APP_ENV", "prod")
    from memberhub.core import config as core_config

    core_config.get_settings.cache_clear()
    with pytest.raises(DeliveryError):
        AuthService().send_code("eve@example.com")
    assert repo.get_verification_code("eve@example.com") is None


def test_new_code_replaces_previous(temp_db, outbox):
    svc = AuthService()
    svc.send_code("fay@example.com")
    first = outbox["fay@example.com"]
    svc.send_code("fay@example.com")
    second = outbox["fay@example.com"]
    if first != second:
        with pytest.raises(InvalidRequestError):
            svc.register("fay@example.com", "Fay", first)
    pair = svc.register("fay@example.com", "Fay", second)
    assert pair.email == "fay@example.com"


def test_register_issues_tokens_and_consumes_code(repo, outbox):
    pair = _register(outbox)
    access = verify_access_token(pair.access_token)
    refresh = verify_refresh_token(pair.refresh_token)
    assert access.email == "dana@example.com"
    assert access.role == "user"
    assert refresh.jti == repo.get_user(pair.user_id).refresh_token_id
    assert repo.get_verification_code("dana@example.com") is None


def test_register_admin_email_gets_admin_role(temp_db, outbox):
    pair = _register(outbox, ADMIN_EMAIL, "Root")
    assert pair.role == "admin"


def test_register_errors(temp_db, outbox):
    svc = AuthService()
    with pytest.raises(InvalidRequestError):
        svc.register("", "x", "abc")
    with pytest.raises(InvalidRequestError):
        svc.register("bad-email", "x", "abc")
    _register(outbox)
    with pytest.raises(ConflictError):
        svc.register("dana@example.com", "Dana", "whatever")


def test_wrong_code_counts_attempts_until_deleted(repo, outbox, monkeypatch):
    monkeypatch.setenv("VERIFICATION_CODE_MAX_ATTEMPTS", "2")
    from memberhub.core import config as core_config

    core_config.get_settings.cache_clear()
    svc = AuthService()
    svc.send_code("gus@example.com")
    with pytest.raises(InvalidRequestError):
        svc.register("gus@example.com", "Gus", "wrongwrong")
    assert repo.get_verification_code("gus@example.com").attempts == 1
    with pytest.raises(InvalidRequestError):
        svc.register("gus@example.com", "Gus", "wrongwrong")
    assert repo.get_verification_code("gus@example.com") is None
    with pytest.raises(InvalidRequestError):
        svc.register("gus@example.com", "Gus", outbox["gus@example.com"])


def test_expired_code_is_rejected_and_removed(repo, outbox):
    svc = AuthService()
    svc.send_code("hal@example.com")
    code = outbox["hal@example.com"]
    entry = repo.get_verification_code("hal@example.com")
    repo.replace_verification_code("hal@example.com", entry.code_hash, utcnow() - timedelta(seconds=1))
    with pytest.raises(InvalidRequestError) as exc:
        svc.register("hal@example.com", "Hal", code)
    assert exc.value.code == "code_expired"
    assert repo.get_verification_code("hal@example.com") is None


def test_code_expiry_compares_in_utc(repo):
    expires = utcnow() + timedelta(minutes=3)
    repo.replace_verification_code("ivy@example.com", "argon2$x", expires)
    stored = as_utc(repo.get_verification_code("ivy@example.com").expires_at)
    assert abs((stored - expires).total_seconds()) < 1


def test_login_flow(repo, outbox):
    registered = _register(outbox)
    svc = AuthService()
    svc.send_code("nobody@example.com")
    with pytest.raises(NotFoundError):
        svc.login("nobody@example.com", outbox["nobody@example.com"])
    svc.send_code("dana@example.com")
    with pytest.raises(InvalidRequestError):
        svc.login("dana@example.com", "zzzzzzzz")
    pair = svc.login("dana@example.com", outbox["dana@example.com"])
    assert pair.user_id == registered.user_id
    assert pair.refresh_token != registered.refresh_token


def test_login_disabled_account_is_forbidden(repo, outbox):
    pair = _register(outbox)
    svc = AuthService()
    svc.disable_account(pair.user_id)
    svc.send_code("dana@example.com")
    with pytest.raises(ForbiddenError):
        svc.login("dana@example.com", outbox["dana@example.com"])


def test_refresh_rotates_and_rejects_reuse(temp_db, outbox):
    pair = _register(outbox)
    svc = AuthService()
    rotated = svc.refresh(pair.refresh_token)
    assert verify_access_token(rotated.access_token).user_id == pair.user_id
    with pytest.raises(UnauthorizedError):
        svc.refresh(pair.refresh_token)
    with pytest.raises(UnauthorizedError):
        svc.refresh(rotated.access_token)
    with pytest.raises(UnauthorizedError):
        svc.refresh("garbage")


def test_disable_and_remove_account(repo, outbox):
    pair = _register(outbox)
    svc = AuthService()
    svc.disable_account(pair.user_id)
    with pytest.raises(ConflictError):
        svc.disable_account(pair.user_id)
    svc.remove_account(pair.user_id)
    assert repo.get_user(pair.user_id) is None
    with pytest.raises(NotFoundError):
        svc.remove_account(pair.user_id)
    with pytest.raises(NotFoundError):
        svc.disable_account(pair.user_id)
