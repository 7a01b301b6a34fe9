"""
Shared fixtures: a temporary SQLite database, captured emails and a TestClient.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the memberhub package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from memberhub.core import config as core_config
from memberhub.core import mailer
from memberhub.core.rate_limiter import reset_rate_limits
from memberhub.db import models
from memberhub.db import session as db_session
from memberhub.domain import targets
from memberhub.repositories.sql_repository import SQLRepository

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point the app at a throwaway SQLite file and rebuild the schema."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("JWT_SECRET", "test-access-secret-0123456789abcdef")
    monkeypatch.setenv("JWT_REFRESH_SECRET", "test-refresh-secret-0123456789abcdef")
    monkeypatch.setenv("ADMIN_EMAILS", ADMIN_EMAIL)
    for key in ("SMTP_HOST", "SMTP_USER", "SMTP_PASSWORD"):
        monkeypatch.delenv(key, raising=False)
    # drop cached settings/engine so the env above is read again
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
    reset_rate_limits()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def outbox(monkeypatch):
    """Capture verification emails instead of talking to SMTP."""
    sent: dict[str, str] = {}

    def fake_send(to_email: str, code: str, ttl_seconds: int) -> bool:
        sent[to_email] = code
        return True

    monkeypatch.setattr(mailer, "send_verification_email", fake_send)
    return sent


@pytest.fixture()
def repo(temp_db):
    return SQLRepository()


@pytest.fixture()
def make_user(repo):
    def _make(email: str, name: str = "Tester", role: str = targets.ROLE_USER):
        return repo.create_user(email, name, role=role)

    return _make


@pytest.fixture()
def admin(make_user):
    return make_user(ADMIN_EMAIL, "Admin", role=targets.ROLE_ADMIN)


@pytest.fixture()
def client(temp_db, outbox):
    from fastapi.testclient import TestClient

    from memberhub.app import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
