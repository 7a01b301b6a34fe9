"""
JWT signing and verification for access and refresh tokens.

Claims:
- id: user id (string)
- name, email, role, referral_code: identity snapshot at issuance
- type: "access" or "refresh"
- jti: refresh tokens only; must match the id stored on the user row
- iat/exp: issued/expiry
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

import jwt
import structlog
from pydantic import BaseModel

from memberhub.core.config import get_settings

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"
BEARER_PREFIX = "bearer "


class TokenClaims(BaseModel):
    """Identity carried by a verified token."""

    id: str
    name: str = ""
    email: str = ""
    role: str = "user"
    referral_code: str = ""
    type: Literal["access", "refresh"] = "access"
    jti: Optional[str] = None

    @property
    def user_id(self) -> int:
        return int(self.id)


def _secret(kind: str) -> str:
    settings = get_settings()
    configured = settings.jwt_secret if kind == "access" else settings.jwt_refresh_secret
    if configured:
        return configured
    # Local stacks work without extra env; prod must set both secrets.
    if settings.app_env in ("dev", "test"):
        logger.warning("jwt.secret_not_configured", kind=kind, app_env=settings.app_env)
        return f"memberhub-insecure-{kind}-secret"
    raise RuntimeError(f"JWT secret for {kind} tokens is not configured")


def _sign(claims: dict, kind: str, ttl_seconds: int) -> str:
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload.update(
        {
            "type": kind,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl_seconds)).timestamp()),
        }
    )
    return jwt.encode(payload, _secret(kind), algorithm=JWT_ALGORITHM)


def _verify(token: str, kind: str) -> TokenClaims | None:
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            _secret(kind),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("jwt.expired", kind=kind)
        return None
    except jwt.InvalidTokenError as exc:
        logger.warning("jwt.invalid", kind=kind, error=str(exc))
        return None
    if payload.get("type") != kind or not payload.get("id"):
        logger.warning("jwt.wrong_type", kind=kind, got=payload.get("type"))
        return None
    return TokenClaims(
        id=str(payload["id"]),
        name=str(payload.get("name") or ""),
        email=str(payload.get("email") or ""),
        role=str(payload.get("role") or "user"),
        referral_code=str(payload.get("referral_code") or ""),
        type=kind,
        jti=payload.get("jti"),
    )


def sign_access_token(claims: dict) -> str:
    return _sign(claims, "access", get_settings().access_token_ttl_seconds)


def sign_refresh_token(claims: dict, token_id: str) -> str:
    payload = dict(claims)
    payload["jti"] = token_id
    return _sign(payload, "refresh", get_settings().refresh_token_ttl_seconds)


def verify_access_token(token: str) -> TokenClaims | None:
    return _verify(token, "access")


def verify_refresh_token(token: str) -> TokenClaims | None:
    return _verify(token, "refresh")


def bearer_token(header_value: str | None) -> str:
    """Accept either "Bearer <jwt>" or a bare JWT in the Authorization header."""
    value = (header_value or "").strip()
    if value.lower().startswith(BEARER_PREFIX):
        return value[len(BEARER_PREFIX) :].strip()
    return value
