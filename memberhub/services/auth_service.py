"""
Authentication and identity related use cases.

Login is passwordless: a short code is emailed, and presenting it (together
with the email) yields an access/refresh JWT pair.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError

from memberhub.core import mailer
from memberhub.core.config import get_settings
from memberhub.core.security import generate_code, hash_code, verify_code
from memberhub.core.tokens import sign_access_token, sign_refresh_token, verify_refresh_token
from memberhub.core.utils import as_utc, utcnow
from memberhub.domain import targets
from memberhub.domain.validation import is_valid_email, normalize_email
from memberhub.repositories.sql_repository import SQLRepository
from memberhub.services.errors import (
    ConflictError,
    DeliveryError,
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
)

logger = structlog.get_logger(__name__)


@dataclass
class CodeResult:
    email: str
    expires_at: datetime
    email_sent: bool
    dev_code: Optional[str] = None


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str
    user_id: int
    email: str
    name: str
    role: str


class AuthService:
    """Handles code issuance, registration, login, refresh and account removal."""

    def __init__(self) -> None:
        self.repository = SQLRepository()

    @property
    def settings(self):
        return get_settings()

    # -------------------------------------- helpers --------------------------------------
    def _clean_email(self, email: str | None) -> str:
        normalized = normalize_email(email)
        if not normalized:
            raise InvalidRequestError("Email is required.", "email_required")
        if not is_valid_email(normalized):
            raise InvalidRequestError("Email is not valid.", "invalid_email")
        return normalized

    def _consume_code(self, email: str, code: str) -> None:
        """Check a submitted code; a success, an expiry or the last failed try removes it."""
        entry = self.repository.get_verification_code(email)
        if not entry:
            raise InvalidRequestError("Verification code is invalid.", "invalid_code")
        if as_utc(entry.expires_at) <= utcnow():
            self.repository.delete_verification_code(email)
            raise InvalidRequestError("Verification code has expired.", "code_expired")
        if not verify_code((code or "").strip().lower(), entry.code_hash):
            attempts = self.repository.increment_code_attempts(email)
            if attempts >= self.settings.verification_code_max_attempts:
                self.repository.delete_verification_code(email)
                logger.info("auth.code_exhausted", email=email, attempts=attempts)
            raise InvalidRequestError("Verification code is invalid.", "invalid_code")
        self.repository.delete_verification_code(email)

    def _issue_tokens(self, user) -> TokenPair:
        claims = {
            "id": str(user.id),
            "name": user.name or "",
            "email": user.email,
            "role": user.role or targets.ROLE_USER,
            "referral_code": user.referral_code or "",
        }
        token_id = secrets.token_hex(16)
        self.repository.set_refresh_token_id(user.id, token_id)
        return TokenPair(
            access_token=sign_access_token(claims),
            refresh_token=sign_refresh_token(claims, token_id),
            user_id=user.id,
            email=user.email,
            name=user.name or "",
            role=user.role or targets.ROLE_USER,
        )

    # -------------------------------------- flows --------------------------------------
    def send_code(self, email: str) -> CodeResult:
        email = self._clean_email(email)
        code = generate_code()
        ttl = self.settings.verification_code_ttl_seconds
        expires_at = utcnow() + timedelta(seconds=ttl)
        self.repository.replace_verification_code(email, hash_code(code), expires_at)
        sent = mailer.send_verification_email(email, code, ttl)
        if not sent:
            if self.settings.app_env == "prod":
                self.repository.delete_verification_code(email)
                raise DeliveryError("Could not deliver the verification email.")
            logger.warning("auth.code_not_emailed", email=email)
            return CodeResult(email=email, expires_at=expires_at, email_sent=False, dev_code=code)
        logger.info("auth.code_sent", email=email)
        return CodeResult(email=email, expires_at=expires_at, email_sent=True)

    def register(self, email: str, name: str, code: str) -> TokenPair:
        if not (email or "").strip() or not (name or "").strip() or not (code or "").strip():
            raise InvalidRequestError("Email, name and verification code are required.", "missing_fields")
        email = self._clean_email(email)
        if self.repository.get_user_by_email(email):
            raise ConflictError("An account with this email already exists.", "account_exists")
        self._consume_code(email, code)
        role = targets.ROLE_ADMIN if email in self.settings.admin_emails else targets.ROLE_USER
        try:
            user = self.repository.create_user(email, name.strip(), role=role)
        except IntegrityError:
            raise ConflictError("An account with this email already exists.", "account_exists")
        logger.info("auth.registered", user_id=user.id, role=role)
        return self._issue_tokens(user)

    def login(self, email: str, code: str) -> TokenPair:
        if not (email or "").strip() or not (code or "").strip():
            raise InvalidRequestError("Email and verification code are required.", "missing_fields")
        email = self._clean_email(email)
        user = self.repository.get_user_by_email(email)
        if not user:
            raise NotFoundError("No account exists for this email.", "user_not_found")
        if user.disabled:
            raise ForbiddenError("This account has been disabled.", "account_disabled")
        self._consume_code(email, code)
        logger.info("auth.login", user_id=user.id)
        return self._issue_tokens(user)

    def refresh(self, refresh_token: str) -> TokenPair:
        claims = verify_refresh_token(refresh_token)
        if not claims:
            raise UnauthorizedError("Refresh token is invalid or expired.", "invalid_token")
        user = self.repository.get_user(claims.user_id)
        if not user or user.disabled:
            raise UnauthorizedError("Refresh token is invalid or expired.", "invalid_token")
        if not claims.jti or claims.jti != user.refresh_token_id:
            logger.warning("auth.refresh_reused", user_id=user.id)
            raise UnauthorizedError("Refresh token has already been used.", "token_reused")
        return self._issue_tokens(user)

    def disable_account(self, user_id: int) -> None:
        user = self.repository.get_user(user_id)
        if not user:
            raise NotFoundError("Account not found.", "user_not_found")
        if user.disabled:
            raise ConflictError("Account is already disabled.", "already_disabled")
        self.repository.set_user_disabled(user_id, True)
        logger.info("auth.account_disabled", user_id=user_id)

    def remove_account(self, user_id: int) -> None:
        user = self.repository.get_user(user_id)
        if not user:
            raise NotFoundError("Account not found.", "user_not_found")
        self.repository.delete_user(user_id)
        logger.info("auth.account_removed", user_id=user_id)
