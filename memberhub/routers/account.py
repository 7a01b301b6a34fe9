from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from memberhub.core.rate_limiter import rate_limit_ip
from memberhub.core.tokens import TokenClaims
from memberhub.routers.deps import current_claims, ok
from memberhub.schemas import CodeRequest, LoginRequest, RefreshRequest, RegisterRequest
from memberhub.services.auth_service import AuthService, TokenPair

router = APIRouter(prefix="/api/account", tags=["account"])
auth_service = AuthService()


def _tokens(pair: TokenPair) -> dict:
    return {
        "access_token": pair.access_token,
        "refresh_token": pair.refresh_token,
        "user": {"id": pair.user_id, "email": pair.email, "name": pair.name, "role": pair.role},
    }


@router.post("/code")
def send_code(body: CodeRequest, request: Request):
    rate_limit_ip(request, "account:code", limit=5, window_seconds=60)
    result = auth_service.send_code(body.email)
    data = {"email": result.email, "expires_at": result.expires_at, "email_sent": result.email_sent}
    if result.dev_code:
        data["dev_code"] = result.dev_code
    return ok(data, "Verification code sent.")


@router.post("/register")
def register(body: RegisterRequest):
    pair = auth_service.register(body.email, body.name, body.code)
    return ok(_tokens(pair), "Registration complete.")


@router.post("/login")
def login(body: LoginRequest, request: Request):
    rate_limit_ip(request, "account:login", limit=10, window_seconds=60)
    pair = auth_service.login(body.email, body.code)
    return ok(_tokens(pair), "Login successful.")


@router.post("/refresh")
def refresh(body: RefreshRequest):
    pair = auth_service.refresh(body.refresh_token)
    return ok(_tokens(pair), "Tokens refreshed.")


@router.put("/update")
def disable_account(claims: TokenClaims = Depends(current_claims)):
    auth_service.disable_account(claims.user_id)
    return ok({"id": claims.user_id, "disabled": True}, "Account disabled.")


@router.delete("/removeAccount")
def remove_account(claims: TokenClaims = Depends(current_claims)):
    auth_service.remove_account(claims.user_id)
    return ok({"id": claims.user_id}, "Account removed.")
