"""Shared router helpers: bearer authentication and the JSON envelope."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import Header
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from memberhub.core.tokens import TokenClaims, bearer_token, verify_access_token
from memberhub.services.errors import UnauthorizedError


def current_claims(authorization: Optional[str] = Header(None)) -> TokenClaims:
    token = bearer_token(authorization)
    if not token:
        raise UnauthorizedError("Access token is missing.", "missing_token")
    claims = verify_access_token(token)
    if not claims:
        raise UnauthorizedError("Access token is invalid or expired.", "invalid_token")
    return claims


def ok(data: Any = None, message: str = "OK", status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "message": message, "data": jsonable_encoder(data)},
    )


def error_body(code: str, message: str) -> dict:
    return {"success": False, "error": code, "message": message}
