import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from memberhub.core.config import get_settings
from memberhub.core.logging import configure_logging
from memberhub.routers import account as account_router
from memberhub.routers import influencer as influencer_router
from memberhub.routers import like as like_router
from memberhub.routers import membership as membership_router
from memberhub.routers import notice as notice_router
from memberhub.routers import notify as notify_router
from memberhub.routers import setting as setting_router
from memberhub.routers import store as store_router
from memberhub.routers import subscription as subscription_router
from memberhub.routers.deps import error_body
from memberhub.services.errors import ServiceError

logger = structlog.get_logger(__name__)

_HTTP_ERROR_CODES = {
    400: "invalid_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    429: "rate_limited",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, no sniffing, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind method/path to the log context and emit one line per request."""

    async def dispatch(self, request, call_next):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request.completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response


async def service_error_handler(request: Request, exc: ServiceError):
    logger.info("request.rejected", error=exc.code, status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))


async def http_error_handler(request: Request, exc: HTTPException):
    code = _HTTP_ERROR_CODES.get(exc.status_code, "error")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = (exc.errors() or [{}])[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg', 'invalid value')}" if field else "Request body is not valid."
    return JSONResponse(status_code=400, content=error_body("invalid_request", message))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("request.failed")
    return JSONResponse(status_code=500, content=error_body("internal_error", "Internal server error."))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.app_env == "dev":
        from memberhub.db.create_tables import create_all

        create_all()
        logger.info("db.tables_ready", database_url=settings.database_url.split("@")[-1])
    yield


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (uvicorn memberhub.app:create_app --factory)."""
    settings = get_settings()
    configure_logging(settings)
    app = FastAPI(title="memberhub API", lifespan=lifespan)

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update(
            {
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:8000",
                "http://127.0.0.1:8000",
            }
        )
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(account_router.router)
    app.include_router(store_router.router)
    app.include_router(influencer_router.router)
    app.include_router(membership_router.router)
    app.include_router(notice_router.router)
    app.include_router(like_router.router)
    app.include_router(subscription_router.router)
    app.include_router(notify_router.router)
    app.include_router(setting_router.router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    return app


app = create_app()
