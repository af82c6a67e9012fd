"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from orgchat.adapters.auth import AccountProvisioner, FirebaseAccountProvisioner, MockAccountProvisioner
from orgchat.core.config import Settings, get_settings
from orgchat.errors import ApiError
from orgchat.repositories.base import DocumentStore
from orgchat.repositories.memory import InMemoryStore
from orgchat.routes import (
    account_router,
    conversations_router,
    maintenance_router,
    organization_router,
    session_router,
)
from orgchat.schemas.error import ErrorResponse
from orgchat.services.completions import CompletionGateway

logger = logging.getLogger(__name__)

PROTECTED_PAGE_PREFIXES: tuple[str, ...] = ("/chat", "/admin", "/debug")
AUTH_PAGE_PREFIXES: tuple[str, ...] = ("/login", "/register")


def _matches_section(path: str, prefixes: tuple[str, ...]) -> bool:
    return any(path == prefix or path.startswith(f"{prefix}/") for prefix in prefixes)


def _build_store(settings: Settings) -> DocumentStore:
    if settings.store_backend == "firestore":
        from orgchat.repositories.firestore import FirestoreStore

        return FirestoreStore.from_settings(settings)
    return InMemoryStore()


def _build_account_provisioner(settings: Settings) -> AccountProvisioner:
    if settings.auth_provider == "firebase":
        return FirebaseAccountProvisioner(settings)
    return MockAccountProvisioner()


def page_redirect_target(path: str, has_session: bool) -> str | None:
    """Where a page request must be sent instead, or ``None`` to let it through."""
    if not has_session and _matches_section(path, PROTECTED_PAGE_PREFIXES):
        return "/login"
    if has_session and _matches_section(path, AUTH_PAGE_PREFIXES):
        return "/chat"
    return None


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Orgchat API", version="1.0.0")
    app.state.store = _build_store(settings)
    app.state.account_provisioner = _build_account_provisioner(settings)
    app.state.completion_gateway = CompletionGateway()

    @app.middleware("http")
    async def protect_pages(request: Request, call_next):
        has_session = bool(request.cookies.get(get_settings().session_cookie_name))
        target = page_redirect_target(request.url.path, has_session)
        if target is not None:
            return RedirectResponse(url=str(request.url.replace(path=target, query="")), status_code=307)
        return await call_next(request)

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "request.failed method=%s path=%s status=%s code=%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.payload.code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = [".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()]
        logger.warning(
            "request.invalid method=%s path=%s fields=%s",
            request.method,
            request.url.path,
            ",".join(fields),
        )
        payload = ErrorResponse(code="VALIDATION_ERROR", message="Invalid request payload", details={"fields": fields})
        return JSONResponse(status_code=400, content=payload.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.crashed method=%s path=%s", request.method, request.url.path)
        payload = ErrorResponse(code="INTERNAL_ERROR", message="Unexpected server error")
        return JSONResponse(status_code=500, content=payload.model_dump(mode="json", exclude_none=True))

    app.include_router(session_router, prefix="/api")
    api_prefix = "/api/v1"
    app.include_router(account_router, prefix=api_prefix)
    app.include_router(conversations_router, prefix=api_prefix)
    app.include_router(organization_router, prefix=api_prefix)
    app.include_router(maintenance_router, prefix=api_prefix)

    return app


app = create_app()
