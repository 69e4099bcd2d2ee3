"""FastAPI dependency injection helpers."""
from __future__ import annotations

from functools import partial
from typing import Annotated, AsyncIterator

import redis.asyncio as aioredis
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campus_chat.application.dto.principal import Principal
from campus_chat.application.ports.auth import TokenVerifier
from campus_chat.application.ports.notifications import NotificationDispatcher
from campus_chat.config import settings
from campus_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from campus_chat.infrastructure.auth.jwks_verifier import JWKSVerifier
from campus_chat.infrastructure.bus.redis_streams import RedisStreamProducer
from campus_chat.infrastructure.db.session import AsyncSessionLocal
from campus_chat.infrastructure.db.uow import SqlAlchemyUoW, open_uow
from campus_chat.infrastructure.mail.smtp_mailer import build_mailer
from campus_chat.infrastructure.notifications.dispatcher import (
    BackgroundNotificationDispatcher,
    RedisStreamNotificationDispatcher,
)

# auto_error=False so a missing header is a 401, not FastAPI's default 403
_bearer_scheme = HTTPBearer(auto_error=False)


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


def _get_verifier() -> TokenVerifier:
    if settings.JWT_VERIFY_MODE == "jwks":
        assert settings.JWKS_URL, "JWKS_URL must be set when JWT_VERIFY_MODE=jwks"
        return JWKSVerifier(settings.JWKS_URL)
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = _get_verifier()
    return _verifier


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise _unauthenticated("Not authenticated")

    verifier = get_verifier()
    try:
        return await verifier.verify(credentials.credentials)
    except Exception as exc:
        raise _unauthenticated("Invalid authentication credentials") from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def build_notifier(redis: aioredis.Redis | None) -> NotificationDispatcher | None:
    """Select the notification dispatcher from settings. None disables e-mail."""
    if not settings.EMAIL_NOTIFICATIONS_ENABLED:
        return None
    if settings.NOTIFICATION_DISPATCH_MODE == "redis_stream":
        assert redis is not None, "Redis is required when NOTIFICATION_DISPATCH_MODE=redis_stream"
        return RedisStreamNotificationDispatcher(
            RedisStreamProducer(redis), settings.NOTIFICATIONS_STREAM,
        )
    return BackgroundNotificationDispatcher(
        partial(open_uow, AsyncSessionLocal),
        build_mailer(settings),
        marketplace_name=settings.MARKETPLACE_NAME,
    )


def get_notifier(request: Request) -> NotificationDispatcher | None:
    return getattr(request.app.state, "notifier", None)


NotifierDep = Annotated[NotificationDispatcher | None, Depends(get_notifier)]
