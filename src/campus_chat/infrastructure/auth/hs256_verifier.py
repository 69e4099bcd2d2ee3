from __future__ import annotations

from uuid import UUID

import jwt

from campus_chat.application.dto.principal import Principal


class HS256Verifier:
    """Verify JWTs signed with a shared HS256 secret."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> Principal:
        payload = jwt.decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            options={"require": ["sub"]},
        )
        return principal_from_claims(payload)


def principal_from_claims(payload: dict) -> Principal:
    """Build a Principal from verified claims. ``sub`` must be a user UUID."""
    user_id = UUID(str(payload.get("userId", payload["sub"])))
    roles = payload.get("roles") or []
    return Principal(user_id=user_id, roles=[roles] if isinstance(roles, str) else list(roles))
