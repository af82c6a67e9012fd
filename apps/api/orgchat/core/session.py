"""Session cookie encoding for authenticated principals.

The cookie value is plain JSON and is not signed. Any client able to write
its own cookies can forge role claims, so role-sensitive operations re-read
the stored user record.
"""

from __future__ import annotations

import json

from pydantic import ValidationError

from orgchat.schemas.auth import AuthPrincipal

LEGACY_PLACEHOLDER_EMAIL = "user@example.com"


def encode_principal(principal: AuthPrincipal) -> str:
    return json.dumps(
        {
            "userId": principal.user_id,
            "email": principal.email,
            "name": principal.name,
            "role": principal.role,
            "isAdmin": principal.is_admin,
        },
        separators=(",", ":"),
    )


def _legacy_principal(user_id: str) -> AuthPrincipal:
    return AuthPrincipal(
        user_id=user_id,
        email=LEGACY_PLACEHOLDER_EMAIL,
        role="coworker",
        is_admin=False,
        name=None,
    )


def decode_cookie(value: str | None) -> AuthPrincipal | None:
    """Decode a session cookie; ``None`` when there is no session.

    Values that are not a JSON object with ``userId`` are the legacy format,
    where the whole cookie was the raw user id.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None

    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        return _legacy_principal(value)

    if not isinstance(data, dict) or not data.get("userId"):
        return _legacy_principal(value)

    role = data.get("role") or "coworker"
    if role not in ("admin", "coworker"):
        role = "coworker"
    try:
        return AuthPrincipal(
            user_id=str(data["userId"]),
            email=data.get("email") or LEGACY_PLACEHOLDER_EMAIL,
            role=role,
            is_admin=data.get("isAdmin") is True,
            name=data.get("name"),
        )
    except ValidationError:
        return None
