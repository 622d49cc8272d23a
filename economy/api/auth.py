"""Caller identity

The upstream identity provider issues HS256 JWTs. Behind a trusted
gateway (AUTH_DISABLED) the identity arrives as plain headers instead.
"""

import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Optional
import jwt
from fastapi import Depends, Header, Request
from economy.libs.result import Error
from .error import ClientError

logger = logging.getLogger(__name__)

ROLES = ("reader", "author", "host", "admin")
DEFAULT_ROLE = "reader"


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str = DEFAULT_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _normalize_role(role: Optional[str]) -> str:
    role = (role or "").lower()
    return role if role in ROLES else DEFAULT_ROLE


def _unauthenticated(message: str) -> ClientError:
    return ClientError(Error(code="UNAUTHENTICATED", message=message))


def decode_token(token: str, secret: str, audience: Optional[str] = None) -> Principal:
    """
    Verify an HS256 token and extract the principal

    The role is read from ``app_metadata.role`` and falls back to a
    top-level ``role`` claim; unknown roles become ``reader``.

    Raises:
        ClientError: token missing a subject, expired or not verifiable
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            audience=audience or None,
            options={"verify_aud": bool(audience)},
        )
    except jwt.InvalidTokenError as e:
        raise _unauthenticated(f"Invalid token: {e}") from e

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthenticated("Token has no subject")

    role = (payload.get("app_metadata") or {}).get("role") or payload.get("role")
    return Principal(user_id=str(user_id), role=_normalize_role(role))


async def get_current_principal(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Principal:
    config = request.app.state.config

    if config.AUTH_DISABLED:
        if not x_user_id:
            raise _unauthenticated("X-User-Id header is required")
        return Principal(user_id=x_user_id, role=_normalize_role(x_user_role))

    if not authorization or not authorization.lower().startswith("bearer "):
        raise _unauthenticated("Bearer token is required")
    if not config.AUTH_JWT_SECRET:
        logger.error("AUTH_JWT_SECRET is not configured; rejecting request")
        raise _unauthenticated("Authentication is not configured")

    return decode_token(authorization[7:].strip(), config.AUTH_JWT_SECRET, config.AUTH_JWT_AUDIENCE)


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise ClientError(Error(code="ADMIN_FORBIDDEN", message="Admin role required"))
    return principal


def verify_webhook_signature(payload: bytes, signature: Optional[str], secret: str) -> bool:
    """Check a hex HMAC-SHA256 of the raw request body"""
    if not secret or not signature:
        return False
    expected = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)
