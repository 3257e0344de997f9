"""Bearer-token authentication for the storefront API.

Tokens are HS256 JWTs issued by the identity provider that signs users in.
Claims: ``sub`` (user id), ``admin``, ``storeOwner`` and ``storeId``.
"""

import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends, Header, HTTPException

ALGORITHM = "HS256"

_DEV_SECRET = "storefront-dev-secret-change-me"


def _secret() -> str:
    return os.getenv("STOREFRONT_JWT_SECRET", _DEV_SECRET)


def _default_ttl() -> timedelta:
    return timedelta(hours=int(os.getenv("STOREFRONT_TOKEN_TTL_HOURS", "168")))


@dataclass(frozen=True)
class Principal:
    user_id: str
    is_admin: bool = False
    is_store_owner: bool = False
    store_id: str | None = None


def issue_token(principal: Principal, expires_in: timedelta | None = None) -> str:
    now = datetime.now(UTC)
    claims = {
        "sub": principal.user_id,
        "admin": principal.is_admin,
        "storeOwner": principal.is_store_owner,
        "storeId": principal.store_id,
        "iat": now,
        "exp": now + (expires_in or _default_ttl()),
    }
    return jwt.encode(claims, _secret(), algorithm=ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def decode_token(token: str) -> Principal:
    try:
        claims = jwt.decode(token, _secret(), algorithms=[ALGORITHM])
    except jwt.PyJWTError as exc:
        raise _unauthorized("Invalid or expired token") from exc

    if not claims.get("sub"):
        raise _unauthorized("Token has no subject")

    return Principal(
        user_id=str(claims["sub"]),
        is_admin=bool(claims.get("admin")),
        is_store_owner=bool(claims.get("storeOwner")),
        store_id=claims.get("storeId"),
    )


async def optional_principal(authorization: str | None = Header(default=None)) -> Principal | None:
    """The caller when a token is sent; a bad token is still rejected."""
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Expected a Bearer token")
    return decode_token(token.strip())


async def require_principal(principal: Principal | None = Depends(optional_principal)) -> Principal:
    if principal is None:
        raise _unauthorized("Authentication required")
    return principal


async def require_store_owner(principal: Principal = Depends(require_principal)) -> Principal:
    if not principal.is_store_owner or not principal.store_id:
        raise HTTPException(status_code=403, detail="Store owner access required")
    return principal


async def require_admin(principal: Principal = Depends(require_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal
