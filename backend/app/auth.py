"""
Notes API - Authentication
==========================

What:  FastAPI dependency resolving the caller's identity.
How:   Two schemes, chosen by settings.use_dev_authentication:

       development → every request is the fixed "dev-user" identity
       bearer      → `Authorization: Bearer <jwt>` verified with python-jose
                     against AUTH_JWT_KEY / AUTH_JWT_ALGORITHM, plus the
                     audience and issuer when configured

Who:   Attached to every note route. Handlers receive the identity but the
       note service does not use it.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import settings
from app.exceptions import UnauthorizedError
from app.schemas.common import CamelModel

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


class CurrentUser(CamelModel):
    """The authenticated caller."""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    auth_mode: str
    claims: Dict[str, Any] = {}


DEV_USER = CurrentUser(
    id="dev-user",
    name="Development User",
    email="dev@example.com",
    auth_mode="development",
    claims={"sub": "dev-user", "name": "Development User", "email": "dev@example.com"},
)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verifies signature, expiry and (when configured) audience and issuer.

    Raises:
        JWTError: on any verification failure
    """
    options = {"verify_aud": bool(settings.auth_audience)}
    return jwt.decode(
        token,
        settings.auth_jwt_key,
        algorithms=[settings.auth_jwt_algorithm],
        audience=settings.auth_audience or None,
        issuer=settings.auth_issuer or None,
        options=options,
    )


def user_from_claims(claims: Dict[str, Any]) -> CurrentUser:
    # Identity providers differ on which claim carries the stable user id
    subject = claims.get("oid") or claims.get("sub")
    if not subject:
        raise UnauthorizedError("Token does not identify a user.")
    return CurrentUser(
        id=str(subject),
        name=claims.get("name"),
        email=claims.get("email") or claims.get("preferred_username"),
        auth_mode="bearer",
        claims=claims,
    )


async def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> CurrentUser:
    """
    Resolves the caller for the active authentication scheme.

    Raises:
        UnauthorizedError: bearer mode and the token is missing or invalid
    """
    if settings.use_dev_authentication:
        return DEV_USER

    if creds is None or creds.scheme.lower() != "bearer":
        raise UnauthorizedError()
    if not settings.auth_jwt_key:
        logger.error("Bearer token received but AUTH_JWT_KEY is not configured")
        raise UnauthorizedError()

    try:
        claims = decode_token(creds.credentials)
    except JWTError as e:
        logger.warning("Rejected bearer token: %s", str(e))
        raise UnauthorizedError("Invalid or expired token.")
    return user_from_claims(claims)
