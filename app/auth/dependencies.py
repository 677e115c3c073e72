import logging
from typing import Annotated
from uuid import UUID

from fastapi import Cookie, Depends, Header
from sqlalchemy.orm import Session

from app.auth.context import SessionContext
from app.auth.models.user import User
from app.auth.services.role_directory import RoleDirectory
from app.core import security
from app.core.exceptions import AuthenticationRequiredError
from app.db.session import get_db

logger = logging.getLogger(__name__)


async def get_access_token(
    access_token: Annotated[str | None, Cookie()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Access token from the httpOnly cookie, or a Bearer header for API clients."""
    if access_token:
        return access_token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    raise AuthenticationRequiredError()


async def get_refresh_token_from_cookie(
    refresh_token: Annotated[str | None, Cookie()] = None,
) -> str:
    if not refresh_token:
        raise AuthenticationRequiredError("Missing refresh token")
    return refresh_token


def get_validated_token_payload(token: str, expected_type: str = "access") -> dict:
    """Decode and validate JWT token"""
    payload = security.decode_token(token)

    if payload is None:
        raise AuthenticationRequiredError("Could not validate credentials")

    if payload.get("type") != expected_type:
        logger.info("wrong_token_type", extra={"expected": expected_type})
        raise AuthenticationRequiredError(f"Invalid token type, expected {expected_type}")

    return payload


def token_subject(payload: dict) -> UUID:
    try:
        return UUID(str(payload.get("sub")))
    except ValueError as exc:
        raise AuthenticationRequiredError("Could not validate credentials") from exc


async def get_current_user(
    access_token: str = Depends(get_access_token),
    db: Session = Depends(get_db),
) -> User:
    """Get current authenticated user from access token"""
    payload = get_validated_token_payload(access_token, expected_type="access")
    return RoleDirectory(db).get_user(token_subject(payload))


async def get_session_context(current_user: User = Depends(get_current_user)) -> SessionContext:
    return RoleDirectory.context_for(current_user)


CurrentSession = Annotated[SessionContext, Depends(get_session_context)]
