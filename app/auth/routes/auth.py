import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.auth.dependencies import (
    get_current_user,
    get_refresh_token_from_cookie,
    get_validated_token_payload,
    token_subject,
)
from app.auth.models.user import User
from app.auth.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RefreshResponse,
    RegisterRequest,
)
from app.auth.schemas.user import UserResponse
from app.auth.services.role_directory import RoleDirectory
from app.auth.services.token_service import token_service
from app.auth.services.user_service import UserService
from app.core import security
from app.core.config import settings
from app.core.exceptions import AuthenticationRequiredError, AuthorizationDeniedError
from app.core.rate_limit import limiter
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


async def _start_session(response: Response, user: User) -> LoginResponse:
    access_token, refresh_token = token_service.issue_pair(user)
    try:
        await token_service.store_refresh_token(refresh_token, str(user.id))
    except Exception:
        logger.warning("redis_unavailable_during_login", extra={"user_id": str(user.id)})

    security.set_auth_cookies(response, access_token, refresh_token)
    return LoginResponse(user=UserResponse.model_validate(user))


@router.post("/register", response_model=LoginResponse, status_code=201)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def register(
    request: Request,
    data: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> LoginResponse:
    user = UserService(db).register(data.email, data.password, data.full_name)
    return await _start_session(response, user)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    credentials: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> LoginResponse:
    user = UserService(db).get_by_email(credentials.email)

    if not user or not security.verify_password(credentials.password, user.hashed_password):
        logger.info("login_failed", extra={"email": credentials.email})
        raise AuthenticationRequiredError("Invalid email or password")

    if not user.is_active:
        raise AuthorizationDeniedError("Account is inactive")

    logger.info("login_succeeded", extra={"user_id": str(user.id)})
    return await _start_session(response, user)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_token(
    response: Response,
    refresh_token: str = Depends(get_refresh_token_from_cookie),
    db: Session = Depends(get_db),
) -> RefreshResponse:
    payload = get_validated_token_payload(refresh_token, expected_type="refresh")
    user_id = token_subject(payload)

    try:
        live = await token_service.is_refresh_token_live(refresh_token, str(user_id))
    except Exception:
        logger.warning("redis_unavailable_during_token_validation")
        live = False
    if not live:
        raise AuthenticationRequiredError("Refresh token has been revoked or expired")

    user = RoleDirectory(db).get_user(user_id)

    # Rotation: the presented token is single-use
    try:
        await token_service.revoke_refresh_token(refresh_token)
    except Exception:
        logger.warning("redis_unavailable_during_revoke", extra={"user_id": str(user_id)})

    new_access_token, new_refresh_token = token_service.issue_pair(user)
    try:
        await token_service.store_refresh_token(new_refresh_token, str(user.id))
    except Exception:
        logger.warning("redis_unavailable_during_refresh", extra={"user_id": str(user.id)})

    security.set_auth_cookies(response, new_access_token, new_refresh_token)
    return RefreshResponse()


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user),
) -> LogoutResponse:
    refresh_token = request.cookies.get("refresh_token")
    if refresh_token:
        try:
            await token_service.revoke_refresh_token(refresh_token)
        except Exception:
            logger.warning("redis_unavailable_during_logout")

    security.clear_auth_cookies(response)
    logger.info("logout", extra={"user_id": str(current_user.id)})
    return LogoutResponse()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    return UserResponse.model_validate(current_user)
