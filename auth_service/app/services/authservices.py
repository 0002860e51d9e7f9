import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import status
from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ..schemas import authschemas
from ..schemas.userschema import UserCreate, UserRead
from . import userservices

logger = logging.getLogger(__name__)


def _token_response(user) -> authschemas.AuthenticationResponse:
    return authschemas.AuthenticationResponse(
        access_token=auth.create_access_token(user),
        user=UserRead.model_validate(user),
    )


def register(db: Session, new_user: UserCreate) -> authschemas.AuthenticationResponse:
    user = userservices.create_user(db, new_user)
    return _token_response(user)


def login(db: Session, request: authschemas.LoginRequest) -> authschemas.AuthenticationResponse:
    user = userservices.get_user_by_email(db, request.email)

    if not user or not user.verify_password(request.password):
        logger.info("Failed login for %s", request.email)
        return error_response(
            message="Invalid email or password",
            status_code=AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID,
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not user.is_active:
        return error_response(
            message="Account is deactivated",
            status_code=AppStatusCode.AUTHENTICATION_USER_INACTIVE,
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return _token_response(user)


def me(db: Session, current_user: UserToken) -> UserRead:
    return UserRead.model_validate(userservices.get_user_by_id(db, UUID(current_user.user_id)))
