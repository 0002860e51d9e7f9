from datetime import datetime, timedelta, timezone
from uuid import UUID
from fastapi import status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import MANAGEMENT_ROLES, STAFF_ROLES, UserRole
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken
from shared.core.database import get_auth_db as get_db
from sqlalchemy.orm import Session

security = HTTPBearer()


def create_access_token(user: Users) -> str:
    expires = datetime.now(timezone.utc) + \
        timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload = {
        "user_id": str(user.id),
        "email": user.email,
        "name": user.full_name,
        "role": user.role,
        "exp": expires,
    }
    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> UserToken:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except (JWTError, ValueError):
        return error_response(
            message="Invalid or expired token",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_INVALID,
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> UserToken:
    user_data = verify_token(credentials.credentials)

    user = db.query(Users).filter(Users.id == UUID(user_data.user_id)).first()

    if not user:
        return error_response(
            message="User not found",
            status_code=AppStatusCode.AUTHENTICATION_USER_INVALID,
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not user.is_active:
        return error_response(
            message="User is not active. Access denied",
            status_code=AppStatusCode.AUTHENTICATION_USER_INACTIVE,
            http_status=status.HTTP_403_FORBIDDEN
        )

    # Role changes take effect without a new token
    user_data.role = user.role
    return user_data


def allow_staff(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role not in STAFF_ROLES:
        return error_response(
            message="Access forbidden: staff only",
            status_code=AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS,
            http_status=status.HTTP_403_FORBIDDEN
        )
    return current_user


def allow_management(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role not in MANAGEMENT_ROLES:
        return error_response(
            message="Access forbidden: managers only",
            status_code=AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS,
            http_status=status.HTTP_403_FORBIDDEN
        )
    return current_user


def allow_admin(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role != UserRole.ADMIN.value:
        return error_response(
            message="Access forbidden: Admins only",
            status_code=AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS,
            http_status=status.HTTP_403_FORBIDDEN
        )
    return current_user
