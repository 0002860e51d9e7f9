import logging
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.exceptions import DuplicateKey, NotFoundError, ValidationError
from shared.core.schemas import UserToken
from shared.models.users import Users
from shared.utils.enums import UserRole
from ..schemas.userschema import UserCreate, UserListResponse, UserRead, UserRequest, UserUpdate

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str):
    return db.query(Users).filter(func.lower(Users.email) == email.lower()).first()


def get_user_by_id(db: Session, user_id: UUID) -> Users:
    user = db.query(Users).filter(Users.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(db: Session, new_user: UserCreate, role: str = UserRole.GUEST.value) -> Users:
    if get_user_by_email(db, new_user.email):
        raise DuplicateKey("User already exists with this email")

    user = Users(
        first_name=new_user.first_name,
        last_name=new_user.last_name,
        email=new_user.email.lower(),
        phone=new_user.phone,
        role=role,
        is_active=True,
    )
    user.set_password(new_user.password)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey("User already exists with this email")
    db.refresh(user)
    logger.info("User %s registered as %s", user.email, user.role)
    return user


def get_users(db: Session, params: UserRequest) -> UserListResponse:
    filters = []
    if params.role:
        filters.append(Users.role == params.role)
    if params.is_active is not None:
        filters.append(Users.is_active == params.is_active)
    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            Users.first_name.ilike(search_term),
            Users.last_name.ilike(search_term),
            Users.email.ilike(search_term),
        ))

    base_query = db.query(Users).filter(*filters)
    total = base_query.with_entities(func.count(Users.id)).scalar()

    query = base_query.order_by(Users.created_at.desc()).offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)
    return UserListResponse(
        users=[UserRead.model_validate(u) for u in query.all()],
        total=total,
    )


def update_user(db: Session, current_user: UserToken, user_update: UserUpdate) -> UserRead:
    user = get_user_by_id(db, user_update.id)
    update_data = user_update.model_dump(exclude_unset=True, exclude={"id"})

    if user.id == UUID(current_user.user_id) and (
            update_data.get("is_active") is False or
            update_data.get("role", user.role) != user.role):
        raise ValidationError("You cannot deactivate or demote yourself")

    for key, value in update_data.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return UserRead.model_validate(user)
