from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin
from shared.core.database import get_auth_db as get_db
from shared.core.schemas import UserToken
from ..schemas.userschema import StaffCreate, UserListResponse, UserRead, UserRequest, UserUpdate
from ..services import userservices

router = APIRouter(prefix="/api/users", tags=["Hotel Users"])


@router.get("/all", response_model=UserListResponse)
def get_users(
        params: UserRequest = Depends(),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin)):
    return userservices.get_users(db, params)


@router.post("/staff", response_model=UserRead)
def create_staff(
        new_user: StaffCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin)):
    return userservices.create_user(db, new_user, role=new_user.role)


@router.put("/", response_model=UserRead)
def update_user(
        user_update: UserUpdate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin)):
    return userservices.update_user(db, current_user, user_update)
