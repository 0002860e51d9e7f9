from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from shared.core.schemas import CommonQueryParams
from shared.utils.enums import UserRole


# Shared properties
class UserBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)


# For reading a user (response model)
class UserRead(UserBase):
    id: UUID
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserCreate(UserBase):
    password: str = Field(..., min_length=6, max_length=72)


class StaffCreate(UserCreate):
    role: UserRole = UserRole.RECEPTIONIST.value

    model_config = {"use_enum_values": True}


class UserUpdate(BaseModel):
    id: UUID
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    model_config = {"use_enum_values": True}


class UserRequest(CommonQueryParams):
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    model_config = {"use_enum_values": True}


class UserListResponse(BaseModel):
    users: List[UserRead]
    total: int
