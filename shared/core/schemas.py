from pydantic import BaseModel
from typing import Generic, Optional, TypeVar, Union
from uuid import UUID

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str
    exp: Optional[int] = None

    @property
    def is_guest(self) -> bool:
        return self.role == "guest"


class CommonQueryParams(BaseModel):
    search: Optional[str] = None
    skip: Optional[int] = 0
    limit: Optional[int] = None


class Lookup(BaseModel):
    id: Union[str, UUID]  # accepts both UUID and str
    name: str

    model_config = {"from_attributes": True}


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str
