from pydantic import BaseModel, EmailStr

from .userschema import UserRead


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthenticationResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
