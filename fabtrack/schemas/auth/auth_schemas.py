from pydantic import BaseModel, EmailStr, Field
from typing import Literal, Optional
from datetime import datetime

from fabtrack.models.enums.user_role import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=1)


class SessionUser(BaseModel):
    email: str
    name: str
    role: UserRole

    class Config:
        from_attributes = True


class SessionOut(BaseModel):
    user: SessionUser
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    user: SessionUser
