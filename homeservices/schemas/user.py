from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from homeservices.db.models.user import Role
from homeservices.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    full_name: str = Field(..., min_length=2, description="Full name must be at least 2 characters")


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class VerifyEmailOtpRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., min_length=1)


class ResendEmailOtpRequest(CamelModel):
    email: EmailStr


class RefreshRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class UserProfile(CamelModel):
    id: int
    email: EmailStr
    full_name: str
    role: Role
    is_email_verified: bool = False
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class AuthData(CamelModel):
    user: UserProfile
    access_token: str
    refresh_token: str
    verification_email_sent: Optional[bool] = None
