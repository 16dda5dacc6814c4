from pydantic import AfterValidator, BaseModel, EmailStr, ConfigDict, Field
from typing import Annotated, Optional
from uuid import UUID
from datetime import datetime

from app.core.schemas import PatchSchema
from app.models.user import UserRole

MAX_EMAIL_LENGTH = 255


def _check_email_length(value: str) -> str:
    if len(value) > MAX_EMAIL_LENGTH:
        raise ValueError(f"Email deve ter no máximo {MAX_EMAIL_LENGTH} caracteres")
    return value


EmailAddress = Annotated[EmailStr, AfterValidator(_check_email_length)]


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    role: UserRole
    company_id: Optional[UUID] = None
    needs_password_change: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class TokenResponse(BaseModel):
    token: str


class TokenClaims(BaseModel):
    """Decoded payload of an access token."""
    sub: UUID
    email: str
    role: UserRole
    company_id: Optional[UUID] = None
    is_active: bool
    needs_password_change: bool = False
    exp: int
    iat: Optional[int] = None
    iss: Optional[str] = None

    @property
    def user_id(self) -> UUID:
        return self.sub


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailAddress
    role: UserRole
    company_id: Optional[UUID] = None
    # Generated when omitted and returned once in the response
    temporary_password: Optional[str] = None


class CreateUserResponse(BaseModel):
    user: UserResponse
    temporary_password: Optional[str] = None


class UserUpdate(PatchSchema):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailAddress] = None
    role: Optional[UserRole] = None
    company_id: Optional[UUID] = None
    is_active: Optional[bool] = None


class DeletedUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: UserRole


class SetNewPasswordRequest(BaseModel):
    new_password: str


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str


class InitAdminRequest(BaseModel):
    install_key: str
    email: EmailAddress
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=2, max_length=255)


class InitStatusResponse(BaseModel):
    initialized: bool
    user_count: int
