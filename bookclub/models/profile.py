"""Profile (login account) models"""

from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from bookclub.models.common import NonEmptyStr, Role, reject_null


class LoginRequest(BaseModel):
    email: NonEmptyStr
    password: NonEmptyStr


class UserCreateRequest(BaseModel):
    email: EmailStr
    full_name: NonEmptyStr
    password: Optional[str] = None
    send_invite: Optional[bool] = None  # Implied by a missing password


class UserUpdateRequest(BaseModel):
    id: NonEmptyStr
    full_name: Optional[str] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    avatar_url: Optional[str] = None

    @field_validator("full_name", "role", "is_active", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    is_active: bool = True
    avatar_url: Optional[str] = None
    has_password: bool = False
    created_at: str
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "ProfileResponse":
        return cls(
            id=row["id"],
            email=row["email"],
            full_name=row.get("full_name"),
            role=row.get("role", "member"),
            is_active=row.get("is_active", True),
            avatar_url=row.get("avatar_url"),
            has_password=bool(row.get("password_hash")),
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
        )


class ForgotPasswordRequest(BaseModel):
    email: NonEmptyStr


class ResetPasswordRequest(BaseModel):
    token: NonEmptyStr
    password: NonEmptyStr
