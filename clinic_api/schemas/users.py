"""User, profile and authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from clinic_api.schemas.common import Email, OptionalFlag, OptionalText, RequiredText

# ============================================================================
# Requests
# ============================================================================


class UserCreate(BaseModel):
    """Schema for an administrator creating a user."""

    name: RequiredText
    email: Email
    role: RequiredText
    password: str = Field(..., min_length=1)
    active: bool = True


class UserUpdate(BaseModel):
    """Schema for updating a user.

    ``name``, ``email`` and ``role`` are always replaced. The remaining fields
    keep their stored value when absent or blank.
    """

    name: RequiredText
    email: Email
    role: RequiredText
    active: OptionalFlag = None
    password: str | None = None
    phone: OptionalText = None
    address: OptionalText = None
    birthdate: OptionalText = None
    gender: OptionalText = None


class UserActiveUpdate(BaseModel):
    """Schema for enabling or disabling an account."""

    active: StrictBool


class ProfileUpdate(BaseModel):
    """Schema for editing a profile row directly."""

    name: OptionalText = None
    email: OptionalText = None
    role: OptionalText = None
    phone: OptionalText = None
    address: OptionalText = None
    birthdate: OptionalText = None
    gender: OptionalText = None


class RegisterRequest(BaseModel):
    """Schema for self registration."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: RequiredText = Field(..., alias="fullName")
    role: RequiredText
    email: Email
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Schema for login."""

    email: Email
    password: str = Field(..., min_length=1)


# ============================================================================
# Responses
# ============================================================================


class UserResponse(BaseModel):
    """User as listed and managed by administrators."""

    id: int
    name: str | None = None
    role: str | None = None
    email: str | None = None
    active: bool | None = None


class UserDetailResponse(UserResponse):
    """User with optional profile fields."""

    phone: str | None = None
    address: str | None = None
    birthdate: str | None = None
    gender: str | None = None


class ProfileResponse(BaseModel):
    """Profile row."""

    id: int
    name: str | None = None
    role: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    birthdate: str | None = None
    gender: str | None = None
    created_at: datetime | None = None
    last_edited: datetime | None = None


class LegacyUserResponse(BaseModel):
    """Row of the unprefixed ``/users`` listing."""

    id: int
    full_name: str | None = None
    role: str | None = None
    email: str | None = None
    active: bool | None = None
    created_at: datetime | None = None


class AccountUser(BaseModel):
    """User row returned by registration and login, without credentials."""

    id: int
    full_name: str | None = None
    role: str | None = None
    email: str | None = None
    active: bool | None = None
    phone: str | None = None
    address: str | None = None
    birthdate: str | None = None
    gender: str | None = None
    created_at: datetime | None = None


class AccountResponse(BaseModel):
    """Envelope used by registration and login."""

    success: bool = True
    user: AccountUser
