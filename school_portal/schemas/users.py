from datetime import date, datetime
from typing import Optional
from pydantic import EmailStr, Field, field_validator
from school_portal.schemas.auth import UserRole
from school_portal.schemas.common import CamelModel, ListQuery
from school_portal.schemas.enums import Gender


def _required_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Full name is required")
    return v


class User(CamelModel):
    id: str
    email: str
    full_name: str
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    is_active: bool = True
    roles: list[UserRole] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PersonCreate(CamelModel):
    """Account fields shared by users, staff and students."""

    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    is_active: Optional[bool] = None

    @field_validator("full_name")
    @classmethod
    def full_name_required(cls, v: str) -> str:
        return _required_name(v)


class PersonUpdate(CamelModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    is_active: Optional[bool] = None

    @field_validator("full_name")
    @classmethod
    def full_name_required(cls, v: Optional[str]) -> Optional[str]:
        return _required_name(v)


class UserCreate(PersonCreate):
    role_ids: Optional[list[str]] = None


class UserUpdate(PersonUpdate):
    avatar_url: Optional[str] = None


class UserRolesUpdate(CamelModel):
    role_ids: list[str]


class UserQuery(ListQuery):
    role: Optional[str] = None
    is_active: Optional[bool] = None
