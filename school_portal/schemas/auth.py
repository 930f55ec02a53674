from typing import Optional
from pydantic import EmailStr, Field, field_validator, model_validator
from school_portal.schemas.common import CamelModel

EMAIL_PATTERN = r"^\S+@\S+$"


class Branch(CamelModel):
    id: str
    name: str
    tenant_id: Optional[str] = None
    code: Optional[str] = None


class UserRole(CamelModel):
    role_id: str
    role_name: str
    branch_id: str


class CurrentUser(CamelModel):
    id: str
    email: str
    full_name: str
    avatar_url: Optional[str] = None
    roles: list[UserRole] = []
    branches: list[Branch] = []
    current_branch: Optional[Branch] = None


class LoginForm(CamelModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)


class ForgotPasswordForm(CamelModel):
    email: str = Field(pattern=EMAIL_PATTERN)


class ResetPasswordForm(CamelModel):
    password: str = Field(min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class RegisterForm(CamelModel):
    school_name: str = Field(min_length=1)
    school_code: Optional[str] = None
    school_domain: Optional[str] = None
    branch_name: str = Field(min_length=1)
    branch_code: Optional[str] = None
    branch_address: Optional[str] = None
    branch_phone: Optional[str] = None
    branch_email: Optional[EmailStr] = None
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)
    phone: Optional[str] = None

    @field_validator("school_name", "branch_name", "full_name", mode="before")
    @classmethod
    def strip_required(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class RegisteredUser(CamelModel):
    id: str
    email: str
    full_name: str
    tenant_id: str
    branch_id: str


class RegisterResult(CamelModel):
    user: RegisteredUser
    access_token: str
    refresh_token: str


class SelectBranchRequest(CamelModel):
    branch_id: str
