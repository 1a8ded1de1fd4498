import re

from pydantic import EmailStr, field_validator

from skillshub.models.enums import Gender, Pathway
from skillshub.schemas.base import RequestModel, blank_to_none

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,50}$")


class SignupBase(RequestModel):
    first_name: str
    last_name: str
    email: EmailStr
    username: str
    password: str
    phone: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if len(v) > 100:
            raise ValueError("Name must be less than 100 characters")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username must be 3-50 characters of letters, numbers, dots, dashes or underscores"
            )
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        if len(v) > 128:
            raise ValueError("Password must be at most 128 characters long")
        return v

    @field_validator("phone", mode="before")
    @classmethod
    def clean_phone(cls, v):
        return blank_to_none(v)


class SeekerSignup(SignupBase):
    pathway: Pathway


class EmployerSignup(SignupBase):
    org_name: str
    org_type: str | None = None
    website: str | None = None

    @field_validator("org_name")
    @classmethod
    def validate_org_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Organization name must be at least 2 characters")
        if len(v) > 255:
            raise ValueError("Organization name must be less than 255 characters")
        return v

    @field_validator("org_type", "website", mode="before")
    @classmethod
    def clean_optional(cls, v):
        return blank_to_none(v)


class VerifyOtpRequest(RequestModel):
    user_id: int
    otp: str

    @field_validator("otp")
    @classmethod
    def validate_otp(cls, v: str) -> str:
        v = v.strip()
        if not re.fullmatch(r"\d{6}", v):
            raise ValueError("OTP must be a 6-digit code")
        return v


class ResendOtpRequest(RequestModel):
    user_id: int


class LoginRequest(RequestModel):
    email: EmailStr
    password: str


class UserUpdate(RequestModel):
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    gender: Gender | None = None

    @field_validator("first_name", "last_name", "phone", mode="before")
    @classmethod
    def clean(cls, v):
        return blank_to_none(v)
