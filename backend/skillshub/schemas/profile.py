from datetime import date

from pydantic import Field, field_validator

from skillshub.models.enums import Pathway
from skillshub.schemas.base import RequestModel, blank_to_none


class SeekerSkillInput(RequestModel):
    skill_id: int
    level: int | None = Field(default=None, ge=1, le=5)


class SeekerProfileUpdate(RequestModel):
    pathway: Pathway | None = None
    profession: str | None = None
    headline: str | None = None
    bio: str | None = None
    date_of_birth: date | None = None
    years_experience: int | None = Field(default=None, ge=0, le=80)
    availability: str | None = None
    resume_file_id: str | None = None
    skills: list[SeekerSkillInput] | None = None

    @field_validator("profession", "headline", "bio", "availability", "resume_file_id", "date_of_birth", mode="before")
    @classmethod
    def clean(cls, v):
        return blank_to_none(v)


class EmployerProfileUpdate(RequestModel):
    org_name: str | None = None
    org_type: str | None = None
    website: str | None = None

    @field_validator("org_name", "org_type", "website", mode="before")
    @classmethod
    def clean(cls, v):
        return blank_to_none(v)


class PortfolioItemCreate(RequestModel):
    title: str
    description: str | None = None
    link_url: str | None = None
    file_id: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        if len(v) > 255:
            raise ValueError("Title must be less than 255 characters")
        return v

    @field_validator("description", "link_url", "file_id", mode="before")
    @classmethod
    def clean(cls, v):
        return blank_to_none(v)

    @field_validator("link_url")
    @classmethod
    def validate_link(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("Link URL must start with http:// or https://")
        return v


class PortfolioItemUpdate(RequestModel):
    title: str | None = None
    description: str | None = None
    link_url: str | None = None
    file_id: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v[:255]

    @field_validator("description", "link_url", "file_id", mode="before")
    @classmethod
    def clean(cls, v):
        return blank_to_none(v)

    @field_validator("link_url")
    @classmethod
    def validate_link(cls, v: str | None) -> str | None:
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("Link URL must start with http:// or https://")
        return v
