from pydantic import field_validator

from skillshub.models.enums import ApplicationStatus
from skillshub.schemas.base import RequestModel, blank_to_none


class ApplyRequest(RequestModel):
    job_id: int
    cover_letter_text: str | None = None
    cover_letter_file_id: str | None = None
    cv_file_id: str | None = None
    expected_pay: int | None = None

    @field_validator("cover_letter_text", "cover_letter_file_id", "cv_file_id", mode="before")
    @classmethod
    def clean(cls, v):
        return blank_to_none(v)

    @field_validator("expected_pay", mode="before")
    @classmethod
    def clean_pay(cls, v):
        return blank_to_none(v)


class ApplicationStatusUpdate(RequestModel):
    status: ApplicationStatus


class RecruitRequest(RequestModel):
    talent_id: int
    job_id: int
    message: str | None = None

    @field_validator("message", mode="before")
    @classmethod
    def clean(cls, v):
        return blank_to_none(v)
