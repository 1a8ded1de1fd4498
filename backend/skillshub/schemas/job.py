from datetime import datetime

from pydantic import field_validator

from skillshub.models.enums import JobStatus, JobType
from skillshub.schemas.base import RequestModel, blank_to_none


def parse_date(v) -> datetime | None:
    """Lenient date parsing: blanks and unparseable values become None."""
    v = blank_to_none(v)
    if v is None or isinstance(v, datetime):
        return v
    try:
        return datetime.fromisoformat(str(v).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        return None


class JobSkillInput(RequestModel):
    skill_id: int
    required: bool = True


class JobFields(RequestModel):
    location: str | None = None
    salary_range: str | None = None
    status: JobStatus | None = None
    skills: list[int | JobSkillInput] | None = None

    # GIG
    project_duration: str | None = None
    budget: str | None = None
    deadline: datetime | None = None
    deliverables: str | None = None
    # INTERNSHIP
    internship_duration: str | None = None
    stipend: str | None = None
    start_date: datetime | None = None
    learning_objectives: str | None = None
    # PART_TIME
    hours_per_week: str | None = None
    schedule: str | None = None
    hourly_rate: str | None = None
    # FULL_TIME
    work_arrangement: str | None = None
    start_date_full_time: datetime | None = None
    probation_period: str | None = None
    benefits: str | None = None

    @field_validator(
        "location", "salary_range", "project_duration", "budget", "deliverables",
        "internship_duration", "stipend", "learning_objectives", "hours_per_week",
        "schedule", "hourly_rate", "work_arrangement", "probation_period", "benefits",
        mode="before",
    )
    @classmethod
    def trim(cls, v):
        if v is not None and not isinstance(v, str):
            v = str(v)
        return blank_to_none(v)

    @field_validator("deadline", "start_date", "start_date_full_time", mode="before")
    @classmethod
    def dates(cls, v):
        return parse_date(v)

    def skill_entries(self) -> list[JobSkillInput] | None:
        if self.skills is None:
            return None
        return [
            s if isinstance(s, JobSkillInput) else JobSkillInput(skill_id=s)
            for s in self.skills
        ]


class JobCreate(JobFields):
    title: str
    description: str
    type: JobType

    @field_validator("title", "description")
    @classmethod
    def required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title, description, and type are required")
        return v


class JobUpdate(JobFields):
    title: str | None = None
    description: str | None = None
    type: JobType | None = None

    @field_validator("title", "description")
    @classmethod
    def non_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title and description cannot be empty")
        return v
