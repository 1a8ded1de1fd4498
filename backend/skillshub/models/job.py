from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from skillshub.database import Base
from skillshub.models.enums import JobStatus


# Optional fields that only apply to a single job type, grouped by type
GIG_FIELDS = ("project_duration", "budget", "deadline", "deliverables")
INTERNSHIP_FIELDS = ("internship_duration", "stipend", "start_date", "learning_objectives")
PART_TIME_FIELDS = ("hours_per_week", "schedule", "hourly_rate")
FULL_TIME_FIELDS = ("work_arrangement", "start_date_full_time", "probation_period", "benefits")
TYPE_SPECIFIC_FIELDS = GIG_FIELDS + INTERNSHIP_FIELDS + PART_TIME_FIELDS + FULL_TIME_FIELDS
DATE_FIELDS = ("deadline", "start_date", "start_date_full_time")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(
        Integer, ForeignKey("employer_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, index=True)
    location = Column(String(255), nullable=True)
    salary_range = Column(String(255), nullable=True)
    status = Column(String(10), nullable=False, default=JobStatus.OPEN.value, index=True)

    # GIG
    project_duration = Column(String(255), nullable=True)
    budget = Column(String(255), nullable=True)
    deadline = Column(DateTime, nullable=True)
    deliverables = Column(Text, nullable=True)
    # INTERNSHIP
    internship_duration = Column(String(255), nullable=True)
    stipend = Column(String(255), nullable=True)
    start_date = Column(DateTime, nullable=True)
    learning_objectives = Column(Text, nullable=True)
    # PART_TIME
    hours_per_week = Column(String(100), nullable=True)
    schedule = Column(String(255), nullable=True)
    hourly_rate = Column(String(100), nullable=True)
    # FULL_TIME
    work_arrangement = Column(String(100), nullable=True)
    start_date_full_time = Column(DateTime, nullable=True)
    probation_period = Column(String(100), nullable=True)
    benefits = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    employer = relationship("EmployerProfile", back_populates="jobs")
    skills = relationship("JobSkill", back_populates="job", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
    contract = relationship("Contract", back_populates="job", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_jobs_status_created", "status", "created_at"),
    )

    @property
    def skill_ids(self) -> set[int]:
        return {s.skill_id for s in self.skills}

    def count_applications(self, status: str) -> int:
        return sum(1 for a in self.applications if a.status == status)
