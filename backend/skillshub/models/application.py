from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from skillshub.database import Base
from skillshub.models.enums import ApplicationStatus


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ApplicationStatus.APPLIED.value, index=True)
    cover_letter_text = Column(Text, nullable=True)
    cover_letter_file_id = Column(String(36), ForeignKey("files.id", ondelete="SET NULL"), nullable=True)
    cv_file_id = Column(String(36), ForeignKey("files.id", ondelete="SET NULL"), nullable=True)
    expected_pay = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    job = relationship("Job", back_populates="applications")
    user = relationship("User", back_populates="applications")

    __table_args__ = (
        UniqueConstraint("job_id", "user_id", name="uq_application_job_user"),
    )
