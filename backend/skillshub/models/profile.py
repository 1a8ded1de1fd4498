from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from skillshub.database import Base


class SeekerProfile(Base):
    __tablename__ = "seeker_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    pathway = Column(String(20), nullable=False)
    profession = Column(String(255), nullable=True)
    headline = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    years_experience = Column(Integer, nullable=True)
    availability = Column(String(100), nullable=True)
    resume_file_id = Column(String(36), ForeignKey("files.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="seeker_profile")
    skills = relationship("SeekerSkill", back_populates="profile", cascade="all, delete-orphan")
    portfolio = relationship(
        "PortfolioItem",
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="desc(PortfolioItem.id)",
    )
    resume_file = relationship("FileObject", foreign_keys=[resume_file_id])

    @property
    def skill_ids(self) -> set[int]:
        return {s.skill_id for s in self.skills}


class EmployerProfile(Base):
    __tablename__ = "employer_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    org_name = Column(String(255), nullable=False)
    org_type = Column(String(100), nullable=True)
    website = Column(String(500), nullable=True)
    verified = Column(Boolean, nullable=False, default=False)
    company_logo_file_id = Column(String(36), ForeignKey("files.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="employer_profile")
    jobs = relationship("Job", back_populates="employer", cascade="all, delete-orphan")
    company_logo_file = relationship("FileObject", foreign_keys=[company_logo_file_id])
