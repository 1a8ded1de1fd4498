from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from skillshub.database import Base


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)


class SeekerSkill(Base):
    __tablename__ = "seeker_skills"

    seeker_profile_id = Column(
        Integer, ForeignKey("seeker_profiles.id", ondelete="CASCADE"), primary_key=True
    )
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True)
    level = Column(Integer, nullable=True)

    profile = relationship("SeekerProfile", back_populates="skills")
    skill = relationship("Skill")


class JobSkill(Base):
    __tablename__ = "job_skills"

    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True)
    required = Column(Boolean, nullable=False, default=True)

    job = relationship("Job", back_populates="skills")
    skill = relationship("Skill")
