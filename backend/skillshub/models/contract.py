from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from skillshub.database import Base
from skillshub.models.enums import ContractStatus, MilestoneStatus


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), unique=True, nullable=False)
    seeker_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), nullable=False, default=ContractStatus.DRAFT.value)
    created_at = Column(DateTime, server_default=func.now())

    job = relationship("Job", back_populates="contract")
    seeker = relationship("User")
    milestones = relationship("Milestone", back_populates="contract", cascade="all, delete-orphan")


class Milestone(Base):
    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True, index=True)
    contract_id = Column(Integer, ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    amount = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default=MilestoneStatus.PROPOSED.value)
    due_date = Column(DateTime, nullable=True)

    contract = relationship("Contract", back_populates="milestones")
