from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from skillshub.database import Base


class Region(Base):
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    districts = relationship(
        "District", back_populates="region", cascade="all, delete-orphan", order_by="District.name"
    )


class District(Base):
    __tablename__ = "districts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="CASCADE"), nullable=False)

    region = relationship("Region", back_populates="districts")

    __table_args__ = (
        UniqueConstraint("name", "region_id", name="uq_district_region"),
    )
