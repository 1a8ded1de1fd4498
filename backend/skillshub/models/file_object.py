import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func

from skillshub.database import Base


class FileObject(Base):
    """Metadata for an object uploaded to the object store."""

    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    bucket_key = Column(String(1000), unique=True, nullable=False)
    content_type = Column(String(255), nullable=False)
    size_bytes = Column(Integer, nullable=True)
    etag = Column(String(255), nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "bucketKey": self.bucket_key,
            "contentType": self.content_type,
            "sizeBytes": self.size_bytes,
        }
