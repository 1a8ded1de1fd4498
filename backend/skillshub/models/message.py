from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from skillshub.database import Base


class MessageThread(Base):
    """Direct conversation between two users. participant1 holds the smaller user id."""

    __tablename__ = "message_threads"

    id = Column(Integer, primary_key=True, index=True)
    participant1_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    participant2_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    participant1 = relationship("User", foreign_keys=[participant1_id])
    participant2 = relationship("User", foreign_keys=[participant2_id])
    messages = relationship(
        "DirectMessage",
        back_populates="thread",
        cascade="all, delete-orphan",
        order_by="DirectMessage.created_at",
    )

    __table_args__ = (
        UniqueConstraint("participant1_id", "participant2_id", name="uq_thread_participants"),
    )

    def other_participant(self, user_id: int):
        return self.participant2 if self.participant1_id == user_id else self.participant1

    def other_participant_id(self, user_id: int) -> int:
        return self.participant2_id if self.participant1_id == user_id else self.participant1_id


class DirectMessage(Base):
    __tablename__ = "direct_messages"

    id = Column(Integer, primary_key=True, index=True)
    thread_id = Column(Integer, ForeignKey("message_threads.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    body = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    thread = relationship("MessageThread", back_populates="messages")
    sender = relationship("User")
