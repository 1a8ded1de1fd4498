from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from skillshub.models import DirectMessage, MessageThread


def find_or_create_thread(db: Session, user_a: int, user_b: int) -> MessageThread:
    """Direct thread between two users. The smaller id is stored as participant1."""
    p1, p2 = sorted((user_a, user_b))
    thread = (
        db.query(MessageThread)
        .filter(
            or_(
                and_(MessageThread.participant1_id == p1, MessageThread.participant2_id == p2),
                and_(MessageThread.participant1_id == p2, MessageThread.participant2_id == p1),
            )
        )
        .first()
    )
    if not thread:
        thread = MessageThread(participant1_id=p1, participant2_id=p2)
        db.add(thread)
        db.flush()
    return thread


def post_message(db: Session, thread: MessageThread, sender_id: int, body: str) -> DirectMessage:
    """Add a message and bump the thread's activity time. The caller commits."""
    message = DirectMessage(thread_id=thread.id, sender_id=sender_id, body=body, read=False)
    db.add(message)
    thread.updated_at = datetime.utcnow()
    return message
