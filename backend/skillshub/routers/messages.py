import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from skillshub.database import get_db
from skillshub.dependencies import get_current_identity
from skillshub.models import DirectMessage, MessageThread
from skillshub.models.enums import NotificationType
from skillshub.schemas import SendMessageRequest
from skillshub.services.access import commit_or_raise, get_thread_for_participant
from skillshub.services.auth import Identity
from skillshub.services.messaging import post_message
from skillshub.services.notifications import notify

logger = logging.getLogger(__name__)
router = APIRouter()


def _participant(user) -> dict:
    return {"id": user.id, "name": user.full_name, "email": user.email, "role": user.role}


def _message(message: DirectMessage) -> dict:
    return {
        "id": message.id,
        "body": message.body,
        "senderId": message.sender_id,
        "senderName": message.sender.full_name,
        "read": message.read,
        "createdAt": message.created_at,
    }


@router.get("")
def list_threads(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    """The caller's conversations, most recent activity first."""
    threads = (
        db.query(MessageThread)
        .options(
            joinedload(MessageThread.participant1),
            joinedload(MessageThread.participant2),
        )
        .filter(
            or_(
                MessageThread.participant1_id == identity.user_id,
                MessageThread.participant2_id == identity.user_id,
            )
        )
        .order_by(MessageThread.updated_at.desc(), MessageThread.id.desc())
        .all()
    )

    unread = dict(
        db.query(DirectMessage.thread_id, func.count(DirectMessage.id))
        .filter(
            DirectMessage.thread_id.in_([t.id for t in threads]),
            DirectMessage.sender_id != identity.user_id,
            DirectMessage.read == False,  # noqa: E712
        )
        .group_by(DirectMessage.thread_id)
        .all()
    ) if threads else {}

    results = []
    for thread in threads:
        last = (
            db.query(DirectMessage)
            .options(joinedload(DirectMessage.sender))
            .filter(DirectMessage.thread_id == thread.id)
            .order_by(DirectMessage.created_at.desc(), DirectMessage.id.desc())
            .first()
        )
        results.append({
            "id": thread.id,
            "otherParticipant": _participant(thread.other_participant(identity.user_id)),
            "lastMessage": _message(last) if last else None,
            "unreadCount": unread.get(thread.id, 0),
            "updatedAt": thread.updated_at,
        })

    return {"threads": results}


@router.get("/{thread_id}")
def get_thread(
    thread_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Messages in a thread, oldest first. Marks incoming messages as read."""
    thread = get_thread_for_participant(db, identity, thread_id)

    messages = (
        db.query(DirectMessage)
        .options(joinedload(DirectMessage.sender))
        .filter(DirectMessage.thread_id == thread.id)
        .order_by(DirectMessage.created_at.asc(), DirectMessage.id.asc())
        .all()
    )
    payload = [_message(m) for m in messages]

    updated = (
        db.query(DirectMessage)
        .filter(
            DirectMessage.thread_id == thread.id,
            DirectMessage.sender_id != identity.user_id,
            DirectMessage.read == False,  # noqa: E712
        )
        .update({DirectMessage.read: True}, synchronize_session=False)
    )
    if updated:
        commit_or_raise(db, "Failed to mark messages as read")

    return {
        "thread": {
            "id": thread.id,
            "otherParticipant": _participant(thread.other_participant(identity.user_id)),
        },
        "messages": payload,
    }


@router.post("/{thread_id}", status_code=status.HTTP_201_CREATED)
def send_message(
    thread_id: int,
    data: SendMessageRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    thread = get_thread_for_participant(db, identity, thread_id)
    message = post_message(db, thread, identity.user_id, data.message)

    notify(
        db,
        user_id=thread.other_participant_id(identity.user_id),
        type=NotificationType.MESSAGE,
        title="New Message",
        message=f"{identity.display_name} sent you a message",
        link="/dashboard/seeker/messages",
    )
    commit_or_raise(db, "Failed to send message")
    db.refresh(message)

    return {"success": True, "message": _message(message)}
