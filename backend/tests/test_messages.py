"""Tests for direct messages and notifications."""

from datetime import datetime, timedelta

from skillshub.models import DirectMessage, MessageThread, Notification
from skillshub.services.messaging import find_or_create_thread, post_message


def _thread(db, a, b, *bodies):
    """Thread between users a and b with alternating messages starting from a."""
    thread = find_or_create_thread(db, a.id, b.id)
    senders = [a, b]
    for i, body in enumerate(bodies):
        message = post_message(db, thread, senders[i % 2].id, body)
        message.created_at = datetime.utcnow() - timedelta(minutes=len(bodies) - i)
    db.commit()
    return thread


class TestThreads:
    """Tests for thread lookup and creation."""

    def test_find_or_create_orders_participants(self, db, seeker, employer):
        thread = find_or_create_thread(db, employer.id, seeker.id)
        db.commit()
        assert thread.participant1_id == min(seeker.id, employer.id)
        assert thread.participant2_id == max(seeker.id, employer.id)

        again = find_or_create_thread(db, seeker.id, employer.id)
        assert again.id == thread.id
        assert db.query(MessageThread).count() == 1

    def test_list_threads_with_unread_counts(self, client, db, seeker, employer, login):
        _thread(db, employer, seeker, "Hello", "Hi there", "Are you free?")

        login(seeker)
        threads = client.get("/api/messages").json()["threads"]
        assert len(threads) == 1
        assert threads[0]["otherParticipant"]["id"] == employer.id
        assert threads[0]["lastMessage"]["body"] == "Are you free?"
        # Two messages from the employer are unread
        assert threads[0]["unreadCount"] == 2

    def test_threads_are_private(self, client, db, seeker, employer, other_employer, login):
        thread = _thread(db, employer, seeker, "Private")

        login(other_employer)
        assert client.get("/api/messages").json()["threads"] == []
        response = client.get(f"/api/messages/{thread.id}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Thread not found"
        assert client.post(f"/api/messages/{thread.id}", json={"message": "Intrude"}).status_code == 404


class TestThreadMessages:
    def test_get_thread_marks_incoming_read(self, client, db, seeker, employer, login):
        thread = _thread(db, employer, seeker, "First", "Reply", "Third")

        login(seeker)
        response = client.get(f"/api/messages/{thread.id}")
        assert response.status_code == 200
        messages = response.json()["messages"]
        assert [m["body"] for m in messages] == ["First", "Reply", "Third"]
        # The payload reflects state before this read
        assert [m["read"] for m in messages] == [False, False, False]

        db.expire_all()
        incoming = db.query(DirectMessage).filter(DirectMessage.sender_id == employer.id).all()
        outgoing = db.query(DirectMessage).filter(DirectMessage.sender_id == seeker.id).all()
        assert all(m.read for m in incoming)
        # Own messages stay unread until the other side opens the thread
        assert not any(m.read for m in outgoing)

    def test_send_message_notifies_recipient(self, client, db, seeker, employer, login):
        thread = _thread(db, employer, seeker, "Hello")
        before = db.get(MessageThread, thread.id).updated_at

        login(seeker)
        response = client.post(f"/api/messages/{thread.id}", json={"message": "  Thanks!  "})
        assert response.status_code == 201
        message = response.json()["message"]
        assert message["body"] == "Thanks!"
        assert message["senderId"] == seeker.id

        note = db.query(Notification).filter(Notification.user_id == employer.id).one()
        assert note.type == "MESSAGE"
        db.expire_all()
        assert db.get(MessageThread, thread.id).updated_at >= before

    def test_blank_message_rejected(self, client, db, seeker, employer, login):
        thread = _thread(db, employer, seeker)
        login(seeker)
        response = client.post(f"/api/messages/{thread.id}", json={"message": "   "})
        assert response.status_code == 400
        assert db.query(DirectMessage).count() == 0


class TestNotifications:
    """Tests for /api/notifications."""

    def _notes(self, db, user, count):
        now = datetime.utcnow()
        for i in range(count):
            db.add(Notification(
                user_id=user.id,
                type="MESSAGE",
                title=f"Note {i}",
                message="m",
                created_at=now - timedelta(minutes=count - i),
            ))
        db.commit()

    def test_list_newest_first_with_unread_count(self, client, db, seeker, employer, login):
        self._notes(db, seeker, 3)
        self._notes(db, employer, 2)

        login(seeker)
        data = client.get("/api/notifications").json()
        assert [n["title"] for n in data["notifications"]] == ["Note 2", "Note 1", "Note 0"]
        assert data["unreadCount"] == 3

    def test_list_is_capped(self, client, db, seeker, login):
        self._notes(db, seeker, 55)
        login(seeker)
        data = client.get("/api/notifications").json()
        assert len(data["notifications"]) == 50
        assert data["unreadCount"] == 55

    def test_mark_one_read(self, client, db, seeker, login):
        self._notes(db, seeker, 2)
        target = db.query(Notification).filter(Notification.title == "Note 0").one()

        login(seeker)
        response = client.patch("/api/notifications", json={"notificationId": target.id, "read": True})
        assert response.status_code == 200
        data = client.get("/api/notifications").json()
        assert data["unreadCount"] == 1
        unread = client.get("/api/notifications", params={"unreadOnly": "true"}).json()["notifications"]
        assert [n["title"] for n in unread] == ["Note 1"]

    def test_mark_all_read(self, client, db, seeker, employer, login):
        self._notes(db, seeker, 3)
        self._notes(db, employer, 1)

        login(seeker)
        assert client.patch("/api/notifications", json={}).status_code == 200
        assert client.get("/api/notifications").json()["unreadCount"] == 0

        db.expire_all()
        assert db.query(Notification).filter(
            Notification.user_id == employer.id, Notification.read == False  # noqa: E712
        ).count() == 1

    def test_cannot_touch_other_users_notification(self, client, db, seeker, employer, login):
        self._notes(db, employer, 1)
        theirs = db.query(Notification).one()

        login(seeker)
        response = client.patch("/api/notifications", json={"notificationId": theirs.id})
        assert response.status_code == 404
        db.refresh(theirs)
        assert theirs.read is False
