import json

from thriftsy.extensions import db
from thriftsy.enums import NotificationType
from thriftsy.models.notification import Notification
from thriftsy.notify.hub import hub
from thriftsy.services.notification_service import NotificationService


def _frames(response):
    for chunk in response.response:
        yield chunk.decode() if isinstance(chunk, bytes) else chunk


def _payload(frame):
    data = "\n".join(
        line[len("data: "):] for line in frame.split("\n") if line.startswith("data: ")
    )
    return json.loads(data)


class TestNotificationService:
    """Persist then push"""

    def test_notify_pushes_after_commit(self, app, buyer_user):
        subscription = hub.subscribe(buyer_user.id)
        try:
            note = NotificationService.notify(
                buyer_user.id, NotificationType.ORDER, {"orderId": 1}
            )
            frame = subscription.next_frame(timeout=0)
        finally:
            hub.unsubscribe(subscription)

        assert frame.startswith("event: notification\n")
        assert _payload(frame)["id"] == note.id
        assert _payload(frame)["type"] == "order"

    def test_push_waits_for_caller_commit(self, app, buyer_user):
        subscription = hub.subscribe(buyer_user.id)
        try:
            NotificationService.notify(buyer_user.id, "order", {}, commit=False)
            assert subscription.next_frame(timeout=0) is None

            db.session.commit()
            assert subscription.next_frame(timeout=0) is not None
        finally:
            hub.unsubscribe(subscription)

    def test_rollback_drops_push(self, app, buyer_user):
        subscription = hub.subscribe(buyer_user.id)
        try:
            NotificationService.notify(buyer_user.id, "order", {}, commit=False)
            db.session.rollback()
            db.session.commit()
            frame = subscription.next_frame(timeout=0)
        finally:
            hub.unsubscribe(subscription)

        assert frame is None
        assert Notification.query.count() == 0

    def test_mark_read_only_own(self, app, buyer_user, seller_user):
        mine = NotificationService.notify(buyer_user.id, "order", {})
        theirs = NotificationService.notify(seller_user.id, "order", {})

        updated = NotificationService.mark_read(buyer_user.id, [mine.id, theirs.id])

        assert updated == 1
        assert NotificationService.unread_count(buyer_user.id) == 0
        assert NotificationService.unread_count(seller_user.id) == 1

    def test_mark_read_is_idempotent(self, app, buyer_user):
        note = NotificationService.notify(buyer_user.id, "order", {})

        assert NotificationService.mark_read(buyer_user.id, [note.id]) == 1
        assert NotificationService.mark_read(buyer_user.id, [note.id]) == 0
        assert NotificationService.mark_read(buyer_user.id, []) == 0


class TestNotificationRoutes:
    def test_list_newest_first(self, client, buyer_headers, buyer_user):
        first = NotificationService.notify(buyer_user.id, "order", {"n": 1})
        second = NotificationService.notify(buyer_user.id, "order", {"n": 2})

        response = client.get("/api/notifications", headers=buyer_headers)

        assert response.status_code == 200
        assert [n["id"] for n in response.json] == [second.id, first.id]

    def test_mark_read_endpoint(self, client, buyer_headers, buyer_user):
        note = NotificationService.notify(buyer_user.id, "order", {})

        response = client.post(
            "/api/notifications/mark-read", json={"ids": [note.id]}, headers=buyer_headers
        )

        assert response.status_code == 200
        assert response.json["updated"] == 1
        assert db.session.get(Notification, note.id).read_at is not None

    def test_list_requires_login(self, client):
        assert client.get("/api/notifications").status_code == 401


class TestNotificationStream:
    """Server-sent events"""

    def test_stream_requires_token(self, client):
        response = client.get("/api/notifications/stream")

        assert response.status_code == 401

    def test_stream_rejects_bad_token(self, client):
        response = client.get("/api/notifications/stream?token=garbage")

        assert response.status_code == 401

    def test_bootstrap_then_live_frames(self, client, buyer_token, buyer_user):
        for n in range(12):
            NotificationService.notify(buyer_user.id, "order", {"n": n})

        response = client.get(
            f"/api/notifications/stream?token={buyer_token}", buffered=False
        )
        try:
            assert response.status_code == 200
            assert response.mimetype == "text/event-stream"
            assert response.headers["Cache-Control"] == "no-cache"
            frames = _frames(response)

            bootstrap = next(frames)
            assert bootstrap.startswith("event: bootstrap\n")
            recent = _payload(bootstrap)
            assert len(recent) == 10
            assert recent[0]["payload"] == {"n": 11}
            assert hub.connection_count(buyer_user.id) == 1

            hub.send(buyer_user.id, "notification", {"hello": "world"})
            live = next(frames)
            assert live.startswith("event: notification\n")
            assert _payload(live) == {"hello": "world"}
        finally:
            response.close()

        assert hub.connection_count(buyer_user.id) == 0

    def test_stream_only_gets_own_events(self, client, buyer_token, buyer_user, seller_user):
        response = client.get(
            f"/api/notifications/stream?token={buyer_token}", buffered=False
        )
        try:
            frames = _frames(response)
            assert _payload(next(frames)) == []

            NotificationService.notify(seller_user.id, "order", {"for": "seller"})
            NotificationService.notify(buyer_user.id, "order", {"for": "buyer"})

            frame = next(frames)
            assert _payload(frame)["payload"] == {"for": "buyer"}
        finally:
            response.close()

    def test_notification_during_bootstrap_is_delivered(self, client, buyer_token, buyer_user,
                                                        monkeypatch):
        list_for_user = NotificationService.list_for_user

        def list_after_late_notification(user_id, limit=50):
            # the stream must already be registered when the bootstrap is read
            assert hub.connection_count(user_id) == 1
            NotificationService.notify(user_id, "order", {"late": True})
            return list_for_user(user_id, limit=limit)

        monkeypatch.setattr(
            NotificationService, "list_for_user", staticmethod(list_after_late_notification)
        )

        response = client.get(
            f"/api/notifications/stream?token={buyer_token}", buffered=False
        )
        try:
            assert response.status_code == 200
            frames = _frames(response)
            assert _payload(next(frames))[0]["payload"] == {"late": True}

            live = next(frames)
            assert live.startswith("event: notification\n")
            assert _payload(live)["payload"] == {"late": True}
        finally:
            response.close()

        assert hub.connection_count(buyer_user.id) == 0

    def test_unread_stream_unsubscribes_on_close(self, client, buyer_token, buyer_user):
        response = client.get(
            f"/api/notifications/stream?token={buyer_token}", buffered=False
        )
        assert hub.connection_count(buyer_user.id) == 1

        response.close()

        assert hub.connection_count(buyer_user.id) == 0
