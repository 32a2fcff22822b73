from thriftsy.models.notification import Message, Notification
from thriftsy.notify.hub import hub


class TestMessages:
    """Buyer/seller conversations about a product"""

    def test_reply_creates_message_and_notification(self, client, buyer_headers, buyer_user,
                                                    seller_user, product):
        subscription = hub.subscribe(seller_user.id)
        try:
            response = client.post(
                "/api/messages/reply",
                json={"productId": product.id, "toUserId": seller_user.id, "content": " Is it M? "},
                headers=buyer_headers,
            )
            frame = subscription.next_frame(timeout=0)
        finally:
            hub.unsubscribe(subscription)

        assert response.status_code == 201
        assert response.json["content"] == "Is it M?"
        assert response.json["product_title"] == "Denim Jacket"

        note = Notification.query.filter_by(user_id=seller_user.id).one()
        assert note.type == "message"
        assert note.payload == {
            "productId": product.id,
            "title": "Denim Jacket",
            "fromUserId": buyer_user.id,
            "preview": "Is it M?",
        }
        assert frame is not None and "Is it M?" in frame

    def test_preview_is_truncated(self, client, buyer_headers, seller_user, product):
        client.post(
            "/api/messages/reply",
            json={"productId": product.id, "toUserId": seller_user.id, "content": "x" * 500},
            headers=buyer_headers,
        )

        note = Notification.query.filter_by(user_id=seller_user.id).one()
        assert len(note.payload["preview"]) == 120

    def test_blank_content_rejected(self, client, buyer_headers, seller_user, product):
        response = client.post(
            "/api/messages/reply",
            json={"productId": product.id, "toUserId": seller_user.id, "content": "   "},
            headers=buyer_headers,
        )

        assert response.status_code == 400
        assert Message.query.count() == 0
        assert Notification.query.count() == 0

    def test_unknown_recipient(self, client, buyer_headers, product):
        response = client.post(
            "/api/messages/reply",
            json={"productId": product.id, "toUserId": 999, "content": "hi"},
            headers=buyer_headers,
        )

        assert response.status_code == 404

    def test_unknown_product(self, client, buyer_headers, seller_user):
        response = client.post(
            "/api/messages/reply",
            json={"productId": 999, "toUserId": seller_user.id, "content": "hi"},
            headers=buyer_headers,
        )

        assert response.status_code == 404

    def test_list_includes_sent_and_received(self, client, buyer_headers, seller_headers,
                                             buyer_user, seller_user, product):
        client.post(
            "/api/messages/reply",
            json={"productId": product.id, "toUserId": seller_user.id, "content": "hello"},
            headers=buyer_headers,
        )
        client.post(
            "/api/messages/reply",
            json={"productId": product.id, "toUserId": buyer_user.id, "content": "hi back"},
            headers=seller_headers,
        )

        response = client.get("/api/messages", headers=buyer_headers)

        assert response.status_code == 200
        assert [m["content"] for m in response.json] == ["hi back", "hello"]
