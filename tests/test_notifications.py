from datetime import datetime

import pytest
from fastapi import HTTPException

from gigconnect.domain.notifications.service import NotificationService


@pytest.fixture
def booking_parties(db, seeder):
    customer = seeder.user("casey@example.com", name="Casey")
    vendor_user = seeder.user("stylehub@example.com", role="vendor")
    vendor = seeder.vendor(vendor_user, "StyleHub Studio")
    haircut = seeder.service(vendor, seeder.category("Beauty & Spa"), "Haircut", 45)
    booking = seeder.booking(customer, haircut, "pending", datetime(2026, 3, 2, 10))
    db.commit()
    return {"customer": customer, "vendor_user": vendor_user, "booking": booking}


class TestNotificationService:
    def test_create_and_list_newest_first(self, db, booking_parties):
        service = NotificationService(db)
        user_id = booking_parties["customer"].id

        service.create_notification(user_id, "Booking confirmed")
        service.create_notification(user_id, "Vendor is on the way")

        listing = service.get_notifications(user_id)
        assert [n.message for n in listing] == ["Vendor is on the way", "Booking confirmed"]
        assert all(not n.isRead for n in listing)
        assert service.get_unread_count(user_id) == 2

    def test_mark_one_and_all_as_read(self, db, booking_parties):
        service = NotificationService(db)
        user_id = booking_parties["customer"].id
        first = service.create_notification(user_id, "One")
        service.create_notification(user_id, "Two")
        service.create_notification(user_id, "Three")

        service.mark_as_read(first.id, user_id)
        assert service.get_unread_count(user_id) == 2

        assert service.mark_all_as_read(user_id) == 2
        assert service.get_unread_count(user_id) == 0

    def test_mark_as_read_is_scoped_to_owner(self, db, booking_parties):
        service = NotificationService(db)
        notification = service.create_notification(booking_parties["customer"].id, "Private")

        with pytest.raises(HTTPException) as exc_info:
            service.mark_as_read(notification.id, booking_parties["vendor_user"].id)

        assert exc_info.value.status_code == 404
        assert service.get_unread_count(booking_parties["customer"].id) == 1

    def test_booking_notifications_reach_each_party(self, db, booking_parties):
        service = NotificationService(db)
        booking_id = booking_parties["booking"].id

        to_vendor = service.notify_vendor_for_booking(booking_id, "New booking request")
        to_customer = service.notify_customer_for_booking(booking_id, "Request sent")

        assert to_vendor.userId == booking_parties["vendor_user"].id
        assert to_customer.userId == booking_parties["customer"].id

    def test_unknown_user_is_404(self, db, booking_parties):
        service = NotificationService(db)

        with pytest.raises(HTTPException) as exc_info:
            service.create_notification(424242, "Hello")

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "User not found"

    def test_unknown_booking_is_skipped(self, db, booking_parties, caplog):
        service = NotificationService(db)

        with caplog.at_level("WARNING"):
            assert service.notify_vendor_for_booking(9999, "Hello") is None
            assert service.notify_customer_for_booking(9999, "Hello") is None

        assert "notification skipped" in caplog.text


class TestNotificationEndpoints:
    def test_notification_flow(self, client, booking_parties):
        user_id = booking_parties["customer"].id

        created = client.post("/notifications", json={"userId": user_id, "message": "  Booking confirmed  "})
        assert created.status_code == 201
        assert created.json()["message"] == "Booking confirmed"
        assert created.json()["isRead"] is False

        assert client.get(f"/notifications/users/{user_id}/unread-count").json() == {"unread_count": 1}

        notification_id = created.json()["id"]
        assert client.post(f"/notifications/users/{user_id}/{notification_id}/read").status_code == 200
        assert client.get(f"/notifications/users/{user_id}").json()[0]["isRead"] is True

    def test_read_all(self, client, booking_parties):
        user_id = booking_parties["customer"].id
        for message in ("One", "Two"):
            client.post("/notifications", json={"userId": user_id, "message": message})

        response = client.post(f"/notifications/users/{user_id}/read-all")
        assert response.json()["updated"] == 2

    def test_unknown_notification_is_404(self, client, booking_parties):
        user_id = booking_parties["customer"].id
        assert client.post(f"/notifications/users/{user_id}/9999/read").status_code == 404

    def test_unknown_user_is_not_reported_as_outage(self, client, booking_parties):
        response = client.post("/notifications", json={"userId": 424242, "message": "Hello"})

        assert response.status_code == 404
        assert response.json() == {"detail": "User not found"}

    def test_blank_message_is_rejected(self, client, booking_parties):
        response = client.post("/notifications", json={"userId": booking_parties["customer"].id, "message": "   "})
        assert response.status_code == 422

    def test_booking_notification_endpoints(self, client, booking_parties):
        booking_id = booking_parties["booking"].id

        delivered = client.post(f"/notifications/bookings/{booking_id}/vendor", json={"message": "New booking"}).json()
        assert delivered["delivered"] is True
        assert delivered["notification"]["userId"] == booking_parties["vendor_user"].id

        missing = client.post("/notifications/bookings/9999/customer", json={"message": "Hi"}).json()
        assert missing == {"delivered": False, "notification": None}

    def test_requires_database(self, static_client):
        assert static_client.get("/notifications/users/1").status_code == 503
