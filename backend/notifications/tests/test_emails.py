import types
from datetime import date
from decimal import Decimal
from smtplib import SMTPException

import pytest
import requests
from django.contrib.auth import get_user_model
from django.core import mail
from rest_framework.test import APIClient

from bookings.models import Booking
from listings.models import Stay
from notifications.api import SendEmailView
from notifications.dispatcher import NotificationDispatcher

User = get_user_model()


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, **kwargs):
        self.posts.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def _ok():
    return types.SimpleNamespace(ok=True, status_code=200, text="")


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def booking(db):
    host = User.objects.create_user(
        username="host@example.com",
        email="host@example.com",
        password="examplepass",
        display_name="Hannah Host",
        role=User.ROLE_HOST,
    )
    guest = User.objects.create_user(
        username="guest@example.com",
        email="guest@example.com",
        password="examplepass",
        display_name="Gbenga Guest",
    )
    stay = Stay.objects.create(
        host=host,
        title="Ikoyi Flat",
        location="Ikoyi, Lagos",
        price_per_night=Decimal("65000.00"),
    )
    return Booking.objects.create(
        user=guest,
        booking_type=Booking.STAY,
        stay=stay,
        start_date=date(2025, 7, 10),
        end_date=date(2025, 7, 12),
        total_amount=Decimal("130000.00"),
    )


def test_dispatcher_posts_typed_payload_with_internal_token(booking):
    session = FakeSession(_ok())
    dispatcher = NotificationDispatcher(
        base_url="https://carrrs.test/", session=session, timeout=3, token="s3cret"
    )

    assert dispatcher.host_booking_notification(booking) is True

    url, kwargs = session.posts[0]
    assert url == "https://carrrs.test/api/emails/send/"
    assert kwargs["timeout"] == 3
    assert kwargs["headers"]["X-Internal-Token"] == "s3cret"
    body = kwargs["json"]
    assert body["type"] == "host-booking-notification"
    assert body["host_email"] == "host@example.com"
    details = body["booking_details"]
    assert details["customer_email"] == "guest@example.com"
    assert details["item_name"] == "Ikoyi Flat"
    assert details["start_date"] == "2025-07-10"
    assert details["total_amount"] == "130000.00"


def test_dispatcher_swallows_transport_errors(booking):
    session = FakeSession(error=requests.Timeout("slow"))
    dispatcher = NotificationDispatcher(base_url="https://carrrs.test", session=session)

    assert dispatcher.booking_confirmation(booking) is False


def test_dispatcher_reports_rejected_requests(booking):
    session = FakeSession(types.SimpleNamespace(ok=False, status_code=400, text="bad"))
    dispatcher = NotificationDispatcher(base_url="https://carrrs.test", session=session)

    assert dispatcher.booking_confirmation(booking) is False


def test_email_endpoint_sends_booking_confirmation(db, client):
    response = client.post(
        "/api/emails/send/",
        {
            "type": "booking-confirmation",
            "user_email": "guest@example.com",
            "user_name": "Gbenga Guest",
            "booking_details": {
                "id": 7,
                "item_type": "stay",
                "item_name": "Ikoyi Flat",
                "location": "Ikoyi, Lagos",
                "start_date": "2025-07-10",
                "end_date": "2025-07-12",
                "total_amount": "130000.00",
            },
        },
        format="json",
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert len(mail.outbox) == 1
    message = mail.outbox[0]
    assert message.to == ["guest@example.com"]
    assert message.subject == "Booking received - Ikoyi Flat"
    assert "NGN 130,000.00" in message.body
    assert message.from_email.startswith("Carrrs <")


def test_email_endpoint_welcomes_hosts_with_host_dashboard(db, client, settings):
    settings.HOST_DASHBOARD_URL = "https://app.carrrs.test/host"

    response = client.post(
        "/api/emails/send/",
        {
            "type": "welcome",
            "user_email": "host@example.com",
            "user_name": "Hannah Host",
            "user_role": "host",
        },
        format="json",
    )

    assert response.status_code == 200
    assert mail.outbox[0].subject == "Welcome to Carrrs Host Community!"
    assert "https://app.carrrs.test/host" in mail.outbox[0].body


def test_email_endpoint_rejects_unknown_type(db, client):
    response = client.post("/api/emails/send/", {"type": "newsletter"}, format="json")

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid email type"}
    assert mail.outbox == []


def test_email_endpoint_validates_template_fields(db, client):
    response = client.post(
        "/api/emails/send/",
        {"type": "verification", "user_email": "not-an-email", "user_name": "Ada"},
        format="json",
    )

    assert response.status_code == 400
    details = response.json()["details"]
    assert "user_email" in details
    assert "verification_link" in details


def test_email_endpoint_requires_internal_token_when_configured(db, client, settings):
    settings.INTERNAL_API_TOKEN = "s3cret"
    payload = {
        "type": "welcome",
        "user_email": "ada@example.com",
        "user_name": "Ada",
    }

    rejected = client.post("/api/emails/send/", payload, format="json")
    accepted = client.post(
        "/api/emails/send/", payload, format="json", HTTP_X_INTERNAL_TOKEN="s3cret"
    )

    assert rejected.status_code == 403
    assert accepted.status_code == 200
    assert len(mail.outbox) == 1


def test_email_endpoint_reports_transport_failure(db, client, monkeypatch):
    class BrokenService:
        def send_welcome_email(self, *args):
            raise SMTPException("relay refused")

    monkeypatch.setattr(SendEmailView, "get_email_service", lambda self: BrokenService())

    response = client.post(
        "/api/emails/send/",
        {"type": "welcome", "user_email": "ada@example.com", "user_name": "Ada"},
        format="json",
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send email", "details": "relay refused"}
