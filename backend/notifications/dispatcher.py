from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

WELCOME = "welcome"
VERIFICATION = "verification"
BOOKING_CONFIRMATION = "booking-confirmation"
PAYMENT_CONFIRMATION = "payment-confirmation"
HOST_BOOKING_NOTIFICATION = "host-booking-notification"

EMAIL_TYPES = (
    WELCOME,
    VERIFICATION,
    BOOKING_CONFIRMATION,
    PAYMENT_CONFIRMATION,
    HOST_BOOKING_NOTIFICATION,
)


class NotificationDispatcher:
    """
    Fire-and-forget client for the internal ``/api/emails/send/`` endpoint.

    Callers build one per request and hand it whatever they just persisted.
    Delivery problems are logged and dropped: a missing email never undoes the
    booking or payment that triggered it.
    """

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 5.0,
        token: str = "",
    ):
        self.endpoint = f"{base_url.rstrip('/')}/api/emails/send/"
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token = token

    @classmethod
    def from_settings(cls, session: Optional[requests.Session] = None) -> "NotificationDispatcher":
        return cls(
            base_url=settings.SITE_URL,
            session=session,
            timeout=settings.NOTIFICATION_TIMEOUT,
            token=settings.INTERNAL_API_TOKEN,
        )

    def send(self, email_type: str, payload: Dict[str, Any]) -> bool:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["X-Internal-Token"] = self.token
        try:
            response = self.session.post(
                self.endpoint,
                json={"type": email_type, **payload},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Failed to dispatch %s email: %s", email_type, exc)
            return False

        if not response.ok:
            logger.warning(
                "Email endpoint rejected %s email (%s): %s",
                email_type,
                response.status_code,
                response.text[:500],
            )
            return False
        return True

    def welcome(self, user) -> bool:
        return self.send(
            WELCOME,
            {
                "user_email": user.email,
                "user_name": user.full_name or user.email,
                "user_role": user.role,
            },
        )

    def verification(self, user, verification_link: str) -> bool:
        return self.send(
            VERIFICATION,
            {
                "user_email": user.email,
                "user_name": user.full_name or user.email,
                "verification_link": verification_link,
            },
        )

    def booking_confirmation(self, booking) -> bool:
        listing = booking.listing
        return self.send(
            BOOKING_CONFIRMATION,
            {
                "user_email": booking.user.email,
                "user_name": booking.user.full_name or "Customer",
                "booking_details": _booking_details(booking, listing),
            },
        )

    def host_booking_notification(self, booking) -> bool:
        listing = booking.listing
        host = getattr(listing, "host", None)
        if host is None or not host.email:
            return False
        details = _booking_details(booking, listing)
        details["customer_name"] = booking.user.full_name or "Customer"
        details["customer_email"] = booking.user.email
        return self.send(
            HOST_BOOKING_NOTIFICATION,
            {
                "host_email": host.email,
                "host_name": host.full_name or "Host",
                "booking_details": details,
            },
        )

    def payment_confirmation(self, payment) -> bool:
        booking = payment.booking
        listing = booking.listing
        return self.send(
            PAYMENT_CONFIRMATION,
            {
                "user_email": booking.user.email,
                "user_name": booking.user.full_name or "Customer",
                "payment_details": {
                    "transaction_id": payment.flutterwave_id or payment.tx_ref,
                    "amount": str(payment.amount),
                    "currency": payment.currency,
                    "payment_method": payment.payment_type or "",
                    "booking_id": booking.id,
                    "item_name": getattr(listing, "title", "") or "Unknown",
                    "item_location": getattr(listing, "location", "") or "Unknown",
                    "date": payment.updated_at.isoformat(),
                },
            },
        )


def _booking_details(booking, listing) -> Dict[str, Any]:
    start = booking.start_date or booking.booking_date
    end = booking.end_date or booking.booking_date
    return {
        "id": booking.id,
        "item_type": booking.booking_type,
        "item_name": getattr(listing, "title", "") or "Unknown",
        "location": getattr(listing, "location", "") or "Unknown",
        "start_date": start.isoformat() if start else None,
        "end_date": end.isoformat() if end else None,
        "total_amount": str(booking.total_amount),
    }


class NotifierMixin:
    """Give a view a freshly built dispatcher; tests swap ``notifier_class``."""

    notifier_class = NotificationDispatcher

    def get_notifier(self) -> NotificationDispatcher:
        return self.notifier_class.from_settings()
