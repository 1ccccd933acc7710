from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def _format_from_email(default_from: str) -> str:
    email_addr = default_from
    if '<' in default_from and default_from.endswith('>'):
        email_addr = default_from.split('<', 1)[1].rstrip('>')
    return f"Carrrs <{email_addr}>"


def _format_amount(amount: Any, currency: str = "NGN") -> str:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return f"{currency} {amount}"
    return f"{currency} {value:,.2f}"


class EmailService:
    """Renders the marketplace's transactional emails and hands them to Django's mail backend."""

    def __init__(
        self,
        *,
        from_email: str,
        dashboard_url: str,
        host_dashboard_url: str,
        connection=None,
    ):
        self.from_email = _format_from_email(from_email)
        self.dashboard_url = dashboard_url
        self.host_dashboard_url = host_dashboard_url
        self.connection = connection

    @classmethod
    def from_settings(cls, connection=None) -> "EmailService":
        return cls(
            from_email=settings.DEFAULT_FROM_EMAIL,
            dashboard_url=settings.DASHBOARD_URL,
            host_dashboard_url=settings.HOST_DASHBOARD_URL,
            connection=connection,
        )

    def send(self, *, subject: str, body_lines: Iterable[str], recipients: Iterable[str]) -> int:
        recipients = list(recipients)
        sent = send_mail(
            subject,
            "\n".join(body_lines),
            self.from_email,
            recipients,
            fail_silently=False,
            connection=self.connection,
        )
        logger.info("Sent '%s' email to %s", subject, ", ".join(recipients))
        return sent

    def send_welcome_email(self, user_email: str, user_name: str, user_role: str) -> int:
        is_host = user_role == "host"
        dashboard_url = self.host_dashboard_url if is_host else self.dashboard_url
        if is_host:
            perks = [
                " • List your cars, stays, and services",
                " • Manage your bookings and earnings",
                " • Connect with customers across Nigeria",
            ]
        else:
            perks = [
                " • Browse and book unique cars",
                " • Find amazing stays",
                " • Discover local services",
            ]
        community = " Host Community" if is_host else ""
        body_lines = [
            f"Hi {user_name},",
            "",
            f"Welcome to Carrrs{community}! We're excited to have you on board.",
            "",
            "You can now:",
            *perks,
            "",
            f"Go to your {'host ' if is_host else ''}dashboard: {dashboard_url}",
            "",
            "— The Carrrs Team",
        ]
        return self.send(
            subject=f"Welcome to Carrrs{community}!",
            body_lines=body_lines,
            recipients=[user_email],
        )

    def send_verification_email(self, user_email: str, user_name: str, verification_link: str) -> int:
        body_lines = [
            f"Hi {user_name},",
            "",
            "Thanks for signing up for Carrrs! Please verify your email address:",
            verification_link,
            "",
            "This link expires in 24 hours. If you didn't create an account, ignore this email.",
            "",
            "— The Carrrs Team",
        ]
        return self.send(
            subject="Verify your email - Carrrs",
            body_lines=body_lines,
            recipients=[user_email],
        )

    def send_booking_confirmation_email(
        self, user_email: str, user_name: str, booking_details: Mapping[str, Any]
    ) -> int:
        body_lines = [
            f"Hi {user_name},",
            "",
            f"Your booking for {booking_details['item_name']} has been received.",
            f"Booking ID: {booking_details['id']}",
            f"Type: {booking_details['item_type']}",
            f"Location: {booking_details.get('location') or 'Unknown'}",
            f"Dates: {booking_details.get('start_date')} to {booking_details.get('end_date')}",
            f"Total: {_format_amount(booking_details['total_amount'])}",
            "",
            f"Manage your bookings: {self.dashboard_url}",
            "",
            "— The Carrrs Team",
        ]
        return self.send(
            subject=f"Booking received - {booking_details['item_name']}",
            body_lines=body_lines,
            recipients=[user_email],
        )

    def send_payment_confirmation_email(
        self, user_email: str, user_name: str, payment_details: Mapping[str, Any]
    ) -> int:
        currency = payment_details.get("currency") or "NGN"
        body_lines = [
            f"Hi {user_name},",
            "",
            f"We received your payment of {_format_amount(payment_details['amount'], currency)}.",
            f"Transaction: {payment_details['transaction_id']}",
            f"Booking ID: {payment_details['booking_id']}",
            f"Item: {payment_details.get('item_name') or 'Unknown'} ({payment_details.get('item_location') or 'Unknown'})",
        ]
        if payment_details.get("payment_method"):
            body_lines.append(f"Method: {payment_details['payment_method']}")
        body_lines += [
            "",
            "Your booking is now confirmed.",
            "",
            "— The Carrrs Team",
        ]
        return self.send(
            subject="Payment confirmed - Carrrs",
            body_lines=body_lines,
            recipients=[user_email],
        )

    def send_host_booking_notification_email(
        self, host_email: str, host_name: str, booking_details: Mapping[str, Any]
    ) -> int:
        body_lines = [
            f"Hi {host_name},",
            "",
            f"{booking_details['customer_name']} ({booking_details['customer_email']}) "
            f"requested {booking_details['item_name']}.",
            f"Booking ID: {booking_details['id']}",
            f"Dates: {booking_details.get('start_date')} to {booking_details.get('end_date')}",
            f"Total: {_format_amount(booking_details['total_amount'])}",
            "",
            f"Review it in your host dashboard: {self.host_dashboard_url}",
            "",
            "— The Carrrs Team",
        ]
        return self.send(
            subject=f"New booking - {booking_details['item_name']}",
            body_lines=body_lines,
            recipients=[host_email],
        )
