import logging
import secrets
from smtplib import SMTPException

from django.conf import settings
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .dispatcher import (
    BOOKING_CONFIRMATION,
    HOST_BOOKING_NOTIFICATION,
    PAYMENT_CONFIRMATION,
    VERIFICATION,
    WELCOME,
)
from .serializers import EmailRequestSerializer, TEMPLATE_SERIALIZERS
from .services import EmailService

logger = logging.getLogger(__name__)


class HasInternalToken(permissions.BasePermission):
    """Require the shared internal token when one is configured."""

    message = "Invalid internal token."

    def has_permission(self, request, view):
        expected = settings.INTERNAL_API_TOKEN
        if not expected:
            return True
        provided = request.headers.get("X-Internal-Token", "")
        return secrets.compare_digest(provided, expected)


class SendEmailView(APIView):
    authentication_classes = []
    permission_classes = [HasInternalToken]

    def get_email_service(self) -> EmailService:
        return EmailService.from_settings()

    def post(self, request, *args, **kwargs):
        type_serializer = EmailRequestSerializer(data=request.data)
        if not type_serializer.is_valid():
            return Response({"error": "Invalid email type"}, status=status.HTTP_400_BAD_REQUEST)
        email_type = type_serializer.validated_data["type"]

        serializer = TEMPLATE_SERIALIZERS[email_type](data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        service = self.get_email_service()
        try:
            if email_type == WELCOME:
                service.send_welcome_email(data["user_email"], data["user_name"], data["user_role"])
            elif email_type == VERIFICATION:
                service.send_verification_email(
                    data["user_email"], data["user_name"], data["verification_link"]
                )
            elif email_type == BOOKING_CONFIRMATION:
                service.send_booking_confirmation_email(
                    data["user_email"], data["user_name"], data["booking_details"]
                )
            elif email_type == PAYMENT_CONFIRMATION:
                service.send_payment_confirmation_email(
                    data["user_email"], data["user_name"], data["payment_details"]
                )
            elif email_type == HOST_BOOKING_NOTIFICATION:
                service.send_host_booking_notification_email(
                    data["host_email"], data["host_name"], data["booking_details"]
                )
        except (SMTPException, OSError) as exc:
            logger.exception("Failed to send %s email: %s", email_type, exc)
            return Response(
                {"error": "Failed to send email", "details": str(exc)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response({"success": True}, status=status.HTTP_200_OK)
