import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.models import Booking
from notifications.dispatcher import NotifierMixin
from payments.models import Payment
from payments.serializers import (
    PaymentInitializeSerializer,
    PaymentProcessSerializer,
    PaymentSerializer,
    PaymentVerifySerializer,
)
from payments.services.flutterwave import FlutterwaveClient, GatewayError
from payments.services.payments import (
    apply_verification,
    build_charge_payload,
    generate_tx_ref,
    payment_instructions,
    record_charge,
)

logger = logging.getLogger(__name__)


class GatewayMixin:
    gateway_class = FlutterwaveClient

    def get_gateway(self) -> FlutterwaveClient:
        return self.gateway_class.from_settings()


class PaymentInitializeView(APIView):
    """Open a pending payment against one of the caller's bookings."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = PaymentInitializeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking = get_object_or_404(Booking, pk=data["booking_id"], user=request.user)
        if data["amount"] != booking.total_amount:
            return Response(
                {"error": "Payment amount does not match the booking total."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            with transaction.atomic():
                payment = Payment.objects.create(
                    booking=booking,
                    user=request.user,
                    amount=data["amount"],
                    currency=(data.get("currency") or settings.DEFAULT_CURRENCY).upper(),
                    tx_ref=data.get("tx_ref") or generate_tx_ref(),
                    status=Payment.PENDING,
                )
        except IntegrityError:
            return Response(
                {"error": "A payment with this reference already exists."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response({"payment": PaymentSerializer(payment).data}, status=status.HTTP_201_CREATED)


class PaymentProcessView(GatewayMixin, APIView):
    """Forward a charge to Flutterwave and mirror the reported status locally."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = PaymentProcessSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        payment = get_object_or_404(Payment, tx_ref=data["tx_ref"], user=request.user)
        payment_type = data.get("type")

        if payment.status != Payment.PENDING:
            return Response(
                {"error": f"Payment is already {payment.status}."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        currency = (data.get("currency") or payment.currency).upper()
        if data["amount"] != payment.amount or currency != payment.currency.upper():
            return Response(
                {"error": "Payment amount does not match the payment record."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            gateway = self.get_gateway()
        except RuntimeError as exc:
            logger.error("Flutterwave not configured: %s", exc)
            return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        try:
            result = gateway.charge(build_charge_payload({**data, "currency": payment.currency}))
        except GatewayError as exc:
            return Response(
                {"error": exc.message or "Payment processing failed"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        payment = record_charge(payment, result, payment_type=payment_type)
        charge = result.get("data") or {}

        if payment.status == Payment.SUCCESSFUL:
            message = "Payment completed successfully"
        elif payment.status == Payment.PENDING:
            message = payment_instructions(payment_type, charge, currency=payment.currency)
        else:
            message = result.get("message") or "Payment failed"

        return Response({"status": payment.status, "data": charge, "message": message})


class PaymentVerifyView(NotifierMixin, GatewayMixin, APIView):
    """
    Confirm a transaction with Flutterwave and settle the booking.

    GET serves as the gateway's redirect target and is public; POST is for the
    signed-in client and carries the same fields in its body.
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    def get(self, request, *args, **kwargs):
        return self._verify(request.query_params)

    def post(self, request, *args, **kwargs):
        return self._verify(request.data)

    def _verify(self, params):
        serializer = PaymentVerifySerializer(data=params)
        serializer.is_valid(raise_exception=True)
        tx_ref = serializer.validated_data.get("tx_ref") or None
        transaction_id = serializer.validated_data.get("transaction_id") or None

        try:
            gateway = self.get_gateway()
        except RuntimeError as exc:
            logger.error("Flutterwave not configured: %s", exc)
            return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        try:
            result = gateway.verify(tx_ref=tx_ref, transaction_id=transaction_id)
        except GatewayError:
            return Response(
                {"error": "Transaction verification failed"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        if result.get("status") != "success":
            logger.warning("Verification of %s rejected by gateway: %s", tx_ref or transaction_id, result)
            return Response(
                {"error": "Transaction verification failed"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        transaction_data = result.get("data") or {}
        try:
            outcome = apply_verification(transaction_data)
        except Payment.DoesNotExist:
            return Response({"error": "Payment not found"}, status=status.HTTP_404_NOT_FOUND)

        if outcome.booking_confirmed:
            self.get_notifier().payment_confirmation(outcome.payment)

        return Response(
            {
                "status": outcome.status,
                "payment": PaymentSerializer(outcome.payment).data,
                "transaction": transaction_data,
            }
        )
