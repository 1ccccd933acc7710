from rest_framework import serializers

from .dispatcher import (
    BOOKING_CONFIRMATION,
    EMAIL_TYPES,
    HOST_BOOKING_NOTIFICATION,
    PAYMENT_CONFIRMATION,
    VERIFICATION,
    WELCOME,
)


class EmailRequestSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=EMAIL_TYPES)


class BookingDetailsSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    item_type = serializers.CharField()
    item_name = serializers.CharField()
    location = serializers.CharField(required=False, allow_blank=True)
    start_date = serializers.CharField(required=False, allow_null=True)
    end_date = serializers.CharField(required=False, allow_null=True)
    total_amount = serializers.CharField()


class HostBookingDetailsSerializer(BookingDetailsSerializer):
    customer_name = serializers.CharField()
    customer_email = serializers.EmailField()


class PaymentDetailsSerializer(serializers.Serializer):
    transaction_id = serializers.CharField()
    amount = serializers.CharField()
    currency = serializers.CharField(required=False, default="NGN")
    payment_method = serializers.CharField(required=False, allow_blank=True)
    booking_id = serializers.IntegerField()
    item_name = serializers.CharField(required=False, allow_blank=True)
    item_location = serializers.CharField(required=False, allow_blank=True)
    date = serializers.CharField(required=False)


class WelcomeEmailSerializer(serializers.Serializer):
    user_email = serializers.EmailField()
    user_name = serializers.CharField()
    user_role = serializers.ChoiceField(choices=["user", "host"], default="user")


class VerificationEmailSerializer(serializers.Serializer):
    user_email = serializers.EmailField()
    user_name = serializers.CharField()
    verification_link = serializers.URLField()


class BookingConfirmationEmailSerializer(serializers.Serializer):
    user_email = serializers.EmailField()
    user_name = serializers.CharField()
    booking_details = BookingDetailsSerializer()


class PaymentConfirmationEmailSerializer(serializers.Serializer):
    user_email = serializers.EmailField()
    user_name = serializers.CharField()
    payment_details = PaymentDetailsSerializer()


class HostBookingNotificationEmailSerializer(serializers.Serializer):
    host_email = serializers.EmailField()
    host_name = serializers.CharField()
    booking_details = HostBookingDetailsSerializer()


TEMPLATE_SERIALIZERS = {
    WELCOME: WelcomeEmailSerializer,
    VERIFICATION: VerificationEmailSerializer,
    BOOKING_CONFIRMATION: BookingConfirmationEmailSerializer,
    PAYMENT_CONFIRMATION: PaymentConfirmationEmailSerializer,
    HOST_BOOKING_NOTIFICATION: HostBookingNotificationEmailSerializer,
}
