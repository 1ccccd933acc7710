from decimal import Decimal

from rest_framework import serializers

from payments.models import Payment
from payments.services.payments import PAYMENT_TYPES


class PaymentSerializer(serializers.ModelSerializer):
    booking_id = serializers.IntegerField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "booking_id",
            "user_id",
            "amount",
            "currency",
            "tx_ref",
            "flutterwave_id",
            "payment_type",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PaymentInitializeSerializer(serializers.Serializer):
    booking_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    tx_ref = serializers.CharField(max_length=100, required=False, allow_blank=True)
    currency = serializers.CharField(max_length=10, required=False, allow_blank=True)

    def validate_tx_ref(self, value: str) -> str:
        if value and Payment.objects.filter(tx_ref=value).exists():
            raise serializers.ValidationError("A payment with this reference already exists.")
        return value


class CustomerSerializer(serializers.Serializer):
    email = serializers.EmailField()
    phone_number = serializers.CharField(required=False, allow_blank=True)
    name = serializers.CharField(required=False, allow_blank=True)


class PaymentProcessSerializer(serializers.Serializer):
    """
    Charge request forwarded to the gateway.

    Method details travel in the sub-object matching ``type``: ``card``,
    ``bank``, ``ussd`` or ``mobile_money``.
    """

    tx_ref = serializers.CharField(max_length=100)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    currency = serializers.CharField(max_length=10, required=False, allow_blank=True)
    customer = CustomerSerializer()
    type = serializers.ChoiceField(choices=PAYMENT_TYPES, required=False)
    customizations = serializers.DictField(required=False)
    card = serializers.DictField(required=False)
    bank = serializers.DictField(required=False)
    ussd = serializers.DictField(required=False)
    mobile_money = serializers.DictField(required=False)

    def validate(self, attrs):
        payment_type = attrs.get("type")
        sub_object = {
            "card": "card",
            "bank_transfer": "bank",
            "ussd": "ussd",
            "mobile_money_nigeria": "mobile_money",
        }.get(payment_type)
        if sub_object and not attrs.get(sub_object):
            raise serializers.ValidationError({sub_object: "This field is required for this payment type."})
        return attrs


class PaymentVerifySerializer(serializers.Serializer):
    tx_ref = serializers.CharField(required=False, allow_blank=True)
    transaction_id = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get("tx_ref") and not attrs.get("transaction_id"):
            raise serializers.ValidationError("Missing transaction reference")
        return attrs
