from decimal import Decimal

from rest_framework import serializers

from bookings.models import Booking
from listings.models import Car, Experience, Service, Stay
from listings.serializers import ListingSummarySerializer

ITEM_MODELS = {
    Booking.CAR: Car,
    Booking.STAY: Stay,
    Booking.SERVICE: Service,
    Booking.EXPERIENCE: Experience,
}


class BookingCreateSerializer(serializers.Serializer):
    """
    Validate a booking request.

    ``booking_type`` may be omitted when exactly one of the ``<type>_id`` fields
    is supplied. Car and stay bookings need a date range; service and
    experience bookings take ``start_date`` as their single booking date.
    """

    booking_type = serializers.ChoiceField(choices=Booking.BOOKING_TYPES, required=False)
    car_id = serializers.CharField(required=False, allow_blank=True)
    stay_id = serializers.CharField(required=False, allow_blank=True)
    service_id = serializers.CharField(required=False, allow_blank=True)
    experience_id = serializers.CharField(required=False, allow_blank=True)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    guest_count = serializers.IntegerField(min_value=1, required=False, default=1)
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    total_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )

    def _resolve_type(self, attrs) -> str:
        booking_type = attrs.get("booking_type")
        if booking_type:
            return booking_type
        supplied = [key for key in ITEM_MODELS if attrs.get(f"{key}_id")]
        if len(supplied) != 1:
            raise serializers.ValidationError(
                {"booking_type": "Specify a booking type or exactly one item id."}
            )
        return supplied[0]

    def validate(self, attrs):
        booking_type = self._resolve_type(attrs)
        item_field = f"{booking_type}_id"
        item_id = attrs.get(item_field)
        if not item_id:
            raise serializers.ValidationError({item_field: "This field is required."})

        model = ITEM_MODELS[booking_type]
        try:
            item = model.objects.select_related("host").get(pk=item_id)
        except (model.DoesNotExist, ValueError):
            raise serializers.ValidationError({item_field: f"Unknown {booking_type}."})

        start_date = attrs.get("start_date")
        end_date = attrs.get("end_date")
        if start_date is None:
            raise serializers.ValidationError({"start_date": "This field is required."})
        if booking_type in Booking.DATE_RANGE_TYPES:
            if end_date is None:
                raise serializers.ValidationError({"end_date": "This field is required."})
            if end_date < start_date:
                raise serializers.ValidationError({"end_date": "End date must not be before the start date."})

        attrs["booking_type"] = booking_type
        attrs["item"] = item
        return attrs

    def create(self, validated_data):
        booking_type = validated_data["booking_type"]
        fields = {
            "user": validated_data["user"],
            "booking_type": booking_type,
            booking_type: validated_data["item"],
            "guest_count": validated_data["guest_count"],
            "special_requests": validated_data["special_requests"],
            "total_amount": validated_data["total_amount"],
            "status": Booking.PENDING,
        }
        if booking_type in Booking.DATE_RANGE_TYPES:
            fields["start_date"] = validated_data["start_date"]
            fields["end_date"] = validated_data["end_date"]
        else:
            fields["booking_date"] = validated_data["start_date"]
        return Booking.objects.create(**fields)


class BookingSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    car_id = serializers.IntegerField(read_only=True)
    stay_id = serializers.IntegerField(read_only=True)
    service_id = serializers.IntegerField(read_only=True)
    experience_id = serializers.IntegerField(read_only=True)
    item = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "user_id",
            "booking_type",
            "car_id",
            "stay_id",
            "service_id",
            "experience_id",
            "item",
            "start_date",
            "end_date",
            "booking_date",
            "guest_count",
            "special_requests",
            "total_amount",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_item(self, obj: Booking):
        listing = obj.listing
        if listing is None:
            return None
        return ListingSummarySerializer(listing).data
