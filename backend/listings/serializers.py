from rest_framework import serializers

from .models import Car, Experience, Service, Stay

LISTING_FIELDS = [
    "id",
    "host_id",
    "host_name",
    "title",
    "description",
    "location",
    "state",
    "images",
    "features",
    "is_available",
    "created_at",
]


class ListingSerializer(serializers.ModelSerializer):
    host_id = serializers.IntegerField(read_only=True)
    host_name = serializers.CharField(source="host.full_name", read_only=True)


class CarSerializer(ListingSerializer):
    class Meta:
        model = Car
        fields = LISTING_FIELDS + [
            "make",
            "model",
            "year",
            "seats",
            "transmission",
            "price_per_day",
        ]
        read_only_fields = fields


class StaySerializer(ListingSerializer):
    class Meta:
        model = Stay
        fields = LISTING_FIELDS + [
            "price_per_night",
            "max_guests",
            "bedrooms",
            "bathrooms",
        ]
        read_only_fields = fields


class ServiceSerializer(ListingSerializer):
    class Meta:
        model = Service
        fields = LISTING_FIELDS + ["category", "price"]
        read_only_fields = fields


class ExperienceSerializer(ListingSerializer):
    car = CarSerializer(read_only=True)
    services = ServiceSerializer(many=True, read_only=True)

    class Meta:
        model = Experience
        fields = LISTING_FIELDS + [
            "price_per_person",
            "duration_hours",
            "car",
            "services",
        ]
        read_only_fields = fields


class ListingSummarySerializer(serializers.Serializer):
    """Compact view of whichever item a booking points at."""

    id = serializers.IntegerField()
    title = serializers.CharField()
    location = serializers.CharField()
    images = serializers.JSONField()
