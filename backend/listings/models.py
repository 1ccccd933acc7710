from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Listing(models.Model):
    """Fields shared by every host-owned rentable item."""

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(class)ss",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=200)
    state = models.CharField(max_length=100, blank=True)
    images = models.JSONField(default=list, blank=True)
    features = models.JSONField(default=list, blank=True)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.title} @ {self.location}"


class Car(Listing):
    AUTOMATIC = "automatic"
    MANUAL = "manual"
    TRANSMISSIONS = [
        (AUTOMATIC, "Automatic"),
        (MANUAL, "Manual"),
    ]

    make = models.CharField(max_length=80, blank=True)
    model = models.CharField(max_length=80, blank=True)
    year = models.PositiveIntegerField(null=True, blank=True)
    seats = models.PositiveIntegerField(default=4, validators=[MinValueValidator(1)])
    transmission = models.CharField(max_length=12, choices=TRANSMISSIONS, default=AUTOMATIC)
    price_per_day = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta(Listing.Meta):
        pass


class Stay(Listing):
    price_per_night = models.DecimalField(max_digits=12, decimal_places=2)
    max_guests = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    bedrooms = models.PositiveIntegerField(default=1)
    bathrooms = models.PositiveIntegerField(default=1)

    class Meta(Listing.Meta):
        pass


class Service(Listing):
    category = models.CharField(max_length=80, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta(Listing.Meta):
        pass


class Experience(Listing):
    price_per_person = models.DecimalField(max_digits=12, decimal_places=2)
    duration_hours = models.PositiveIntegerField(null=True, blank=True)
    car = models.ForeignKey(
        "Car",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="experiences",
    )
    services = models.ManyToManyField("Service", blank=True, related_name="experiences")

    class Meta(Listing.Meta):
        pass
