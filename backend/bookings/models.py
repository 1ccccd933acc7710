from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Booking(models.Model):
    """Reservation of a car, stay, service or experience by a marketplace user."""

    CAR = "car"
    STAY = "stay"
    SERVICE = "service"
    EXPERIENCE = "experience"
    BOOKING_TYPES = [
        (CAR, "Car"),
        (STAY, "Stay"),
        (SERVICE, "Service"),
        (EXPERIENCE, "Experience"),
    ]
    DATE_RANGE_TYPES = {CAR, STAY}

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    STATUSES = [
        (PENDING, "Pending"),
        (CONFIRMED, "Confirmed"),
        (CANCELLED, "Cancelled"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    booking_type = models.CharField(max_length=12, choices=BOOKING_TYPES)
    car = models.ForeignKey(
        "listings.Car", on_delete=models.PROTECT, null=True, blank=True, related_name="bookings"
    )
    stay = models.ForeignKey(
        "listings.Stay", on_delete=models.PROTECT, null=True, blank=True, related_name="bookings"
    )
    service = models.ForeignKey(
        "listings.Service", on_delete=models.PROTECT, null=True, blank=True, related_name="bookings"
    )
    experience = models.ForeignKey(
        "listings.Experience", on_delete=models.PROTECT, null=True, blank=True, related_name="bookings"
    )
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    booking_date = models.DateField(null=True, blank=True)
    guest_count = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    special_requests = models.TextField(blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=12, choices=STATUSES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(
                        booking_type="car",
                        car__isnull=False,
                        stay__isnull=True,
                        service__isnull=True,
                        experience__isnull=True,
                    )
                    | models.Q(
                        booking_type="stay",
                        car__isnull=True,
                        stay__isnull=False,
                        service__isnull=True,
                        experience__isnull=True,
                    )
                    | models.Q(
                        booking_type="service",
                        car__isnull=True,
                        stay__isnull=True,
                        service__isnull=False,
                        experience__isnull=True,
                    )
                    | models.Q(
                        booking_type="experience",
                        car__isnull=True,
                        stay__isnull=True,
                        service__isnull=True,
                        experience__isnull=False,
                    )
                ),
                name="booking_single_item_matches_type",
            ),
        ]

    def __str__(self):
        return f"Booking #{self.pk} ({self.booking_type}, {self.status})"

    @property
    def listing(self):
        return getattr(self, self.booking_type, None)

    def confirm(self) -> bool:
        """
        Move a pending booking to confirmed.

        The transition is a conditional UPDATE so that concurrent or repeated
        verifications of the same payment confirm the booking at most once.
        Returns True only for the call that performed the transition.
        """

        now = timezone.now()
        updated = Booking.objects.filter(pk=self.pk, status=self.PENDING).update(
            status=self.CONFIRMED,
            updated_at=now,
        )
        if updated:
            self.status = self.CONFIRMED
            self.updated_at = now
        return bool(updated)
