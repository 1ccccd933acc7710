from django.conf import settings
from django.db import models


class Payment(models.Model):
    """Local mirror of a gateway transaction attempt for one booking."""

    PENDING = "pending"
    SUCCESSFUL = "successful"
    FAILED = "failed"
    STATUSES = [
        (PENDING, "Pending"),
        (SUCCESSFUL, "Successful"),
        (FAILED, "Failed"),
    ]

    booking = models.ForeignKey('bookings.Booking', on_delete=models.CASCADE, related_name='payments')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='payments')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=10, default='NGN')
    tx_ref = models.CharField(max_length=100, unique=True)
    flutterwave_id = models.CharField(max_length=100, blank=True)
    payment_type = models.CharField(max_length=40, blank=True)
    # gateway status, stored as reported
    status = models.CharField(max_length=30, default=PENDING)
    response_data = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.tx_ref} ({self.status})"

    @property
    def is_successful(self) -> bool:
        return self.status == self.SUCCESSFUL
