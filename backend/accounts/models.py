from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Marketplace account; doubles as the renter/host profile."""

    ROLE_USER = "user"
    ROLE_HOST = "host"
    ROLES = [
        (ROLE_USER, "User"),
        (ROLE_HOST, "Host"),
    ]

    display_name = models.CharField(max_length=120, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    role = models.CharField(max_length=10, choices=ROLES, default=ROLE_USER)
    email_verified = models.BooleanField(default=False)
    driver_license_front = models.URLField(max_length=500, blank=True)
    driver_license_back = models.URLField(max_length=500, blank=True)
    driver_license_verified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def full_name(self) -> str:
        return self.display_name or f"{self.first_name} {self.last_name}".strip()

    @property
    def is_host(self) -> bool:
        return self.role == self.ROLE_HOST

    def submit_driver_license(self, *, front: str, back: str):
        self.driver_license_front = front
        self.driver_license_back = back
        self.driver_license_verified = False
        self.save(
            update_fields=[
                "driver_license_front",
                "driver_license_back",
                "driver_license_verified",
                "updated_at",
            ]
        )

    def mark_email_verified(self):
        if not self.email_verified:
            self.email_verified = True
            self.save(update_fields=["email_verified", "updated_at"])
