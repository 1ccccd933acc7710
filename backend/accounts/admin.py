from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class MarketplaceUserAdmin(UserAdmin):
    list_display = ("email", "display_name", "role", "email_verified", "driver_license_verified")
    list_filter = ("role", "email_verified", "driver_license_verified", "is_staff")
    search_fields = ("email", "display_name", "phone")
    ordering = ("email",)
    fieldsets = UserAdmin.fieldsets + (
        (
            "Marketplace profile",
            {
                "fields": (
                    "display_name",
                    "phone",
                    "role",
                    "email_verified",
                    "driver_license_front",
                    "driver_license_back",
                    "driver_license_verified",
                )
            },
        ),
    )
