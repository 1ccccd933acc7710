from django.contrib import admin

from .models import Car, Experience, Service, Stay


class ListingAdmin(admin.ModelAdmin):
    list_display = ("title", "host", "location", "state", "is_available", "created_at")
    list_filter = ("is_available", "state")
    search_fields = ("title", "location", "host__email")


@admin.register(Car)
class CarAdmin(ListingAdmin):
    list_display = ListingAdmin.list_display + ("price_per_day",)


@admin.register(Stay)
class StayAdmin(ListingAdmin):
    list_display = ListingAdmin.list_display + ("price_per_night",)


@admin.register(Service)
class ServiceAdmin(ListingAdmin):
    list_display = ListingAdmin.list_display + ("category", "price")


@admin.register(Experience)
class ExperienceAdmin(ListingAdmin):
    list_display = ListingAdmin.list_display + ("price_per_person",)
    filter_horizontal = ("services",)
