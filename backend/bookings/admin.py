from django.contrib import admin

from payments.models import Payment

from .models import Booking


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    fields = ("tx_ref", "amount", "currency", "status", "flutterwave_id", "created_at")
    readonly_fields = fields


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "booking_type", "status", "total_amount", "created_at")
    list_filter = ("booking_type", "status")
    search_fields = ("user__email",)
    inlines = [PaymentInline]
