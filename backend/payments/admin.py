from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("tx_ref", "booking", "amount", "currency", "status", "payment_type", "created_at")
    list_filter = ("status", "payment_type", "currency")
    search_fields = ("tx_ref", "flutterwave_id", "user__email")
    readonly_fields = ("response_data",)
