from django.contrib import admin

from bookings.models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["event_title", "name", "email", "quantity", "status", "total_price", "created_at"]
    search_fields = ["email", "name", "payment_reference", "event_title"]
    list_filter = ["status"]
    # Moved only by the booking lifecycle.
    readonly_fields = ["event", "quantity", "status", "payment_reference", "refund_id", "refund_amount", "refund_status"]
