from django.contrib import admin

from events.models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "date", "location", "capacity", "attendees", "created_at"]
    search_fields = ["title", "location", "organizer_email"]
    list_filter = ["category_value"]
    # Moved only by the booking lifecycle.
    readonly_fields = ["attendees"]
