"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class CategorySerializer(serializers.Serializer):
    label = serializers.CharField(max_length=100)
    value = serializers.CharField(max_length=100)


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    date = serializers.DateTimeField()
    location = serializers.CharField()
    price = serializers.DecimalField(source="price.amount", max_digits=10, decimal_places=2)
    capacity = serializers.SerializerMethodField()
    attendees = serializers.IntegerField()
    seats_remaining = serializers.IntegerField(allow_null=True)
    is_sold_out = serializers.BooleanField()
    organizer_email = serializers.CharField(source="organizer_email.value")
    category = CategorySerializer()
    image_url = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_capacity(self, event) -> int | None:
        return event.capacity.value if event.capacity is not None else None


class EventCreateSerializer(serializers.Serializer):
    """Validates the input shape of POST /api/events."""

    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    date = serializers.DateTimeField()
    location = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    capacity = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    email = serializers.EmailField()
    category = CategorySerializer()
    image_url = serializers.URLField(max_length=500, required=False, allow_null=True)


class EventUpdateSerializer(serializers.Serializer):
    """Validates the input shape of PATCH /api/events/{id}. Only sent fields change."""

    email = serializers.EmailField()
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False)
    date = serializers.DateTimeField(required=False)
    location = serializers.CharField(max_length=255, required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    capacity = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    category = CategorySerializer(required=False)
    image_url = serializers.URLField(max_length=500, required=False, allow_null=True)
