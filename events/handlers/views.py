"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.cache import EVENT_LIST_KEY, event_detail_key
from events.domain import Capacity, Category, Email, Money, NewEvent
from events.domain.errors import DomainError
from events.handlers.responses import error_response, validation_response
from events.handlers.serializers import EventCreateSerializer, EventSerializer, EventUpdateSerializer
from events.services.event_service import EventService
from events.stores.django_store import DjangoEventStore


def get_event_service() -> EventService:
    return EventService(DjangoEventStore())


def event_changes(payload: dict) -> dict:
    """Turn validated edit fields into domain values."""
    changes = dict(payload)
    if "price" in changes:
        changes["price"] = Money(amount=changes["price"])
    if "capacity" in changes:
        capacity = changes["capacity"]
        changes["capacity"] = Capacity(value=capacity) if capacity is not None else None
    if "category" in changes:
        changes["category"] = Category(**changes["category"])
    return changes


def requester_email(request: Request) -> str | None:
    body = request.data if isinstance(request.data, dict) else {}
    return body.get("email") or request.query_params.get("email")


class EventListView(APIView):
    """Handler for GET and POST /api/events"""

    def get(self, request: Request) -> Response:
        data = cache.get(EVENT_LIST_KEY)
        if data is None:
            events = get_event_service().list_events()
            data = EventSerializer(events, many=True).data
            cache.set(EVENT_LIST_KEY, data, settings.EVENT_CACHE_TTL)
        return Response({"data": data})

    def post(self, request: Request) -> Response:
        serializer = EventCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        payload = serializer.validated_data
        capacity = payload.get("capacity")
        new_event = NewEvent(
            title=payload["title"],
            description=payload["description"],
            date=payload["date"],
            location=payload["location"],
            price=Money(amount=payload["price"]),
            capacity=Capacity(value=capacity) if capacity is not None else None,
            organizer_email=Email(value=payload["email"]),
            category=Category(**payload["category"]),
            image_url=payload.get("image_url"),
        )
        event = get_event_service().create_event(new_event)
        return Response({"data": EventSerializer(event).data}, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET and DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        key = event_detail_key(event_id)
        data = cache.get(key)
        if data is None:
            try:
                event = get_event_service().get_event(event_id)
            except DomainError as error:
                return error_response(error)
            data = EventSerializer(event).data
            cache.set(key, data, settings.EVENT_CACHE_TTL)
        return Response({"data": data})

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        payload = dict(serializer.validated_data)
        requester = payload.pop("email")
        try:
            event = get_event_service().update_event(event_id, requester, event_changes(payload))
        except DomainError as error:
            return error_response(error)
        return Response({"data": EventSerializer(event).data})

    def delete(self, request: Request, event_id: str) -> Response:
        try:
            get_event_service().delete_event(event_id, requester_email(request))
        except DomainError as error:
            return error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)
