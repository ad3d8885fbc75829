"""HTTP handlers (views) for the booking lifecycle.

Handlers parse and validate input, call a service and map domain errors to
responses. They never contain business logic.
"""

import base64

import structlog
from django.conf import settings
from django.http import HttpResponse
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.domain.errors import BookingErrorCode
from bookings.handlers.serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    OwnerSerializer,
    PaymentIntentRequestSerializer,
    RefundSerializer,
    TicketVerifySerializer,
    VerifiedTicketSerializer,
)
from bookings.payments import get_gateway
from bookings.services.booking_service import BookingService
from bookings.services.cancellation import CancellationService
from bookings.services.reconciliation import PaymentReconciler
from bookings.services.ticket_service import TicketService
from bookings.stores.django_store import DjangoBookingStore
from events.domain.errors import DomainError
from events.handlers.responses import (
    STATUS_BY_CODE,
    error_body,
    error_response,
    register_statuses,
    validation_response,
)
from events.stores.django_store import DjangoEventStore

logger = structlog.get_logger(__name__)

DOWNLOAD_FLAGS = ("1", "true")

register_statuses(
    {
        BookingErrorCode.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
        BookingErrorCode.INVALID_BOOKING_ID: status.HTTP_400_BAD_REQUEST,
        BookingErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
        BookingErrorCode.SOLD_OUT: status.HTTP_409_CONFLICT,
        BookingErrorCode.PAYMENT_REFERENCE_REQUIRED: status.HTTP_400_BAD_REQUEST,
        BookingErrorCode.PAYMENT_REFERENCE_IN_USE: status.HTTP_409_CONFLICT,
        BookingErrorCode.PAYMENT_NOT_REQUIRED: status.HTTP_400_BAD_REQUEST,
        BookingErrorCode.ALREADY_CANCELLED: status.HTTP_409_CONFLICT,
        BookingErrorCode.CANCELLATION_WINDOW_CLOSED: status.HTTP_422_UNPROCESSABLE_ENTITY,
        BookingErrorCode.BOOKING_NOT_CONFIRMED: status.HTTP_409_CONFLICT,
        BookingErrorCode.GATEWAY_ERROR: status.HTTP_502_BAD_GATEWAY,
        BookingErrorCode.REFUND_FAILED: status.HTTP_502_BAD_GATEWAY,
        BookingErrorCode.SIGNATURE_INVALID: status.HTTP_400_BAD_REQUEST,
        BookingErrorCode.INVALID_TICKET_FORMAT: status.HTTP_400_BAD_REQUEST,
        BookingErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
        BookingErrorCode.TICKET_REVOKED: status.HTTP_410_GONE,
        BookingErrorCode.TICKET_MISMATCH: status.HTTP_409_CONFLICT,
    }
)


def _stores() -> tuple[DjangoBookingStore, DjangoEventStore]:
    events = DjangoEventStore()
    return DjangoBookingStore(events), events


def get_booking_service() -> BookingService:
    bookings, events = _stores()
    return BookingService(
        bookings,
        events,
        get_gateway(),
        currency=settings.PAYMENT_CURRENCY,
        claim_attempts=settings.BOOKING_CLAIM_ATTEMPTS,
    )


def get_cancellation_service() -> CancellationService:
    bookings, events = _stores()
    return CancellationService(
        bookings,
        events,
        get_gateway(),
        window_hours=settings.BOOKING_CANCELLATION_WINDOW_HOURS,
    )


def get_ticket_service() -> TicketService:
    bookings, events = _stores()
    return TicketService(bookings, events)


def get_reconciler() -> PaymentReconciler:
    bookings, events = _stores()
    return PaymentReconciler(bookings, events, get_gateway(), settings.STRIPE_WEBHOOK_SECRET)


class PaymentIntentView(APIView):
    """Handler for POST /api/payments/intents"""

    def post(self, request: Request) -> Response:
        serializer = PaymentIntentRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        try:
            intent = get_booking_service().create_payment_intent(**serializer.validated_data)
        except DomainError as error:
            return error_response(error)
        return Response(
            {
                "payment_reference": intent.reference,
                "client_secret": intent.client_secret,
                "amount": intent.amount_minor,
                "currency": intent.currency,
            },
            status=status.HTTP_201_CREATED,
        )


class BookingListView(APIView):
    """Handler for GET and POST /api/bookings"""

    def get(self, request: Request) -> Response:
        serializer = OwnerSerializer(data=request.query_params)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        bookings = get_booking_service().list_bookings(serializer.validated_data["email"])
        return Response({"bookings": BookingSerializer(bookings, many=True).data})

    def post(self, request: Request) -> Response:
        serializer = BookingCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        payload = serializer.validated_data
        try:
            booking = get_booking_service().create_booking(
                event_id=payload["event_id"],
                name=payload["name"],
                email=payload["email"],
                quantity=payload["quantity"],
                payment_reference=payload.get("payment_reference"),
                quoted_total=payload.get("total_price"),
            )
        except DomainError as error:
            return error_response(error)
        return Response({"data": BookingSerializer(booking).data}, status=status.HTTP_201_CREATED)


class BookingCancelView(APIView):
    """Handler for POST /api/bookings/{booking_id}/cancel"""

    def post(self, request: Request, booking_id: str) -> Response:
        serializer = OwnerSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        try:
            result = get_cancellation_service().cancel_booking(booking_id, serializer.validated_data["email"])
        except DomainError as error:
            return error_response(error)
        return Response(
            {
                "data": BookingSerializer(result.booking).data,
                "refund": RefundSerializer(result.refund).data if result.refund else None,
            }
        )


class BookingTicketView(APIView):
    """Handler for GET /api/bookings/{booking_id}/ticket"""

    def get(self, request: Request, booking_id: str) -> HttpResponse:
        try:
            issued = get_ticket_service().issue_ticket(booking_id, request.query_params.get("email"))
        except DomainError as error:
            return error_response(error)

        if request.query_params.get("download", "").lower() in DOWNLOAD_FLAGS:
            response = HttpResponse(issued.pdf, content_type="application/pdf")
            response["Content-Disposition"] = f'attachment; filename="{issued.ticket.ticket_id}.pdf"'
            response["X-Ticket-Id"] = issued.ticket.ticket_id
            return response

        return Response(
            {
                "ticket_id": issued.ticket.ticket_id,
                "payload": issued.code,
                "qr_code": "data:image/png;base64," + base64.b64encode(issued.qr_png).decode(),
                "pdf": base64.b64encode(issued.pdf).decode(),
            }
        )


class TicketVerifyView(APIView):
    """Handler for POST /api/tickets/verify"""

    def post(self, request: Request) -> Response:
        serializer = TicketVerifySerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        try:
            verified = get_ticket_service().verify_ticket(serializer.validated_data["payload"])
        except DomainError as error:
            return Response(
                {"valid": False, **error_body(error)},
                status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
            )
        return Response({"valid": True, **VerifiedTicketSerializer(verified).data})


class StripeWebhookView(APIView):
    """Handler for POST /api/webhooks/stripe"""

    def post(self, request: Request) -> Response:
        if not settings.STRIPE_WEBHOOK_SECRET:
            logger.error("Stripe webhook secret is not configured")
            return Response(
                {"error": {"code": "WEBHOOK_NOT_CONFIGURED", "message": "Webhook secret not configured"}},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        try:
            outcome = get_reconciler().handle_webhook(request.body, request.headers.get("Stripe-Signature"))
        except DomainError as error:
            return error_response(error)
        return Response({"received": True, "outcome": outcome.value})
