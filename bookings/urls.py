from django.urls import path

from bookings.handlers import (
    BookingCancelView,
    BookingListView,
    BookingTicketView,
    PaymentIntentView,
    StripeWebhookView,
    TicketVerifyView,
)

urlpatterns = [
    path("payments/intents", PaymentIntentView.as_view(), name="payment-intent"),
    path("bookings", BookingListView.as_view(), name="booking-list"),
    path("bookings/<str:booking_id>/cancel", BookingCancelView.as_view(), name="booking-cancel"),
    path("bookings/<str:booking_id>/ticket", BookingTicketView.as_view(), name="booking-ticket"),
    path("tickets/verify", TicketVerifyView.as_view(), name="ticket-verify"),
    path("webhooks/stripe", StripeWebhookView.as_view(), name="stripe-webhook"),
]
