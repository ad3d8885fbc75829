from bookings.handlers.views import (
    BookingCancelView,
    BookingListView,
    BookingTicketView,
    PaymentIntentView,
    StripeWebhookView,
    TicketVerifyView,
)

__all__ = [
    "PaymentIntentView",
    "BookingListView",
    "BookingCancelView",
    "BookingTicketView",
    "TicketVerifyView",
    "StripeWebhookView",
]
