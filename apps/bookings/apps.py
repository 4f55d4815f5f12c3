from django.apps import AppConfig


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    verbose_name = "Bookings"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .domain.events import BookingCreated, BookingDeleted, BookingRescheduled
        from .services import log_booking_event

        for event_type in (BookingCreated, BookingRescheduled, BookingDeleted):
            message_bus.register_event_handler(event_type, log_booking_event)
