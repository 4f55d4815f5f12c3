"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "spot",
        "user",
        "start_date",
        "end_date",
        "created_at",
    )
    list_filter = ("start_date", "end_date")
    search_fields = ("spot__name", "spot__address", "user__username", "user__email")
    # Dates change only through the reservation manager, which holds the spot lock.
    readonly_fields = (
        "spot",
        "user",
        "start_date",
        "end_date",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request) -> bool:  # type: ignore
        return False
