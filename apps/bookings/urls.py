"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import BookingDetailView, CurrentUserBookingsView, SpotBookingsView

app_name = "bookings"

urlpatterns = [
    path("bookings/current/", CurrentUserBookingsView.as_view(), name="current"),
    path("bookings/<int:booking_id>/", BookingDetailView.as_view(), name="detail"),
    path("spots/<int:spot_id>/bookings/", SpotBookingsView.as_view(), name="spot-bookings"),
]
