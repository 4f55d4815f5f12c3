"""Booking persistence model."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

# Installed on PostgreSQL only, see migration 0002.
OVERLAP_CONSTRAINT_NAME = "booking_no_overlap"


class Booking(models.Model):
    """Reservation of a spot by a guest for the nights [start_date, end_date)."""

    spot = models.ForeignKey(
        "spots.Spot",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["start_date", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="booking_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["spot", "start_date", "end_date"], name="booking_spot_dates_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} for spot {self.spot_id} ({self.start_date} - {self.end_date})"
