"""Serializers for the booking endpoints.

Output serializers render domain objects (Booking aggregates and
BookingWindow projections), not ORM rows.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class BookingDatesSerializer(serializers.Serializer):
    """Dates requested when creating or rescheduling a booking.

    Presence and format are checked here so that every missing or malformed
    field is reported in one response; ordering and availability rules are
    enforced by the reservation manager.
    """

    start_date = serializers.DateField()
    end_date = serializers.DateField()


class BookingSerializer(serializers.Serializer):
    """Full booking record, shown to its guest and to the spot owner."""

    id = serializers.IntegerField(read_only=True)
    spot_id = serializers.IntegerField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    start_date = serializers.DateField(read_only=True)
    end_date = serializers.DateField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class BookingWindowSerializer(serializers.Serializer):
    """Occupied dates only; the guest stays anonymous."""

    spot_id = serializers.IntegerField(read_only=True)
    start_date = serializers.DateField(read_only=True)
    end_date = serializers.DateField(read_only=True)


class SpotSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    owner_id = serializers.IntegerField(read_only=True)
    address = serializers.CharField(read_only=True)
    city = serializers.CharField(read_only=True)
    state = serializers.CharField(read_only=True)
    country = serializers.CharField(read_only=True)
    lat = serializers.DecimalField(max_digits=9, decimal_places=6, read_only=True)
    lng = serializers.DecimalField(max_digits=9, decimal_places=6, read_only=True)
    name = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    preview_image = serializers.SerializerMethodField()

    def get_preview_image(self, spot) -> str | None:
        return spot.preview_image or None


class CurrentUserBookingSerializer(BookingSerializer):
    """Guest's own booking with a summary of the booked spot.

    Expects ``context["spots"]``: a mapping of spot id to Spot row.
    """

    spot = serializers.SerializerMethodField()

    def get_spot(self, booking) -> dict | None:
        spot = self.context.get("spots", {}).get(booking.spot_id)
        if spot is None:
            return None
        return SpotSummarySerializer(spot).data
