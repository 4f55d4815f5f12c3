"""API views for the booking domain.

Views authenticate the caller, validate request shape and hand everything
else to the reservation manager. Domain errors are translated to HTTP in
``ReservationAPIView.handle_exception``.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema, inline_serializer  # type: ignore
from rest_framework import exceptions, permissions, serializers, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.spots.models import Spot
from shared.domain.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    TransientStoreError,
)

from .serializers import (
    BookingDatesSerializer,
    BookingSerializer,
    BookingWindowSerializer,
    CurrentUserBookingSerializer,
)
from .services import get_reservation_manager


class BookingConflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "A booking already exists for these dates."
    default_code = "conflict"


class StoreUnavailable(exceptions.APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Bookings are temporarily unavailable, please retry."
    default_code = "service_unavailable"


def translate_domain_error(exc: DomainError) -> exceptions.APIException:
    if isinstance(exc, NotFoundError):
        return exceptions.NotFound(exc.message)
    if isinstance(exc, ForbiddenError):
        return exceptions.PermissionDenied(exc.message)
    if isinstance(exc, InvalidInputError):
        return exceptions.ValidationError({"detail": exc.message, **exc.errors})
    if isinstance(exc, ConflictError):
        return BookingConflict(exc.message)
    if isinstance(exc, TransientStoreError):
        return StoreUnavailable()
    return exceptions.APIException(exc.message)


class ReservationAPIView(APIView):
    """Base view for endpoints backed by the reservation manager."""

    permission_classes = [permissions.IsAuthenticated]

    def get_manager(self):
        return get_reservation_manager()

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, DomainError):
            exc = translate_domain_error(exc)
        return super().handle_exception(exc)

    def get_dates(self, request) -> dict:
        serializer = BookingDatesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data


class CurrentUserBookingsView(ReservationAPIView):
    """Bookings made by the authenticated user, with the booked spot."""

    @extend_schema(responses=inline_serializer(
        "CurrentUserBookings", {"bookings": CurrentUserBookingSerializer(many=True)}
    ))
    def get(self, request):  # type: ignore
        bookings = self.get_manager().list_bookings_for_user(request.user.id)
        spots = Spot.objects.in_bulk({booking.spot_id for booking in bookings})
        serializer = CurrentUserBookingSerializer(bookings, many=True, context={"spots": spots})
        return Response({"bookings": serializer.data})


class SpotBookingsView(ReservationAPIView):
    """Bookings of one spot: list them or book the spot."""

    @extend_schema(responses=inline_serializer(
        "SpotBookings", {"bookings": serializers.ListField(child=serializers.DictField())}
    ))
    def get(self, request, spot_id: int):  # type: ignore
        result = self.get_manager().list_bookings_for_spot(spot_id, request.user.id)
        serializer_class = BookingSerializer if result.is_owner else BookingWindowSerializer
        return Response({"bookings": serializer_class(result.bookings, many=True).data})

    @extend_schema(request=BookingDatesSerializer, responses={201: BookingSerializer})
    def post(self, request, spot_id: int):  # type: ignore
        dates = self.get_dates(request)
        booking = self.get_manager().create_booking(
            spot_id,
            request.user.id,
            dates["start_date"],
            dates["end_date"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class BookingDetailView(ReservationAPIView):
    """Reschedule or delete a single booking."""

    @extend_schema(request=BookingDatesSerializer, responses=BookingSerializer)
    def put(self, request, booking_id: int):  # type: ignore
        dates = self.get_dates(request)
        booking = self.get_manager().update_booking(
            booking_id,
            request.user.id,
            dates["start_date"],
            dates["end_date"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)

    @extend_schema(responses=inline_serializer("BookingDeleted", {"message": serializers.CharField()}))
    def delete(self, request, booking_id: int):  # type: ignore
        self.get_manager().delete_booking(booking_id, request.user.id)
        return Response({"message": "Booking deleted successfully"}, status=status.HTTP_200_OK)
