"""Concurrent writers against the real database."""

import threading
from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.db import connection
from django.utils import timezone

from apps.bookings.domain.exceptions import BookingConflictError
from apps.bookings.models import Booking
from apps.bookings.services import get_reservation_manager
from apps.spots.models import Spot


@pytest.mark.django_db(transaction=True)
def test_concurrent_creates_through_the_database_only_one_wins(settings):
    # SQLite answers contention with "database is locked"; allow enough retries
    settings.RESERVATIONS = {"TRANSIENT_RETRY_ATTEMPTS": 20, "TRANSIENT_RETRY_BACKOFF_SECONDS": 0.02}
    User = get_user_model()
    owner = User.objects.create_user(username="owner", password="OwnerPass123")
    guests = [User.objects.create_user(username=f"guest{i}", password="GuestPass123") for i in range(4)]
    spot = Spot.objects.create(
        owner=owner,
        address="7 Canal Street",
        city="Amsterdam",
        state="North Holland",
        country="Netherlands",
        lat=Decimal("52.370216"),
        lng=Decimal("4.895168"),
        name="Canal House",
        description="Narrow house on the canal",
        price=Decimal("150.00"),
    )
    start = timezone.localdate() + timedelta(days=10)
    end = start + timedelta(days=3)

    barrier = threading.Barrier(len(guests))
    outcomes = []
    outcomes_lock = threading.Lock()

    def attempt(guest_id):
        try:
            barrier.wait()
            try:
                get_reservation_manager().create_booking(spot.id, guest_id, start, end)
                result = "ok"
            except BookingConflictError:
                result = "conflict"
            with outcomes_lock:
                outcomes.append(result)
        finally:
            connection.close()

    threads = [threading.Thread(target=attempt, args=(guest.id,)) for guest in guests]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert sorted(outcomes) == ["conflict", "conflict", "conflict", "ok"]
    assert Booking.objects.filter(spot=spot).count() == 1
