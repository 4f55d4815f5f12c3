import importlib
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.db import OperationalError

from apps.bookings.domain.entities import Booking
from apps.bookings.infrastructure.repositories import DjangoBookingRepository, DjangoSpotDirectory
from apps.bookings.models import OVERLAP_CONSTRAINT_NAME
from apps.spots.models import Spot
from shared.application.message_bus import message_bus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import Aggregate, DomainEvent
from shared.domain.exceptions import NotFoundError, TransientStoreError
from shared.domain.value_objects import DateRange

pytestmark = pytest.mark.django_db


def d(day: str) -> date:
    return date.fromisoformat(day)


@pytest.fixture
def owner():
    return get_user_model().objects.create_user(username="owner", password="OwnerPass123")


@pytest.fixture
def guest():
    return get_user_model().objects.create_user(username="guest", password="GuestPass123")


@pytest.fixture
def spot(owner):
    return Spot.objects.create(
        owner=owner,
        address="1 Harbour Road",
        city="Hobart",
        state="Tasmania",
        country="Australia",
        lat=Decimal("-42.882138"),
        lng=Decimal("147.327195"),
        name="Harbour Loft",
        description="Loft by the water",
        price=Decimal("180.00"),
    )


@pytest.fixture
def repo():
    return DjangoBookingRepository()


def add(repo, spot, guest, start, end):
    return repo.insert(Booking(spot_id=spot.id, user_id=guest.id, dates=DateRange(d(start), d(end))))


def test_spot_directory_returns_owner(spot, owner):
    directory = DjangoSpotDirectory()

    with DjangoUnitOfWork():
        ref = directory.get(spot.id, lock=True)

    assert ref.id == spot.id
    assert ref.owner_id == owner.id
    assert directory.get(spot.id + 1000) is None


def test_insert_assigns_id_and_timestamps(repo, spot, guest):
    booking = add(repo, spot, guest, "2024-06-01", "2024-06-10")

    assert booking.id is not None
    assert booking.created_at is not None
    assert repo.get(booking.id).dates == DateRange(d("2024-06-01"), d("2024-06-10"))


def test_find_overlapping_uses_half_open_boundary(repo, spot, guest):
    existing = add(repo, spot, guest, "2024-06-01", "2024-06-10")

    assert [b.id for b in repo.find_overlapping(spot.id, DateRange(d("2024-06-09"), d("2024-06-15")))] == [existing.id]
    assert repo.find_overlapping(spot.id, DateRange(d("2024-06-10"), d("2024-06-15"))) == []
    assert repo.find_overlapping(spot.id, DateRange(d("2024-05-25"), d("2024-06-01"))) == []


def test_find_overlapping_can_exclude_a_booking(repo, spot, guest):
    existing = add(repo, spot, guest, "2024-06-01", "2024-06-10")

    found = repo.find_overlapping(spot.id, DateRange(d("2024-06-05"), d("2024-06-12")), exclude_booking_id=existing.id)

    assert found == []


def test_update_range_touches_updated_at(repo, spot, guest):
    booking = add(repo, spot, guest, "2024-06-01", "2024-06-10")

    updated = repo.update_range(booking.id, DateRange(d("2024-06-02"), d("2024-06-04")))

    assert updated.dates == DateRange(d("2024-06-02"), d("2024-06-04"))
    assert updated.updated_at >= booking.updated_at
    assert updated.created_at == booking.created_at


def test_missing_rows_raise_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.update_range(404, DateRange(d("2024-06-02"), d("2024-06-04")))
    with pytest.raises(NotFoundError):
        repo.delete(404)
    assert repo.get(404) is None


def test_listings_are_ordered_by_start_date(repo, spot, guest, owner):
    later = add(repo, spot, guest, "2024-07-01", "2024-07-05")
    earlier = add(repo, spot, owner, "2024-06-01", "2024-06-05")

    assert [b.id for b in repo.list_for_spot(spot.id)] == [earlier.id, later.id]
    assert [b.id for b in repo.list_for_user(guest.id)] == [later.id]


@dataclass
class LedgerStamped(DomainEvent):
    label: str


@dataclass(eq=False)
class Ledger(Aggregate):
    label: str


@pytest.fixture
def isolated_message_bus():
    saved = {event_type: list(handlers) for event_type, handlers in message_bus._event_handlers.items()}
    yield message_bus
    message_bus._event_handlers.clear()
    message_bus._event_handlers.update(saved)


def test_events_are_published_only_after_commit(isolated_message_bus, django_capture_on_commit_callbacks):
    received = []
    isolated_message_bus.register_event_handler(LedgerStamped, received.append)
    ledger = Ledger(id=1, label="x")
    ledger.add_event(LedgerStamped(aggregate_id=1, label="x"))

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with DjangoUnitOfWork() as uow:
            uow.collect_events(ledger)
            assert received == []

    assert len(callbacks) == 1
    assert [event.label for event in received] == ["x"]
    assert ledger.events == []


def test_handlers_registered_by_earlier_tests_are_gone():
    assert message_bus.handlers_for(LedgerStamped) == []


def test_rolled_back_work_publishes_nothing(django_capture_on_commit_callbacks):
    ledger = Ledger(id=2, label="y")
    ledger.add_event(LedgerStamped(aggregate_id=2, label="y"))

    with django_capture_on_commit_callbacks() as callbacks:
        with pytest.raises(RuntimeError):
            with DjangoUnitOfWork() as uow:
                uow.collect_events(ledger)
                raise RuntimeError("boom")

    assert callbacks == []


def test_operational_errors_become_transient(repo, spot, guest):
    with pytest.raises(TransientStoreError):
        with DjangoUnitOfWork():
            add(repo, spot, guest, "2024-06-01", "2024-06-10")
            raise OperationalError("database is locked")

    assert repo.list_for_spot(spot.id) == []


def test_migration_and_model_agree_on_overlap_constraint_name():
    migration = importlib.import_module("apps.bookings.migrations.0002_booking_no_overlap_exclusion")

    assert migration.CONSTRAINT_NAME == OVERLAP_CONSTRAINT_NAME
