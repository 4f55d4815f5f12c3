from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError

from apps.spots.models import Spot

pytestmark = pytest.mark.django_db


def make_spot(owner, **overrides):
    fields = dict(
        owner=owner,
        address="10 Rue de Rivoli",
        city="Paris",
        state="Ile-de-France",
        country="France",
        lat=Decimal("48.856613"),
        lng=Decimal("2.352222"),
        name="Rivoli Studio",
        description="Studio near the Louvre",
        price=Decimal("95.00"),
    )
    fields.update(overrides)
    return Spot(**fields)


@pytest.fixture
def owner():
    return get_user_model().objects.create_user(username="host", password="HostPass123")


def test_spot_str(owner):
    assert str(make_spot(owner)) == "Rivoli Studio (Paris)"


def test_address_is_unique(owner):
    make_spot(owner).save()

    with pytest.raises(IntegrityError):
        make_spot(owner, name="Another").save()


@pytest.mark.parametrize("field, value", [
    ("lat", Decimal("91")),
    ("lng", Decimal("-181")),
    ("price", Decimal("-1.00")),
    ("name", "x" * 51),
])
def test_field_validation(owner, field, value):
    spot = make_spot(owner, **{field: value})

    with pytest.raises(ValidationError) as excinfo:
        spot.full_clean()

    assert field in excinfo.value.message_dict


def test_owner_reverse_relation(owner):
    spot = make_spot(owner)
    spot.save()

    assert list(owner.spots.all()) == [spot]
