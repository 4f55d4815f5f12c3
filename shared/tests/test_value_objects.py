from datetime import date, datetime

import pytest

from shared.domain.exceptions import InvalidInputError
from shared.domain.value_objects import DateRange


def rng(start: str, end: str) -> DateRange:
    return DateRange(date.fromisoformat(start), date.fromisoformat(end))


BOOKED = rng("2024-06-01", "2024-06-10")


@pytest.mark.parametrize("other, expected", [
    (rng("2024-06-09", "2024-06-15"), True),   # checks in on the last booked night
    (rng("2024-06-10", "2024-06-15"), False),  # checks in on checkout day
    (rng("2024-05-25", "2024-06-01"), False),  # checks out on check-in day
    (rng("2024-05-25", "2024-06-02"), True),
    (rng("2024-06-03", "2024-06-04"), True),
    (rng("2024-05-01", "2024-07-01"), True),
    (rng("2024-06-01", "2024-06-10"), True),
])
def test_overlap_is_half_open(other, expected):
    assert BOOKED.overlaps_with(other) is expected
    assert other.overlaps_with(BOOKED) is expected


def test_overlap_with_non_range():
    with pytest.raises(TypeError):
        BOOKED.overlaps_with((date(2024, 6, 1), date(2024, 6, 2)))


def test_contains_excludes_checkout_day():
    assert BOOKED.contains(date(2024, 6, 1))
    assert BOOKED.contains(date(2024, 6, 9))
    assert not BOOKED.contains(date(2024, 6, 10))


def test_nights_and_formatting():
    assert len(BOOKED) == 9
    assert str(BOOKED) == "2024-06-01 - 2024-06-10"


@pytest.mark.parametrize("start, end", [("2024-06-10", "2024-06-10"), ("2024-06-11", "2024-06-10")])
def test_end_must_follow_start(start, end):
    with pytest.raises(InvalidInputError) as excinfo:
        rng(start, end)

    assert excinfo.value.errors == {"end_date": ["End date must be after start date."]}


def test_rejects_datetimes_and_strings():
    with pytest.raises(InvalidInputError) as excinfo:
        DateRange(datetime(2024, 6, 1, 14, 0), "2024-06-10")

    assert set(excinfo.value.errors) == {"start_date", "end_date"}


def test_ranges_are_values():
    assert rng("2024-06-01", "2024-06-10") == BOOKED
    assert len({BOOKED, rng("2024-06-01", "2024-06-10")}) == 1
