from __future__ import annotations

from datetime import date, time

import pytest

from src.hostel_mess.hostel_mess.common.datetime_utils import day_of_week, iter_dates, parse_hhmm, parse_iso_date
from src.hostel_mess.hostel_mess.common.validators import clean_items, clean_note, parse_day_of_week, parse_meal_slot
from src.hostel_mess.hostel_mess.core.enums import MealSlot
from src.hostel_mess.hostel_mess.core.exceptions import ValidationError


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2024, 3, 10)) == 0
    assert day_of_week(date(2024, 3, 11)) == 1
    assert day_of_week(date(2024, 3, 16)) == 6


def test_iter_dates_is_inclusive():
    assert list(iter_dates(date(2024, 2, 28), date(2024, 3, 1))) == [
        date(2024, 2, 28),
        date(2024, 2, 29),
        date(2024, 3, 1),
    ]
    assert list(iter_dates(date(2024, 3, 2), date(2024, 3, 1))) == []


def test_parsers():
    assert parse_iso_date("2024-03-10") == date(2024, 3, 10)
    assert parse_hhmm("19:30") == time(19, 30)
    assert parse_meal_slot(" Dinner ") == MealSlot.DINNER
    assert parse_day_of_week("6") == 6

    with pytest.raises(ValidationError):
        parse_iso_date("10/03/2024")
    with pytest.raises(ValidationError):
        parse_hhmm("7pm")
    with pytest.raises(ValidationError):
        parse_day_of_week(-1)


def test_note_and_items_limits():
    assert clean_note("   ") is None
    assert clean_items(None) == ()
    with pytest.raises(ValidationError):
        clean_note("x" * 501)
    with pytest.raises(ValidationError):
        clean_items(["dish"] * 51)
