from datetime import date, timedelta

import pytest

from services.weekday_resolver import WEEKDAYS, next_weekday, resolve_weekday, weekday_number


@pytest.mark.parametrize(
    "name, expected",
    [
        ("segunda", 1),
        ("Segunda-feira", 1),
        ("terça", 2),
        ("TERCA", 2),
        ("quarta feira", 3),
        ("quinta", 4),
        ("sexta", 5),
        ("sábado", 6),
        ("sabado", 6),
        ("domingo", 7),
    ],
)
def test_weekday_number(name, expected):
    assert weekday_number(name) == expected


def test_unknown_name_is_absent():
    assert weekday_number("feriado") is None
    assert resolve_weekday("feriado", date(2025, 6, 10)) is None


def test_table_lists_accented_and_plain_variants():
    assert WEEKDAYS["terça"] == WEEKDAYS["terca"] == 2
    assert WEEKDAYS["sábado"] == WEEKDAYS["sabado"] == 6


def test_table_is_read_only():
    with pytest.raises(TypeError):
        WEEKDAYS["feriado"] = 8


def test_next_weekday_is_always_strictly_in_the_future():
    """
    Across three weeks of reference dates and every ISO weekday,
    the result lands 1..7 days ahead on the requested weekday.
    """
    start = date(2025, 6, 1)
    for offset in range(21):
        today = start + timedelta(days=offset)
        for iso_weekday in range(1, 8):
            result = next_weekday(iso_weekday, today)
            assert result > today
            assert (result - today).days <= 7
            assert result.isoweekday() == iso_weekday


def test_same_weekday_resolves_one_week_later():
    tuesday = date(2025, 6, 10)
    assert resolve_weekday("terça", tuesday) == date(2025, 6, 17)
