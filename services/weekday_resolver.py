# services/weekday_resolver.py
"""
Weekday Resolver

- Maps Portuguese weekday names to ISO weekday numbers (Monday = 1 ... Sunday = 7)
- Resolves a name to its next occurrence, always strictly after the reference date
"""

from datetime import date, timedelta
from types import MappingProxyType
from typing import Optional

from core.text import fold

WEEKDAYS = MappingProxyType({
    "segunda": 1,
    "terca": 2,
    "terça": 2,
    "quarta": 3,
    "quinta": 4,
    "sexta": 5,
    "sabado": 6,
    "sábado": 6,
    "domingo": 7,
})


def weekday_number(name: str) -> Optional[int]:
    """ISO weekday for a name such as "Terça", "sexta-feira" or "sabado"."""
    key = fold(name)
    if key.endswith("-feira"):
        key = key[: -len("-feira")]
    elif key.endswith(" feira"):
        key = key[: -len(" feira")]
    return WEEKDAYS.get(key)


def next_weekday(iso_weekday: int, today: date) -> date:
    """
    Next occurrence of iso_weekday after today.
    When today already is that weekday the result is one week ahead.
    """
    diff = iso_weekday - today.isoweekday()
    if diff <= 0:
        diff += 7
    return today + timedelta(days=diff)


def resolve_weekday(name: str, today: date) -> Optional[date]:
    number = weekday_number(name)
    if number is None:
        return None
    return next_weekday(number, today)
