from datetime import date, datetime

import pytest

from core.intent import Action, EntityType, Period
from models.intent import StructuredIntent
from services.date_resolver import (
    get_now,
    resolve_expression,
    resolve_intent_range,
    resolve_period,
)

TODAY = date(2025, 6, 12)  # Thursday


def _query(**fields):
    return StructuredIntent(entity_type=EntityType.TRANSACTION, action=Action.QUERY, **fields)


def test_get_now_is_naive():
    now = get_now()
    assert isinstance(now, datetime)
    assert now.tzinfo is None


@pytest.mark.parametrize(
    "period, expected",
    [
        (Period.TODAY, (date(2025, 6, 12), date(2025, 6, 12))),
        (Period.YESTERDAY, (date(2025, 6, 11), date(2025, 6, 11))),
        (Period.WEEK, (date(2025, 6, 9), date(2025, 6, 12))),
        (Period.MONTH, (date(2025, 6, 1), date(2025, 6, 12))),
    ],
)
def test_resolve_period(period, expected):
    assert resolve_period(period, TODAY) == expected


def test_yesterday_crosses_month_boundary():
    assert resolve_period(Period.YESTERDAY, date(2025, 3, 1)) == (date(2025, 2, 28), date(2025, 2, 28))


def test_explicit_date_is_a_one_day_range():
    intent = _query(date=date(2025, 12, 18))
    assert resolve_intent_range(intent, TODAY) == (date(2025, 12, 18), date(2025, 12, 18))


def test_period_range_when_no_date():
    intent = _query(period=Period.MONTH)
    assert resolve_expression(intent, TODAY) == {
        "start_date": "2025-06-01",
        "end_date": "2025-06-12",
    }


def test_no_window_resolves_to_empty():
    assert resolve_intent_range(_query(), TODAY) is None
    assert resolve_expression(_query(), TODAY) == {}
