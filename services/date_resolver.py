"""
Date Resolver Service

- Owns the reference clock ("now") every temporal decision is grounded on
- Converts a query Period into a concrete inclusive date range
"""

from datetime import date, datetime, timedelta
from typing import Dict, Optional, Tuple
from zoneinfo import ZoneInfo

from config import LUME_TIMEZONE
from core.intent import Period
from models.intent import StructuredIntent

_ZONE = ZoneInfo(LUME_TIMEZONE)


def get_now() -> datetime:
    """Current wall time in the configured zone, returned naive."""
    return datetime.now(_ZONE).replace(tzinfo=None)


def get_today() -> date:
    return get_now().date()


def resolve_period(period: Period, today: Optional[date] = None) -> Tuple[date, date]:
    """
    Resolve a Period into (start_date, end_date), both inclusive.
    Open windows (week, month) end today.
    """
    today = today or get_today()

    if period is Period.TODAY:
        return today, today

    if period is Period.YESTERDAY:
        d = today - timedelta(days=1)
        return d, d

    if period is Period.WEEK:
        start = today - timedelta(days=today.weekday())  # Monday
        return start, today

    if period is Period.MONTH:
        return today.replace(day=1), today

    raise ValueError(f"Unknown period: {period!r}")


def resolve_intent_range(
    intent: StructuredIntent, today: Optional[date] = None
) -> Optional[Tuple[date, date]]:
    """
    The window a query intent refers to: an explicit date wins,
    otherwise the period, otherwise None.
    """
    if intent.date is not None:
        return intent.date, intent.date
    if intent.period is not None:
        return resolve_period(intent.period, today)
    return None


def resolve_expression(intent: StructuredIntent, today: Optional[date] = None) -> Dict[str, str]:
    """
    High-level resolver.
    Returns a dict with start_date and end_date (ISO format) if resolvable,
    else returns an empty dict.
    """
    result = resolve_intent_range(intent, today)
    if result:
        start, end = result
        return {
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
        }
    return {}
