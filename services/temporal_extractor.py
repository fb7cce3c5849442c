# FILE: services/temporal_extractor.py
"""
Temporal Extractor

Deterministic date/time extraction for Portuguese free text.

- Dates are resolved by a fixed precedence chain; the first strategy that
  yields a valid calendar date wins
- Times are resolved by their own chain, independently of the date
- Every pattern runs against the folded text (lowercase, accent-free)
- Nothing here raises on bad input: a miss is an absent value
"""

import re
from datetime import date, datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Callable, Optional, Tuple

from core.text import fold
from models.intent import TemporalCandidate
from services.date_resolver import get_now
from services.utils import get_logger
from services.weekday_resolver import resolve_weekday

logger = get_logger("temporal_extractor")


class DatePolicy(str, Enum):
    """
    What to do when no strategy recognizes a date.

    ASSUME_TODAY: fall back to the reference date (interpretation path).
    STRICT: return no date unless the text carries a date signal.
    """

    ASSUME_TODAY = "assume_today"
    STRICT = "strict"


MONTHS = MappingProxyType({
    "janeiro": 1,
    "fevereiro": 2,
    "marco": 3,
    "março": 3,
    "abril": 4,
    "maio": 5,
    "junho": 6,
    "julho": 7,
    "agosto": 8,
    "setembro": 9,
    "outubro": 10,
    "novembro": 11,
    "dezembro": 12,
})

_MONTH_ALTERNATION = "|".join(sorted({fold(m) for m in MONTHS}, key=len, reverse=True))

# -----------------------------
# Date patterns
# -----------------------------
_FULL_DATE_RE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{4}|\d{2})\b")
_PARTIAL_DATE_RE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})\b")
_SPELLED_DATE_RE = re.compile(r"\b(\d{1,2})\s*(?:de\s+)?(" + _MONTH_ALTERNATION + r")\b")
_WEEKDAY_RE = re.compile(r"\b(segunda|terca|quarta|quinta|sexta|sabado|domingo)\b")
_TODAY_RE = re.compile(r"\bhoje\b")

# Order matters: "depois de amanha" contains "amanha"
_RELATIVE_DAYS: Tuple[Tuple[re.Pattern, int], ...] = (
    (re.compile(r"\bdepois de amanha\b"), 2),
    (re.compile(r"\bamanha\b"), 1),
    (re.compile(r"\bontem\b"), -1),
)

# -----------------------------
# Time patterns (precedence order)
# -----------------------------
_TIME_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\b(\d{1,2})[:h](\d{1,2})\b"),          # 19:30, 19h30
    re.compile(r"\b(\d{1,2})\s*(?:h|horas|hrs)\b"),     # 19h, 19 horas
    re.compile(r"\bas\s+(\d{1,2})\b"),                   # às 19
)


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


# -----------------------------
# Date strategies
# -----------------------------
def _full_numeric_date(text: str, today: date) -> Optional[date]:
    match = _FULL_DATE_RE.search(text)
    if not match:
        return None
    day, month, raw_year = int(match.group(1)), int(match.group(2)), match.group(3)
    year = 2000 + int(raw_year) if len(raw_year) == 2 else int(raw_year)
    return _safe_date(year, month, day)


def _partial_numeric_date(text: str, today: date) -> Optional[date]:
    match = _PARTIAL_DATE_RE.search(text)
    if not match:
        return None
    return _safe_date(today.year, int(match.group(2)), int(match.group(1)))


def _spelled_date(text: str, today: date) -> Optional[date]:
    match = _SPELLED_DATE_RE.search(text)
    if not match:
        return None
    month = MONTHS.get(match.group(2))
    if month is None:
        return None
    return _safe_date(today.year, month, int(match.group(1)))


def _relative_date(text: str, today: date) -> Optional[date]:
    for pattern, offset in _RELATIVE_DAYS:
        if pattern.search(text):
            return today + timedelta(days=offset)
    return None


def _weekday_date(text: str, today: date) -> Optional[date]:
    match = _WEEKDAY_RE.search(text)
    if not match:
        return None
    return resolve_weekday(match.group(1), today)


def _explicit_today(text: str, today: date) -> Optional[date]:
    return today if _TODAY_RE.search(text) else None


DateStrategy = Callable[[str, date], Optional[date]]

DATE_STRATEGIES: Tuple[DateStrategy, ...] = (
    _full_numeric_date,
    _partial_numeric_date,
    _spelled_date,
    _relative_date,
    _weekday_date,
)

STRICT_DATE_STRATEGIES: Tuple[DateStrategy, ...] = DATE_STRATEGIES + (_explicit_today,)


# -----------------------------
# Public API
# -----------------------------
def extract_date(
    text: str,
    now: Optional[datetime] = None,
    policy: DatePolicy = DatePolicy.ASSUME_TODAY,
) -> Optional[date]:
    today = (now or get_now()).date()
    folded = fold(text or "")

    strategies = STRICT_DATE_STRATEGIES if policy is DatePolicy.STRICT else DATE_STRATEGIES
    for strategy in strategies:
        found = strategy(folded, today)
        if found is not None:
            return found

    if policy is DatePolicy.STRICT:
        logger.debug("No date signal in text")
        return None
    return today


def extract_time(text: str) -> Optional[str]:
    """
    First matching pattern wins. The hour is zero-padded on the left; a
    single captured minute digit is padded on the right ("19h3" -> "19:30").
    """
    folded = fold(text or "")
    for pattern in _TIME_PATTERNS:
        match = pattern.search(folded)
        if not match:
            continue
        raw_hour = match.group(1)
        raw_minute = match.group(2) if pattern.groups > 1 else None
        hour = raw_hour.zfill(2)
        minute = raw_minute.ljust(2, "0") if raw_minute else "00"
        if int(hour) > 23 or int(minute) > 59:
            continue
        return f"{hour}:{minute}"
    return None


def extract_date_time(
    text: str,
    now: Optional[datetime] = None,
    policy: DatePolicy = DatePolicy.ASSUME_TODAY,
) -> TemporalCandidate:
    """
    Best-effort {date, time} for one message.

    Date precedence: D/M/YY(YY) > D/M > "D de <mes>" > depois de amanhã /
    amanhã / ontem > weekday name > fallback (today, or None when STRICT).
    """
    now = now or get_now()
    candidate = TemporalCandidate(
        date=extract_date(text, now, policy),
        time=extract_time(text),
    )
    logger.debug(f"Temporal candidate: {candidate}")
    return candidate
