# models/intent.py
import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from dateutil import parser as date_parser
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    ValidationInfo,
    model_validator,
)

from core.intent import Action, EntityType, Period, TransactionDirection

_TIME_RE = re.compile(r"^\s*(\d{1,2})\s*[:h]\s*(\d{2})?(?::\d{2})?\s*$", re.IGNORECASE)
_CURRENCY_RE = re.compile(r"(r\$|brl|reais|real)", re.IGNORECASE)
_THOUSANDS_RE = re.compile(r"^-?\d{1,3}(\.\d{3})+$")
# Two defaults that differ in every field; a date parsed the same under both is complete
_COMPLETENESS_DEFAULTS = (dt.datetime(2000, 1, 1), dt.datetime(2001, 2, 2))


def is_null_literal(value: Any) -> bool:
    """True for the string "null" (any case) and for blank strings."""
    return isinstance(value, str) and value.strip().lower() in ("", "null")


def normalize_null_literals(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Replace "null" strings with real None so a response that spelled out
    "null" is indistinguishable from one that omitted the field.
    """
    return {k: (None if is_null_literal(v) else v) for k, v in payload.items()}


def parse_clock_time(value: Any) -> Optional[str]:
    """
    "9:30" -> "09:30", "19h" -> "19:00", "7:00" -> "07:00".
    Anything that is not a valid 24h clock reading becomes None.
    """
    if isinstance(value, dt.time):
        return value.strftime("%H:%M")
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value)
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def parse_calendar_date(value: Any, reference: Optional[dt.date] = None) -> Optional[dt.date]:
    """
    ISO first, then day-first free text ("18/12/2025"). Unparseable -> None.

    Missing parts ("15/07") are taken from `reference`; without one a
    partial date is rejected rather than completed from the system clock.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        if reference is not None:
            default = dt.datetime.combine(reference, dt.time())
            return date_parser.parse(text, dayfirst=True, default=default).date()
        first = date_parser.parse(text, dayfirst=True, default=_COMPLETENESS_DEFAULTS[0])
        second = date_parser.parse(text, dayfirst=True, default=_COMPLETENESS_DEFAULTS[1])
    except (ValueError, OverflowError):
        return None
    return first.date() if first == second else None


def parse_amount(value: Any) -> Optional[Decimal]:
    """Numbers pass through; "R$ 1.234,56" and "50,00" are read the Brazilian way."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if not isinstance(value, str):
        return None
    raw = _CURRENCY_RE.sub("", value).replace("\u00a0", "").replace(" ", "")
    if "," in raw or _THOUSANDS_RE.match(raw):
        raw = raw.replace(".", "").replace(",", ".")
    try:
        return Decimal(raw)
    except InvalidOperation:
        return None


# -----------------------------
# Temporal Candidate (Extractor → Reconciler)
# -----------------------------
class TemporalCandidate(BaseModel):
    date: Optional[dt.date] = None
    time: Optional[str] = None

    def is_empty(self) -> bool:
        return self.date is None and self.time is None


# -----------------------------
# Structured Intent (Reconciler → caller)
# -----------------------------
class StructuredIntent(BaseModel):
    """
    The interpreted meaning of one message.

    Attribute names are English; the wire names (aliases) are the
    Portuguese keys the classifier speaks and downstream consumers expect.
    """

    model_config = ConfigDict(populate_by_name=True)

    entity_type: EntityType = Field(..., alias="tipo")
    action: Action = Field(..., alias="acao")
    description: str = Field(default="", alias="descricao")
    amount: Optional[Decimal] = Field(None, alias="valor")
    date: Optional[dt.date] = Field(None, alias="data")
    time: Optional[str] = Field(None, alias="hora")
    transaction_direction: Optional[TransactionDirection] = Field(None, alias="tipoTransacao")
    category: Optional[str] = Field(None, alias="categoria")
    period: Optional[Period] = Field(None, alias="periodo")

    # -----------------------------
    # Validators
    # -----------------------------
    @field_validator("entity_type", mode="before")
    @classmethod
    def coerce_entity_type(cls, v):
        return EntityType(v) if isinstance(v, str) else v

    @field_validator("action", mode="before")
    @classmethod
    def coerce_action(cls, v):
        return Action(v) if isinstance(v, str) else v

    @field_validator("transaction_direction", mode="before")
    @classmethod
    def coerce_direction(cls, v):
        if v is None or is_null_literal(v):
            return None
        try:
            return TransactionDirection(v)
        except ValueError:
            return None

    @field_validator("period", mode="before")
    @classmethod
    def coerce_period(cls, v):
        if v is None or is_null_literal(v):
            return None
        try:
            return Period(v)
        except ValueError:
            return None

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v):
        if v is None or is_null_literal(v):
            return ""
        return str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        if is_null_literal(v):
            return None
        return parse_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v, info: ValidationInfo):
        if v is None or is_null_literal(v):
            return None
        reference = (info.context or {}).get("today")
        return parse_calendar_date(v, reference)

    @field_validator("time", mode="before")
    @classmethod
    def coerce_time(cls, v):
        if v is None or is_null_literal(v):
            return None
        return parse_clock_time(v)

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v):
        if v is None or is_null_literal(v):
            return None
        return str(v).strip()

    @model_validator(mode="after")
    def enforce_entity_rules(self):
        if self.entity_type.is_task():
            self.amount = None
            self.transaction_direction = None
            self.category = None
            self.period = None
        # An explicit date replaces the period even when the classifier sent both
        if self.action.is_query() and self.date is not None:
            self.period = None
        return self

    # -----------------------------
    # Serialization
    # -----------------------------
    @field_serializer("amount")
    def serialize_amount(self, v: Optional[Decimal]):
        return float(v) if v is not None else None

    def to_wire(self) -> Dict[str, Any]:
        """All nine wire keys, absent values as None."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def default_task(cls, text: str) -> "StructuredIntent":
        """The fixed interpretation used when the classifier is unusable."""
        return cls(
            entity_type=EntityType.TASK,
            action=Action.INSERT,
            description=text,
        )
