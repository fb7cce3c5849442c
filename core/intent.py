# core/intent.py
from enum import Enum
from typing import Dict, Optional

from core.text import fold


class EntityType(str, Enum):
    """
    What the message is about.
    """

    TRANSACTION = "transacao"
    TASK = "tarefa"

    @classmethod
    def _missing_(cls, value):
        return _lenient_lookup(cls, value)

    def is_task(self) -> bool:
        return self is EntityType.TASK


class Action(str, Enum):
    INSERT = "inserir"
    EDIT = "editar"
    QUERY = "consultar"
    REMOVE = "remover"

    @classmethod
    def _missing_(cls, value):
        return _lenient_lookup(cls, value)

    def is_insert(self) -> bool:
        return self is Action.INSERT

    def is_query(self) -> bool:
        return self is Action.QUERY


class TransactionDirection(str, Enum):
    INFLOW = "ENTRADA"
    OUTFLOW = "SAIDA"

    @classmethod
    def _missing_(cls, value):
        return _lenient_lookup(cls, value)


class Period(str, Enum):
    """
    Reporting window of a query intent.
    """

    TODAY = "hoje"
    YESTERDAY = "ontem"
    WEEK = "semana"
    MONTH = "mes"

    @classmethod
    def _missing_(cls, value):
        return _lenient_lookup(cls, value)


# -----------------------------
# English / spelled-out aliases accepted from the classifier
# -----------------------------
_ALIASES: Dict[type, Dict[str, str]] = {
    EntityType: {
        "transaction": "transacao",
        "task": "tarefa",
    },
    Action: {
        "insert": "inserir",
        "edit": "editar",
        "query": "consultar",
        "remove": "remover",
    },
    TransactionDirection: {
        "inflow": "ENTRADA",
        "outflow": "SAIDA",
    },
    Period: {
        "today": "hoje",
        "yesterday": "ontem",
        "week": "semana",
        "month": "mes",
    },
}


def _lenient_lookup(enum_cls, value) -> Optional[Enum]:
    if not isinstance(value, str):
        return None
    key = fold(value)
    for member in enum_cls:
        if fold(member.value) == key:
            return member
    alias = _ALIASES.get(enum_cls, {}).get(key)
    if alias is not None:
        return enum_cls(alias)
    return None
