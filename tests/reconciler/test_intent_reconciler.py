import asyncio
import json
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from core.intent import Action, EntityType, Period
from models.intent import StructuredIntent, TemporalCandidate
from services.intent_reconciler import interpret_message, merge_temporal


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def classifier_json(**overrides) -> str:
    payload = {
        "tipo": "transacao",
        "acao": "inserir",
        "descricao": "almoço",
        "valor": 50,
        "data": None,
        "hora": None,
        "tipoTransacao": "SAIDA",
        "categoria": "alimentacao",
        "periodo": None,
    }
    payload.update(overrides)
    return json.dumps(payload, ensure_ascii=False)


def interpret(text, agent, now):
    return asyncio.run(interpret_message(text, now=now, agent=agent))


# ---------------------------------------------------------------------
# TESTS: CLASSIFIER FAILURE
# ---------------------------------------------------------------------

@pytest.mark.parametrize("output", ["", "não sei", "[]", '{"tipo": "outro", "acao": "inserir"}'])
def test_classifier_failure_yields_default_task(make_agent, fixed_now, output):
    text = "paguei 50 de almoço amanhã às 13h"

    intent = interpret(text, make_agent(output=output), fixed_now)

    assert intent.entity_type is EntityType.TASK
    assert intent.action is Action.INSERT
    assert intent.description == text
    assert intent.to_wire() == {
        "tipo": "tarefa",
        "acao": "inserir",
        "descricao": text,
        "valor": None,
        "data": None,
        "hora": None,
        "tipoTransacao": None,
        "categoria": None,
        "periodo": None,
    }


def test_classifier_failure_does_not_consult_extractor(make_agent, fixed_now):
    with patch("services.intent_reconciler.extract_date_time", new=MagicMock()) as extractor:
        interpret("amanhã às 13h", make_agent(side_effect=RuntimeError("boom")), fixed_now)

    extractor.assert_not_called()


# ---------------------------------------------------------------------
# TESTS: INSERT MERGE
# ---------------------------------------------------------------------

def test_insert_fills_missing_date_and_time(make_agent, fixed_now):
    intent = interpret("paguei 50 de almoço amanhã às 13h", make_agent(output=classifier_json()), fixed_now)

    assert intent.date == date(2025, 6, 11)
    assert intent.time == "13:00"
    assert intent.amount == 50


def test_insert_fills_fields_the_classifier_spelled_as_null(make_agent, fixed_now):
    output = classifier_json(data="null", hora="null")

    intent = interpret("consulta no dentista sexta 14h30", make_agent(output=output), fixed_now)

    assert intent.date == date(2025, 6, 13)
    assert intent.time == "14:30"


def test_insert_without_date_signal_assumes_today(make_agent, fixed_now):
    intent = interpret("paguei 50 de almoço", make_agent(output=classifier_json()), fixed_now)

    assert intent.date == date(2025, 6, 10)
    assert intent.time is None


def test_classifier_values_are_never_overwritten(make_agent, fixed_now):
    output = classifier_json(data="2025-12-24", hora="20:00")

    intent = interpret("ceia amanhã às 19h", make_agent(output=output), fixed_now)

    assert intent.date == date(2025, 12, 24)
    assert intent.time == "20:00"


def test_task_insert_is_merged_too(make_agent, fixed_now):
    output = classifier_json(tipo="tarefa", descricao="reunião com contador", valor=None, tipoTransacao=None, categoria=None)

    intent = interpret("reunião com contador 18/12/25 às 10", make_agent(output=output), fixed_now)

    assert intent.entity_type is EntityType.TASK
    assert intent.date == date(2025, 12, 18)
    assert intent.time == "10:00"


# ---------------------------------------------------------------------
# TESTS: NON-INSERT GUARD
# ---------------------------------------------------------------------

def test_query_keeps_classifier_period_despite_incidental_date(make_agent, fixed_now):
    output = classifier_json(acao="consultar", valor=None, tipoTransacao=None, categoria=None, periodo="mes")

    intent = interpret("quanto gastei no mês? vence 18/12 às 10h", make_agent(output=output), fixed_now)

    assert intent.action is Action.QUERY
    assert intent.period is Period.MONTH
    assert intent.date is None
    assert intent.time is None


def test_query_keeps_classifier_date(make_agent, fixed_now):
    output = classifier_json(acao="consultar", data="2025-06-01", periodo=None)

    intent = interpret("gastos de 01/06 e de amanhã", make_agent(output=output), fixed_now)

    assert intent.date == date(2025, 6, 1)
    assert intent.period is None


@pytest.mark.parametrize("action", ["editar", "remover"])
def test_edit_and_remove_are_not_merged(make_agent, fixed_now, action):
    intent = interpret("apaga o almoço de amanhã às 13h", make_agent(output=classifier_json(acao=action)), fixed_now)

    assert intent.date is None
    assert intent.time is None


# ---------------------------------------------------------------------
# TESTS: MERGE FUNCTION
# ---------------------------------------------------------------------

def test_merge_returns_same_intent_when_nothing_to_fill():
    intent = StructuredIntent(
        entity_type=EntityType.TASK,
        action=Action.INSERT,
        description="x",
        date=date(2025, 1, 1),
        time="08:00",
    )
    assert merge_temporal(intent, TemporalCandidate(date=date(2025, 2, 2), time="09:00")) is intent


def test_merge_ignores_empty_candidate():
    intent = StructuredIntent(entity_type=EntityType.TASK, action=Action.INSERT, description="x")
    merged = merge_temporal(intent, TemporalCandidate())
    assert merged.date is None
    assert merged.time is None
