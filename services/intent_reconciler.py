# FILE: services/intent_reconciler.py
"""
Intent Reconciler

Merges the classifier's reading of a message with the deterministic
temporal extraction of the same text.

Policy:
- Classifier failure -> default task intent, extractor not consulted
- Only "inserir" intents are merged; queries keep the classifier's date/period
- Merging fills gaps only; classifier values are never overwritten
"""

from datetime import datetime
from typing import Optional

from models.intent import StructuredIntent, TemporalCandidate
from services.date_resolver import get_now
from services.intent_classifier import ClassifierFailure, classify_message
from services.temporal_extractor import DatePolicy, extract_date_time
from services.utils import get_logger

logger = get_logger("intent_reconciler")


def merge_temporal(intent: StructuredIntent, candidate: TemporalCandidate) -> StructuredIntent:
    if not intent.action.is_insert():
        return intent

    updates = {}
    if intent.date is None and candidate.date is not None:
        updates["date"] = candidate.date
    if intent.time is None and candidate.time is not None:
        updates["time"] = candidate.time

    if not updates:
        return intent
    return intent.model_copy(update=updates)


async def interpret_message(
    text: str,
    *,
    now: Optional[datetime] = None,
    agent=None,
) -> StructuredIntent:
    """
    Interpret one message. Always returns an intent.

    `now` is the reference instant for relative expressions ("amanhã",
    "sexta"); `agent` replaces the configured LLM agent.
    """
    now = now or get_now()
    logger.info(f"Interpreting message: text_length={len(text or '')}")

    classified = await classify_message(text, agent=agent, today=now.date())
    if isinstance(classified, ClassifierFailure):
        logger.warning(f"Falling back to default task intent: reason={classified.reason.value}")
        return StructuredIntent.default_task(text)

    candidate = extract_date_time(text, now, DatePolicy.ASSUME_TODAY)
    intent = merge_temporal(classified, candidate)

    logger.info(f"✅ Interpreted intent: {intent.to_wire()}")
    return intent
