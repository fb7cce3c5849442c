# FILE: services/intent_classifier.py
"""
Semantic Intent Classifier Adapter

Sends the instruction template to the LLM agent and turns whatever comes
back into either a StructuredIntent or a ClassifierFailure. Failures are
returned, never raised: the caller decides how to degrade.
"""

import asyncio
import json
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional, Union

from pydantic import ValidationError

from agents.intent_agent import build_prompt, get_intent_agent
from config import CLASSIFIER_TIMEOUT_SECONDS
from models.intent import StructuredIntent, normalize_null_literals
from services.date_resolver import get_today
from services.utils import get_logger

logger = get_logger("intent_classifier")

_OPEN_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*")
_CLOSE_FENCE_RE = re.compile(r"\s*```$")


# -----------------------------
# Failure Model
# -----------------------------
class ClassifierFailureReason(str, Enum):
    EMPTY_RESPONSE = "empty_response"
    INVALID_JSON = "invalid_json"
    NOT_AN_OBJECT = "not_an_object"
    INVALID_PAYLOAD = "invalid_payload"
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class ClassifierFailure:
    reason: ClassifierFailureReason
    detail: Optional[str] = None
    raw: Optional[str] = None


ClassifierResult = Union[StructuredIntent, ClassifierFailure]


# -----------------------------
# Response Contract
# -----------------------------
def strip_code_fence(text: str) -> str:
    """```json {...} ``` -> {...}"""
    body = text.strip()
    body = _OPEN_FENCE_RE.sub("", body)
    body = _CLOSE_FENCE_RE.sub("", body)
    return body.strip()


def parse_classifier_response(text: Optional[str], today: Optional[date] = None) -> ClassifierResult:
    """
    `today` completes partial dates in the payload ("15/07").
    """
    if not text or not text.strip():
        return ClassifierFailure(ClassifierFailureReason.EMPTY_RESPONSE, raw=text)

    body = strip_code_fence(text)
    if not body:
        return ClassifierFailure(ClassifierFailureReason.EMPTY_RESPONSE, raw=text)

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        return ClassifierFailure(ClassifierFailureReason.INVALID_JSON, detail=str(e), raw=text)

    if not isinstance(payload, dict):
        return ClassifierFailure(
            ClassifierFailureReason.NOT_AN_OBJECT,
            detail=type(payload).__name__,
            raw=text,
        )

    try:
        return StructuredIntent.model_validate(
            normalize_null_literals(payload),
            context={"today": today} if today else None,
        )
    except ValidationError as e:
        return ClassifierFailure(ClassifierFailureReason.INVALID_PAYLOAD, detail=str(e), raw=text)


def _output_text(result: Any) -> Optional[str]:
    output = getattr(result, "output", result)
    if output is None or isinstance(output, str):
        return output
    return str(output)


# -----------------------------
# Classifier Call
# -----------------------------
async def classify_message(
    text: str,
    *,
    agent=None,
    today: Optional[date] = None,
    timeout: Optional[float] = CLASSIFIER_TIMEOUT_SECONDS,
) -> ClassifierResult:
    """
    One attempt, no retry. Transport errors and an expired timeout come
    back as ClassifierFailure like any unusable response.
    """
    today = today or get_today()
    prompt = build_prompt(text, today)

    try:
        agent = agent or get_intent_agent()
        if timeout and timeout > 0:
            result = await asyncio.wait_for(agent.run(prompt), timeout=timeout)
        else:
            result = await agent.run(prompt)
    except asyncio.TimeoutError:
        failure = ClassifierFailure(ClassifierFailureReason.TIMEOUT, detail=f"{timeout}s")
    except Exception as e:
        failure = ClassifierFailure(ClassifierFailureReason.TRANSPORT_ERROR, detail=str(e))
    else:
        failure = None
        classified = parse_classifier_response(_output_text(result), today)
        if isinstance(classified, ClassifierFailure):
            failure = classified

    if failure is not None:
        logger.warning(f"⚠️ Classifier failure: reason={failure.reason.value}, detail={failure.detail}")
        return failure

    logger.info(f"🧠 Classified: {classified.to_wire()}")
    return classified
