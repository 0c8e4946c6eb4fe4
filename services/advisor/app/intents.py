"""
Two-tier intent classification.

Tier 1 is a pure function over the message text and covers the budget/availability requests,
which are the ones the advisor answers from live inventory. Only when it does not match is the
completion API consulted, and whatever comes back is coerced into a known `Intent`.
"""

from __future__ import annotations

import json
import re
from enum import StrEnum
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from services.advisor.app.graph_helpers import extract_first_json_object
from services.advisor.app.llm_schemas import LLMIntent
from services.advisor.app.logging import logger
from services.advisor.app.observability import INTENT_TOTAL, timed_llm_call
from services.advisor.app.prompt import INTENT_SYSTEM_PROMPT, INTENT_TEMPLATE


class Intent(StrEnum):
    ASK_VOUCHER = "ask_voucher"
    ASK_ROOM_TYPES = "ask_room_types"
    ASK_AVAILABLE_ROOMS_WITH_DATES = "ask_available_rooms_with_dates"
    ASK_AFFORDABLE_ROOMS_WITH_SERVICES = "ask_affordable_rooms_with_services"
    ASK_AFFORDABLE_ROOMS = "ask_affordable_rooms"
    CHECK_SERVICE = "check_service"
    ASK_PRICE = "ask_price"
    GENERAL = "general"


_AMOUNT = r"\d+(?:[.,]\d+)?\s*(?:triệu|tr|nghìn|ngàn|k)\b"

# Ordered; the first hit wins. All patterns run against the lowercased message.
BUDGET_ROOM_PATTERNS = [
    re.compile(r"phòng.*(?:dưới|đưới|tối đa|khoảng|<=?)\s*\d+"),
    re.compile(r"có.*phòng.*nào.*(?:dưới|đưới)"),
    re.compile(r"phòng.*giá.*(?:dưới|đưới|tối đa)"),
    re.compile(_AMOUNT + r".*(?:đêm|ngày)"),
    re.compile(r"có.*?" + _AMOUNT),
    re.compile(_AMOUNT + r".*(?:ở|cho)"),
    re.compile(r"còn\s*phòng\s*(?:nào|trống)"),
    re.compile(r"tổng\s*tiền.*?\d+(?:[.,]\d+)?\s*(?:triệu|tr)\b"),
]

DATE_TOKEN_RE = re.compile(r"\d{1,2}/\d{1,2}|ngày\s*\d+|\d+-\d+")


def classify_by_rules(message: str) -> Intent | None:
    text = message.lower()
    if not any(p.search(text) for p in BUDGET_ROOM_PATTERNS):
        return None
    if DATE_TOKEN_RE.search(text):
        return Intent.ASK_AVAILABLE_ROOMS_WITH_DATES
    return Intent.ASK_AFFORDABLE_ROOMS_WITH_SERVICES


def coerce_intent(raw: Any) -> Intent:  # noqa: ANN401
    try:
        return Intent(str(raw).strip().lower())
    except ValueError:
        return Intent.GENERAL


async def classify_with_llm(message: str, llm: Any) -> Intent:  # noqa: ANN401
    """
    Ask the model for {"intent": ...}. A reply that is not JSON, lacks "intent", or names an
    unknown tag degrades to GENERAL. Transport errors propagate.
    """
    sys = SystemMessage(content=INTENT_SYSTEM_PROMPT)
    human = HumanMessage(content=INTENT_TEMPLATE.format(user_message=message))
    with timed_llm_call("intent"):
        raw = (await llm.ainvoke([sys, human])).content  # type: ignore[attr-defined]
    try:
        parsed = LLMIntent.model_validate(json.loads(extract_first_json_object(str(raw))))
    except ValueError as e:
        logger.info("llm_intent_parse_failed", error=str(e))
        return Intent.GENERAL
    if parsed.intent is None:
        return Intent.GENERAL
    return coerce_intent(parsed.intent)


async def classify_intent(message: str, get_llm: Any) -> tuple[Intent, str]:  # noqa: ANN401
    """Returns (intent, tier). `get_llm` is only called when the rules do not match."""
    intent = classify_by_rules(message)
    tier = "rules"
    if intent is None:
        intent = await classify_with_llm(message, get_llm())
        tier = "llm"
    INTENT_TOTAL.labels(intent.value, tier).inc()
    logger.info("intent_classified", intent=intent.value, tier=tier)
    return intent, tier
