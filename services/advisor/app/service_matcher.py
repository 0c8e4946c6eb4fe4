"""
Finds the catalog services a guest message talks about.

Names, name tokens and category keywords match as whole words, not as raw substrings: "ăn"
must not fire inside "căn", and tokens such as "dịch" or "gói" never identify a service on
their own. The cost is that plurals and glued compounds ("buffets", "gymnasium") do not match.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache

from services.advisor.app.domain import Service
from services.advisor.app.stores import AdvisorStore


# A message must mention at least one of these before the catalog is consulted.
SERVICE_TRIGGER_KEYWORDS = (
    "dịch vụ",
    "spa",
    "massage",
    "mát xa",
    "ăn",
    "uống",
    "gym",
    "fitness",
    "thể dục",
    "pool",
    "bể bơi",
    "hồ bơi",
    "tour",
    "tham quan",
    "cocktail",
    "bar",
)

# Category word -> phrasings a guest may use for it.
SERVICE_CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "spa": ("spa", "massage", "mát xa"),
    "ăn": ("ăn", "đồ ăn", "thức ăn", "bữa ăn", "món ăn"),
    "uống": ("uống", "đồ uống", "nước uống", "cocktail", "bar"),
    "gym": ("gym", "thể dục", "fitness"),
    "pool": ("pool", "bể bơi", "hồ bơi"),
    "tour": ("tour", "tham quan", "du lịch"),
}

# Name tokens too generic to identify a service on their own.
_GENERIC_NAME_TOKENS = frozenset({"dịch", "vụ", "gói", "và", "cho", "the", "of", "&", "-"})


@lru_cache(maxsize=256)
def _word_re(phrase: str) -> re.Pattern[str]:
    return re.compile(r"(?<!\w)" + re.escape(phrase) + r"(?!\w)")


def contains_phrase(text: str, phrase: str) -> bool:
    """Whole-word containment, so "ăn" does not fire inside "căn"."""
    return bool(_word_re(phrase.lower()).search(text))


def mentions_services(text: str) -> bool:
    lowered = text.lower()
    return any(contains_phrase(lowered, kw) for kw in SERVICE_TRIGGER_KEYWORDS)


def match_services(text: str, catalog: Iterable[Service]) -> list[Service]:
    lowered = text.lower()
    services = list(catalog)
    matched: list[Service] = []

    for service in services:
        name = service.name.lower()
        tokens = [t for t in name.split() if t not in _GENERIC_NAME_TOKENS]
        if contains_phrase(lowered, name) or any(contains_phrase(lowered, t) for t in tokens):
            matched.append(service)

    for category, phrasings in SERVICE_CATEGORY_KEYWORDS.items():
        if not any(contains_phrase(lowered, p) for p in phrasings):
            continue
        for service in services:
            name = service.name.lower()
            if contains_phrase(name, category) or any(contains_phrase(name, p) for p in phrasings):
                matched.append(service)

    seen: set[str] = set()
    unique: list[Service] = []
    for service in matched:
        if service.service_id in seen:
            continue
        seen.add(service.service_id)
        unique.append(service)
    return unique


async def find_mentioned_services(text: str, store: AdvisorStore) -> list[Service]:
    if not mentions_services(text):
        return []
    return match_services(text, await store.list_services())
