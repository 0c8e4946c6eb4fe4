"""
Deterministic parsing of a single guest message (Vietnamese) into typed quantities.

None of these functions raise: "not found" is always reported through a default value.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation


# Domain assumptions: an unspecified stay is one night, an unspecified party is a couple.
DEFAULT_NIGHTS = 1
DEFAULT_PARTY_SIZE = 2

MILLION = Decimal(1_000_000)
THOUSAND = Decimal(1_000)

_NUMBER = r"(\d+(?:[.,]\d+)*)"

_MILLIONS_RE = re.compile(_NUMBER + r"\s*(?:triệu|tr)\b", re.IGNORECASE)
_THOUSANDS_RE = re.compile(_NUMBER + r"\s*(?:nghìn|ngàn|k)\b", re.IGNORECASE)
_BARE_AMOUNT_RE = re.compile(r"(?<![\d/.,-])" + _NUMBER + r"\s*(?:đồng|vnd|đ)?\s*$", re.IGNORECASE)
_GROUPED_RE = re.compile(r"^\d{1,3}(?:[.,]\d{3}){2,}$")

# Counts longer than four digits are not a stay length or a party size; they are ignored.
_COUNT = r"(?<!\d)(\d{1,4})(?!\d)"

_NIGHTS_PATTERNS = [
    re.compile(_COUNT + r"\s*(?:đêm|dem)\b", re.IGNORECASE),
    re.compile(_COUNT + r"\s*(?:ngày|day)s?\b", re.IGNORECASE),
    re.compile(r"ở\s*" + _COUNT, re.IGNORECASE),
]

_COUPLE_RE = re.compile(r"cặp\s*đôi|couple", re.IGNORECASE)
_PEOPLE_PATTERNS = [
    re.compile(_COUNT + r"\s*(?:người|ng)\b", re.IGNORECASE),
    re.compile(r"cho\s*" + _COUNT, re.IGNORECASE),
    re.compile(_COUNT + r"\s*(?:khách|guests?)\b", re.IGNORECASE),
    re.compile(r"gia\s*đình\s*" + _COUNT, re.IGNORECASE),
]

_DM = r"(\d{1,2})[/-](\d{1,2})"
_UNTIL = r"\s*(?:tới|đến|to)\s*(?:ngày\s*)?"
_RANGE_PATTERNS = [
    re.compile(r"từ\s*ngày\s*" + _DM + _UNTIL + _DM, re.IGNORECASE),
    re.compile(r"từ\s*" + _DM + _UNTIL + _DM, re.IGNORECASE),
    re.compile(r"ngày\s*" + _DM + _UNTIL + _DM, re.IGNORECASE),
    re.compile(_DM + _UNTIL + _DM, re.IGNORECASE),
]
_SINGLE_DATE_PATTERNS = [
    re.compile(r"vào\s*ngày\s*" + _DM, re.IGNORECASE),
    re.compile(r"ngày\s*" + _DM, re.IGNORECASE),
]


def _to_decimal(raw: str) -> Decimal | None:
    # "2.000.000" is thousands grouping; "2,5" / "2.5" is a decimal fraction.
    if _GROUPED_RE.match(raw):
        cleaned = raw.replace(".", "").replace(",", "")
    else:
        cleaned = raw.replace(",", ".")
        if cleaned.count(".") > 1:
            return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def parse_money(text: str) -> Decimal:
    """Budget in VND, or 0 when the message names no amount."""
    lowered = text.lower()

    m = _MILLIONS_RE.search(lowered)
    if m:
        value = _to_decimal(m.group(1))
        if value is not None:
            return value * MILLION

    m = _THOUSANDS_RE.search(lowered)
    if m:
        value = _to_decimal(m.group(1))
        if value is not None:
            return value * THOUSAND

    m = _BARE_AMOUNT_RE.search(lowered.strip())
    if m:
        value = _to_decimal(m.group(1))
        if value is not None:
            # Small bare numbers ("5") mean millions; resort prices are never that low.
            return value if value > THOUSAND else value * MILLION

    return Decimal(0)


def parse_nights(text: str) -> int:
    for pattern in _NIGHTS_PATTERNS:
        m = pattern.search(text)
        if m:
            return int(m.group(1))
    return DEFAULT_NIGHTS


def parse_people(text: str) -> int:
    if _COUPLE_RE.search(text):
        return 2
    for pattern in _PEOPLE_PATTERNS:
        m = pattern.search(text)
        if m:
            return int(m.group(1))
    return DEFAULT_PARTY_SIZE


def _valid_day_month(day: int, month: int) -> bool:
    return 1 <= day <= 31 and 1 <= month <= 12


def _calendar_date(year: int, month: int, day: int) -> date:
    # Days past the end of a month roll into the next one ("30/2" -> early March).
    return date(year, month, 1) + timedelta(days=day - 1)


def parse_date_range(text: str, today: date | None = None) -> tuple[date | None, date | None]:
    """
    Check-in/check-out from "<d>/<m> tới <d>/<m>" phrasing, or from a single "ngày <d>/<m>"
    plus the night count. The current year is assumed; a check-in already in the past moves
    both dates to next year.
    """
    today = today or date.today()
    lowered = text.lower()

    for pattern in _RANGE_PATTERNS:
        m = pattern.search(lowered)
        if not m:
            continue
        d1, m1, d2, m2 = (int(g) for g in m.groups())
        if not (_valid_day_month(d1, m1) and _valid_day_month(d2, m2)):
            continue
        year = today.year
        try:
            check_in = _calendar_date(year, m1, d1)
            if check_in < today:
                year += 1
                check_in = _calendar_date(year, m1, d1)
            return check_in, _calendar_date(year, m2, d2)
        except (OverflowError, ValueError):
            # Beyond the last representable date.
            return None, None

    for pattern in _SINGLE_DATE_PATTERNS:
        m = pattern.search(lowered)
        if not m:
            continue
        day, month = int(m.group(1)), int(m.group(2))
        if not _valid_day_month(day, month):
            continue
        try:
            check_in = _calendar_date(today.year, month, day)
            if check_in < today:
                check_in = _calendar_date(today.year + 1, month, day)
            return check_in, check_in + timedelta(days=parse_nights(text))
        except (OverflowError, ValueError):
            return None, None

    return None, None


_MORE_SERVICES_RE = re.compile(r"thêm.*dịch vụ|dịch vụ.*thêm|thêm.*gì|có gì thêm", re.IGNORECASE)


def wants_more_services(text: str) -> bool:
    return bool(_MORE_SERVICES_RE.search(text))
