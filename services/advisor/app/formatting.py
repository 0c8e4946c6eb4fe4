from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal


def format_vnd(amount: Decimal | int) -> str:
    """vi-VN currency display: 5.000.000 ₫ (rounding happens here and only here)."""
    value = int(Decimal(amount).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    sign = "-" if value < 0 else ""
    return f"{sign}{abs(value):,}".replace(",", ".") + " ₫"


def format_date(d: date) -> str:
    return d.strftime("%d/%m/%Y")
