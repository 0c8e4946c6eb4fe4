from __future__ import annotations

from datetime import date

from services.advisor.app.domain import Service
from services.advisor.app.formatting import format_vnd


class AdvisorInputError(ValueError):
    """A guest-correctable problem with the message; surfaced as 400 {"error": ...}."""


def extract_first_json_object(text: str) -> str:
    """
    Models sometimes wrap JSON in markdown or include commentary.
    Extract the first {...} block by naive brace scanning.
    """
    s = text.strip()
    if s.startswith("{") and s.endswith("}"):
        return s
    start = s.find("{")
    if start < 0:
        raise ValueError("No JSON object found in model output.")
    depth = 0
    for i in range(start, len(s)):
        ch = s[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return s[start : i + 1]
    raise ValueError("Unterminated JSON object in model output.")


def service_catalog_lines(services: list[Service]) -> str:
    if not services:
        return "Hiện chưa có dịch vụ bổ sung nào."
    return "\n".join(f"• {s.name} - {format_vnd(s.price)}" for s in services)


def stay_is_valid(check_in: date | None, check_out: date | None) -> bool:
    return check_in is not None and check_out is not None and check_out > check_in
