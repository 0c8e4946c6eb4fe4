from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa

from services.advisor.app.domain import Room

if TYPE_CHECKING:
    from services.advisor.app.stores import AdvisorStore


def reservation_overlaps(res_check_in: date, res_check_out: date, check_in: date, check_out: date) -> bool:
    """
    Half-open overlap of a reservation with the requested stay [check_in, check_out).

    A reservation blocks the stay when it starts inside it, ends inside it, or spans it.
    Back-to-back stays (one checks out the day the other checks in) do not overlap.
    """
    starts_inside = check_in <= res_check_in < check_out
    ends_inside = check_in < res_check_out <= check_out
    spans = res_check_in <= check_in and res_check_out >= check_out
    return starts_inside or ends_inside or spans


def reservation_overlap_clause(res_check_in: Any, res_check_out: Any, check_in: date, check_out: date) -> Any:
    """SQL form of `reservation_overlaps`; keep the two in lockstep."""
    return sa.or_(
        sa.and_(res_check_in >= check_in, res_check_in < check_out),
        sa.and_(res_check_out > check_in, res_check_out <= check_out),
        sa.and_(res_check_in <= check_in, res_check_out >= check_out),
    )


class AvailabilityResolver:
    def __init__(self, store: AdvisorStore):
        self._store = store

    async def find_available(
        self,
        check_in: date,
        check_out: date,
        max_price_per_night: Decimal | None = None,
        min_occupancy: int | None = None,
    ) -> list[Room]:
        # Caller guarantees check_out > check_in.
        rooms = await self._store.list_rooms(max_price=max_price_per_night, min_occupancy=min_occupancy)
        blocked = await self._store.blocked_room_ids(check_in, check_out)
        free = [r for r in rooms if r.room_id not in blocked]
        return sort_by_price(free)


def sort_by_price(rooms: list[Room]) -> list[Room]:
    return sorted(rooms, key=lambda r: (r.price, r.room_id))
