"""
InMemoryAdvisorStore: the same read views as SqlAdvisorStore, backed by plain lists.

Used by tests and by local demos that run without PostgreSQL.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from services.advisor.app.availability import reservation_overlaps, sort_by_price
from services.advisor.app.domain import (
    BLOCKING_RESERVATION_STATUSES,
    ROOM_AVAILABLE,
    VOUCHER_ACTIVE,
    Reservation,
    Room,
    RoomType,
    Service,
    Voucher,
)
from services.advisor.app.stores import AdvisorStore


class InMemoryAdvisorStore(AdvisorStore):
    def __init__(
        self,
        rooms: list[Room] | None = None,
        reservations: list[Reservation] | None = None,
        services: list[Service] | None = None,
        vouchers: list[Voucher] | None = None,
        room_types: list[RoomType] | None = None,
    ):
        self.rooms = list(rooms or [])
        self.reservations = list(reservations or [])
        self.services = list(services or [])
        self.vouchers = list(vouchers or [])
        self._room_types = list(room_types or [])
        # Test hook: every call is recorded as (method, kwargs).
        self.calls: list[tuple[str, dict]] = []

    async def list_rooms(self, *, max_price: Decimal | None = None, min_occupancy: int | None = None) -> list[Room]:
        self.calls.append(("list_rooms", {"max_price": max_price, "min_occupancy": min_occupancy}))
        out = [r for r in self.rooms if r.status == ROOM_AVAILABLE]
        if max_price is not None:
            out = [r for r in out if r.price <= max_price]
        if min_occupancy is not None:
            out = [r for r in out if r.room_type.occupancy >= min_occupancy]
        return sort_by_price(out)

    async def blocked_room_ids(self, check_in: date, check_out: date) -> set[str]:
        self.calls.append(("blocked_room_ids", {"check_in": check_in, "check_out": check_out}))
        return {
            r.room_id
            for r in self.reservations
            if r.status in BLOCKING_RESERVATION_STATUSES
            and reservation_overlaps(r.check_in, r.check_out, check_in, check_out)
        }

    async def list_services(self) -> list[Service]:
        self.calls.append(("list_services", {}))
        return sorted(self.services, key=lambda s: s.service_id)

    async def list_active_vouchers(self, today: date) -> list[Voucher]:
        self.calls.append(("list_active_vouchers", {"today": today}))
        active = [v for v in self.vouchers if v.status == VOUCHER_ACTIVE and v.starts_on <= today <= v.ends_on]
        return sorted(active, key=lambda v: (v.ends_on, v.voucher_id))

    async def list_room_types(self) -> list[RoomType]:
        self.calls.append(("list_room_types", {}))
        types = self._room_types or list({r.room_type.room_type_id: r.room_type for r in self.rooms}.values())
        return sorted(types, key=lambda t: (t.occupancy, t.name))
