"""
Read-only views the advisor consults: room inventory, reservations, services and vouchers.

The advisor never writes. Rooms, reservations and catalogs are owned by the admin side of the
application; every request re-reads a fresh snapshot.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from services.advisor.app.availability import reservation_overlap_clause
from services.advisor.app.domain import (
    BLOCKING_RESERVATION_STATUSES,
    ROOM_AVAILABLE,
    VOUCHER_ACTIVE,
    Room,
    RoomType,
    Service,
    Voucher,
)


class AdvisorStore(ABC):
    @abstractmethod
    async def list_rooms(self, *, max_price: Decimal | None = None, min_occupancy: int | None = None) -> list[Room]:
        """Bookable (status "available") rooms within the price ceiling and occupancy floor, cheapest first."""

    @abstractmethod
    async def blocked_room_ids(self, check_in: date, check_out: date) -> set[str]:
        """Rooms holding a blocking reservation that overlaps [check_in, check_out)."""

    @abstractmethod
    async def list_services(self) -> list[Service]: ...

    @abstractmethod
    async def list_active_vouchers(self, today: date) -> list[Voucher]: ...

    @abstractmethod
    async def list_room_types(self) -> list[RoomType]: ...

    async def ping(self) -> None:
        return None


room_types_t = sa.table(
    "room_types",
    sa.column("room_type_id"),
    sa.column("name"),
    sa.column("occupancy"),
    sa.column("beds"),
)
rooms_t = sa.table(
    "rooms",
    sa.column("room_id"),
    sa.column("room_type_id"),
    sa.column("name"),
    sa.column("price"),
    sa.column("status"),
)
reservations_t = sa.table(
    "reservations",
    sa.column("reservation_id"),
    sa.column("room_id"),
    sa.column("check_in"),
    sa.column("check_out"),
    sa.column("status"),
)
services_t = sa.table(
    "services",
    sa.column("service_id"),
    sa.column("name"),
    sa.column("price"),
)
vouchers_t = sa.table(
    "vouchers",
    sa.column("voucher_id"),
    sa.column("name"),
    sa.column("description"),
    sa.column("discount_percent"),
    sa.column("min_spend"),
    sa.column("starts_on"),
    sa.column("ends_on"),
    sa.column("status"),
)


class SqlAdvisorStore(AdvisorStore):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def ping(self) -> None:
        await self._session.execute(sa.text("SELECT 1"))

    async def list_rooms(self, *, max_price: Decimal | None = None, min_occupancy: int | None = None) -> list[Room]:
        where = [rooms_t.c.status == ROOM_AVAILABLE]
        if max_price is not None:
            where.append(rooms_t.c.price <= max_price)
        if min_occupancy is not None:
            where.append(room_types_t.c.occupancy >= min_occupancy)

        q = (
            sa.select(
                rooms_t.c.room_id,
                rooms_t.c.name,
                rooms_t.c.price,
                rooms_t.c.status,
                room_types_t.c.room_type_id,
                room_types_t.c.name.label("room_type_name"),
                room_types_t.c.occupancy,
                room_types_t.c.beds,
            )
            .select_from(rooms_t.join(room_types_t, rooms_t.c.room_type_id == room_types_t.c.room_type_id))
            .where(sa.and_(*where))
            .order_by(rooms_t.c.price.asc(), rooms_t.c.room_id.asc())
        )
        rows = (await self._session.execute(q)).all()
        return [
            Room(
                room_id=str(r.room_id),
                name=r.name,
                price=Decimal(r.price),
                status=r.status,
                room_type=RoomType(
                    room_type_id=str(r.room_type_id),
                    name=r.room_type_name,
                    occupancy=int(r.occupancy),
                    beds=int(r.beds or 1),
                ),
            )
            for r in rows
        ]

    async def blocked_room_ids(self, check_in: date, check_out: date) -> set[str]:
        q = (
            sa.select(reservations_t.c.room_id)
            .where(reservations_t.c.status.in_(BLOCKING_RESERVATION_STATUSES))
            .where(reservation_overlap_clause(reservations_t.c.check_in, reservations_t.c.check_out, check_in, check_out))
            .distinct()
        )
        rows = (await self._session.execute(q)).all()
        return {str(r.room_id) for r in rows}

    async def list_services(self) -> list[Service]:
        q = sa.select(services_t.c.service_id, services_t.c.name, services_t.c.price).order_by(services_t.c.service_id)
        rows = (await self._session.execute(q)).all()
        return [Service(service_id=str(r.service_id), name=r.name, price=Decimal(r.price)) for r in rows]

    async def list_active_vouchers(self, today: date) -> list[Voucher]:
        q = (
            sa.select(vouchers_t)
            .where(
                sa.and_(
                    vouchers_t.c.status == VOUCHER_ACTIVE,
                    vouchers_t.c.starts_on <= today,
                    vouchers_t.c.ends_on >= today,
                )
            )
            .order_by(vouchers_t.c.ends_on.asc(), vouchers_t.c.voucher_id.asc())
        )
        rows = (await self._session.execute(q)).mappings().all()
        return [
            Voucher(
                voucher_id=str(r["voucher_id"]),
                name=r["name"],
                description=r["description"],
                discount_percent=int(r["discount_percent"]),
                starts_on=r["starts_on"],
                ends_on=r["ends_on"],
                min_spend=Decimal(r["min_spend"]) if r["min_spend"] is not None else None,
                status=r["status"],
            )
            for r in rows
        ]

    async def list_room_types(self) -> list[RoomType]:
        q = sa.select(room_types_t).order_by(room_types_t.c.occupancy.asc(), room_types_t.c.name.asc())
        rows = (await self._session.execute(q)).mappings().all()
        return [
            RoomType(
                room_type_id=str(r["room_type_id"]),
                name=r["name"],
                occupancy=int(r["occupancy"]),
                beds=int(r["beds"] or 1),
            )
            for r in rows
        ]
