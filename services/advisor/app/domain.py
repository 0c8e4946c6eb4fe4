from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


ROOM_AVAILABLE = "available"
ROOM_BOOKED = "booked"
ROOM_CLEANING = "cleaning"
ROOM_UNDER_REPAIR = "under_repair"

RESERVATION_PENDING = "pending_confirmation"
RESERVATION_CHECKED_IN = "checked_in"
RESERVATION_CHECKED_OUT = "checked_out"
RESERVATION_CANCELLED = "cancelled"

# Only these reservation states occupy a room.
BLOCKING_RESERVATION_STATUSES: tuple[str, ...] = (RESERVATION_PENDING, RESERVATION_CHECKED_IN)

VOUCHER_ACTIVE = "active"
VOUCHER_EXPIRED = "expired"


@dataclass(frozen=True)
class RoomType:
    room_type_id: str
    name: str
    occupancy: int
    beds: int = 1


@dataclass(frozen=True)
class Room:
    room_id: str
    name: str
    price: Decimal
    status: str
    room_type: RoomType


@dataclass(frozen=True)
class Reservation:
    reservation_id: str
    room_id: str
    check_in: date
    check_out: date
    status: str


@dataclass(frozen=True)
class Service:
    service_id: str
    name: str
    # Per person, per stay.
    price: Decimal


@dataclass(frozen=True)
class Voucher:
    voucher_id: str
    name: str
    description: str | None
    discount_percent: int
    starts_on: date
    ends_on: date
    min_spend: Decimal | None = None
    status: str = VOUCHER_ACTIVE


@dataclass
class ParsedQuery:
    """
    Structured view of one advisor message. Built per request and discarded with the reply.

    budget == 0 means the guest did not name an amount.
    """

    budget: Decimal
    nights: int
    people: int
    check_in: date | None = None
    check_out: date | None = None
    services: list[Service] = field(default_factory=list)
    wants_more_services: bool = False

    @property
    def has_dates(self) -> bool:
        return self.check_in is not None and self.check_out is not None

    @property
    def service_cost(self) -> Decimal:
        return sum((s.price * self.people for s in self.services), Decimal(0))
