from __future__ import annotations

from datetime import date
from decimal import Decimal

from services.advisor.app.domain import ROOM_AVAILABLE, Room, RoomType, Service


STANDARD = RoomType(room_type_id="rt_standard", name="Standard", occupancy=2)
DELUXE = RoomType(room_type_id="rt_deluxe", name="Deluxe", occupancy=3, beds=2)
FAMILY = RoomType(room_type_id="rt_family", name="Family Suite", occupancy=4, beds=2)


def make_room(room_id: str, price: int, room_type: RoomType = STANDARD, status: str = ROOM_AVAILABLE) -> Room:
    return Room(room_id=room_id, name=f"Phòng {room_id}", price=Decimal(price), status=status, room_type=room_type)


def make_service(service_id: str, name: str, price: int) -> Service:
    return Service(service_id=service_id, name=name, price=Decimal(price))


# Anchor date for seeded reservations and vouchers.
SEED_TODAY = date(2025, 7, 1)
