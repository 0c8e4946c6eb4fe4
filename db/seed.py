from __future__ import annotations

import argparse
import os
import random
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

import sqlalchemy as sa

from db.settings import SETTINGS


@dataclass(frozen=True)
class RoomTypeSpec:
    room_type_id: str
    name: str
    occupancy: int
    beds: int
    base_price: int
    rooms: int
    description: str


ROOM_TYPES: list[RoomTypeSpec] = [
    RoomTypeSpec("rt_standard", "Standard", 2, 1, 800_000, 6, "Phòng tiêu chuẩn hướng vườn."),
    RoomTypeSpec("rt_superior", "Superior", 2, 1, 1_200_000, 5, "Phòng rộng có ban công."),
    RoomTypeSpec("rt_deluxe", "Deluxe", 3, 2, 1_800_000, 4, "Phòng hướng biển, bồn tắm riêng."),
    RoomTypeSpec("rt_family", "Family Suite", 4, 2, 2_500_000, 3, "Hai phòng ngủ liền kề cho gia đình."),
    RoomTypeSpec("rt_villa", "Pool Villa", 6, 3, 5_000_000, 2, "Biệt thự có hồ bơi riêng."),
]

# (service_id, name, price per person)
SERVICES: list[tuple[str, str, int]] = [
    ("sv_spa", "Spa thư giãn", 300_000),
    ("sv_massage", "Massage đá nóng", 450_000),
    ("sv_breakfast", "Buffet sáng", 150_000),
    ("sv_seafood", "Ăn tối hải sản", 500_000),
    ("sv_bbq", "BBQ bãi biển", 400_000),
    ("sv_bar", "Cocktail quầy bar", 120_000),
    ("sv_gym", "Gym & Yoga", 100_000),
    ("sv_pool", "Hồ bơi vô cực", 80_000),
    ("sv_tour_island", "Tour đảo nửa ngày", 650_000),
    ("sv_kayak", "Chèo kayak", 200_000),
]

# Statuses on the inventory are weighted towards "available".
ROOM_STATUS_WEIGHTS = [("available", 0.85), ("cleaning", 0.1), ("under_repair", 0.05)]
RESERVATION_STATUS_WEIGHTS = [
    ("pending_confirmation", 0.3),
    ("checked_in", 0.3),
    ("checked_out", 0.25),
    ("cancelled", 0.15),
]


def _pick(rng: random.Random, weights: list[tuple[str, float]]) -> str:
    values, probs = zip(*weights)
    return rng.choices(values, weights=probs, k=1)[0]


def _price(rng: random.Random, base: int) -> Decimal:
    # +/- 10% in steps of 50,000 VND.
    step = 50_000
    jitter = rng.randint(-2, 2) * step
    return Decimal(max(base + jitter, step))


def seed(
    database_url: str,
    seed_value: int,
    *,
    today: date | None = None,
    reservations_n: int = 60,
    horizon_days: int = 120,
) -> None:
    rng = random.Random(seed_value)
    today = today or date.today()

    engine = sa.create_engine(database_url, future=True)
    meta = sa.MetaData()

    room_types = sa.Table(
        "room_types",
        meta,
        sa.Column("room_type_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("occupancy", sa.Integer(), nullable=False),
        sa.Column("beds", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )
    rooms = sa.Table(
        "rooms",
        meta,
        sa.Column("room_id", sa.Text(), primary_key=True),
        sa.Column("room_type_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
    )
    reservations = sa.Table(
        "reservations",
        meta,
        sa.Column("reservation_id", sa.Text(), primary_key=True),
        sa.Column("room_id", sa.Text(), nullable=False),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
    )
    services = sa.Table(
        "services",
        meta,
        sa.Column("service_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )
    vouchers = sa.Table(
        "vouchers",
        meta,
        sa.Column("voucher_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("discount_percent", sa.Integer(), nullable=False),
        sa.Column("min_spend", sa.Numeric(14, 2), nullable=True),
        sa.Column("starts_on", sa.Date(), nullable=False),
        sa.Column("ends_on", sa.Date(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
    )

    room_type_rows = [
        dict(
            room_type_id=t.room_type_id,
            name=t.name,
            occupancy=t.occupancy,
            beds=t.beds,
            description=t.description,
        )
        for t in ROOM_TYPES
    ]

    room_rows: list[dict] = []
    floor = 1
    for t in ROOM_TYPES:
        for i in range(t.rooms):
            room_rows.append(
                dict(
                    room_id=f"r_{floor}{i + 1:02d}",
                    room_type_id=t.room_type_id,
                    name=f"Phòng {floor}{i + 1:02d}",
                    price=_price(rng, t.base_price),
                    status=_pick(rng, ROOM_STATUS_WEIGHTS),
                )
            )
        floor += 1

    service_rows = [dict(service_id=sid, name=name, price=Decimal(price), description=None) for sid, name, price in SERVICES]

    voucher_rows = [
        dict(
            voucher_id="vc_summer",
            name="Hè rực rỡ",
            description="Áp dụng cho mọi hạng phòng.",
            discount_percent=15,
            min_spend=Decimal(3_000_000),
            starts_on=today - timedelta(days=10),
            ends_on=today + timedelta(days=50),
            status="active",
        ),
        dict(
            voucher_id="vc_early",
            name="Đặt sớm",
            description="Đặt trước 30 ngày.",
            discount_percent=10,
            min_spend=None,
            starts_on=today - timedelta(days=30),
            ends_on=today + timedelta(days=90),
            status="active",
        ),
        dict(
            voucher_id="vc_tet",
            name="Tết sum vầy",
            description=None,
            discount_percent=20,
            min_spend=Decimal(5_000_000),
            starts_on=today - timedelta(days=300),
            ends_on=today - timedelta(days=200),
            status="expired",
        ),
    ]

    reservation_rows: list[dict] = []
    for i in range(reservations_n):
        room = rng.choice(room_rows)
        check_in = today + timedelta(days=rng.randint(-10, horizon_days))
        nights = rng.randint(1, 5)
        reservation_rows.append(
            dict(
                reservation_id=f"rs_{seed_value}_{i:04d}",
                room_id=room["room_id"],
                check_in=check_in,
                check_out=check_in + timedelta(days=nights),
                status=_pick(rng, RESERVATION_STATUS_WEIGHTS),
            )
        )

    # Load into DB (truncate existing rows for deterministic idempotence in dev).
    with engine.begin() as conn:
        conn.execute(sa.text("TRUNCATE TABLE reservations, rooms, room_types, services, vouchers CASCADE"))
        conn.execute(room_types.insert(), room_type_rows)
        conn.execute(rooms.insert(), room_rows)
        conn.execute(services.insert(), service_rows)
        conn.execute(vouchers.insert(), voucher_rows)
        if reservation_rows:
            conn.execute(reservations.insert(), reservation_rows)

    print(
        f"Seeded {len(room_type_rows)} room types, {len(room_rows)} rooms, {len(service_rows)} services, "
        f"{len(voucher_rows)} vouchers, {len(reservation_rows)} reservations."
    )


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--database-url", default=os.getenv("DATABASE_URL") or SETTINGS.database_url)
    parser.add_argument("--seed", type=int, default=SETTINGS.seed_value)
    parser.add_argument("--today", type=date.fromisoformat, default=None, help="Anchor date for reservations/vouchers (YYYY-MM-DD).")
    parser.add_argument("--reservations", type=int, default=60)
    parser.add_argument("--horizon-days", type=int, default=120)
    args = parser.parse_args()
    seed(
        args.database_url,
        args.seed,
        today=args.today,
        reservations_n=args.reservations,
        horizon_days=args.horizon_days,
    )


if __name__ == "__main__":
    main()
