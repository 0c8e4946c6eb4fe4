from __future__ import annotations

import os
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from testcontainers.postgres import PostgresContainer

from services.advisor.app.domain import (
    RESERVATION_CANCELLED,
    RESERVATION_PENDING,
    ROOM_UNDER_REPAIR,
    Reservation,
    Room,
    Service,
    Voucher,
)
from services.advisor.app.memory_store import InMemoryAdvisorStore
from tests.factories import DELUXE, FAMILY, SEED_TODAY, make_room, make_service


REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture()
def rooms() -> list[Room]:
    return [
        make_room("101", 800_000),
        make_room("102", 1_200_000),
        make_room("201", 1_800_000, DELUXE),
        make_room("301", 2_500_000, FAMILY),
        make_room("302", 2_400_000, FAMILY, status=ROOM_UNDER_REPAIR),
    ]


@pytest.fixture()
def services() -> list[Service]:
    return [
        make_service("sv_spa", "Spa thư giãn", 300_000),
        make_service("sv_breakfast", "Buffet sáng", 150_000),
        make_service("sv_seafood", "Ăn tối hải sản", 500_000),
        make_service("sv_gym", "Gym & Yoga", 100_000),
        make_service("sv_tour", "Tour đảo nửa ngày", 650_000),
    ]


@pytest.fixture()
def vouchers() -> list[Voucher]:
    return [
        Voucher(
            voucher_id="vc_summer",
            name="Hè rực rỡ",
            description="Áp dụng cho mọi hạng phòng.",
            discount_percent=15,
            starts_on=date(2025, 6, 1),
            ends_on=date(2025, 8, 31),
            min_spend=Decimal(3_000_000),
        ),
        Voucher(
            voucher_id="vc_old",
            name="Tết sum vầy",
            description=None,
            discount_percent=20,
            starts_on=date(2025, 1, 1),
            ends_on=date(2025, 2, 15),
        ),
    ]


@pytest.fixture()
def reservations() -> list[Reservation]:
    return [
        Reservation("rs_1", "101", date(2025, 8, 1), date(2025, 8, 5), RESERVATION_PENDING),
        Reservation("rs_2", "102", date(2025, 8, 1), date(2025, 8, 5), RESERVATION_CANCELLED),
    ]


@pytest.fixture()
def store(rooms, reservations, services, vouchers) -> InMemoryAdvisorStore:
    return InMemoryAdvisorStore(rooms=rooms, reservations=reservations, services=services, vouchers=vouchers)


@pytest.fixture(scope="session")
def postgres_url() -> str:
    with PostgresContainer("postgres:16") as pg:
        yield pg.get_connection_url()


@pytest.fixture(scope="session")
def migrated_seeded_db(postgres_url: str) -> str:
    # Normalize testcontainers URL (may be postgresql:// or postgresql+psycopg2://).
    base = postgres_url.replace("postgresql+psycopg2://", "postgresql://")
    # Alembic and the seed expect a sync URL (psycopg3).
    sync_url = base.replace("postgresql://", "postgresql+psycopg://")
    async_url = base.replace("postgresql://", "postgresql+asyncpg://")

    alembic_ini = str(REPO_ROOT / "db" / "migrations" / "alembic.ini")
    cfg = Config(alembic_ini)
    os.environ["DATABASE_URL"] = sync_url
    command.upgrade(cfg, "head")

    from db.seed import seed

    seed(database_url=sync_url, seed_value=2025, today=SEED_TODAY)

    # Restore async url for app runtime
    os.environ["DATABASE_URL"] = async_url
    return async_url
