"""resort schema

Revision ID: 0001_resort_schema
Revises: None
Create Date: 2025-07-01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_resort_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "room_types",
        sa.Column("room_type_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("occupancy", sa.Integer(), nullable=False),
        sa.Column("beds", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("description", sa.Text(), nullable=True),
    )

    op.create_table(
        "rooms",
        sa.Column("room_id", sa.Text(), primary_key=True),
        sa.Column("room_type_id", sa.Text(), sa.ForeignKey("room_types.room_type_id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        # VND per night
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="available"),
        sa.CheckConstraint("status IN ('available', 'booked', 'cleaning', 'under_repair')", name="ck_rooms_status"),
    )

    op.create_table(
        "reservations",
        sa.Column("reservation_id", sa.Text(), primary_key=True),
        sa.Column("room_id", sa.Text(), sa.ForeignKey("rooms.room_id"), nullable=False),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="pending_confirmation"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("check_out > check_in", name="ck_reservations_dates"),
        sa.CheckConstraint(
            "status IN ('pending_confirmation', 'checked_in', 'checked_out', 'cancelled')",
            name="ck_reservations_status",
        ),
    )

    op.create_table(
        "services",
        sa.Column("service_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        # VND per person, per stay
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )

    op.create_table(
        "vouchers",
        sa.Column("voucher_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("discount_percent", sa.Integer(), nullable=False),
        sa.Column("min_spend", sa.Numeric(14, 2), nullable=True),
        sa.Column("starts_on", sa.Date(), nullable=False),
        sa.Column("ends_on", sa.Date(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="active"),
    )

    op.create_index("idx_rooms_status_price", "rooms", ["status", "price"])
    op.create_index("idx_reservations_room", "reservations", ["room_id"])
    op.create_index("idx_reservations_status_dates", "reservations", ["status", "check_in", "check_out"])
    op.create_index("idx_vouchers_status_ends", "vouchers", ["status", "ends_on"])


def downgrade() -> None:
    op.drop_index("idx_vouchers_status_ends", table_name="vouchers")
    op.drop_index("idx_reservations_status_dates", table_name="reservations")
    op.drop_index("idx_reservations_room", table_name="reservations")
    op.drop_index("idx_rooms_status_price", table_name="rooms")

    op.drop_table("vouchers")
    op.drop_table("services")
    op.drop_table("reservations")
    op.drop_table("rooms")
    op.drop_table("room_types")
