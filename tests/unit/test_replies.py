from __future__ import annotations

from services.advisor.app.domain import RoomType
from services.advisor.app.replies import NO_ROOM_TYPES_REPLY, NO_VOUCHERS_REPLY, render_room_types, render_vouchers


def test_render_vouchers(vouchers) -> None:
    reply = render_vouchers(vouchers[:1])
    assert reply.startswith("🎁 Hè rực rỡ: Giảm 15% (áp dụng cho đơn từ 3.000.000 ₫). Hết hạn: 31/08/2025")
    assert "Áp dụng cho mọi hạng phòng." in reply


def test_render_vouchers_without_minimum_spend(vouchers) -> None:
    assert render_vouchers(vouchers[1:]) == "🎁 Tết sum vầy: Giảm 20%. Hết hạn: 15/02/2025"


def test_render_vouchers_empty() -> None:
    assert render_vouchers([]) == NO_VOUCHERS_REPLY


def test_render_room_types() -> None:
    types = [RoomType("rt_standard", "Standard", 2), RoomType("rt_family", "Family Suite", 4)]
    assert render_room_types(types) == "🏨 Standard: Dành cho 2 người.\n🏨 Family Suite: Dành cho 4 người."


def test_render_room_types_empty() -> None:
    assert render_room_types([]) == NO_ROOM_TYPES_REPLY
