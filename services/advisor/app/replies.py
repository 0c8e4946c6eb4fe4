"""
Vietnamese reply text. The caller renders these strings verbatim, emoji and **bold** included.
"""

from __future__ import annotations

from services.advisor.app.composer import (
    OUTCOME_ALL_BOOKED,
    OUTCOME_BUDGET_INSUFFICIENT,
    OUTCOME_MISSING_BUDGET,
    OUTCOME_NO_ROOMS_IN_BUDGET,
    Recommendation,
)
from services.advisor.app.domain import RoomType, Voucher
from services.advisor.app.formatting import format_date, format_vnd


MISSING_MESSAGE_ERROR = "Vui lòng cung cấp tin nhắn"
INVALID_STAY_ERROR = "Ngày trả phòng phải sau ngày nhận phòng. Vui lòng kiểm tra lại khoảng ngày (ví dụ: từ 1/8 tới 3/8)."
SERVER_ERROR = "Lỗi server, vui lòng thử lại sau"

MISSING_BUDGET_REPLY = "Vui lòng cung cấp số tiền cụ thể (ví dụ: 5 triệu, 2 triệu) để tôi tư vấn phòng phù hợp."
NO_VOUCHERS_REPLY = "Hiện tại không có chương trình khuyến mãi nào đang áp dụng."
NO_ROOM_TYPES_REPLY = "Hiện tại chưa có loại phòng nào được cấu hình."


def render_vouchers(vouchers: list[Voucher]) -> str:
    if not vouchers:
        return NO_VOUCHERS_REPLY
    lines = []
    for v in vouchers:
        condition = f" (áp dụng cho đơn từ {format_vnd(v.min_spend)})" if v.min_spend else ""
        line = f"🎁 {v.name}: Giảm {v.discount_percent}%{condition}. Hết hạn: {format_date(v.ends_on)}"
        if v.description:
            line += f"\n   {v.description}"
        lines.append(line)
    return "\n".join(lines)


def render_room_types(room_types: list[RoomType]) -> str:
    if not room_types:
        return NO_ROOM_TYPES_REPLY
    return "\n".join(f"🏨 {t.name}: Dành cho {t.occupancy} người." for t in room_types)


def _stay_line(rec: Recommendation) -> str:
    q = rec.query
    if q.check_in and q.check_out:
        return f"📅 Thời gian: {format_date(q.check_in)} → {format_date(q.check_out)} ({rec.nights} đêm)"
    return f"📅 Thời gian: {rec.nights} đêm"


def _service_items(rec: Recommendation, per_person: bool = False) -> str:
    people = rec.query.people
    unit = "/người" if per_person else ""
    return "\n".join(
        f"• {s.name}: {format_vnd(s.price)}{unit} × {people} = {format_vnd(s.price * people)}" for s in rec.query.services
    )


def _budget_insufficient(rec: Recommendation) -> str:
    q = rec.query
    return (
        f"Với ngân sách {format_vnd(q.budget)} cho {q.people} người, sau khi trừ chi phí dịch vụ "
        f"{format_vnd(rec.service_cost)}, không còn đủ tiền cho phòng.\n\n"
        f"🛎️ Dịch vụ bạn đề cập (cho {q.people} người):\n"
        f"{_service_items(rec)}\n\n"
        "Bạn có thể:\n"
        "• Tăng ngân sách\n"
        "• Giảm số người sử dụng dịch vụ\n"
        "• Bỏ bớt một số dịch vụ\n"
        "• Chọn dịch vụ khác rẻ hơn"
    )


def _no_rooms_in_budget(rec: Recommendation) -> str:
    q = rec.query
    if q.budget > 0:
        head = f"Với ngân sách {format_vnd(q.budget)} cho {rec.nights} đêm"
        if q.services:
            head += f" kèm dịch vụ cho {q.people} người"
        head += f", không tìm thấy phòng phù hợp cho {q.people} người."
    else:
        head = f"Hiện không có phòng nào đủ chỗ cho {q.people} người."

    parts = [head]
    if q.services:
        parts.append(
            f"🛎️ Chi phí dịch vụ cho {q.people} người: {format_vnd(rec.service_cost)}\n"
            f"{_service_items(rec)}\n"
            f"💰 Còn lại cho phòng: {format_vnd(q.budget - rec.service_cost)}"
        )
    if rec.room_budget_per_night is not None:
        line = f"🔎 Mức giá phòng tối đa mỗi đêm: {format_vnd(rec.room_budget_per_night)}"
        if rec.cheapest_fitting_room is not None:
            room = rec.cheapest_fitting_room
            line += f"\n🏷️ Phòng rẻ nhất cho {q.people} người: {room.name} ({format_vnd(room.price)}/đêm)"
        parts.append(line)

    remedies = ["• Tăng ngân sách lên", "• Giảm số đêm xuống"]
    if q.services:
        remedies.append("• Giảm số người dùng dịch vụ hoặc bỏ bớt dịch vụ")
    remedies.append("• Chia nhóm thành nhiều phòng nhỏ hơn")
    parts.append("Bạn có thể:\n" + "\n".join(remedies))
    return "\n\n".join(parts)


def _all_booked(rec: Recommendation) -> str:
    q = rec.query
    assert q.check_in and q.check_out
    window = f"{format_date(q.check_in)} → {format_date(q.check_out)}"
    head = f"Có phòng phù hợp với yêu cầu của bạn cho {q.people} người"
    if q.budget > 0:
        head += f" trong ngân sách {format_vnd(q.budget)}"
    head += f", nhưng tất cả đã được đặt trong khoảng {window}."
    return (
        f"{head}\n\n"
        "Bạn có thể:\n"
        "• Chọn ngày nhận phòng khác\n"
        "• Rút ngắn thời gian lưu trú\n"
        "• Tăng ngân sách để xem thêm hạng phòng khác\n"
        "• Liên hệ lễ tân để được báo khi có phòng trống"
    )


def _options(rec: Recommendation) -> str:
    q = rec.query
    if q.budget > 0:
        title = f"🏨 **GÓI DỊCH VỤ PHÙ HỢP VỚI NGÂN SÁCH {format_vnd(q.budget)}**"
    else:
        title = "🏨 **CÁC PHÒNG CÒN TRỐNG**"
    header = [title, "", _stay_line(rec), f"👥 Số người: {q.people} người"]
    if q.services:
        header.append(f"🛎️ Dịch vụ kèm theo: {', '.join(s.name for s in q.services)}")
    out = "\n".join(header) + "\n\n**💎 CÁC PHÒNG PHÙ HỢP:**\n\n"

    blocks = []
    for idx, opt in enumerate(rec.options, start=1):
        room = opt.room
        block = (
            f"{idx}. 🛏️ **{room.name}** ({room.room_type.name})\n"
            f"   👥 Sức chứa: {room.room_type.occupancy} người\n"
            f"   💰 Phòng: {format_vnd(room.price)}/đêm × {rec.nights} = {format_vnd(opt.room_total)}"
        )
        if q.services:
            block += f"\n   🛎️ Dịch vụ cho {q.people} người: {format_vnd(rec.service_cost)}"
        block += f"\n   💵 **Tổng cộng: {format_vnd(opt.grand_total)}**"
        if opt.leftover is not None:
            block += f"\n   💸 Còn thừa: {format_vnd(opt.leftover)}"
        blocks.append(block)
    out += "\n\n".join(blocks)

    if q.services:
        out += f"\n\n**🛎️ CHI TIẾT DỊCH VỤ CHO {q.people} NGƯỜI:**\n{_service_items(rec, per_person=True)}"

    if rec.suggestions:
        budget = format_vnd(rec.upsell_budget or 0)
        if q.services:
            out += f"\n\n**💡 GỢI Ý THÊM DỊCH VỤ VỚI SỐ TIỀN THỪA {budget}:**\n"
        else:
            out += f"\n\n**🎯 GỢI Ý DỊCH VỤ THÊM VỚI NGÂN SÁCH {budget}:**\n"
        out += "\n\n".join(
            f"{idx}. 🎯 **{s.service.name}**: {format_vnd(s.service.price)}/người × {q.people} = {format_vnd(s.cost)}\n"
            f"   💰 Còn lại: {format_vnd(s.remaining)}"
            for idx, s in enumerate(rec.suggestions, start=1)
        )
        if rec.more_suggestions:
            out += f"\n\n📋 *Còn {rec.more_suggestions} dịch vụ khác trong tầm ngân sách!*"
        if rec.combo:
            remaining = (rec.upsell_budget or 0) - rec.combo_cost
            out += (
                "\n\n**🎁 COMBO ĐỀ XUẤT:**\n"
                f"🔥 {' + '.join(s.name for s in rec.combo)}: {format_vnd(rec.combo_cost)}\n"
                f"💰 Còn thừa: {format_vnd(remaining)}"
            )
    elif rec.suggest_upgrade:
        out += (
            f"\n\n💡 **Với số tiền thừa {format_vnd(rec.upsell_budget or 0)}**, "
            "bạn có thể nâng cấp lên phòng cao cấp hơn!"
        )

    if rec.more_rooms:
        out += f"\n\n📝 *Còn {rec.more_rooms} phòng khác phù hợp. Liên hệ lễ tân để xem thêm!*"
    return out


def render_recommendation(rec: Recommendation) -> str:
    if rec.outcome == OUTCOME_MISSING_BUDGET:
        return MISSING_BUDGET_REPLY
    if rec.outcome == OUTCOME_BUDGET_INSUFFICIENT:
        return _budget_insufficient(rec)
    if rec.outcome == OUTCOME_NO_ROOMS_IN_BUDGET:
        return _no_rooms_in_budget(rec)
    if rec.outcome == OUTCOME_ALL_BOOKED:
        return _all_booked(rec)
    return _options(rec)
