from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from services.advisor.app.composer import (
    OUTCOME_ALL_BOOKED,
    OUTCOME_BUDGET_INSUFFICIENT,
    OUTCOME_MISSING_BUDGET,
    OUTCOME_NO_ROOMS_IN_BUDGET,
    OUTCOME_OK,
    RecommendationComposer,
    greedy_combo,
    per_night_ceiling,
)
from services.advisor.app.domain import RESERVATION_PENDING, ParsedQuery, Reservation
from services.advisor.app.memory_store import InMemoryAdvisorStore
from services.advisor.app.replies import MISSING_BUDGET_REPLY, render_recommendation
from tests.factories import make_room, make_service


AUG_1 = date(2025, 8, 1)
AUG_3 = date(2025, 8, 3)


def _query(budget: int, nights: int = 1, people: int = 2, **kwargs) -> ParsedQuery:
    return ParsedQuery(budget=Decimal(budget), nights=nights, people=people, **kwargs)


def _spa(services):
    return [s for s in services if s.service_id == "sv_spa"]


def test_per_night_ceiling_rounds_down() -> None:
    assert per_night_ceiling(Decimal(5_000_000), 2) == Decimal(2_500_000)
    third = per_night_ceiling(Decimal(1_000_000), 3)
    assert third * 3 <= Decimal(1_000_000)


def test_greedy_combo_skips_what_no_longer_fits() -> None:
    a = make_service("a", "A", 500_000)
    b = make_service("b", "B", 400_000)
    c = make_service("c", "C", 100_000)
    combo, cost = greedy_combo([a, b, c], people=1, budget=Decimal(600_000))
    assert combo == [a, c]
    assert cost == Decimal(600_000)


@pytest.mark.asyncio
async def test_dated_search_asks_for_ceiling_and_party_size(store) -> None:
    rec = await RecommendationComposer(store).recommend(_query(5_000_000, nights=2, check_in=AUG_1, check_out=AUG_3))

    assert rec.outcome == OUTCOME_OK
    assert store.calls[0] == ("list_rooms", {"max_price": Decimal(2_500_000), "min_occupancy": 2})
    assert store.calls[1] == ("blocked_room_ids", {"check_in": AUG_1, "check_out": AUG_3})
    # 101 is held for 1/8-5/8; 302 is under repair.
    assert [o.room.room_id for o in rec.options] == ["102", "201", "301"]
    assert [o.leftover for o in rec.options] == [Decimal(2_600_000), Decimal(1_400_000), Decimal(0)]


@pytest.mark.asyncio
async def test_spa_budget_scenario(store, services) -> None:
    rec = await RecommendationComposer(store).recommend(_query(2_000_000, services=_spa(services)))

    assert rec.service_cost == Decimal(600_000)
    assert rec.room_budget_per_night == Decimal(1_400_000)
    assert store.calls[0] == ("list_rooms", {"max_price": Decimal(1_400_000), "min_occupancy": 2})
    assert [o.room.room_id for o in rec.options] == ["101", "102"]
    assert rec.options[0].grand_total == Decimal(1_400_000)


@pytest.mark.asyncio
@pytest.mark.parametrize("budget", [1_000_000, 2_000_000, 3_500_000, 7_000_000])
@pytest.mark.parametrize("with_spa", [False, True])
async def test_every_presented_room_is_affordable(store, services, budget: int, with_spa: bool) -> None:
    query = _query(budget, nights=2, services=_spa(services) if with_spa else [])
    rec = await RecommendationComposer(store).recommend(query)
    for option in rec.options:
        assert option.grand_total == option.room_total + rec.service_cost
        assert option.leftover == query.budget - option.grand_total
        assert option.leftover >= 0


@pytest.mark.asyncio
async def test_missing_budget(store) -> None:
    for budget in (0, 50_000):
        rec = await RecommendationComposer(store).recommend(_query(budget))
        assert rec.outcome == OUTCOME_MISSING_BUDGET
        assert render_recommendation(rec) == MISSING_BUDGET_REPLY
    assert store.calls == []


@pytest.mark.asyncio
async def test_dated_search_without_budget_lists_free_rooms(store) -> None:
    rec = await RecommendationComposer(store).recommend(_query(0, nights=2, check_in=AUG_1, check_out=AUG_3))
    assert rec.outcome == OUTCOME_OK
    assert rec.room_budget_per_night is None
    assert [o.room.room_id for o in rec.options] == ["102", "201", "301"]
    assert all(o.leftover is None for o in rec.options)
    assert rec.upsell_budget is None
    assert "CÁC PHÒNG CÒN TRỐNG" in render_recommendation(rec)


@pytest.mark.asyncio
async def test_budget_insufficient_when_services_eat_the_budget(store, services) -> None:
    rec = await RecommendationComposer(store).recommend(_query(500_000, services=_spa(services)))
    assert rec.outcome == OUTCOME_BUDGET_INSUFFICIENT
    reply = render_recommendation(rec)
    assert "không còn đủ tiền cho phòng" in reply
    assert "Spa thư giãn: 300.000 ₫ × 2 = 600.000 ₫" in reply


@pytest.mark.asyncio
async def test_no_rooms_in_budget_is_explained(store, services) -> None:
    rec = await RecommendationComposer(store).recommend(_query(1_000_000, services=_spa(services)))

    assert rec.outcome == OUTCOME_NO_ROOMS_IN_BUDGET
    assert rec.options == []
    assert rec.cheapest_fitting_room is not None
    assert rec.cheapest_fitting_room.room_id == "101"

    reply = render_recommendation(rec)
    assert "không tìm thấy phòng phù hợp" in reply
    assert "Chi phí dịch vụ cho 2 người: 600.000 ₫" in reply
    assert "Spa thư giãn: 300.000 ₫ × 2 = 600.000 ₫" in reply
    assert "Mức giá phòng tối đa mỗi đêm: 400.000 ₫" in reply


@pytest.mark.asyncio
async def test_all_booked_when_matching_rooms_are_reserved() -> None:
    store = InMemoryAdvisorStore(
        rooms=[make_room("101", 800_000)],
        reservations=[Reservation("rs_1", "101", AUG_1, date(2025, 8, 5), RESERVATION_PENDING)],
    )
    rec = await RecommendationComposer(store).recommend(_query(5_000_000, nights=2, check_in=AUG_1, check_out=AUG_3))

    assert rec.outcome == OUTCOME_ALL_BOOKED
    reply = render_recommendation(rec)
    assert "tất cả đã được đặt" in reply
    assert "01/08/2025 → 03/08/2025" in reply


@pytest.mark.asyncio
async def test_party_size_filters_small_rooms(store) -> None:
    rec = await RecommendationComposer(store).recommend(_query(10_000_000, people=4))
    assert [o.room.room_id for o in rec.options] == ["301"]


@pytest.mark.asyncio
async def test_room_options_are_capped(store) -> None:
    rec = await RecommendationComposer(store, max_room_options=2).recommend(_query(10_000_000))
    assert [o.room.room_id for o in rec.options] == ["101", "102"]
    assert rec.more_rooms == 2
    assert "Còn 2 phòng khác phù hợp" in render_recommendation(rec)


@pytest.mark.asyncio
async def test_upsell_without_services_suggests_priciest_first(store) -> None:
    rec = await RecommendationComposer(store).recommend(_query(5_000_000, nights=2, check_in=AUG_1, check_out=AUG_3))

    assert rec.upsell_budget == Decimal(2_600_000)
    assert [s.service.service_id for s in rec.suggestions] == ["sv_tour", "sv_seafood", "sv_spa", "sv_breakfast"]
    assert [s.remaining for s in rec.suggestions] == [
        Decimal(1_300_000),
        Decimal(1_600_000),
        Decimal(2_000_000),
        Decimal(2_300_000),
    ]
    assert rec.more_suggestions == 1
    assert [s.service_id for s in rec.combo] == ["sv_tour", "sv_seafood"]
    assert rec.combo_cost == Decimal(2_300_000)

    reply = render_recommendation(rec)
    assert "GỢI Ý DỊCH VỤ THÊM VỚI NGÂN SÁCH 2.600.000 ₫" in reply
    assert "COMBO ĐỀ XUẤT" in reply


@pytest.mark.asyncio
async def test_upsell_with_services_uses_leftover_and_skips_mentioned(store, services) -> None:
    rec = await RecommendationComposer(store).recommend(_query(2_000_000, services=_spa(services)))

    assert rec.upsell_budget == Decimal(600_000)
    assert [s.service.service_id for s in rec.suggestions] == ["sv_breakfast", "sv_gym"]
    assert rec.combo_cost == Decimal(500_000)
    assert "GỢI Ý THÊM DỊCH VỤ VỚI SỐ TIỀN THỪA 600.000 ₫" in render_recommendation(rec)


@pytest.mark.asyncio
async def test_no_upsell_when_leftover_is_small(store, services) -> None:
    rec = await RecommendationComposer(store).recommend(_query(1_500_000, services=_spa(services)))
    assert rec.outcome == OUTCOME_OK
    assert rec.upsell_budget is None
    assert rec.suggestions == []


@pytest.mark.asyncio
async def test_asking_for_more_forces_upsell(store, services) -> None:
    rec = await RecommendationComposer(store).recommend(
        _query(1_500_000, services=_spa(services), wants_more_services=True)
    )
    assert rec.upsell_budget == Decimal(100_000)
    assert rec.suggestions == []
    assert not rec.suggest_upgrade


@pytest.mark.asyncio
async def test_upgrade_hint_when_nothing_affordable(store) -> None:
    rec = await RecommendationComposer(store).recommend(_query(900_000))
    assert rec.suggestions == []
    assert rec.suggest_upgrade
    assert "nâng cấp lên phòng cao cấp hơn" in render_recommendation(rec)


@pytest.mark.asyncio
async def test_same_request_twice_gives_identical_result(store, services) -> None:
    composer = RecommendationComposer(store)
    first = await composer.recommend(_query(3_000_000, nights=2, services=_spa(services)))
    second = await composer.recommend(_query(3_000_000, nights=2, services=_spa(services)))
    assert first == second
    assert render_recommendation(first) == render_recommendation(second)
