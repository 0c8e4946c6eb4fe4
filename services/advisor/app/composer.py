from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_FLOOR, Decimal, localcontext

from services.advisor.app.availability import AvailabilityResolver, sort_by_price
from services.advisor.app.domain import ParsedQuery, Room, Service
from services.advisor.app.stores import AdvisorStore


OUTCOME_OK = "ok"
OUTCOME_MISSING_BUDGET = "missing_budget"
OUTCOME_BUDGET_INSUFFICIENT = "budget_insufficient"
OUTCOME_NO_ROOMS_IN_BUDGET = "no_rooms_in_budget"
OUTCOME_ALL_BOOKED = "all_booked"


@dataclass(frozen=True)
class RoomOption:
    room: Room
    room_total: Decimal
    grand_total: Decimal
    # None when the guest gave no budget.
    leftover: Decimal | None


@dataclass(frozen=True)
class ServiceSuggestion:
    service: Service
    cost: Decimal
    remaining: Decimal


@dataclass
class Recommendation:
    outcome: str
    query: ParsedQuery
    nights: int
    service_cost: Decimal
    room_budget_per_night: Decimal | None = None
    options: list[RoomOption] = field(default_factory=list)
    more_rooms: int = 0
    # Cheapest room large enough for the party, ignoring price (reported when nothing fits the budget).
    cheapest_fitting_room: Room | None = None
    upsell_budget: Decimal | None = None
    suggestions: list[ServiceSuggestion] = field(default_factory=list)
    more_suggestions: int = 0
    combo: list[Service] = field(default_factory=list)
    combo_cost: Decimal = Decimal(0)
    suggest_upgrade: bool = False


def per_night_ceiling(room_money: Decimal, nights: int) -> Decimal:
    # Round down so that price <= ceiling always implies price * nights <= room_money.
    with localcontext() as ctx:
        ctx.rounding = ROUND_FLOOR
        return room_money / Decimal(nights)


def greedy_combo(services: list[Service], people: int, budget: Decimal, size: int = 2) -> tuple[list[Service], Decimal]:
    """Walk `services` in order, keeping each one that still fits, until `size` are chosen."""
    combo: list[Service] = []
    cost = Decimal(0)
    for service in services:
        item = service.price * people
        if cost + item <= budget:
            combo.append(service)
            cost += item
            if len(combo) >= size:
                break
    return combo, cost


class RecommendationComposer:
    def __init__(
        self,
        store: AdvisorStore,
        *,
        max_room_options: int = 5,
        max_service_suggestions: int = 4,
        upsell_threshold: Decimal = Decimal(100_000),
        min_budget: Decimal = Decimal(100_000),
    ):
        self._store = store
        self._resolver = AvailabilityResolver(store)
        self._max_room_options = max_room_options
        self._max_service_suggestions = max_service_suggestions
        self._upsell_threshold = Decimal(upsell_threshold)
        self._min_budget = Decimal(min_budget)

    async def recommend(self, query: ParsedQuery) -> Recommendation:
        nights = max(query.nights, 1)
        service_cost = query.service_cost
        rec = Recommendation(outcome=OUTCOME_OK, query=query, nights=nights, service_cost=service_cost)

        dated = query.has_dates
        budget_known = query.budget > 0
        if not dated and query.budget < self._min_budget:
            rec.outcome = OUTCOME_MISSING_BUDGET
            return rec

        ceiling: Decimal | None = None
        if budget_known:
            room_money = query.budget - service_cost
            if room_money <= 0:
                rec.outcome = OUTCOME_BUDGET_INSUFFICIENT
                return rec
            ceiling = per_night_ceiling(room_money, nights)
            rec.room_budget_per_night = ceiling

        if dated:
            assert query.check_in and query.check_out
            candidates = await self._resolver.find_available(
                query.check_in, query.check_out, max_price_per_night=ceiling, min_occupancy=query.people
            )
        else:
            candidates = sort_by_price(await self._store.list_rooms(max_price=ceiling, min_occupancy=query.people))

        if not candidates:
            await self._explain_empty(rec, dated=dated, ceiling=ceiling)
            return rec

        for room in candidates[: self._max_room_options]:
            room_total = room.price * nights
            grand_total = room_total + service_cost
            leftover = query.budget - grand_total if budget_known else None
            rec.options.append(RoomOption(room=room, room_total=room_total, grand_total=grand_total, leftover=leftover))
        rec.more_rooms = max(len(candidates) - self._max_room_options, 0)

        if budget_known:
            await self._upsell(rec, cheapest=candidates[0])
        return rec

    async def _explain_empty(self, rec: Recommendation, *, dated: bool, ceiling: Decimal | None) -> None:
        people = rec.query.people
        if dated:
            # Same price/occupancy filter without the calendar: anything left is simply booked.
            fitting = await self._store.list_rooms(max_price=ceiling, min_occupancy=people)
            if fitting:
                rec.outcome = OUTCOME_ALL_BOOKED
                return
        rec.outcome = OUTCOME_NO_ROOMS_IN_BUDGET
        if ceiling is not None:
            any_price = await self._store.list_rooms(min_occupancy=people)
            rec.cheapest_fitting_room = sort_by_price(any_price)[0] if any_price else None

    async def _upsell(self, rec: Recommendation, *, cheapest: Room) -> None:
        query = rec.query
        used = cheapest.price * rec.nights + rec.service_cost
        leftover = query.budget - used
        if query.services and not query.wants_more_services and leftover <= self._upsell_threshold:
            return

        rec.upsell_budget = leftover
        mentioned = {s.service_id for s in query.services}
        catalog = await self._store.list_services()
        affordable = [s for s in catalog if s.service_id not in mentioned and s.price * query.people <= leftover]
        # Most expensive first: the guest gets the most out of the money left over.
        affordable.sort(key=lambda s: (-s.price, s.name, s.service_id))

        for service in affordable[: self._max_service_suggestions]:
            cost = service.price * query.people
            rec.suggestions.append(ServiceSuggestion(service=service, cost=cost, remaining=leftover - cost))
        rec.more_suggestions = max(len(affordable) - self._max_service_suggestions, 0)

        if len(affordable) >= 2:
            combo, combo_cost = greedy_combo(affordable, query.people, leftover)
            if len(combo) >= 2:
                rec.combo = combo
                rec.combo_cost = combo_cost

        if not affordable and not query.services:
            rec.suggest_upgrade = True
