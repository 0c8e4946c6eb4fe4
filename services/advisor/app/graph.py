from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, TypedDict

from langchain_core.messages import HumanMessage
from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, StateGraph

from services.advisor.app.composer import Recommendation, RecommendationComposer
from services.advisor.app.domain import ParsedQuery
from services.advisor.app.extractors import (
    parse_date_range,
    parse_money,
    parse_nights,
    parse_people,
    wants_more_services,
)
from services.advisor.app.graph_helpers import AdvisorInputError, service_catalog_lines, stay_is_valid
from services.advisor.app.intents import Intent, classify_intent
from services.advisor.app.logging import logger
from services.advisor.app.model import get_intent_model, get_reply_model
from services.advisor.app.observability import OUTCOME_TOTAL, timed_llm_call
from services.advisor.app.prompt import GENERAL_REPLY_TEMPLATE
from services.advisor.app.replies import INVALID_STAY_ERROR, render_recommendation, render_room_types, render_vouchers
from services.advisor.app.service_matcher import find_mentioned_services
from services.advisor.app.settings import AdvisorSettings
from services.advisor.app.stores import AdvisorStore


class AdvisorState(TypedDict, total=False):
    message: str
    intent: str
    intent_tier: str
    query: ParsedQuery
    recommendation: Recommendation
    reply: str


@dataclass
class AdvisorContext:
    """Per-request collaborators, handed to every node through the run config."""

    settings: AdvisorSettings
    store: AdvisorStore
    today: Callable[[], date] = field(default=date.today)

    def intent_model(self) -> Any:  # noqa: ANN401
        return get_intent_model(self.settings)

    def reply_model(self) -> Any:  # noqa: ANN401
        return get_reply_model(self.settings)

    def composer(self) -> RecommendationComposer:
        return RecommendationComposer(
            self.store,
            max_room_options=self.settings.max_room_options,
            max_service_suggestions=self.settings.max_service_suggestions,
            upsell_threshold=Decimal(self.settings.upsell_leftover_threshold),
            min_budget=Decimal(self.settings.min_budget),
        )


def _ctx(config: RunnableConfig) -> AdvisorContext:
    return config["configurable"]["advisor"]


async def build_query(
    message: str,
    store: AdvisorStore,
    check_in: date | None = None,
    check_out: date | None = None,
) -> ParsedQuery:
    nights = (check_out - check_in).days if check_in and check_out else parse_nights(message)
    query = ParsedQuery(
        budget=parse_money(message),
        nights=nights,
        people=parse_people(message),
        check_in=check_in,
        check_out=check_out,
        services=await find_mentioned_services(message, store),
        wants_more_services=wants_more_services(message),
    )
    logger.info(
        "query_parsed",
        budget=str(query.budget),
        nights=query.nights,
        people=query.people,
        check_in=check_in.isoformat() if check_in else None,
        check_out=check_out.isoformat() if check_out else None,
        services=[s.name for s in query.services],
        wants_more_services=query.wants_more_services,
    )
    return query


async def _recommend(ctx: AdvisorContext, query: ParsedQuery) -> AdvisorState:
    rec = await ctx.composer().recommend(query)
    OUTCOME_TOTAL.labels(rec.outcome).inc()
    return {"query": query, "recommendation": rec, "reply": render_recommendation(rec)}


async def _classify(state: AdvisorState, config: RunnableConfig) -> AdvisorState:
    ctx = _ctx(config)
    intent, tier = await classify_intent(state["message"], ctx.intent_model)
    return {"intent": intent.value, "intent_tier": tier}


def _route_after_classify(state: AdvisorState) -> str:
    intent = Intent(state["intent"])
    if intent == Intent.ASK_VOUCHER:
        return "VOUCHERS"
    if intent == Intent.ASK_ROOM_TYPES:
        return "ROOM_TYPES"
    if intent == Intent.ASK_AVAILABLE_ROOMS_WITH_DATES:
        return "DATED_SEARCH"
    if intent in (Intent.ASK_AFFORDABLE_ROOMS_WITH_SERVICES, Intent.ASK_AFFORDABLE_ROOMS):
        return "BUDGET_SEARCH"
    return "GENERAL_REPLY"


async def _vouchers(state: AdvisorState, config: RunnableConfig) -> AdvisorState:
    ctx = _ctx(config)
    vouchers = await ctx.store.list_active_vouchers(ctx.today())
    return {"reply": render_vouchers(vouchers)}


async def _room_types(state: AdvisorState, config: RunnableConfig) -> AdvisorState:
    ctx = _ctx(config)
    return {"reply": render_room_types(await ctx.store.list_room_types())}


async def _dated_search(state: AdvisorState, config: RunnableConfig) -> AdvisorState:
    ctx = _ctx(config)
    message = state["message"]
    check_in, check_out = parse_date_range(message, today=ctx.today())
    if check_in is None:
        # A date-like token that is not a usable stay ("ngày 5"): answer on budget alone.
        return await _recommend(ctx, await build_query(message, ctx.store))
    if not stay_is_valid(check_in, check_out):
        raise AdvisorInputError(INVALID_STAY_ERROR)
    return await _recommend(ctx, await build_query(message, ctx.store, check_in, check_out))


async def _budget_search(state: AdvisorState, config: RunnableConfig) -> AdvisorState:
    ctx = _ctx(config)
    return await _recommend(ctx, await build_query(state["message"], ctx.store))


async def _general_reply(state: AdvisorState, config: RunnableConfig) -> AdvisorState:
    ctx = _ctx(config)
    services = await ctx.store.list_services()
    prompt = GENERAL_REPLY_TEMPLATE.format(
        resort_name=ctx.settings.resort_name,
        service_lines=service_catalog_lines(services),
        user_message=state["message"],
        intent=state.get("intent") or Intent.GENERAL.value,
    )
    llm = ctx.reply_model()
    with timed_llm_call("reply"):
        raw = (await llm.ainvoke([HumanMessage(content=prompt)])).content  # type: ignore[attr-defined]
    reply = str(raw or "").strip()
    if not reply:
        reply = "Xin lỗi, tôi chưa hiểu rõ câu hỏi. Bạn có thể nói rõ hơn về ngân sách, ngày lưu trú hoặc dịch vụ bạn quan tâm không?"
    return {"reply": reply}


def build_graph() -> Any:
    sg: StateGraph = StateGraph(AdvisorState)
    sg.add_node("CLASSIFY", _classify)
    sg.add_node("VOUCHERS", _vouchers)
    sg.add_node("ROOM_TYPES", _room_types)
    sg.add_node("DATED_SEARCH", _dated_search)
    sg.add_node("BUDGET_SEARCH", _budget_search)
    sg.add_node("GENERAL_REPLY", _general_reply)

    sg.set_entry_point("CLASSIFY")
    sg.add_conditional_edges(
        "CLASSIFY",
        _route_after_classify,
        {
            "VOUCHERS": "VOUCHERS",
            "ROOM_TYPES": "ROOM_TYPES",
            "DATED_SEARCH": "DATED_SEARCH",
            "BUDGET_SEARCH": "BUDGET_SEARCH",
            "GENERAL_REPLY": "GENERAL_REPLY",
        },
    )
    for node in ("VOUCHERS", "ROOM_TYPES", "DATED_SEARCH", "BUDGET_SEARCH", "GENERAL_REPLY"):
        sg.add_edge(node, END)

    return sg.compile()


async def run_advisor(graph: Any, message: str, ctx: AdvisorContext) -> AdvisorState:  # noqa: ANN401
    return await graph.ainvoke({"message": message}, config={"configurable": {"advisor": ctx}})
