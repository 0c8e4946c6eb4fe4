from __future__ import annotations

import pytest

from services.advisor.app.memory_store import InMemoryAdvisorStore
from services.advisor.app.service_matcher import (
    contains_phrase,
    find_mentioned_services,
    match_services,
    mentions_services,
)


def test_contains_phrase_is_whole_word() -> None:
    assert contains_phrase("đi ăn tối", "ăn")
    assert not contains_phrase("thuê căn hộ", "ăn")
    assert contains_phrase("spa, massage", "spa")


def test_mentions_services() -> None:
    assert mentions_services("Có dịch vụ spa không?")
    assert mentions_services("muốn đi TOUR đảo")
    assert not mentions_services("phòng dưới 2 triệu cho 2 người")


def test_match_services_by_name_token(services) -> None:
    matched = match_services("muốn đi spa", services)
    assert [s.service_id for s in matched] == ["sv_spa"]


def test_match_services_by_category(services) -> None:
    # "ăn uống" is a category phrasing; the seafood dinner carries "ăn" in its name.
    matched = match_services("gói có ăn uống không", services)
    assert [s.service_id for s in matched] == ["sv_seafood"]


def test_match_services_dedupes_in_first_seen_order(services) -> None:
    matched = match_services("spa và massage, thêm gym và tour", services)
    ids = [s.service_id for s in matched]
    assert ids == ["sv_spa", "sv_gym", "sv_tour"]
    assert len(ids) == len(set(ids))


def test_match_services_ignores_generic_words(services) -> None:
    assert match_services("dịch vụ nào tốt", services) == []


@pytest.mark.asyncio
async def test_find_mentioned_services_skips_catalog_without_keywords(services) -> None:
    store = InMemoryAdvisorStore(services=services)
    assert await find_mentioned_services("phòng dưới 2 triệu", store) == []
    assert store.calls == []


@pytest.mark.asyncio
async def test_find_mentioned_services_reads_catalog(services) -> None:
    store = InMemoryAdvisorStore(services=services)
    found = await find_mentioned_services("2 triệu có spa cho 2 người", store)
    assert [s.name for s in found] == ["Spa thư giãn"]
    assert store.calls == [("list_services", {})]


def test_contains_phrase_needs_word_edges() -> None:
    assert not contains_phrase("buffets sáng", "buffet")
    assert not contains_phrase("gymnasium", "gym")
    assert contains_phrase("spa-resort", "spa")
