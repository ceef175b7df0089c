# tests/unit/test_memory_store.py
"""Unit tests for InMemoryCompanionStore."""

from datetime import date, timedelta

import pytest

from petbrain.models import (
    AgeBucket,
    CompanionBucket,
    Conversation,
    DailyCard,
    InMemoryCompanionStore,
    Message,
    Profile,
    Stage,
)

TODAY = date(2024, 6, 15)


@pytest.fixture
def store() -> InMemoryCompanionStore:
    return InMemoryCompanionStore()


@pytest.mark.asyncio
async def test_profile_roundtrip(store):
    profile = Profile(
        breed="泰迪",
        age_bucket=AgeBucket.MONTHS_4_6,
        companion_bucket=CompanionBucket.HOURS_2_3,
        home_date=TODAY,
    )
    await store.save_profile("u1", profile)
    assert await store.load_profile("u1") == profile

    await store.delete_profile("u1")
    assert await store.load_profile("u1") is None


@pytest.mark.asyncio
async def test_card_expires_at_day_boundary(store):
    card = DailyCard(focus="a", forbidden="b", reason="c", card_date=TODAY)
    await store.save_today_card("u1", card)

    assert await store.load_today_card("u1", TODAY) == card
    assert await store.load_today_card("u1", TODAY + timedelta(days=1)) is None


@pytest.mark.asyncio
async def test_conversation_copied(store):
    """Mutating a loaded conversation does not change the stored one."""
    await store.save_conversation(
        "u1", Conversation(stage=Stage.PREP, messages=[Message("user", "hi")])
    )

    loaded = await store.load_conversation("u1", Stage.PREP)
    loaded.messages.append(Message("assistant", "hello"))

    again = await store.load_conversation("u1", Stage.PREP)
    assert len(again.messages) == 1


@pytest.mark.asyncio
async def test_explore_conversation_rejected(store):
    with pytest.raises(ValueError):
        await store.save_conversation("u1", Conversation(stage=Stage.EXPLORE))


@pytest.mark.asyncio
async def test_users_isolated(store):
    await store.save_stage("u1", Stage.PREP)
    assert await store.load_stage("u2") is None
