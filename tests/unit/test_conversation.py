# tests/unit/test_conversation.py
"""
Tests for ConversationSession.

Uses a scripted completion client that hands out sequential continuity
tokens and records every request it receives.
"""

import asyncio
from datetime import date, timedelta

import pytest

from petbrain.errors import ProfileRequiredError, UpstreamError
from petbrain.journey import ConversationSession, ProfileCollector
from petbrain.llm import CompletionClient, CompletionRequest, CompletionResponse
from petbrain.models import (
    AgeBucket,
    CompanionBucket,
    InMemoryCompanionStore,
    Profile,
    Stage,
)

TODAY = date(2024, 6, 15)


class ScriptedClient(CompletionClient):
    """Mock completion client issuing conv-1, conv-2, ... tokens."""

    def __init__(self, reply: str = "好的", delay: float = 0.0):
        self.reply = reply
        self.delay = delay
        self.requests: list[CompletionRequest] = []
        self.active = 0
        self.max_active = 0

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        self.requests.append(request)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.active -= 1
        return CompletionResponse(text=self.reply, continuity_token=f"conv-{len(self.requests)}")


class FailingClient(CompletionClient):
    """Mock completion client that always fails."""

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        raise ConnectionError("service unavailable")


@pytest.fixture
def store() -> InMemoryCompanionStore:
    return InMemoryCompanionStore()


@pytest.fixture
def profile() -> Profile:
    return Profile(
        breed="柯基",
        age_bucket=AgeBucket.MONTHS_4_6,
        companion_bucket=CompanionBucket.HOURS_2_3,
        home_date=TODAY - timedelta(days=9),
    )


class TestContinuity:
    @pytest.mark.asyncio
    async def test_token_round_trip(self, store):
        """Test each request carries the token from the previous response."""
        client = ScriptedClient()
        session = ConversationSession(store, client, "u1", Stage.EXPLORE)

        await session.chat("你好")
        await session.chat("柯基好养吗")

        assert client.requests[0].continuity_token is None
        assert client.requests[1].continuity_token == "conv-1"
        assert session.conversation.continuity_token == "conv-2"

    @pytest.mark.asyncio
    async def test_concurrent_sends_are_serialised(self, store):
        """Test overlapping sends never run concurrently or reuse a stale token."""
        client = ScriptedClient(delay=0.01)
        session = ConversationSession(store, client, "u1", Stage.PREP)

        await asyncio.gather(session.send("第一条"), session.send("第二条"))

        assert client.max_active == 1
        assert client.requests[1].continuity_token == "conv-1"
        assert not session.in_flight

    @pytest.mark.asyncio
    async def test_missing_token_keeps_previous(self, store):
        class TokenlessClient(CompletionClient):
            async def complete(self, request):
                return CompletionResponse(text="ok", continuity_token=None)

        session = ConversationSession(store, TokenlessClient(), "u1", Stage.EXPLORE)
        session.conversation.continuity_token = "keep-me"

        await session.send("hi")
        assert session.conversation.continuity_token == "keep-me"


class TestFailures:
    @pytest.mark.asyncio
    async def test_upstream_failure_wrapped(self, store):
        session = ConversationSession(store, FailingClient(), "u1", Stage.PREP)
        session.conversation.continuity_token = "before"

        with pytest.raises(UpstreamError) as exc_info:
            await session.chat("需要准备什么")

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert session.conversation.continuity_token == "before"
        assert session.messages == []
        assert await store.load_conversation("u1", Stage.PREP) is None

    @pytest.mark.asyncio
    async def test_empty_message_rejected(self, store):
        client = ScriptedClient()
        session = ConversationSession(store, client, "u1", Stage.EXPLORE)

        with pytest.raises(ValueError):
            await session.chat("   ")
        assert client.requests == []


class TestRetention:
    @pytest.mark.asyncio
    async def test_explore_never_persisted(self, store):
        client = ScriptedClient()
        session = await ConversationSession.open(store, client, "u1", Stage.EXPLORE)
        await session.chat("金毛好养吗")

        assert await store.load_conversation("u1", Stage.EXPLORE) is None

        reopened = await ConversationSession.open(store, client, "u1", Stage.EXPLORE)
        assert reopened.conversation.continuity_token is None
        assert reopened.messages == []

    @pytest.mark.asyncio
    async def test_prep_resumed(self, store):
        client = ScriptedClient(reply="狗窝、牵引绳")
        session = await ConversationSession.open(store, client, "u1", Stage.PREP)
        await session.chat("需要准备什么")

        reopened = await ConversationSession.open(store, client, "u1", Stage.PREP)

        assert reopened.conversation.continuity_token == "conv-1"
        assert [m.role for m in reopened.messages] == ["user", "assistant"]
        assert reopened.messages[1].content == "狗窝、牵引绳"

    @pytest.mark.asyncio
    async def test_reset_clears_stored_conversation(self, store):
        session = ConversationSession(store, ScriptedClient(), "u1", Stage.PREP)
        await session.chat("你好")

        await session.reset()

        assert session.conversation.continuity_token is None
        assert await store.load_conversation("u1", Stage.PREP) is None


class TestStageBehaviour:
    @pytest.mark.asyncio
    async def test_prep_feeds_collector(self, store):
        collector = ProfileCollector(store)
        session = ConversationSession(store, ScriptedClient(), "u1", Stage.PREP, collector=collector)

        await session.chat("定了一只3个月的拉布拉多")

        draft = await store.load_draft("u1")
        assert draft.breed == "拉布拉多"
        assert draft.age_bucket is AgeBucket.MONTHS_1_3

    @pytest.mark.asyncio
    async def test_explore_does_not_feed_collector(self, store):
        collector = ProfileCollector(store)
        session = ConversationSession(
            store, ScriptedClient(), "u1", Stage.EXPLORE, collector=collector
        )

        await session.chat("定了一只3个月的拉布拉多")

        assert await store.load_draft("u1") is None

    @pytest.mark.asyncio
    async def test_with_dog_sends_profile_inputs(self, store, profile):
        await store.save_profile("u1", profile)
        client = ScriptedClient()
        session = ConversationSession(store, client, "u1", Stage.WITH_DOG)

        await session.chat("它今天不吃饭", today=TODAY)

        assert client.requests[0].inputs == {
            "breed": "柯基",
            "ageMonths": "4-6",
            "companionHours": "2-3h",
            "daysHome": "10",
            "generateDailyCard": "false",
        }

    @pytest.mark.asyncio
    async def test_with_dog_requires_profile(self, store):
        client = ScriptedClient()
        session = ConversationSession(store, client, "u1", Stage.WITH_DOG)

        with pytest.raises(ProfileRequiredError):
            await session.chat("它今天不吃饭")
        assert client.requests == []

    @pytest.mark.asyncio
    async def test_checklist_in_prep(self, store):
        client = ScriptedClient(reply="1. 狗粮")
        session = ConversationSession(store, client, "u1", Stage.PREP)

        assert await session.request_checklist() == "1. 狗粮"
        assert client.requests[0].inputs == {"shouldGenerateChecklist": "true"}

    @pytest.mark.asyncio
    async def test_checklist_outside_prep_rejected(self, store):
        session = ConversationSession(store, ScriptedClient(), "u1", Stage.EXPLORE)
        with pytest.raises(ValueError):
            await session.request_checklist()
