# petbrain/models/memory_store.py
"""In-memory companion storage."""

import logging
from datetime import date

from petbrain.models.card import DailyCard
from petbrain.models.conversation import Conversation
from petbrain.models.profile import Profile, ProfileDraft
from petbrain.models.stage import Stage
from petbrain.models.store import CompanionStore

logger = logging.getLogger(__name__)


def _copy_conversation(conversation: Conversation) -> Conversation:
    return Conversation(
        stage=conversation.stage,
        continuity_token=conversation.continuity_token,
        messages=list(conversation.messages),
    )


class InMemoryCompanionStore(CompanionStore):
    """
    Simple in-memory companion storage.

    Single-process only. Profiles, drafts and cards are immutable values and
    stored as-is; conversations are copied on the way in and out.
    """

    def __init__(self) -> None:
        """Initialize empty store."""
        self._profiles: dict[str, Profile] = {}
        self._drafts: dict[str, ProfileDraft] = {}
        self._cards: dict[str, DailyCard] = {}
        self._stages: dict[str, Stage] = {}
        self._conversations: dict[tuple[str, Stage], Conversation] = {}
        logger.info("Initialized InMemoryCompanionStore")

    async def load_profile(self, user_id: str) -> Profile | None:
        return self._profiles.get(user_id)

    async def save_profile(self, user_id: str, profile: Profile) -> None:
        self._profiles[user_id] = profile
        logger.info(f"Saved profile for user {user_id}")

    async def delete_profile(self, user_id: str) -> None:
        self._profiles.pop(user_id, None)

    async def load_draft(self, user_id: str) -> ProfileDraft | None:
        return self._drafts.get(user_id)

    async def save_draft(self, user_id: str, draft: ProfileDraft) -> None:
        self._drafts[user_id] = draft

    async def clear_draft(self, user_id: str) -> None:
        self._drafts.pop(user_id, None)

    async def load_today_card(self, user_id: str, today: date) -> DailyCard | None:
        card = self._cards.get(user_id)
        if card is None or not card.is_current(today):
            return None
        return card

    async def save_today_card(self, user_id: str, card: DailyCard) -> None:
        self._cards[user_id] = card
        logger.info(f"Saved daily card for user {user_id} ({card.card_date.isoformat()})")

    async def load_stage(self, user_id: str) -> Stage | None:
        return self._stages.get(user_id)

    async def save_stage(self, user_id: str, stage: Stage) -> None:
        self._stages[user_id] = stage

    async def load_conversation(self, user_id: str, stage: Stage) -> Conversation | None:
        conversation = self._conversations.get((user_id, stage))
        return _copy_conversation(conversation) if conversation else None

    async def save_conversation(self, user_id: str, conversation: Conversation) -> None:
        if not conversation.stage.retains_conversation:
            raise ValueError(f"Stage '{conversation.stage.value}' conversations are not persisted")
        self._conversations[(user_id, conversation.stage)] = _copy_conversation(conversation)

    async def clear_conversation(self, user_id: str, stage: Stage) -> None:
        self._conversations.pop((user_id, stage), None)
