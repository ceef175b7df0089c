# petbrain/models/store.py
"""
Companion store protocol definition.

Defines the abstract interface that both InMemoryCompanionStore and
SQLiteCompanionStore implement. The journey services depend only on this.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from petbrain.models.card import DailyCard
    from petbrain.models.conversation import Conversation
    from petbrain.models.profile import Profile, ProfileDraft
    from petbrain.models.stage import Stage


class CompanionStore(ABC):
    """
    Abstract base class for per-user persistence.

    Loaders return None both when nothing is stored and when the stored
    record can no longer be read back.
    """

    async def initialize(self) -> None:
        """Prepare the backing storage. No-op by default."""

    async def close(self) -> None:
        """Release the backing storage. No-op by default."""

    @abstractmethod
    async def load_profile(self, user_id: str) -> "Profile | None":
        """Get the user's profile, or None."""

    @abstractmethod
    async def save_profile(self, user_id: str, profile: "Profile") -> None:
        """Create or replace the user's profile."""

    @abstractmethod
    async def delete_profile(self, user_id: str) -> None:
        """Remove the user's profile if present."""

    @abstractmethod
    async def load_draft(self, user_id: str) -> "ProfileDraft | None":
        """Get the partially collected profile, or None."""

    @abstractmethod
    async def save_draft(self, user_id: str, draft: "ProfileDraft") -> None:
        """Create or replace the partially collected profile."""

    @abstractmethod
    async def clear_draft(self, user_id: str) -> None:
        """Remove the partially collected profile if present."""

    @abstractmethod
    async def load_today_card(self, user_id: str, today: date) -> "DailyCard | None":
        """
        Get the user's card for ``today``.

        Returns:
            The card if one was generated on ``today``, None otherwise
        """

    @abstractmethod
    async def save_today_card(self, user_id: str, card: "DailyCard") -> None:
        """Store the card, superseding any earlier one."""

    @abstractmethod
    async def load_stage(self, user_id: str) -> "Stage | None":
        """Get the user's current stage, or None if never chosen."""

    @abstractmethod
    async def save_stage(self, user_id: str, stage: "Stage") -> None:
        """Set the user's current stage."""

    @abstractmethod
    async def load_conversation(self, user_id: str, stage: "Stage") -> "Conversation | None":
        """Get the stored conversation for a stage, or None."""

    @abstractmethod
    async def save_conversation(self, user_id: str, conversation: "Conversation") -> None:
        """Create or replace the conversation for ``conversation.stage``."""

    @abstractmethod
    async def clear_conversation(self, user_id: str, stage: "Stage") -> None:
        """Remove the stored conversation for a stage if present."""
