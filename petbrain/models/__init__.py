# petbrain/models/__init__.py
"""
Data models for petbrain.

Provides the profile, card, stage and conversation models plus the
companion store implementations.
"""

from petbrain.models.card import DailyCard
from petbrain.models.conversation import Conversation, Message
from petbrain.models.memory_store import InMemoryCompanionStore
from petbrain.models.profile import (
    AgeBucket,
    CompanionBucket,
    ExtractedFacts,
    Profile,
    ProfileDraft,
    ProfileIncompleteError,
    days_home,
    home_date_for,
    merge,
)
from petbrain.models.stage import Stage
from petbrain.models.store import CompanionStore

__all__ = [
    # Profile
    "AgeBucket",
    "CompanionBucket",
    "ExtractedFacts",
    "Profile",
    "ProfileDraft",
    "ProfileIncompleteError",
    "merge",
    "days_home",
    "home_date_for",
    # Card, stage, conversation
    "DailyCard",
    "Stage",
    "Conversation",
    "Message",
    # Storage
    "CompanionStore",
    "InMemoryCompanionStore",
]
