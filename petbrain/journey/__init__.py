# petbrain/journey/__init__.py
"""Stage state machine, profile collection, conversations and daily cards."""

from .collector import ProfileCollector
from .conversation import ConversationSession
from .daily_card import DailyCardService
from .state_machine import JourneyStateMachine, SessionStart

__all__ = [
    "JourneyStateMachine",
    "SessionStart",
    "ProfileCollector",
    "ConversationSession",
    "DailyCardService",
]
