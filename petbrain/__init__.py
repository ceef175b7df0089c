# petbrain/__init__.py
"""
petbrain - journey core for a dog-owner companion app.

Deterministic fact extraction from user messages, daily card parsing, and the
explore / prep / with-dog stage state machine.
"""

__version__ = "0.1.0"

from petbrain.cards import CardParser, parse_card
from petbrain.errors import (
    CardParseError,
    PetBrainError,
    ProfileIncompleteError,
    ProfileRequiredError,
    UpstreamError,
)
from petbrain.extraction import SignalExtractor, extract
from petbrain.lexicon import Lexicon, load_lexicon
from petbrain.models import (
    AgeBucket,
    CompanionBucket,
    DailyCard,
    ExtractedFacts,
    Profile,
    ProfileDraft,
    Stage,
    days_home,
    merge,
)

__all__ = [
    "SignalExtractor",
    "extract",
    "Lexicon",
    "load_lexicon",
    "CardParser",
    "parse_card",
    "AgeBucket",
    "CompanionBucket",
    "ExtractedFacts",
    "Profile",
    "ProfileDraft",
    "DailyCard",
    "Stage",
    "merge",
    "days_home",
    "PetBrainError",
    "CardParseError",
    "ProfileIncompleteError",
    "ProfileRequiredError",
    "UpstreamError",
]
