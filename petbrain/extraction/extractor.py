# petbrain/extraction/extractor.py
"""
Deterministic signal extraction from user messages.

Recovers breed, age bucket and companion-hours bucket from free text using
only the lexicon tables and a few numeric patterns. No model is involved, so
the same text always yields the same facts.

Gating, applied per field:
    - Any consulting or negation phrase vetoes the field outright.
    - Breed and age also need an ownership or decision trigger.
    - Companion hours accept those triggers or a daily-routine phrase.
"""

import logging
import re

from petbrain.lexicon import Lexicon, contains, default_lexicon
from petbrain.models.profile import AgeBucket, CompanionBucket, ExtractedFacts

logger = logging.getLogger(__name__)

# "3个月", "3月龄", "3个月大", "3月大"
_MONTHS_RE = re.compile(r"(\d+)\s*个?月(?:龄|大)?")

# One number or a range ("2-3", "2到3", "2至3") followed by hours
_HOUR_RANGE = r"\s*(\d+)\s*(?:[-~到至]\s*(\d+))?\s*个?小?时"
_HOURS_RES = (
    re.compile(r"[每一]\s*天" + _HOUR_RANGE),
    re.compile(r"能陪" + _HOUR_RANGE),
    re.compile(r"陪伴" + _HOUR_RANGE),
)


class SignalExtractor:
    """
    Extracts ExtractedFacts from a single message.

    Stateless apart from the injected lexicon; safe to share.
    """

    def __init__(self, lexicon: Lexicon | None = None) -> None:
        """
        Initialize extractor.

        Args:
            lexicon: Phrase tables to use (None = packaged default)
        """
        self.lexicon = lexicon if lexicon is not None else default_lexicon()

    def extract_breed(self, text: str) -> str | None:
        """Breed named in an ownership or decision statement, else None."""
        if not text or self.lexicon.has_negative(text):
            return None
        if not self.lexicon.has_trigger(text):
            return None
        return self.lexicon.first_breed(text)

    def extract_age_bucket(self, text: str) -> AgeBucket | None:
        """Age bucket from descriptors or a month count, else None."""
        if not text or self.lexicon.has_negative(text):
            return None
        if not self.lexicon.has_trigger(text):
            return None

        if contains(self.lexicon.juvenile_phrases, text):
            return AgeBucket.MONTHS_1_3
        if contains(self.lexicon.adult_phrases, text):
            return AgeBucket.MONTHS_12_PLUS

        match = _MONTHS_RE.search(text)
        if not match:
            return None
        try:
            months = int(match.group(1))
        except ValueError:
            return None
        return AgeBucket.from_months(months)

    def extract_companion_bucket(self, text: str) -> CompanionBucket | None:
        """Companion-hours bucket from routine phrases or an hour count, else None."""
        if not text or self.lexicon.has_negative(text):
            return None
        if not self.lexicon.has_companion_context(text):
            return None

        if contains(self.lexicon.all_day_phrases, text):
            return CompanionBucket.AT_LEAST_8H
        if contains(self.lexicon.mostly_home_phrases, text):
            return CompanionBucket.HOURS_4_8
        if contains(self.lexicon.office_worker_phrases, text):
            return CompanionBucket.UP_TO_1H

        for pattern in _HOURS_RES:
            match = pattern.search(text)
            if not match:
                continue
            try:
                low = int(match.group(1))
                high = int(match.group(2)) if match.group(2) is not None else None
            except ValueError:
                return None
            hours = (low + high) / 2 if high is not None else low
            return CompanionBucket.from_hours(hours)

        return None

    def extract(self, text: str) -> ExtractedFacts:
        """
        Run all three field extractors over the same text.

        Fields are independent: one field finding nothing never affects
        another. Never raises for any string input.
        """
        facts = ExtractedFacts(
            breed=self.extract_breed(text),
            age_bucket=self.extract_age_bucket(text),
            companion_bucket=self.extract_companion_bucket(text),
        )
        if not facts.is_empty:
            logger.debug(f"Extracted {facts.to_dict()} from message ({len(text)} chars)")
        return facts


def extract(text: str, lexicon: Lexicon | None = None) -> ExtractedFacts:
    """Extract facts with the given lexicon (None = packaged default)."""
    return SignalExtractor(lexicon).extract(text)
