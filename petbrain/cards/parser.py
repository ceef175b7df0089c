# petbrain/cards/parser.py
"""
Daily card parsing.

A card response is three sections, each introduced by a fixed anchor:

    ✅ 今天最需要关注的事：
    ...
    ❌ 今天容易犯的错误：
    ...
    ℹ️ 为什么：
    ...

Parsing resolves each anchor to its position in one scan, validates the
result, then slices the sections. Either all three sections come back
non-empty or the whole parse fails.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date

from petbrain.errors import CardParseError
from petbrain.models.card import DailyCard

logger = logging.getLogger(__name__)

_VARIATION_SELECTOR = "\ufe0f"


@dataclass(frozen=True)
class CardAnchor:
    """Label introducing one card section."""

    field: str  # DailyCard field name
    marker: str  # emoji marker
    title: str

    @property
    def pattern(self) -> str:
        # Models sometimes drop the emoji variation selector
        marker = re.escape(self.marker.replace(_VARIATION_SELECTOR, ""))
        return rf"{marker}{_VARIATION_SELECTOR}?\s*{re.escape(self.title)}\s*[：:]?"


# Canonical order
DEFAULT_ANCHORS: tuple[CardAnchor, ...] = (
    CardAnchor(field="focus", marker="✅", title="今天最需要关注的事"),
    CardAnchor(field="forbidden", marker="❌", title="今天容易犯的错误"),
    CardAnchor(field="reason", marker="ℹ️", title="为什么"),
)


@dataclass(frozen=True)
class AnchorHit:
    """Where an anchor label was found in the text."""

    anchor: CardAnchor
    start: int
    end: int


class CardParser:
    """
    Parses one card response into a DailyCard.

    With strict_order=False a response whose anchors are out of canonical
    order still parses, and an earlier section absorbs text that belongs to
    a later one. With strict_order=True the parse fails instead.
    """

    def __init__(
        self,
        anchors: tuple[CardAnchor, ...] = DEFAULT_ANCHORS,
        strict_order: bool = False,
    ) -> None:
        fields = [a.field for a in anchors]
        if sorted(fields) != sorted(("focus", "forbidden", "reason")):
            raise ValueError(f"Anchors must cover focus, forbidden and reason, got {fields}")

        self.anchors = anchors
        self.strict_order = strict_order
        self._scanner = re.compile(
            "|".join(f"(?P<a{i}>{a.pattern})" for i, a in enumerate(anchors))
        )

    def locate(self, text: str) -> list[AnchorHit]:
        """
        Find the first occurrence of each anchor in a single scan.

        Returns:
            Hits in text order (anchors never found are absent)
        """
        hits: dict[int, AnchorHit] = {}
        for match in self._scanner.finditer(text):
            index = int(match.lastgroup[1:])
            if index not in hits:
                hits[index] = AnchorHit(self.anchors[index], match.start(), match.end())
            if len(hits) == len(self.anchors):
                break
        return sorted(hits.values(), key=lambda hit: hit.start)

    def _validate(self, text: str, hits: list[AnchorHit]) -> None:
        found = {hit.anchor.field for hit in hits}
        missing = [a.field for a in self.anchors if a.field not in found]
        if missing:
            raise CardParseError(f"missing sections: {', '.join(missing)}", text)

        if self.strict_order:
            order = [hit.anchor for hit in hits]
            if order != list(self.anchors):
                raise CardParseError(
                    "sections out of order: " + ", ".join(a.field for a in order), text
                )

    def _sections(self, text: str, hits: list[AnchorHit]) -> dict[str, str]:
        by_anchor = {hit.anchor: hit for hit in hits}
        sections: dict[str, str] = {}
        for i, anchor in enumerate(self.anchors):
            hit = by_anchor[anchor]
            stop = len(text)
            if i + 1 < len(self.anchors):
                following = by_anchor[self.anchors[i + 1]]
                if following.start >= hit.end:
                    stop = following.start
            sections[anchor.field] = text[hit.end:stop].strip()
        return sections

    def parse(self, text: str, card_date: date | None = None) -> DailyCard:
        """
        Parse a response into a DailyCard.

        Args:
            text: Raw completion text
            card_date: Day the card is for (default: today)

        Returns:
            DailyCard with all three sections trimmed

        Raises:
            CardParseError: If any anchor is missing, a section is empty,
                or (strict_order only) anchors are out of order
        """
        text = text or ""
        hits = self.locate(text)
        self._validate(text, hits)

        sections = self._sections(text, hits)
        empty = [name for name, content in sections.items() if not content]
        if empty:
            raise CardParseError(f"empty sections: {', '.join(empty)}", text)

        card = DailyCard(
            card_date=card_date if card_date is not None else date.today(),
            **sections,
        )
        logger.debug(f"Parsed daily card for {card.card_date.isoformat()}")
        return card


def parse_card(text: str, card_date: date | None = None, strict_order: bool = False) -> DailyCard:
    """Parse a card response with the default anchors."""
    return CardParser(strict_order=strict_order).parse(text, card_date)
