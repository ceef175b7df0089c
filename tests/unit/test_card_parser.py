# tests/unit/test_card_parser.py
"""Tests for daily card parsing."""

from datetime import date

import pytest

from petbrain.cards import DEFAULT_ANCHORS, CardAnchor, CardParser, parse_card
from petbrain.errors import CardParseError

FOCUS = "✅ 今天最需要关注的事："
FORBIDDEN = "❌ 今天容易犯的错误："
REASON = "\u2139\ufe0f 为什么："

CARD = (
    f"{FOCUS}\n  让它熟悉新环境，先固定一个休息角落  \n\n"
    f"{FORBIDDEN}\n过度抱它、频繁换地方\n\n"
    f"{REASON}\n到家第一周它最需要的是安全感\n"
)


class TestParse:
    def test_full_card(self):
        card = parse_card(CARD, card_date=date(2024, 6, 15))
        assert card.focus == "让它熟悉新环境，先固定一个休息角落"
        assert card.forbidden == "过度抱它、频繁换地方"
        assert card.reason == "到家第一周它最需要的是安全感"
        assert card.card_date == date(2024, 6, 15)

    def test_defaults_to_today(self):
        assert parse_card(CARD).card_date == date.today()

    def test_preamble_ignored(self):
        card = parse_card("好的，这是今天的卡片：\n\n" + CARD)
        assert card.focus.startswith("让它熟悉新环境")

    def test_multiline_section_kept(self):
        text = f"{FOCUS}\n第一条\n第二条\n{FORBIDDEN}\nB\n{REASON}\nC"
        assert parse_card(text).focus == "第一条\n第二条"

    def test_variation_selector_optional(self):
        text = CARD.replace("\ufe0f", "")
        assert parse_card(text).reason == "到家第一周它最需要的是安全感"

    def test_ascii_colon_and_no_colon(self):
        text = (
            "✅ 今天最需要关注的事: A\n"
            "❌ 今天容易犯的错误 B\n"
            "\u2139\ufe0f为什么：C"
        )
        card = parse_card(text)
        assert (card.focus, card.forbidden, card.reason) == ("A", "B", "C")

    def test_first_occurrence_of_anchor_wins(self):
        text = CARD + f"\n{FOCUS}\n重复的段落"
        card = parse_card(text)
        assert card.focus == "让它熟悉新环境，先固定一个休息角落"
        assert card.reason.endswith("重复的段落")


class TestFailures:
    def test_missing_anchor(self):
        text = CARD.split(REASON)[0]
        with pytest.raises(CardParseError, match="missing sections: reason") as exc_info:
            parse_card(text)
        assert exc_info.value.raw_text == text

    def test_no_anchors_at_all(self):
        with pytest.raises(CardParseError, match="focus, forbidden, reason"):
            parse_card("抱歉，我现在无法生成卡片。")

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_input(self, text):
        with pytest.raises(CardParseError):
            parse_card(text)

    def test_empty_section(self):
        text = f"{FOCUS}\n   \n{FORBIDDEN}\nB\n{REASON}\nC"
        with pytest.raises(CardParseError, match="empty sections: focus"):
            parse_card(text)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse_card("nothing here")


class TestOrdering:
    OUT_OF_ORDER = f"{FOCUS}\nA\n{REASON}\nC\n{FORBIDDEN}\nB"

    def test_lenient_parses_with_absorption(self):
        card = parse_card(self.OUT_OF_ORDER)
        assert card.forbidden == "B"
        assert card.focus.startswith("A")
        assert "为什么" in card.focus
        assert card.reason.startswith("C")

    def test_strict_rejects(self):
        with pytest.raises(CardParseError, match="out of order"):
            parse_card(self.OUT_OF_ORDER, strict_order=True)

    def test_strict_accepts_canonical_order(self):
        assert parse_card(CARD, strict_order=True).forbidden == "过度抱它、频繁换地方"


class TestCardParser:
    def test_locate_returns_text_order(self):
        hits = CardParser().locate(TestOrdering.OUT_OF_ORDER)
        assert [hit.anchor.field for hit in hits] == ["focus", "reason", "forbidden"]

    def test_locate_partial(self):
        hits = CardParser().locate(f"{FORBIDDEN} only")
        assert [hit.anchor.field for hit in hits] == ["forbidden"]

    def test_anchors_must_cover_all_fields(self):
        with pytest.raises(ValueError):
            CardParser(anchors=DEFAULT_ANCHORS[:2])

    def test_custom_anchors(self):
        anchors = (
            CardAnchor(field="focus", marker="1.", title="Focus"),
            CardAnchor(field="forbidden", marker="2.", title="Avoid"),
            CardAnchor(field="reason", marker="3.", title="Why"),
        )
        card = CardParser(anchors=anchors).parse("1. Focus: walk\n2. Avoid: crate\n3. Why: calm")
        assert (card.focus, card.forbidden, card.reason) == ("walk", "crate", "calm")
