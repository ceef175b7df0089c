# tests/unit/test_profile.py
"""Tests for profile models, merging and day counting."""

from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from petbrain.errors import ProfileIncompleteError
from petbrain.models import (
    AgeBucket,
    CompanionBucket,
    DailyCard,
    ExtractedFacts,
    Profile,
    ProfileDraft,
    Stage,
    days_home,
    home_date_for,
    merge,
)

TODAY = date(2024, 6, 15)


def _profile(**overrides) -> Profile:
    data = {
        "breed": "柯基",
        "age_bucket": AgeBucket.MONTHS_1_3,
        "companion_bucket": CompanionBucket.HOURS_4_8,
        "home_date": TODAY - timedelta(days=4),
    }
    data.update(overrides)
    return Profile(**data)


class TestBuckets:
    @pytest.mark.parametrize(
        "months,expected",
        [(1, "1-3"), (3, "1-3"), (4, "4-6"), (6, "4-6"), (7, "6-12"), (12, "6-12"), (13, "12+")],
    )
    def test_age_boundaries(self, months, expected):
        assert AgeBucket.from_months(months).value == expected

    @pytest.mark.parametrize(
        "hours,expected",
        [(0, "≤1h"), (1, "≤1h"), (1.5, "2-3h"), (3, "2-3h"), (8, "4-8h"), (8.5, "≥8h"), (12, "≥8h")],
    )
    def test_companion_boundaries(self, hours, expected):
        assert CompanionBucket.from_hours(hours).value == expected


class TestMerge:
    def test_empty_facts_change_nothing(self):
        draft = ProfileDraft(breed="金毛")
        assert merge(draft, ExtractedFacts()) == draft

    def test_idempotent(self):
        facts = ExtractedFacts(breed="金毛", age_bucket=AgeBucket.MONTHS_4_6)
        once = merge(ProfileDraft(), facts)
        assert merge(once, facts) == once

    def test_absent_fields_keep_old_values(self):
        draft = ProfileDraft(breed="金毛", companion_bucket=CompanionBucket.UP_TO_1H)
        merged = merge(draft, ExtractedFacts(age_bucket=AgeBucket.MONTHS_1_3))
        assert merged == ProfileDraft(
            breed="金毛",
            age_bucket=AgeBucket.MONTHS_1_3,
            companion_bucket=CompanionBucket.UP_TO_1H,
        )

    def test_last_write_wins(self):
        draft = merge(ProfileDraft(), ExtractedFacts(breed="泰迪"))
        draft = merge(draft, ExtractedFacts(breed="比熊"))
        assert draft.breed == "比熊"

    def test_input_draft_untouched(self):
        draft = ProfileDraft()
        merge(draft, ExtractedFacts(breed="柯基"))
        assert draft.breed is None


class TestProfileDraft:
    def test_missing_fields_in_order(self):
        assert ProfileDraft().missing_fields == ["breed", "age_bucket", "companion_bucket"]
        assert ProfileDraft(breed="柯基").missing_fields == ["age_bucket", "companion_bucket"]

    def test_incomplete_cannot_be_promoted(self):
        with pytest.raises(ProfileIncompleteError) as exc_info:
            ProfileDraft(breed="柯基").to_profile(TODAY)
        assert exc_info.value.missing == ["age_bucket", "companion_bucket"]

    def test_complete_draft_promotes(self):
        draft = ProfileDraft(
            breed="柯基",
            age_bucket=AgeBucket.MONTHS_1_3,
            companion_bucket=CompanionBucket.HOURS_2_3,
        )
        assert draft.is_complete
        profile = draft.to_profile(TODAY)
        assert profile.breed == "柯基"
        assert profile.home_date == TODAY


class TestDaysHome:
    def test_acquisition_day_is_day_one(self):
        assert days_home(TODAY, TODAY) == 1

    def test_yesterday_is_day_two(self):
        assert days_home(TODAY - timedelta(days=1), TODAY) == 2

    def test_future_home_date_clamped(self):
        assert days_home(TODAY + timedelta(days=3), TODAY) == 1

    def test_accepts_datetimes(self):
        assert days_home(datetime(2024, 6, 10, 23, 59), datetime(2024, 6, 15, 0, 1)) == 6

    def test_home_date_for_inverts_days_home(self):
        for days in (1, 2, 30):
            assert days_home(home_date_for(days, TODAY), TODAY) == days

    def test_home_date_for_rejects_zero(self):
        with pytest.raises(ValueError):
            home_date_for(0, TODAY)


class TestProfile:
    def test_blank_breed_rejected(self):
        with pytest.raises(ValidationError):
            _profile(breed="   ")

    def test_breed_stripped(self):
        assert _profile(breed=" 柯基 ").breed == "柯基"

    def test_bucket_values_coerced(self):
        profile = _profile(age_bucket="4-6", companion_bucket="≥8h")
        assert profile.age_bucket is AgeBucket.MONTHS_4_6
        assert profile.companion_bucket is CompanionBucket.AT_LEAST_8H

    def test_unknown_bucket_rejected(self):
        with pytest.raises(ValidationError):
            _profile(age_bucket="24")

    def test_merge_empty_returns_same(self):
        profile = _profile()
        assert profile.merge(ExtractedFacts()) is profile

    def test_merge_keeps_home_date(self):
        profile = _profile()
        updated = profile.merge(ExtractedFacts(companion_bucket=CompanionBucket.UP_TO_1H))
        assert updated.companion_bucket is CompanionBucket.UP_TO_1H
        assert updated.home_date == profile.home_date
        assert updated.breed == "柯基"

    def test_prompt_inputs(self):
        assert _profile().prompt_inputs(TODAY) == {
            "breed": "柯基",
            "ageMonths": "1-3",
            "companionHours": "4-8h",
            "daysHome": "5",
        }

    def test_to_draft_round_trip(self):
        profile = _profile()
        assert profile.to_draft().to_profile(profile.home_date) == profile


class TestDailyCard:
    def test_sections_stripped(self):
        card = DailyCard(focus=" a ", forbidden="b\n", reason="\tc", card_date=TODAY)
        assert (card.focus, card.forbidden, card.reason) == ("a", "b", "c")

    def test_empty_section_rejected(self):
        with pytest.raises(ValidationError):
            DailyCard(focus="a", forbidden="  ", reason="c")

    def test_is_current(self):
        card = DailyCard(focus="a", forbidden="b", reason="c", card_date=TODAY)
        assert card.is_current(TODAY)
        assert not card.is_current(TODAY + timedelta(days=1))


class TestStage:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("explore", Stage.EXPLORE),
            ("PREP", Stage.PREP),
            ("withDog", Stage.WITH_DOG),
            ("with-dog", Stage.WITH_DOG),
            ("with_dog", Stage.WITH_DOG),
        ],
    )
    def test_parse(self, raw, expected):
        assert Stage.parse(raw) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown stage"):
            Stage.parse("adopted")

    def test_retention(self):
        assert not Stage.EXPLORE.retains_conversation
        assert Stage.PREP.retains_conversation
        assert Stage.WITH_DOG.retains_conversation

    def test_only_with_dog_requires_profile(self):
        assert [s for s in Stage if s.requires_profile] == [Stage.WITH_DOG]
