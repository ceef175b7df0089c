# petbrain/models/profile.py
"""
Dog profile models.

ExtractedFacts is what one message yields, ProfileDraft is the partial record
accumulated across messages, Profile is the complete persisted record.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from petbrain.errors import ProfileIncompleteError

logger = logging.getLogger(__name__)


class AgeBucket(Enum):
    """Dog age in months, bucketed."""

    MONTHS_1_3 = "1-3"
    MONTHS_4_6 = "4-6"
    MONTHS_6_12 = "6-12"
    MONTHS_12_PLUS = "12+"

    @classmethod
    def from_months(cls, months: int) -> "AgeBucket":
        """Bucket a month count (upper bounds inclusive)."""
        if months <= 3:
            return cls.MONTHS_1_3
        if months <= 6:
            return cls.MONTHS_4_6
        if months <= 12:
            return cls.MONTHS_6_12
        return cls.MONTHS_12_PLUS


class CompanionBucket(Enum):
    """Hours per day the owner can spend with the dog, bucketed."""

    UP_TO_1H = "≤1h"
    HOURS_2_3 = "2-3h"
    HOURS_4_8 = "4-8h"
    AT_LEAST_8H = "≥8h"

    @classmethod
    def from_hours(cls, hours: float) -> "CompanionBucket":
        """Bucket an hour count (upper bounds inclusive)."""
        if hours <= 1:
            return cls.UP_TO_1H
        if hours <= 3:
            return cls.HOURS_2_3
        if hours <= 8:
            return cls.HOURS_4_8
        return cls.AT_LEAST_8H


@dataclass(frozen=True)
class ExtractedFacts:
    """
    Facts recovered from a single user message.

    Every field is independently optional. None means the message carried no
    signal for that field, never an error.
    """

    breed: str | None = None
    age_bucket: AgeBucket | None = None
    companion_bucket: CompanionBucket | None = None

    @property
    def is_empty(self) -> bool:
        return self.breed is None and self.age_bucket is None and self.companion_bucket is None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "breed": self.breed,
            "age_bucket": self.age_bucket.value if self.age_bucket else None,
            "companion_bucket": self.companion_bucket.value if self.companion_bucket else None,
        }


@dataclass(frozen=True)
class ProfileDraft:
    """Partial profile accumulated from extraction, never persisted as a Profile."""

    breed: str | None = None
    age_bucket: AgeBucket | None = None
    companion_bucket: CompanionBucket | None = None

    def merge(self, facts: ExtractedFacts) -> "ProfileDraft":
        """Return a new draft where each present fact overwrites the old value."""
        return replace(
            self,
            breed=facts.breed if facts.breed is not None else self.breed,
            age_bucket=facts.age_bucket if facts.age_bucket is not None else self.age_bucket,
            companion_bucket=(
                facts.companion_bucket
                if facts.companion_bucket is not None
                else self.companion_bucket
            ),
        )

    @property
    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("breed", "age_bucket", "companion_bucket")
            if getattr(self, name) is None
        ]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields

    def to_profile(self, home_date: date) -> "Profile":
        """
        Promote the draft to a complete Profile.

        Raises:
            ProfileIncompleteError: If breed, age or companion hours is unknown
        """
        missing = self.missing_fields
        if missing:
            raise ProfileIncompleteError(missing)
        return Profile(
            breed=self.breed,
            age_bucket=self.age_bucket,
            companion_bucket=self.companion_bucket,
            home_date=home_date,
        )


def merge(old: ProfileDraft, new: ExtractedFacts) -> ProfileDraft:
    """Merge new facts into a draft; absent facts leave old values untouched."""
    return old.merge(new)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_home(home_date: date | datetime, today: date | datetime | None = None) -> int:
    """
    Day count since the dog came home, acquisition day being day 1.

    Never less than 1, so a home date in the future still reads as day 1.
    """
    current = _as_date(today) if today is not None else date.today()
    return max((current - _as_date(home_date)).days + 1, 1)


def home_date_for(days: int, today: date | None = None) -> date:
    """Inverse of days_home: the home date that makes today day ``days``."""
    if days < 1:
        raise ValueError(f"days must be at least 1, got {days}")
    current = today if today is not None else date.today()
    return current - timedelta(days=days - 1)


class Profile(BaseModel):
    """Complete record of the user's dog."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    breed: str = Field(..., min_length=1, description="Breed name")
    age_bucket: AgeBucket = Field(..., description="Age bucket in months")
    companion_bucket: CompanionBucket = Field(..., description="Daily companion hours bucket")
    home_date: date = Field(..., description="Date the dog came home")

    @field_validator("breed")
    @classmethod
    def _strip_breed(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("breed cannot be blank")
        return value

    def merge(self, facts: ExtractedFacts) -> "Profile":
        """Return a new Profile with present facts applied; home_date is kept."""
        if facts.is_empty:
            return self
        return self.model_copy(
            update={
                key: value
                for key, value in (
                    ("breed", facts.breed),
                    ("age_bucket", facts.age_bucket),
                    ("companion_bucket", facts.companion_bucket),
                )
                if value is not None
            }
        )

    def days_home(self, today: date | None = None) -> int:
        return days_home(self.home_date, today)

    def to_draft(self) -> ProfileDraft:
        return ProfileDraft(
            breed=self.breed,
            age_bucket=self.age_bucket,
            companion_bucket=self.companion_bucket,
        )

    def prompt_inputs(self, today: date | None = None) -> dict[str, str]:
        """Variables handed to the completion service alongside each message."""
        return {
            "breed": self.breed,
            "ageMonths": self.age_bucket.value,
            "companionHours": self.companion_bucket.value,
            "daysHome": str(self.days_home(today)),
        }
