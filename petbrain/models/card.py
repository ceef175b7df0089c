# petbrain/models/card.py
"""Schema for the daily card produced by a card-request turn."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DailyCard(BaseModel):
    """One day's guidance: what to focus on, what to avoid, and why.

    A card is only valid for the calendar day it was generated on.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    focus: str = Field(..., description="The one thing that needs attention today")
    forbidden: str = Field(..., description="The mistake owners are likely to make today")
    reason: str = Field(..., description="Why this matters today")
    card_date: date = Field(
        default_factory=date.today, description="Calendar day the card was generated for"
    )

    @field_validator("focus", "forbidden", "reason")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("card sections cannot be empty")
        return value

    def is_current(self, today: date | None = None) -> bool:
        """Whether the card belongs to ``today`` (date comparison, no TTL)."""
        return self.card_date == (today if today is not None else date.today())
