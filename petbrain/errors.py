# petbrain/errors.py
"""
Exception types raised by petbrain.

"No signal" from the extractor is never an exception; it is an absent field.
"""


class PetBrainError(Exception):
    """Base class for petbrain errors."""


class CardParseError(PetBrainError, ValueError):
    """
    A card response could not be turned into a complete DailyCard.

    Distinct from UpstreamError so callers can offer "regenerate" instead of
    a network error message.
    """

    def __init__(self, reason: str, raw_text: str = "") -> None:
        self.reason = reason
        self.raw_text = raw_text
        super().__init__(f"Could not parse daily card: {reason}")


class ProfileIncompleteError(PetBrainError, ValueError):
    """A profile draft was promoted before every field was known."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Profile is missing: {', '.join(missing)}")


class ProfileRequiredError(PetBrainError):
    """Entering the with-dog stage requires a complete profile."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(
            f"User {user_id} has no dog profile; collect one before entering the with-dog stage"
        )


class UpstreamError(PetBrainError):
    """The completion service failed. Chained to the client exception, no retry."""
