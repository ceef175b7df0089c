# petbrain/lexicon/__init__.py
"""
Phrase tables used by the signal extractor.

A Lexicon is immutable data loaded once from YAML and injected into the
extractor, so tests and deployments can swap tables without touching the
extraction rules.
"""

import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).parent / "default.yaml"

# Sets that must not share an entry
_DISJOINT_SETS = (
    "breeds",
    "ownership_triggers",
    "decision_triggers",
    "consulting_negatives",
    "negation_negatives",
)


def contains(phrases: Iterable[str], text: str) -> bool:
    """True iff any phrase is a substring of ``text`` (no tokenization)."""
    return any(phrase in text for phrase in phrases)


class Lexicon(BaseModel):
    """Closed phrase sets for deterministic extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    breeds: tuple[str, ...] = Field(..., description="Breed names in tie-break order")
    ownership_triggers: tuple[str, ...] = Field(
        default=(), description="Phrases stating the user already has the dog"
    )
    decision_triggers: tuple[str, ...] = Field(
        default=(), description="Phrases stating the user has decided on a dog"
    )
    consulting_negatives: tuple[str, ...] = Field(
        default=(), description="Phrases marking a question or hypothetical"
    )
    negation_negatives: tuple[str, ...] = Field(
        default=(), description="Phrases negating ownership or intent"
    )
    companion_triggers: tuple[str, ...] = Field(
        default=(), description="Daily-routine phrases that allow companion-hours extraction"
    )
    juvenile_phrases: tuple[str, ...] = Field(default=(), description="Puppy descriptors")
    adult_phrases: tuple[str, ...] = Field(default=(), description="Adult-dog descriptors")
    all_day_phrases: tuple[str, ...] = Field(default=(), description="Home all day")
    mostly_home_phrases: tuple[str, ...] = Field(default=(), description="Home most of the time")
    office_worker_phrases: tuple[str, ...] = Field(default=(), description="Away during work hours")

    @field_validator("*", mode="before")
    @classmethod
    def _clean_entries(cls, value: object) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            raise ValueError("expected a list of phrases, got a single string")
        seen: dict[str, None] = {}
        for entry in value:
            phrase = str(entry).strip()
            if phrase and phrase not in seen:
                seen[phrase] = None
        return tuple(seen)

    @model_validator(mode="after")
    def _check_disjoint(self) -> "Lexicon":
        owner: dict[str, str] = {}
        for set_name in _DISJOINT_SETS:
            for phrase in getattr(self, set_name):
                if phrase in owner:
                    raise ValueError(
                        f"'{phrase}' appears in both {owner[phrase]} and {set_name}"
                    )
                owner[phrase] = set_name
        return self

    @property
    def triggers(self) -> tuple[str, ...]:
        """Ownership then decision triggers."""
        return self.ownership_triggers + self.decision_triggers

    @property
    def negatives(self) -> tuple[str, ...]:
        """Consulting then negation negatives."""
        return self.consulting_negatives + self.negation_negatives

    def has_negative(self, text: str) -> bool:
        return contains(self.negatives, text)

    def has_trigger(self, text: str) -> bool:
        return contains(self.triggers, text)

    def has_companion_context(self, text: str) -> bool:
        return contains(self.companion_triggers, text) or self.has_trigger(text)

    def first_breed(self, text: str) -> str | None:
        """First breed in declaration order contained in ``text``."""
        for breed in self.breeds:
            if breed in text:
                return breed
        return None


def load_lexicon(path: str | Path | None = None) -> Lexicon:
    """
    Load and validate a lexicon from YAML.

    Args:
        path: YAML file to read (None = packaged default)

    Returns:
        Validated, immutable Lexicon

    Raises:
        FileNotFoundError: If the file doesn't exist
        pydantic.ValidationError: If the tables are malformed
    """
    lexicon_path = Path(path) if path is not None else DEFAULT_LEXICON_PATH
    if not lexicon_path.exists():
        raise FileNotFoundError(f"Lexicon not found: {lexicon_path}")

    with lexicon_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    lexicon = Lexicon(**data)
    logger.info(f"Loaded lexicon from {lexicon_path} ({len(lexicon.breeds)} breeds)")
    return lexicon


@lru_cache(maxsize=1)
def default_lexicon() -> Lexicon:
    """The packaged lexicon, loaded once per process."""
    return load_lexicon()


__all__ = ["Lexicon", "contains", "load_lexicon", "default_lexicon", "DEFAULT_LEXICON_PATH"]
