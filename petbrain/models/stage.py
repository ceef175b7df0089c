# petbrain/models/stage.py
"""Journey stages and their retention policy."""

from enum import Enum


class Stage(Enum):
    """The three phases of the user journey."""

    EXPLORE = "explore"
    PREP = "prep"
    WITH_DOG = "withDog"

    @property
    def retains_conversation(self) -> bool:
        """Explore conversations start fresh on every visit."""
        return self is not Stage.EXPLORE

    @property
    def requires_profile(self) -> bool:
        return self is Stage.WITH_DOG

    @classmethod
    def parse(cls, value: str) -> "Stage":
        """Accept the stored value or the enum name, case-insensitively."""
        normalized = value.strip().lower().replace("-", "_")
        for stage in cls:
            if normalized in (stage.value.lower(), stage.name.lower()):
                return stage
        raise ValueError(
            f"Unknown stage '{value}'. Expected one of: "
            + ", ".join(s.value for s in cls)
        )
