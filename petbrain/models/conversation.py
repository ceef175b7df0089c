# petbrain/models/conversation.py
"""
Conversation records (internal, NOT pydantic).

A conversation belongs to one user and one stage. The continuity token is
opaque and only ever round-tripped.
"""

from dataclasses import dataclass, field
from typing import Any

from petbrain.models.stage import Stage


@dataclass(frozen=True)
class Message:
    """A single transcript entry."""

    role: str  # "user" or "assistant"
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        role = data["role"]
        if role not in ("user", "assistant"):
            raise ValueError(f"Unknown message role '{role}'")
        return cls(role=role, content=str(data["content"]))


@dataclass
class Conversation:
    """Transcript plus the continuity token of the last response."""

    stage: Stage
    continuity_token: str | None = None
    messages: list[Message] = field(default_factory=list)
