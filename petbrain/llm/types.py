# petbrain/llm/types.py
"""Completion request/response types and the client interface.

No concrete client ships with petbrain; the application wires in whatever
chat-completion service it uses by implementing CompletionClient.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CompletionRequest:
    """One user turn sent to the completion service."""

    text: str
    continuity_token: str | None = None  # None starts a new conversation
    inputs: dict[str, str] = field(default_factory=dict)  # prompt variables


@dataclass(frozen=True)
class CompletionResponse:
    """The service's reply and the token that continues the conversation."""

    text: str
    continuity_token: str | None


class CompletionClient(ABC):
    """Chat-completion collaborator."""

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Send one turn and wait for the reply.

        Implementations raise on any transport or service failure; callers
        wrap those as UpstreamError. Retry policy belongs to the implementation.
        """
