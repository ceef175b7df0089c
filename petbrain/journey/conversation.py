# petbrain/journey/conversation.py
"""
Conversation sessions against the completion service.

A session serialises requests so at most one is in flight, and applies the
continuity token from each response before the next request goes out.
Sending with a stale token would fork the conversation on the service side.

Explore sessions are never persisted; prep and with-dog sessions are loaded
from and saved to the store after every turn.
"""

import asyncio
import logging
from datetime import date

from petbrain.errors import ProfileRequiredError, UpstreamError
from petbrain.journey.collector import ProfileCollector
from petbrain.llm.types import CompletionClient, CompletionRequest, CompletionResponse
from petbrain.models.conversation import Conversation, Message
from petbrain.models.stage import Stage
from petbrain.models.store import CompanionStore

logger = logging.getLogger(__name__)

CHECKLIST_REQUEST_TEXT = "请根据我们的对话生成准备清单"


class ConversationSession:
    """One user's conversation in one stage."""

    def __init__(
        self,
        store: CompanionStore,
        client: CompletionClient,
        user_id: str,
        stage: Stage,
        conversation: Conversation | None = None,
        collector: ProfileCollector | None = None,
    ) -> None:
        """
        Initialize a session. Use ``open`` to resume a stored conversation.

        Args:
            store: Companion store
            client: Completion service client
            user_id: User identifier
            stage: Stage this conversation belongs to
            conversation: Existing conversation (None = start fresh)
            collector: Profile collector fed with every user message (prep and
                with-dog only)
        """
        self._store = store
        self._client = client
        self._lock = asyncio.Lock()
        self.user_id = user_id
        self.stage = stage
        self.conversation = conversation or Conversation(stage=stage)
        self.collector = collector

    @classmethod
    async def open(
        cls,
        store: CompanionStore,
        client: CompletionClient,
        user_id: str,
        stage: Stage,
        collector: ProfileCollector | None = None,
    ) -> "ConversationSession":
        """Resume the stored conversation for retaining stages, else start fresh."""
        conversation = None
        if stage.retains_conversation:
            conversation = await store.load_conversation(user_id, stage)
        if conversation is not None:
            logger.info(
                f"Resumed {stage.value} conversation for user {user_id} "
                f"({len(conversation.messages)} messages)"
            )
        return cls(store, client, user_id, stage, conversation=conversation, collector=collector)

    @property
    def in_flight(self) -> bool:
        """Whether a request is currently waiting on the service."""
        return self._lock.locked()

    @property
    def messages(self) -> list[Message]:
        return list(self.conversation.messages)

    async def send(
        self,
        text: str,
        inputs: dict[str, str] | None = None,
        record: bool = True,
    ) -> CompletionResponse:
        """
        Send one turn and apply the returned continuity token.

        Args:
            text: Message text
            inputs: Prompt variables for the service
            record: Append the exchange to the transcript

        Returns:
            The service response

        Raises:
            UpstreamError: If the completion client fails (the token is left
                unchanged and nothing is recorded)
        """
        async with self._lock:
            request = CompletionRequest(
                text=text,
                continuity_token=self.conversation.continuity_token,
                inputs=dict(inputs or {}),
            )
            try:
                response = await self._client.complete(request)
            except Exception as e:
                logger.warning(f"Completion failed for user {self.user_id} ({self.stage.value}): {e}")
                raise UpstreamError(f"Completion service failed: {e}") from e

            if response.continuity_token is not None:
                self.conversation.continuity_token = response.continuity_token
            if record:
                self.conversation.messages.append(Message(role="user", content=text))
                self.conversation.messages.append(Message(role="assistant", content=response.text))

            if self.stage.retains_conversation:
                await self._store.save_conversation(self.user_id, self.conversation)

            return response

    async def _stage_inputs(self, today: date | None) -> dict[str, str]:
        if self.stage is not Stage.WITH_DOG:
            return {}
        profile = await self._store.load_profile(self.user_id)
        if profile is None:
            raise ProfileRequiredError(self.user_id)
        return {**profile.prompt_inputs(today), "generateDailyCard": "false"}

    async def chat(self, text: str, today: date | None = None) -> str:
        """
        Regular chat turn.

        In prep and with-dog, the message is first fed to the profile
        collector. In with-dog, the profile is sent along as prompt inputs.

        Returns:
            The assistant's reply text
        """
        text = text.strip()
        if not text:
            raise ValueError("Message cannot be empty")

        if self.collector is not None and self.stage.retains_conversation:
            await self.collector.observe(self.user_id, text)

        inputs = await self._stage_inputs(today)
        response = await self.send(text, inputs=inputs)
        return response.text

    async def request_checklist(self) -> str:
        """Ask the service for the preparation checklist (prep only)."""
        if self.stage is not Stage.PREP:
            raise ValueError("Checklists are only generated in the prep stage")
        response = await self.send(
            CHECKLIST_REQUEST_TEXT, inputs={"shouldGenerateChecklist": "true"}
        )
        return response.text

    async def reset(self) -> None:
        """Drop the conversation and start over with no continuity token."""
        async with self._lock:
            self.conversation = Conversation(stage=self.stage)
            if self.stage.retains_conversation:
                await self._store.clear_conversation(self.user_id, self.stage)
