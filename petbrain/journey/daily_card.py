# petbrain/journey/daily_card.py
"""
Daily card lifecycle.

One card per calendar day. A stored card from an earlier day is stale and is
never shown; a successful parse replaces whatever was stored.
"""

import logging
from datetime import date

from petbrain.cards.parser import CardParser
from petbrain.config.schema import CardConfig
from petbrain.errors import ProfileRequiredError
from petbrain.journey.conversation import ConversationSession
from petbrain.models.card import DailyCard
from petbrain.models.stage import Stage
from petbrain.models.store import CompanionStore

logger = logging.getLogger(__name__)


class DailyCardService:
    """Loads today's card or generates one through a with-dog session."""

    def __init__(self, store: CompanionStore, config: CardConfig | None = None) -> None:
        self._store = store
        self._config = config if config is not None else CardConfig()
        self._parser = CardParser(strict_order=self._config.strict_order)

    async def today_card(self, user_id: str, today: date | None = None) -> DailyCard | None:
        """Today's card, or None if none was generated today."""
        today = today if today is not None else date.today()
        card = await self._store.load_today_card(user_id, today)
        if card is not None and not card.is_current(today):
            return None
        return card

    async def generate(
        self, session: ConversationSession, today: date | None = None
    ) -> DailyCard:
        """
        Request, parse and store today's card.

        The request goes through the session so the continuity token is
        honoured, but the exchange is kept out of the transcript.

        Raises:
            ProfileRequiredError: If the user has no profile
            UpstreamError: If the completion service fails
            CardParseError: If the response lacks a complete card
        """
        if session.stage is not Stage.WITH_DOG:
            raise ValueError("Daily cards are only generated in the with-dog stage")

        today = today if today is not None else date.today()
        profile = await self._store.load_profile(session.user_id)
        if profile is None:
            raise ProfileRequiredError(session.user_id)

        inputs = {**profile.prompt_inputs(today), "generateDailyCard": "true"}
        response = await session.send(self._config.request_text, inputs=inputs, record=False)

        card = self._parser.parse(response.text, card_date=today)
        await self._store.save_today_card(session.user_id, card)
        logger.info(f"Generated daily card for user {session.user_id} (day {profile.days_home(today)})")
        return card

    async def get_or_generate(
        self, session: ConversationSession, today: date | None = None
    ) -> DailyCard:
        """Today's stored card, generating one if needed."""
        card = await self.today_card(session.user_id, today)
        if card is not None:
            return card
        return await self.generate(session, today)
