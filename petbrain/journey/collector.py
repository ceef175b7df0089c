# petbrain/journey/collector.py
"""
Progressive profile collection.

Each user message is run through the extractor and merged into what is
already known: the stored profile if one exists, otherwise the draft.
"""

import logging
from datetime import date

from petbrain.extraction import SignalExtractor
from petbrain.models.profile import AgeBucket, CompanionBucket, Profile, ProfileDraft
from petbrain.models.store import CompanionStore

logger = logging.getLogger(__name__)


class ProfileCollector:
    """Merges extracted facts into the stored draft or profile."""

    def __init__(self, store: CompanionStore, extractor: SignalExtractor | None = None) -> None:
        self._store = store
        self._extractor = extractor if extractor is not None else SignalExtractor()

    async def known(self, user_id: str) -> ProfileDraft:
        """Everything known about the dog so far, as a draft."""
        profile = await self._store.load_profile(user_id)
        if profile is not None:
            return profile.to_draft()
        return await self._store.load_draft(user_id) or ProfileDraft()

    async def observe(self, user_id: str, text: str) -> ProfileDraft:
        """
        Extract facts from one message and merge them.

        Returns:
            What is known after the merge
        """
        facts = self._extractor.extract(text)

        profile = await self._store.load_profile(user_id)
        if profile is not None:
            merged = profile.merge(facts)
            if merged != profile:
                await self._store.save_profile(user_id, merged)
                logger.info(f"Updated profile for user {user_id} from conversation")
            return merged.to_draft()

        draft = await self._store.load_draft(user_id) or ProfileDraft()
        merged_draft = draft.merge(facts)
        if merged_draft != draft:
            await self._store.save_draft(user_id, merged_draft)
            logger.info(
                f"Draft for user {user_id} now missing: {merged_draft.missing_fields or 'nothing'}"
            )
        return merged_draft

    async def complete(self, user_id: str, home_date: date) -> Profile:
        """
        Promote the draft to a profile once the home date is known.

        Raises:
            ProfileIncompleteError: If the draft still lacks a field
        """
        draft = await self._store.load_draft(user_id) or ProfileDraft()
        profile = draft.to_profile(home_date)
        await self._store.save_profile(user_id, profile)
        await self._store.clear_draft(user_id)
        logger.info(f"Promoted draft to profile for user {user_id}")
        return profile

    async def submit_form(
        self,
        user_id: str,
        breed: str,
        age_bucket: AgeBucket,
        companion_bucket: CompanionBucket,
        home_date: date,
    ) -> Profile:
        """Save a profile entered through the form, replacing any draft."""
        profile = Profile(
            breed=breed,
            age_bucket=age_bucket,
            companion_bucket=companion_bucket,
            home_date=home_date,
        )
        await self._store.save_profile(user_id, profile)
        await self._store.clear_draft(user_id)
        return profile

    async def reset(self, user_id: str) -> None:
        """Forget the profile and any draft."""
        await self._store.delete_profile(user_id)
        await self._store.clear_draft(user_id)
        logger.info(f"Reset profile for user {user_id}")
