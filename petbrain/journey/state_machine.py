# petbrain/journey/state_machine.py
"""
Stage transitions for the three-stage journey.

Any stage can move to any other, but only on explicit user action. Entering
the with-dog stage is gated on a complete profile. Switching stages never
touches the profile or the retained conversations.
"""

import logging
from dataclasses import dataclass

from petbrain.errors import ProfileRequiredError
from petbrain.models.profile import Profile
from petbrain.models.stage import Stage
from petbrain.models.store import CompanionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionStart:
    """Where a returning user lands.

    Attributes:
        stage: Stage to show, or None when the user must pick one
        profile: The stored profile, if any
        needs_profile: True when the stage is with-dog but no profile exists,
            so the profile form must be shown first
    """

    stage: Stage | None
    profile: Profile | None
    needs_profile: bool = False


class JourneyStateMachine:
    """Owns the user's current stage and the with-dog guard."""

    def __init__(self, store: CompanionStore) -> None:
        self._store = store

    async def current_stage(self, user_id: str) -> Stage | None:
        return await self._store.load_stage(user_id)

    async def start_session(self, user_id: str) -> SessionStart:
        """
        Resolve the landing stage at session start.

        A stored stage wins. Without one, a user who already has a profile
        lands in with-dog; everyone else picks a stage.
        """
        stage = await self._store.load_stage(user_id)
        profile = await self._store.load_profile(user_id)

        if stage is None and profile is not None:
            stage = Stage.WITH_DOG
            await self._store.save_stage(user_id, stage)
            logger.info(f"Routed user {user_id} to {stage.value} (profile on file)")

        needs_profile = stage is Stage.WITH_DOG and profile is None
        if needs_profile:
            logger.warning(f"User {user_id} is in {stage.value} without a profile")

        return SessionStart(stage=stage, profile=profile, needs_profile=needs_profile)

    async def can_enter(self, user_id: str, target: Stage) -> bool:
        """Whether ``target`` is enterable right now."""
        if not target.requires_profile:
            return True
        return await self._store.load_profile(user_id) is not None

    async def transition(self, user_id: str, target: Stage) -> Stage:
        """
        Move the user to ``target``.

        Returns:
            The new current stage

        Raises:
            ProfileRequiredError: If ``target`` is with-dog and no profile exists
        """
        if not await self.can_enter(user_id, target):
            logger.info(f"Blocked transition to {target.value} for user {user_id}: no profile")
            raise ProfileRequiredError(user_id)

        previous = await self._store.load_stage(user_id)
        if previous is target:
            return target

        await self._store.save_stage(user_id, target)
        logger.info(
            f"Stage transition for user {user_id}: "
            f"{previous.value if previous else 'none'} -> {target.value}"
        )
        return target

    async def transition_with_profile(
        self, user_id: str, profile: Profile, target: Stage = Stage.WITH_DOG
    ) -> Stage:
        """Save a collected profile, then transition."""
        await self._store.save_profile(user_id, profile)
        await self._store.clear_draft(user_id)
        return await self.transition(user_id, target)
