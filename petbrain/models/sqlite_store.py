# petbrain/models/sqlite_store.py
"""
SQLite-backed companion persistence.

Provides async load/save operations with WAL mode and IMMEDIATE transactions.
Rows that fail to deserialize are logged and treated as absent, so a corrupt
profile or card sends the user back through collection instead of crashing.
"""

import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, TypeVar

import aiosqlite

from petbrain.models.card import DailyCard
from petbrain.models.conversation import Conversation, Message
from petbrain.models.profile import AgeBucket, CompanionBucket, Profile, ProfileDraft
from petbrain.models.schema import init_db
from petbrain.models.stage import Stage
from petbrain.models.store import CompanionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteCompanionStore(CompanionStore):
    """
    Async SQLite-backed companion storage.

    Features:
        - WAL mode for concurrent reads/writes
        - IMMEDIATE transactions for write safety
        - No persistent connections (avoids resource leaks)
    """

    def __init__(self, db_path: str) -> None:
        """
        Initialize SQLite companion store.

        Args:
            db_path: Path to SQLite database file
        """
        self._db_path = db_path
        logger.info(f"Created SQLiteCompanionStore with path: {db_path}")

    async def initialize(self) -> None:
        """Initialize database schema."""
        await init_db(self._db_path)

    async def close(self) -> None:
        """
        Checkpoint WAL and close database.

        Truncates WAL file to avoid unbounded growth.
        """
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute("PRAGMA wal_checkpoint(TRUNCATE)")
                logger.info("WAL checkpoint completed")
        except aiosqlite.Error as e:
            logger.warning(f"WAL checkpoint failed: {e}")

    async def _write(self, sql: str, params: tuple) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                await db.execute(sql, params)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    async def _fetch_one(self, sql: str, params: tuple) -> aiosqlite.Row | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(sql, params)
            return await cursor.fetchone()

    def _decode(self, what: str, user_id: str, row: aiosqlite.Row, build: Callable[[aiosqlite.Row], T]) -> T | None:
        """Convert a row, treating unreadable records as absent."""
        try:
            return build(row)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable {what} for user {user_id}: {e}")
            return None

    # Profile

    async def load_profile(self, user_id: str) -> Profile | None:
        row = await self._fetch_one("SELECT * FROM dog_info WHERE user_id = ?", (user_id,))
        if not row:
            return None
        return self._decode("profile", user_id, row, self._row_to_profile)

    async def save_profile(self, user_id: str, profile: Profile) -> None:
        now = _now_iso()
        await self._write(
            """
            INSERT INTO dog_info (
                user_id, breed, age_months, companion_hours, home_date, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                breed = excluded.breed,
                age_months = excluded.age_months,
                companion_hours = excluded.companion_hours,
                home_date = excluded.home_date,
                updated_at = excluded.updated_at
            """,
            (
                user_id,
                profile.breed,
                profile.age_bucket.value,
                profile.companion_bucket.value,
                profile.home_date.isoformat(),
                now,
                now,
            ),
        )
        logger.info(f"Saved profile for user {user_id}")

    async def delete_profile(self, user_id: str) -> None:
        await self._write("DELETE FROM dog_info WHERE user_id = ?", (user_id,))
        logger.info(f"Deleted profile for user {user_id}")

    # Draft

    async def load_draft(self, user_id: str) -> ProfileDraft | None:
        row = await self._fetch_one("SELECT * FROM profile_draft WHERE user_id = ?", (user_id,))
        if not row:
            return None
        return self._decode("profile draft", user_id, row, self._row_to_draft)

    async def save_draft(self, user_id: str, draft: ProfileDraft) -> None:
        await self._write(
            """
            INSERT INTO profile_draft (user_id, breed, age_months, companion_hours, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                breed = excluded.breed,
                age_months = excluded.age_months,
                companion_hours = excluded.companion_hours,
                updated_at = excluded.updated_at
            """,
            (
                user_id,
                draft.breed,
                draft.age_bucket.value if draft.age_bucket else None,
                draft.companion_bucket.value if draft.companion_bucket else None,
                _now_iso(),
            ),
        )

    async def clear_draft(self, user_id: str) -> None:
        await self._write("DELETE FROM profile_draft WHERE user_id = ?", (user_id,))

    # Daily card

    async def load_today_card(self, user_id: str, today: date) -> DailyCard | None:
        row = await self._fetch_one(
            "SELECT * FROM daily_card WHERE user_id = ? AND card_date = ?",
            (user_id, today.isoformat()),
        )
        if not row:
            return None
        return self._decode("daily card", user_id, row, self._row_to_card)

    async def save_today_card(self, user_id: str, card: DailyCard) -> None:
        await self._write(
            """
            INSERT INTO daily_card (user_id, card_date, focus, forbidden, reason, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                card_date = excluded.card_date,
                focus = excluded.focus,
                forbidden = excluded.forbidden,
                reason = excluded.reason,
                created_at = excluded.created_at
            """,
            (
                user_id,
                card.card_date.isoformat(),
                card.focus,
                card.forbidden,
                card.reason,
                _now_iso(),
            ),
        )
        logger.info(f"Saved daily card for user {user_id} ({card.card_date.isoformat()})")

    # Stage

    async def load_stage(self, user_id: str) -> Stage | None:
        row = await self._fetch_one(
            "SELECT current_stage FROM user_state WHERE user_id = ?", (user_id,)
        )
        if not row:
            return None
        return self._decode("stage", user_id, row, lambda r: Stage(r["current_stage"]))

    async def save_stage(self, user_id: str, stage: Stage) -> None:
        await self._write(
            """
            INSERT INTO user_state (user_id, current_stage, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                current_stage = excluded.current_stage,
                updated_at = excluded.updated_at
            """,
            (user_id, stage.value, _now_iso()),
        )

    # Conversation

    async def load_conversation(self, user_id: str, stage: Stage) -> Conversation | None:
        row = await self._fetch_one(
            "SELECT * FROM conversation WHERE user_id = ? AND stage = ?",
            (user_id, stage.value),
        )
        if not row:
            return None
        return self._decode("conversation", user_id, row, self._row_to_conversation)

    async def save_conversation(self, user_id: str, conversation: Conversation) -> None:
        if not conversation.stage.retains_conversation:
            raise ValueError(f"Stage '{conversation.stage.value}' conversations are not persisted")

        transcript = json.dumps(
            [message.to_dict() for message in conversation.messages], ensure_ascii=False
        )
        await self._write(
            """
            INSERT INTO conversation (user_id, stage, continuity_token, transcript, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(user_id, stage) DO UPDATE SET
                continuity_token = excluded.continuity_token,
                transcript = excluded.transcript,
                updated_at = excluded.updated_at
            """,
            (
                user_id,
                conversation.stage.value,
                conversation.continuity_token,
                transcript,
                _now_iso(),
            ),
        )

    async def clear_conversation(self, user_id: str, stage: Stage) -> None:
        await self._write(
            "DELETE FROM conversation WHERE user_id = ? AND stage = ?",
            (user_id, stage.value),
        )

    # Row conversion

    def _row_to_profile(self, row: aiosqlite.Row) -> Profile:
        return Profile(
            breed=row["breed"],
            age_bucket=AgeBucket(row["age_months"]),
            companion_bucket=CompanionBucket(row["companion_hours"]),
            home_date=date.fromisoformat(row["home_date"]),
        )

    def _row_to_draft(self, row: aiosqlite.Row) -> ProfileDraft:
        return ProfileDraft(
            breed=row["breed"],
            age_bucket=AgeBucket(row["age_months"]) if row["age_months"] else None,
            companion_bucket=(
                CompanionBucket(row["companion_hours"]) if row["companion_hours"] else None
            ),
        )

    def _row_to_card(self, row: aiosqlite.Row) -> DailyCard:
        return DailyCard(
            focus=row["focus"],
            forbidden=row["forbidden"],
            reason=row["reason"],
            card_date=date.fromisoformat(row["card_date"]),
        )

    def _row_to_conversation(self, row: aiosqlite.Row) -> Conversation:
        entries: list[dict[str, Any]] = json.loads(row["transcript"])
        if not isinstance(entries, list):
            raise ValueError("transcript is not a list")
        return Conversation(
            stage=Stage(row["stage"]),
            continuity_token=row["continuity_token"],
            messages=[Message.from_dict(entry) for entry in entries],
        )
