# petbrain/models/schema.py
"""
Database schema definition for SQLite companion persistence.

Provides DDL for tables and schema initialization.
"""

import logging

import aiosqlite

logger = logging.getLogger(__name__)

# Schema version for future migrations
SCHEMA_VERSION = 1

USER_STATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS user_state (
    user_id TEXT PRIMARY KEY,
    current_stage TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

# One complete profile per user; partial data lives in profile_draft
DOG_INFO_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS dog_info (
    user_id TEXT PRIMARY KEY,
    breed TEXT NOT NULL,
    age_months TEXT NOT NULL,
    companion_hours TEXT NOT NULL,
    home_date TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

PROFILE_DRAFT_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS profile_draft (
    user_id TEXT PRIMARY KEY,
    breed TEXT,
    age_months TEXT,
    companion_hours TEXT,
    updated_at TEXT NOT NULL
)
"""

# Latest card only: a new card supersedes the previous one
DAILY_CARD_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS daily_card (
    user_id TEXT PRIMARY KEY,
    card_date TEXT NOT NULL,
    focus TEXT NOT NULL,
    forbidden TEXT NOT NULL,
    reason TEXT NOT NULL,
    created_at TEXT NOT NULL
)
"""

CONVERSATION_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS conversation (
    user_id TEXT NOT NULL,
    stage TEXT NOT NULL CHECK(stage IN ('prep', 'withDog')),
    continuity_token TEXT,
    transcript TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (user_id, stage)
)
"""

ALL_TABLES_SQL = (
    USER_STATE_TABLE_SQL,
    DOG_INFO_TABLE_SQL,
    PROFILE_DRAFT_TABLE_SQL,
    DAILY_CARD_TABLE_SQL,
    CONVERSATION_TABLE_SQL,
)


async def _get_schema_version(db: aiosqlite.Connection) -> int:
    """
    Get current schema version from database.

    Returns:
        Schema version (0 if no version table exists)
    """
    try:
        cursor = await db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        return row[0] if row else 0
    except aiosqlite.OperationalError:
        return 0


async def _set_schema_version(db: aiosqlite.Connection, version: int) -> None:
    await db.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER)")
    await db.execute("DELETE FROM schema_version")
    await db.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))


async def init_db(db_path: str) -> None:
    """
    Initialize database schema with WAL mode.

    Args:
        db_path: Path to SQLite database file

    Settings:
        - WAL mode: Concurrent reads + writes
        - synchronous=NORMAL: Good durability/performance balance
        - busy_timeout=5000ms: Retry on SQLITE_BUSY
    """
    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.execute("PRAGMA synchronous=NORMAL")
        await db.execute("PRAGMA busy_timeout=5000")

        for ddl in ALL_TABLES_SQL:
            await db.execute(ddl)

        current_version = await _get_schema_version(db)
        if current_version < SCHEMA_VERSION:
            await _set_schema_version(db, SCHEMA_VERSION)
            logger.info(f"New database initialized at v{SCHEMA_VERSION}")

        await db.commit()

        logger.info(f"Initialized database at {db_path} (schema v{SCHEMA_VERSION})")
