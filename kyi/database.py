import aiosqlite
import json
import uuid
from datetime import datetime, timezone
from kyi.config import DATABASE_PATH, DEFAULT_LEVEL
from kyi.models import ProgressRecord, ChatMessage, UserProfile

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    current_level TEXT NOT NULL DEFAULT 'N3',  -- 'N3', 'N2', 'N1'
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS vocabulary (
    id TEXT PRIMARY KEY,
    japanese TEXT NOT NULL,
    hiragana TEXT NOT NULL,
    burmese TEXT NOT NULL,
    english TEXT NOT NULL,
    level TEXT NOT NULL,
    category TEXT NOT NULL DEFAULT '',
    example_sentence TEXT,
    example_burmese TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS grammar_points (
    id TEXT PRIMARY KEY,
    pattern TEXT NOT NULL,
    meaning TEXT NOT NULL,
    burmese_explanation TEXT NOT NULL DEFAULT '',
    english_explanation TEXT NOT NULL DEFAULT '',
    level TEXT NOT NULL,
    examples TEXT NOT NULL DEFAULT '[]',  -- JSON array of {japanese, burmese, english}
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS kaiwa_scenarios (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    title_burmese TEXT NOT NULL DEFAULT '',
    level TEXT NOT NULL,
    situation TEXT NOT NULL DEFAULT '',
    dialogue TEXT NOT NULL DEFAULT '[]',  -- JSON array of {speaker, japanese, burmese, english}
    key_phrases TEXT NOT NULL DEFAULT '[]',  -- JSON array of {japanese, burmese, english}
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_progress (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    item_type TEXT NOT NULL,  -- 'vocabulary', 'grammar', 'kaiwa'
    item_id TEXT NOT NULL,
    mastery_level INTEGER NOT NULL DEFAULT 1,
    review_count INTEGER NOT NULL DEFAULT 1,
    last_reviewed TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE(user_id, item_type, item_id)
);

CREATE TABLE IF NOT EXISTS ai_chat_history (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    message TEXT NOT NULL,
    role TEXT NOT NULL,  -- 'user' or 'assistant'
    language TEXT NOT NULL DEFAULT 'burmese',
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

# --- Schema migrations ---
# Each entry is run once, in order. Version tracked in settings table.

MIGRATIONS = [
    # Migration 1: lookup indexes for content filters and per-user reads
    """
    CREATE INDEX IF NOT EXISTS idx_vocabulary_level ON vocabulary(level, category);
    CREATE INDEX IF NOT EXISTS idx_grammar_level ON grammar_points(level);
    CREATE INDEX IF NOT EXISTS idx_kaiwa_level ON kaiwa_scenarios(level);
    CREATE INDEX IF NOT EXISTS idx_progress_user ON user_progress(user_id, item_type);
    CREATE INDEX IF NOT EXISTS idx_chat_user ON ai_chat_history(user_id, created_at);
    """,
]

# Columns each content collection may be filtered on
CONTENT_COLLECTIONS = {
    "vocabulary": ("level", "category"),
    "grammar_points": ("level",),
    "kaiwa_scenarios": ("level",),
}

ORDER_COLUMNS = ("created_at", "level")

MASTERY_CAP = 5


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


async def get_db() -> aiosqlite.Connection:
    db = await aiosqlite.connect(DATABASE_PATH)
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA journal_mode=WAL")
    await db.execute("PRAGMA foreign_keys=ON")
    return db


async def _get_schema_version(db) -> int:
    rows = await db.execute_fetchall(
        "SELECT value FROM settings WHERE key = 'schema_version'"
    )
    if rows:
        return int(rows[0][0])
    return 0


async def _run_migrations(db):
    current = await _get_schema_version(db)
    for i, migration_sql in enumerate(MIGRATIONS, start=1):
        if i > current:
            await db.executescript(migration_sql)
            await db.execute(
                "INSERT OR REPLACE INTO settings (key, value) VALUES ('schema_version', ?)",
                (str(i),)
            )
            await db.commit()


async def init_db():
    DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
    db = await get_db()
    try:
        await db.executescript(SCHEMA)
        await db.commit()
        await _run_migrations(db)
    finally:
        await db.close()


# --- Users ---

async def create_user(db: aiosqlite.Connection, email: str, password_hash: str,
                      name: str, current_level: str = DEFAULT_LEVEL) -> str:
    user_id = new_id()
    now = utcnow()
    await db.execute(
        """INSERT INTO users (id, email, name, password_hash, current_level, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (user_id, email, name, password_hash, current_level, now, now)
    )
    return user_id


async def get_user_by_email(db: aiosqlite.Connection, email: str) -> dict | None:
    rows = await db.execute_fetchall(
        "SELECT id, email, name, password_hash, current_level FROM users WHERE email = ?",
        (email,)
    )
    return dict(rows[0]) if rows else None


async def get_user_profile(db: aiosqlite.Connection, user_id: str) -> UserProfile | None:
    rows = await db.execute_fetchall(
        "SELECT name, current_level FROM users WHERE id = ?", (user_id,)
    )
    return UserProfile(**dict(rows[0])) if rows else None


# --- Progress ---

_PROGRESS_COLUMNS = """id, user_id, item_type, item_id, mastery_level, review_count,
                       last_reviewed, created_at, updated_at"""


async def list_progress(db: aiosqlite.Connection, user_id: str) -> list[ProgressRecord]:
    rows = await db.execute_fetchall(
        f"SELECT {_PROGRESS_COLUMNS} FROM user_progress WHERE user_id = ?",
        (user_id,)
    )
    return [ProgressRecord(**dict(r)) for r in rows]


async def find_progress(db: aiosqlite.Connection, user_id: str,
                        item_type: str, item_id: str) -> ProgressRecord | None:
    rows = await db.execute_fetchall(
        f"""SELECT {_PROGRESS_COLUMNS} FROM user_progress
            WHERE user_id = ? AND item_type = ? AND item_id = ?""",
        (user_id, item_type, item_id)
    )
    return ProgressRecord(**dict(rows[0])) if rows else None


async def upsert_progress(db: aiosqlite.Connection, user_id: str, item_type: str,
                          item_id: str, now: str | None = None):
    """Create the progress row at review 1, or bump the existing one in place.

    Mastery only advances for kaiwa and never past MASTERY_CAP.
    """
    now = now or utcnow()
    await db.execute(
        f"""INSERT INTO user_progress (id, user_id, item_type, item_id, mastery_level,
                                       review_count, last_reviewed, created_at, updated_at)
            VALUES (?, ?, ?, ?, 1, 1, ?, ?, ?)
            ON CONFLICT(user_id, item_type, item_id) DO UPDATE SET
                review_count = review_count + 1,
                mastery_level = CASE WHEN item_type = 'kaiwa'
                                     THEN MIN(mastery_level + 1, {MASTERY_CAP})
                                     ELSE mastery_level END,
                last_reviewed = excluded.last_reviewed,
                updated_at = excluded.updated_at""",
        (new_id(), user_id, item_type, item_id, now, now, now)
    )


# --- Content ---

async def list_content(db: aiosqlite.Connection, collection: str,
                       filters: dict | None = None,
                       order_by: str = "created_at", descending: bool = True,
                       limit: int | None = None) -> list[dict]:
    """Equality-filtered read of a content collection. Rows come back as dicts."""
    if collection not in CONTENT_COLLECTIONS:
        raise ValueError(f"Unknown content collection: {collection}")
    if order_by not in ORDER_COLUMNS:
        raise ValueError(f"Cannot order by {order_by}")

    conditions = []
    params = []
    for column, value in (filters or {}).items():
        if column != "id" and column not in CONTENT_COLLECTIONS[collection]:
            raise ValueError(f"Cannot filter {collection} by {column}")
        conditions.append(f"{column} = ?")
        params.append(value)

    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    direction = "DESC" if descending else "ASC"
    sql = f"SELECT * FROM {collection} {where} ORDER BY {order_by} {direction}, rowid {direction}"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)

    rows = await db.execute_fetchall(sql, params)
    return [dict(r) for r in rows]


async def insert_vocabulary(db: aiosqlite.Connection, japanese: str, hiragana: str,
                            burmese: str, english: str, level: str, category: str = "",
                            example_sentence: str | None = None,
                            example_burmese: str | None = None) -> str:
    item_id = new_id()
    await db.execute(
        """INSERT INTO vocabulary (id, japanese, hiragana, burmese, english, level, category,
                                   example_sentence, example_burmese, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (item_id, japanese, hiragana, burmese, english, level, category,
         example_sentence, example_burmese, utcnow())
    )
    return item_id


async def insert_grammar_point(db: aiosqlite.Connection, pattern: str, meaning: str,
                               burmese_explanation: str, english_explanation: str,
                               level: str, examples: list | None = None) -> str:
    item_id = new_id()
    await db.execute(
        """INSERT INTO grammar_points (id, pattern, meaning, burmese_explanation,
                                       english_explanation, level, examples, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
        (item_id, pattern, meaning, burmese_explanation, english_explanation, level,
         json.dumps(examples or [], ensure_ascii=False), utcnow())
    )
    return item_id


async def insert_kaiwa_scenario(db: aiosqlite.Connection, title: str, title_burmese: str,
                                level: str, situation: str, dialogue: list | None = None,
                                key_phrases: list | None = None) -> str:
    item_id = new_id()
    await db.execute(
        """INSERT INTO kaiwa_scenarios (id, title, title_burmese, level, situation,
                                        dialogue, key_phrases, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
        (item_id, title, title_burmese, level, situation,
         json.dumps(dialogue or [], ensure_ascii=False),
         json.dumps(key_phrases or [], ensure_ascii=False), utcnow())
    )
    return item_id


async def count_content(db: aiosqlite.Connection, collection: str) -> int:
    if collection not in CONTENT_COLLECTIONS:
        raise ValueError(f"Unknown content collection: {collection}")
    rows = await db.execute_fetchall(f"SELECT COUNT(*) FROM {collection}")
    return rows[0][0]


# --- Chat ---

async def append_chat_message(db: aiosqlite.Connection, user_id: str, message: str,
                              role: str, language: str) -> ChatMessage:
    msg = ChatMessage(id=new_id(), user_id=user_id, message=message,
                      role=role, language=language, created_at=utcnow())
    await db.execute(
        """INSERT INTO ai_chat_history (id, user_id, message, role, language, created_at)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (msg.id, msg.user_id, msg.message, msg.role, msg.language, msg.created_at)
    )
    return msg


async def list_chat_history(db: aiosqlite.Connection, user_id: str,
                            limit: int = 50) -> list[ChatMessage]:
    """Most recent `limit` messages, oldest first."""
    rows = await db.execute_fetchall(
        """SELECT id, user_id, message, role, language, created_at FROM (
               SELECT id, user_id, message, role, language, created_at, rowid AS seq
               FROM ai_chat_history WHERE user_id = ?
               ORDER BY created_at DESC, seq DESC
               LIMIT ?
           ) ORDER BY created_at ASC, seq ASC""",
        (user_id, limit)
    )
    return [ChatMessage(**dict(r)) for r in rows]
