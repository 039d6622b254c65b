# SQL schema for the Daily Word database

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Learners (one per Telegram chat)
CREATE TABLE IF NOT EXISTS learners (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    chat_id TEXT UNIQUE NOT NULL,
    words_per_day INTEGER NOT NULL DEFAULT 1 CHECK(words_per_day BETWEEN 1 AND 3),
    created_at TEXT NOT NULL
);

-- Learning units (vocabulary words)
CREATE TABLE IF NOT EXISTS learning_units (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word TEXT NOT NULL,
    part_of_speech TEXT NOT NULL DEFAULT '',
    definition TEXT NOT NULL DEFAULT '',
    example TEXT NOT NULL DEFAULT '',
    source TEXT NOT NULL DEFAULT 'local',
    created_at TEXT NOT NULL
);

-- Scheduled items: a unit served to a learner, with its review schedule
CREATE TABLE IF NOT EXISTS scheduled_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    learner_id INTEGER NOT NULL,
    unit_id INTEGER NOT NULL,
    served_at TEXT NOT NULL,
    next_review TEXT NOT NULL,
    interval INTEGER NOT NULL DEFAULT 2,
    last_response TEXT,
    correct_count INTEGER NOT NULL DEFAULT 0 CHECK(correct_count >= 0),
    served_index INTEGER NOT NULL DEFAULT 1
);

-- Engagement streaks
CREATE TABLE IF NOT EXISTS learner_streaks (
    learner_id INTEGER PRIMARY KEY,
    streak INTEGER NOT NULL DEFAULT 0 CHECK(streak >= 0),
    last_completed TEXT
);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_scheduled_items_next_review ON scheduled_items (next_review);
CREATE INDEX IF NOT EXISTS idx_scheduled_items_learner ON scheduled_items (learner_id, served_at);
CREATE INDEX IF NOT EXISTS idx_learning_units_word ON learning_units (word COLLATE NOCASE);
"""
