PROFILES_SCHEMA = """
CREATE TABLE IF NOT EXISTS profiles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    color TEXT,
    active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

DAILY_SALES_SCHEMA = """
CREATE TABLE IF NOT EXISTS daily_sales (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    profile_id INTEGER NOT NULL REFERENCES profiles(id),
    amount TEXT NOT NULL DEFAULT '0',
    notes TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    UNIQUE(date, profile_id)
);
"""

DAILY_SALES_INDEX = """
CREATE INDEX IF NOT EXISTS idx_daily_sales_date ON daily_sales(date);
"""

SETTINGS_SCHEMA = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

USERS_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT UNIQUE NOT NULL,
    password TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

ALL_SCHEMAS = (
    PROFILES_SCHEMA,
    DAILY_SALES_SCHEMA,
    DAILY_SALES_INDEX,
    SETTINGS_SCHEMA,
    USERS_SCHEMA,
)

DEFAULT_PROFILES = (
    ("@judourado.shop", "#FE2C55"),
    ("@mariadourado.shop", "#25F4EE"),
)

MONTHLY_TARGET_KEY = "monthly_target"
