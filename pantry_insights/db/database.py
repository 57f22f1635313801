"""SQLite database connection management and schema initialization.

Provides a single-file database at ~/.pantry_insights/pantry_insights.db.
Every public function that needs a connection should call get_connection(),
use it, and close it in a finally block.
"""

import os
import sqlite3
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path

_db_path_override: ContextVar["Path | None"] = ContextVar("_db_path_override", default=None)


@contextmanager
def override_db_path(path: "Path"):
    """Context manager to override the DB path for the current async task/thread.

    Used by demo routes to serve reads from the demo DB without affecting
    other concurrent requests.  The override follows work handed to
    asyncio.to_thread(), which copies the current context.

    Example:
        with override_db_path(DEMO_DB_PATH):
            items = inventory_core.list_inventory()
    """
    token = _db_path_override.set(path)
    try:
        yield
    finally:
        _db_path_override.reset(token)


def get_db_path() -> Path:
    """Return the active DB path.

    Priority order:
    1. ContextVar override (used by demo routes per-request)
    2. DB_PATH environment variable (used by Docker / local dev / tests)
    3. Default ~/.pantry_insights/pantry_insights.db
    """
    override = _db_path_override.get()
    if override is not None:
        return override
    env_url = os.environ.get("DB_PATH")
    if env_url:
        p = Path(env_url)
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    db_dir = Path.home() / ".pantry_insights"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "pantry_insights.db"


def get_connection(db_path: Path = None) -> sqlite3.Connection:
    """Return a new SQLite connection with Row factory and foreign keys enabled.

    Callers are responsible for closing the connection when done.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: Path = None) -> None:
    """Create all tables if they don't already exist.

    Called once at application startup from main.py.
    Tables: users, recipes, recipe_ingredients, recipe_steps, inventory, settings.
    """
    conn = get_connection(db_path)
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS users (
                id           TEXT PRIMARY KEY,
                display_name TEXT NOT NULL,
                role         TEXT,
                created_at   TEXT DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS recipes (
                id           TEXT PRIMARY KEY,
                owner_id     TEXT,
                title        TEXT NOT NULL,
                meal_type    TEXT,
                cuisine_type TEXT,
                prep_time    REAL,
                difficulty   TEXT,
                servings     REAL,
                chef         TEXT,
                created_at   TEXT DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS recipe_ingredients (
                id        INTEGER PRIMARY KEY AUTOINCREMENT,
                recipe_id TEXT NOT NULL REFERENCES recipes(id) ON DELETE CASCADE,
                name      TEXT NOT NULL,
                quantity  REAL,
                unit      TEXT
            );

            CREATE TABLE IF NOT EXISTS recipe_steps (
                id        INTEGER PRIMARY KEY AUTOINCREMENT,
                recipe_id TEXT NOT NULL REFERENCES recipes(id) ON DELETE CASCADE,
                position  INTEGER NOT NULL,
                text      TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS inventory (
                id              TEXT PRIMARY KEY,
                owner_id        TEXT,
                ingredient_name TEXT NOT NULL,
                quantity        REAL DEFAULT 0,
                unit            TEXT,
                category        TEXT,
                purchase_date   TEXT,
                expiration_date TEXT,
                location        TEXT,
                cost            REAL,
                created_at      TEXT DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS settings (
                key   TEXT PRIMARY KEY,
                value TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_recipes_owner ON recipes(owner_id);
            CREATE INDEX IF NOT EXISTS idx_inventory_owner ON inventory(owner_id);
            CREATE INDEX IF NOT EXISTS idx_ingredients_recipe ON recipe_ingredients(recipe_id);
        """)
        conn.commit()
    finally:
        conn.close()
