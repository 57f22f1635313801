"""User accounts — read access and seeding.

Analytics only needs the user count; ownership ids on recipes and
inventory are used as optional scope filters, never joined.
"""

from typing import Optional

from pantry_insights.db.database import get_connection
from pantry_insights.db.models import User
from pantry_insights.core.recipes import normalise_owner_id


def get_all() -> list[User]:
    """Return all users sorted by id."""
    conn = get_connection()
    try:
        rows = conn.execute("SELECT * FROM users ORDER BY id").fetchall()
        return [User(**dict(row)) for row in rows]
    finally:
        conn.close()


def get(user_id: str) -> Optional[User]:
    """Return a single user by ID, or None if not found."""
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT * FROM users WHERE id = ?", (normalise_owner_id(user_id),)
        ).fetchone()
        return User(**dict(row)) if row else None
    finally:
        conn.close()


def count_users() -> int:
    conn = get_connection()
    try:
        return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
    finally:
        conn.close()


def add(user: User) -> str:
    """Insert a new user and return its ID."""
    user_id = normalise_owner_id(user.id)
    conn = get_connection()
    try:
        conn.execute(
            """INSERT INTO users (id, display_name, role, created_at)
               VALUES (?, ?, ?, COALESCE(?, CURRENT_TIMESTAMP))""",
            (user_id, user.display_name, user.role, user.created_at),
        )
        conn.commit()
        return user_id
    finally:
        conn.close()
