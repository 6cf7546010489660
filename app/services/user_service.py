"""
User Service - accounts table access.

Emails are stored lowercased, so lookups are case-insensitive.
Registration writes the user and its empty profile in one transaction.
"""

from typing import Optional

from loguru import logger
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.db.postgres import to_datetime
from app.services.records_service import PROFILES, new_id, utc_now

USER_COLUMNS = "id, email, password_hash, is_active, created_at"


def _row_to_user(row) -> Optional[dict]:
    if row is None:
        return None
    user = dict(row._mapping)
    user["is_active"] = bool(user["is_active"])
    user["created_at"] = to_datetime(user["created_at"])
    return user


def get_user(db: Session, user_id: str) -> Optional[dict]:
    row = db.execute(
        text(f"SELECT {USER_COLUMNS} FROM users WHERE id = :id"),
        {"id": user_id}
    ).fetchone()
    return _row_to_user(row)


def get_user_by_email(db: Session, email: str) -> Optional[dict]:
    row = db.execute(
        text(f"SELECT {USER_COLUMNS} FROM users WHERE email = :email"),
        {"email": email.strip().lower()}
    ).fetchone()
    return _row_to_user(row)


def create_user(db: Session, email: str, password: str, full_name: Optional[str] = None) -> str:
    """Insert the account plus its profile row; returns the new user id."""
    user_id = new_id()
    db.execute(
        text("""
            INSERT INTO users (id, email, password_hash, is_active, created_at)
            VALUES (:id, :email, :password_hash, :is_active, :created_at)
        """),
        {
            "id": user_id,
            "email": email.strip().lower(),
            "password_hash": hash_password(password),
            "is_active": True,
            "created_at": utc_now().isoformat()
        }
    )
    PROFILES.create(db, user_id, {"full_name": full_name})
    logger.info("Registered user {}", user_id)
    return user_id
