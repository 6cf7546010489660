"""
Records Service - ownership-scoped access to the tracker tables.

Every statement built here carries `user_id = :user_id`. A row owned by
someone else is indistinguishable from a missing row: reads return None,
updates and deletes affect nothing, and the routes answer 404.

Column names are whitelisted per table before they are interpolated into
SQL; values always travel as bound parameters.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Any

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.db.postgres import dump_json, load_json, to_date, to_datetime

TIMESTAMP_COLUMNS = ("created_at", "updated_at", "completed_at")


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OwnedTable:
    """
    One user-owned table.

    Args:
        name: table name
        columns: writable columns (id/user_id/timestamps excluded)
        json_columns: column -> default returned when NULL
        date_columns: columns decoded to datetime.date
        order_by: ORDER BY clause for list()
        has_updated_at: refresh updated_at on every update
    """

    def __init__(
        self,
        name: str,
        columns: Iterable[str],
        json_columns: Dict[str, Any] = None,
        date_columns: Iterable[str] = (),
        order_by: str = "created_at DESC",
        has_updated_at: bool = True
    ):
        self.name = name
        self.columns = tuple(columns)
        self.json_columns = json_columns or {}
        self.date_columns = tuple(date_columns)
        self.order_by = order_by
        self.has_updated_at = has_updated_at

    # ---------- row codecs ----------

    def _encode(self, data: dict) -> dict:
        values = {}
        for column, value in data.items():
            if column not in self.columns:
                continue
            if column in self.json_columns:
                value = dump_json(value)
            elif hasattr(value, "isoformat"):
                value = value.isoformat()
            values[column] = value
        return values

    def decode(self, row: dict) -> dict:
        record = dict(row)
        for column, default in self.json_columns.items():
            if column in record:
                record[column] = load_json(record[column], default)
        for column in self.date_columns:
            if column in record:
                record[column] = to_date(record[column])
        for column in TIMESTAMP_COLUMNS:
            if column in record:
                record[column] = to_datetime(record[column])
        return record

    # ---------- reads ----------

    def list(self, db: Session, user_id: str, limit: int = None, **equals) -> List[dict]:
        """Rows owned by user_id, optionally narrowed by column equality."""
        clauses = ["user_id = :user_id"]
        params = {"user_id": user_id}
        for column, value in equals.items():
            if column not in self.columns:
                raise ValueError(f"Unknown column {column!r} for {self.name}")
            clauses.append(f"{column} = :{column}")
            params[column] = value

        sql = f"SELECT * FROM {self.name} WHERE {' AND '.join(clauses)} ORDER BY {self.order_by}"
        if limit:
            sql += " LIMIT :limit"
            params["limit"] = limit

        rows = db.execute(text(sql), params).mappings().all()
        return [self.decode(row) for row in rows]

    def get(self, db: Session, user_id: str, record_id: str) -> Optional[dict]:
        row = db.execute(
            text(f"SELECT * FROM {self.name} WHERE id = :id AND user_id = :user_id"),
            {"id": record_id, "user_id": user_id}
        ).mappings().first()
        return self.decode(row) if row else None

    def get_for_user(self, db: Session, user_id: str) -> Optional[dict]:
        """Single-row-per-user tables (roadmap, profiles)."""
        row = db.execute(
            text(f"SELECT * FROM {self.name} WHERE user_id = :user_id"),
            {"user_id": user_id}
        ).mappings().first()
        return self.decode(row) if row else None

    # ---------- writes ----------

    def create(self, db: Session, user_id: str, data: dict) -> dict:
        values = self._encode(data)
        now = utc_now().isoformat()
        values.update({"id": new_id(), "user_id": user_id, "created_at": now})
        if self.has_updated_at:
            values["updated_at"] = now

        columns = ", ".join(values)
        placeholders = ", ".join(f":{column}" for column in values)
        db.execute(text(f"INSERT INTO {self.name} ({columns}) VALUES ({placeholders})"), values)
        return self.get(db, user_id, values["id"])

    def update(self, db: Session, user_id: str, record_id: str, data: dict) -> Optional[dict]:
        """Update only the provided columns. Returns None when not owned."""
        values = self._encode(data)
        if self.has_updated_at:
            values["updated_at"] = utc_now().isoformat()
        if not values:
            return self.get(db, user_id, record_id)

        assignments = ", ".join(f"{column} = :{column}" for column in values)
        result = db.execute(
            text(f"UPDATE {self.name} SET {assignments} WHERE id = :id AND user_id = :user_id"),
            {**values, "id": record_id, "user_id": user_id}
        )
        if result.rowcount == 0:
            return None
        return self.get(db, user_id, record_id)

    def delete(self, db: Session, user_id: str, record_id: str) -> bool:
        result = db.execute(
            text(f"DELETE FROM {self.name} WHERE id = :id AND user_id = :user_id"),
            {"id": record_id, "user_id": user_id}
        )
        return result.rowcount > 0


# ============================================================
# TABLES
# ============================================================

PROFILES = OwnedTable(
    "profiles",
    columns=("full_name", "avatar_url")
)

LEARNING_GOALS = OwnedTable(
    "learning_goals",
    columns=("skill_name", "topic_name", "status", "start_date", "target_date", "resource_links", "notes"),
    json_columns={"resource_links": []},
    date_columns=("start_date", "target_date")
)

CODING_PROBLEMS = OwnedTable(
    "coding_problems",
    columns=("platform", "problem_name", "difficulty", "status", "date_practiced", "notes"),
    date_columns=("date_practiced",),
    order_by="date_practiced DESC, created_at DESC"
)

RESUMES = OwnedTable(
    "resumes",
    columns=("resume_name", "version_number", "target_role", "file_url", "notes", "checklist"),
    json_columns={"checklist": {}},
    order_by="version_number DESC, created_at DESC"
)

APPLICATIONS = OwnedTable(
    "applications",
    columns=("company_name", "role", "job_type", "status", "application_link",
             "apply_date", "interview_date", "notes"),
    date_columns=("apply_date", "interview_date"),
    order_by="apply_date DESC, created_at DESC"
)

ROADMAP = OwnedTable(
    "roadmap",
    columns=("target_role", "company_type", "monthly_goals", "skill_priorities", "weaknesses"),
    json_columns={"monthly_goals": [], "skill_priorities": []}
)

REMINDERS = OwnedTable(
    "reminders",
    columns=("reminder_type", "message", "is_active"),
    order_by="created_at ASC"
)

MOCK_TESTS = OwnedTable(
    "mock_tests",
    columns=("category", "subcategory", "difficulty", "total_questions", "correct_answers",
             "time_taken", "max_time", "questions", "answers", "status", "score", "completed_at"),
    json_columns={"questions": [], "answers": []},
    has_updated_at=False
)

MOCK_INTERVIEWS = OwnedTable(
    "mock_interviews",
    columns=("interview_type", "target_role", "difficulty", "messages", "questions_asked",
             "feedback", "overall_rating", "status", "completed_at"),
    json_columns={"messages": [], "feedback": None},
    has_updated_at=False
)
