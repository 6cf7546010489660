"""
Progress Service - in-memory aggregation over the caller's rows.

Every page reads one or two tables filtered by user id and derives its
numbers here:
- list filters ("all" or missing = no filter)
- per-skill learning progress
- coding stats and the practice streak
- upcoming interviews
- dashboard totals, weekly activity, application status distribution
- motivational quotes and weekly reflection prompts

Functions take plain row dicts and an explicit `today` so they can be
tested without a clock.
"""

import random
from collections import OrderedDict
from datetime import date, timedelta
from typing import Iterable, List, Dict, Optional, Any

from app.db.postgres import to_date


# ============================================================
# FILTERING
# ============================================================

def filter_records(records: Iterable[dict], **filters: Optional[str]) -> List[dict]:
    """
    Keep records matching every given field filter.
    A filter of None, "" or "all" is ignored; the rest are ANDed.

    Example:
        filter_records(apps, status="interview", job_type="all")
    """
    active = {field: value for field, value in filters.items() if value and value != "all"}
    return [
        record for record in records
        if all(str(record.get(field)) == value for field, value in active.items())
    ]


# ============================================================
# LEARNING GOALS
# ============================================================

def skill_progress(goals: Iterable[dict]) -> List[dict]:
    """
    Per-skill totals in first-seen order.
    percentage = round(completed / total * 100)
    """
    by_skill: "OrderedDict[str, Dict[str, int]]" = OrderedDict()
    for goal in goals:
        counts = by_skill.setdefault(goal["skill_name"], {"total": 0, "completed": 0})
        counts["total"] += 1
        if goal.get("status") == "completed":
            counts["completed"] += 1

    return [
        {
            "skill": skill,
            "total": counts["total"],
            "completed": counts["completed"],
            "percentage": round(counts["completed"] / counts["total"] * 100)
        }
        for skill, counts in by_skill.items()
    ]


# ============================================================
# CODING PRACTICE
# ============================================================

def calculate_streak(dates: Iterable[Any], today: date) -> int:
    """
    Consecutive calendar days with at least one entry, ending today or
    yesterday. A gap before yesterday resets the streak to 0.
    """
    practiced = {to_date(d) for d in dates if d}
    if today in practiced:
        day = today
    elif today - timedelta(days=1) in practiced:
        day = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while day in practiced:
        streak += 1
        day -= timedelta(days=1)
    return streak


def coding_stats(problems: List[dict], today: date) -> dict:
    solved = [p for p in problems if p["status"] == "solved"]
    return {
        "total": len(problems),
        "solved": len(solved),
        "revision": sum(1 for p in problems if p["status"] == "revision_needed"),
        "easy": sum(1 for p in solved if p["difficulty"] == "easy"),
        "medium": sum(1 for p in solved if p["difficulty"] == "medium"),
        "hard": sum(1 for p in solved if p["difficulty"] == "hard"),
        "current_streak": calculate_streak((p["date_practiced"] for p in problems), today)
    }


def weekly_activity(problems: Iterable[dict], today: date) -> List[dict]:
    """Problems logged per day for the last 7 days, oldest first."""
    days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
    counts = {day: 0 for day in days}
    for problem in problems:
        practiced = to_date(problem.get("date_practiced"))
        if practiced in counts:
            counts[practiced] += 1
    return [{"name": day.strftime("%a"), "date": day, "problems": counts[day]} for day in days]


# ============================================================
# APPLICATIONS
# ============================================================

STATUS_LABELS = OrderedDict([
    ("applied", "Applied"),
    ("oa", "OA"),
    ("interview", "Interview"),
    ("rejected", "Rejected"),
    ("selected", "Selected"),
])


def upcoming_interviews(applications: Iterable[dict], today: date, days: int = 7) -> List[dict]:
    """
    Applications in the interview stage whose interview falls strictly
    after today and strictly before today + `days`. Soonest first.
    """
    horizon = today + timedelta(days=days)
    upcoming = [
        app for app in applications
        if app["status"] == "interview"
        and app.get("interview_date")
        and today < to_date(app["interview_date"]) < horizon
    ]
    return sorted(upcoming, key=lambda app: to_date(app["interview_date"]))


def application_status_distribution(applications: Iterable[dict]) -> List[dict]:
    """Count per status, only statuses that occur."""
    counts = {status: 0 for status in STATUS_LABELS}
    for app in applications:
        if app["status"] in counts:
            counts[app["status"]] += 1
    return [
        {"status": status, "label": label, "value": counts[status]}
        for status, label in STATUS_LABELS.items()
        if counts[status] > 0
    ]


# ============================================================
# DASHBOARD
# ============================================================

def dashboard_stats(goals: List[dict], problems: List[dict], applications: List[dict], today: date) -> dict:
    return {
        "total_learning_goals": len(goals),
        "completed_skills": sum(1 for g in goals if g["status"] == "completed"),
        "problems_solved": sum(1 for p in problems if p["status"] == "solved"),
        "current_streak": calculate_streak((p["date_practiced"] for p in problems), today),
        "applications_sent": len(applications),
        "interviews_attended": sum(1 for a in applications if a["status"] in ("interview", "selected"))
    }


# ============================================================
# MOTIVATION
# ============================================================

MOTIVATIONAL_QUOTES = [
    {"quote": "Success is not final, failure is not fatal: it is the courage to continue that counts.", "author": "Winston Churchill"},
    {"quote": "The only way to do great work is to love what you do.", "author": "Steve Jobs"},
    {"quote": "Believe you can and you're halfway there.", "author": "Theodore Roosevelt"},
    {"quote": "Hard work beats talent when talent doesn't work hard.", "author": "Tim Notke"},
    {"quote": "Your limitation, it's only your imagination.", "author": "Unknown"},
    {"quote": "The future belongs to those who believe in the beauty of their dreams.", "author": "Eleanor Roosevelt"},
    {"quote": "It does not matter how slowly you go as long as you do not stop.", "author": "Confucius"},
    {"quote": "Success usually comes to those who are too busy to be looking for it.", "author": "Henry David Thoreau"},
]

REFLECTION_PROMPTS = [
    "What was your biggest learning this week?",
    "Which problem-solving approach worked well?",
    "What would you do differently?",
    "Which skill needs more focus next week?",
    "What achievement are you proud of?",
]


def pick_quote(rng: random.Random = None) -> dict:
    return (rng or random).choice(MOTIVATIONAL_QUOTES)


def pick_reflection_prompt(rng: random.Random = None) -> str:
    return (rng or random).choice(REFLECTION_PROMPTS)


# ============================================================
# PRACTICE SESSION HISTORY
# ============================================================

def mock_test_stats(tests: Iterable[dict]) -> dict:
    """
    Totals over completed mock tests.
    average_score = round(mean score); time_spent_minutes = round(total seconds / 60)
    """
    completed = [t for t in tests if t["status"] == "completed"]
    if not completed:
        return {"tests_taken": 0, "average_score": 0, "correct_answers": 0, "time_spent_minutes": 0}
    return {
        "tests_taken": len(completed),
        "average_score": round(sum(t["score"] for t in completed) / len(completed)),
        "correct_answers": sum(t["correct_answers"] for t in completed),
        "time_spent_minutes": round(sum(t.get("time_taken") or 0 for t in completed) / 60)
    }


def mock_interview_stats(interviews: Iterable[dict]) -> dict:
    """
    Counts by type and the mean rating of rated interviews (1 decimal).
    average_rating is None until an interview has a non-zero rating.
    """
    interviews = list(interviews)
    ratings = [i["overall_rating"] for i in interviews if i.get("overall_rating")]
    technical = sum(1 for i in interviews if i["interview_type"] == "technical")
    return {
        "interviews": len(interviews),
        "average_rating": round(sum(ratings) / len(ratings), 1) if ratings else None,
        "technical": technical,
        "non_technical": len(interviews) - technical
    }
