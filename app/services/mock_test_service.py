"""
Mock Test Service - timed multiple choice sessions.

LIFECYCLE:
    POST   → questions generated by the AI gateway, validated, persisted
             (status in_progress, answers all "", max_time = N × 60 s)
    answer → selection stored at its index
    submit → score = correct / total × 100 (2 decimals), status completed

The countdown runs on the server clock from created_at. A session whose
time has run out is submitted with the answers recorded so far the next
time it is read or answered.

Correct answers and explanations stay hidden until the session completes.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.services.ai_client import AIGatewayClient, AIServiceError
from app.services.ai_parsing_service import parse_json_reply, validate_questions
from app.services.records_service import MOCK_TESTS, utc_now

settings = get_settings()


class MockTestClosed(Exception):
    """Raised when answering or submitting a completed session."""


# ============================================================
# PURE HELPERS
# ============================================================

def score_answers(questions: List[dict], answers: List[str]) -> Tuple[int, float]:
    """Return (correct count, percentage rounded to 2 decimals)."""
    total = len(questions)
    if total == 0:
        return 0, 0.0
    correct = sum(
        1 for index, question in enumerate(questions)
        if index < len(answers) and answers[index] == question.get("correctAnswer")
    )
    return correct, round(correct / total * 100, 2)


def elapsed_seconds(test: dict, now: datetime) -> int:
    return max(0, int((now - test["created_at"]).total_seconds()))


def remaining_seconds(test: dict, now: datetime) -> int:
    if test["status"] != "in_progress":
        return 0
    return max(0, test["max_time"] - elapsed_seconds(test, now))


def normalize_answers(answers: Optional[List[str]], total: int) -> List[str]:
    """Pad or truncate to one entry per question."""
    answers = list(answers or [])[:total]
    return answers + [""] * (total - len(answers))


def public_view(test: dict, now: datetime) -> dict:
    """Response shape: remaining time added, answers hidden while in progress."""
    view = dict(test)
    view["time_remaining"] = remaining_seconds(test, now)
    if test["status"] == "in_progress":
        view["questions"] = [
            {"id": q["id"], "question": q["question"], "options": q["options"]}
            for q in test["questions"]
        ]
    return view


# ============================================================
# SESSION OPERATIONS
# ============================================================

def generate_questions(ai: AIGatewayClient, category: str, subcategory: Optional[str],
                       difficulty: str, num_questions: int) -> List[dict]:
    """
    Ask the gateway for questions and keep the well-formed ones.
    Raises AIServiceError(502) when nothing usable comes back.
    """
    raw = ai.generate_questions(category, subcategory, difficulty, num_questions)
    data = parse_json_reply(raw)
    if data is None:
        logger.warning("Unparsable question set from AI: {!r}", raw[:200])
        raise AIServiceError(502, "Failed to parse questions from AI response")

    questions = validate_questions(data, limit=num_questions)
    if not questions:
        raise AIServiceError(502, "AI returned no usable questions")
    return questions


def create_test(db: Session, user_id: str, category: str, subcategory: Optional[str],
                difficulty: str, questions: List[dict]) -> dict:
    total = len(questions)
    test = MOCK_TESTS.create(db, user_id, {
        "category": category,
        "subcategory": subcategory,
        "difficulty": difficulty,
        "total_questions": total,
        "correct_answers": 0,
        "max_time": total * settings.seconds_per_question,
        "questions": questions,
        "answers": [""] * total,
        "status": "in_progress",
        "score": 0
    })
    logger.info("Mock test {} started: {} {} question(s)", test["id"], total, category)
    return test


def submit_test(db: Session, user_id: str, test: dict, answers: Optional[List[str]] = None,
                now: datetime = None) -> dict:
    """Score and complete an in-progress session."""
    if test["status"] != "in_progress":
        raise MockTestClosed(test["id"])

    now = now or utc_now()
    final_answers = normalize_answers(answers if answers is not None else test["answers"],
                                      test["total_questions"])
    correct, score = score_answers(test["questions"], final_answers)

    updated = MOCK_TESTS.update(db, user_id, test["id"], {
        "answers": final_answers,
        "correct_answers": correct,
        "score": score,
        "time_taken": min(elapsed_seconds(test, now), test["max_time"]),
        "status": "completed",
        "completed_at": now
    })
    logger.info("Mock test {} submitted: {}/{} ({}%)", test["id"], correct, test["total_questions"], score)
    return updated


def refresh_expired(db: Session, user_id: str, test: dict, now: datetime = None) -> dict:
    """Auto-submit a session whose countdown reached zero."""
    now = now or utc_now()
    if test["status"] == "in_progress" and remaining_seconds(test, now) == 0:
        logger.info("Mock test {} ran out of time, auto-submitting", test["id"])
        return submit_test(db, user_id, test, now=now)
    return test


def record_answer(db: Session, user_id: str, test: dict, index: int, answer: str,
                  now: datetime = None) -> dict:
    """
    Store one selection. The session is refreshed first so an expired
    test is submitted instead of accepting a late answer.
    """
    test = refresh_expired(db, user_id, test, now)
    if test["status"] != "in_progress":
        raise MockTestClosed(test["id"])

    answers = normalize_answers(test["answers"], test["total_questions"])
    answers[index] = answer
    return MOCK_TESTS.update(db, user_id, test["id"], {"answers": answers})
