"""
AI Parsing Service - sanitize structured AI output before it is stored.

PURPOSE:
The gateway returns free-form JSON. Nothing reaches the database until it
has been reshaped here:
1. Mock test questions (drop malformed questions, renumber the rest)
2. Mock interview feedback (placeholder when unparsable)
3. Resume analysis (placeholder carrying the raw reply when unparsable)

AI OUTPUT → VALIDATED → STORED
"""

import json
from typing import Any, List, Optional

from loguru import logger

ANSWER_KEYS = ("A", "B", "C", "D")


# ============================================================
# SMALL COERCION HELPERS
# ============================================================

def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [_text(v) for v in value if _text(v)]


def _number(value: Any, low: float, high: float) -> float:
    try:
        number = float(value)
    except (ValueError, TypeError):
        return low
    return min(high, max(low, number))


def parse_json_reply(raw: str) -> Optional[dict]:
    """
    Strip markdown fences / surrounding prose and parse an object.
    Returns None when nothing parsable is found.
    """
    text = raw.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    text = text.strip()

    for candidate in (text, text[text.find("{"):text.rfind("}") + 1]):
        if not candidate:
            continue
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    return None


# ============================================================
# MOCK TEST QUESTIONS
# ============================================================

def validate_questions(data: Any, limit: Optional[int] = None) -> List[dict]:
    """
    Validate and sanitize a generated question set.

    Keeps only questions with non-empty text, all four options and a
    correct answer among A-D. Ids are renumbered 1..n in order.
    """
    raw_questions = data.get("questions", []) if isinstance(data, dict) else data
    if not isinstance(raw_questions, list):
        return []

    validated = []
    for item in raw_questions:
        if not isinstance(item, dict):
            continue
        question = _text(item.get("question"))
        options = item.get("options")
        answer = _text(item.get("correctAnswer")).upper()
        if not question or not isinstance(options, dict) or answer not in ANSWER_KEYS:
            continue
        cleaned_options = {key: _text(options.get(key)) for key in ANSWER_KEYS}
        if not all(cleaned_options.values()):
            continue
        validated.append({
            "id": len(validated) + 1,
            "question": question,
            "options": cleaned_options,
            "correctAnswer": answer,
            "explanation": _text(item.get("explanation"))
        })
        if limit and len(validated) >= limit:
            break

    dropped = len(raw_questions) - len(validated)
    if dropped > 0:
        logger.warning("Dropped {} malformed question(s) from AI output", dropped)
    return validated


# ============================================================
# MOCK INTERVIEW FEEDBACK
# ============================================================

def placeholder_feedback(raw: str) -> dict:
    return {
        "overallRating": 0,
        "strengths": [],
        "improvements": [],
        "questionFeedback": [],
        "tips": [],
        "summary": "Unable to parse feedback. Please try again.",
        "rawResponse": raw
    }


def validate_feedback(raw: str) -> dict:
    """Parse interview feedback; ratings are clamped to 0..10."""
    data = parse_json_reply(raw)
    if data is None:
        logger.warning("Unparsable interview feedback from AI")
        return placeholder_feedback(raw)

    items = data.get("questionFeedback")
    if not isinstance(items, list):
        items = []

    question_feedback = []
    for item in items:
        if isinstance(item, dict):
            question_feedback.append({
                "question": _text(item.get("question")),
                "rating": _number(item.get("rating"), 0, 10),
                "feedback": _text(item.get("feedback"))
            })

    return {
        "overallRating": round(_number(data.get("overallRating"), 0, 10), 1),
        "strengths": _text_list(data.get("strengths")),
        "improvements": _text_list(data.get("improvements")),
        "questionFeedback": question_feedback,
        "tips": _text_list(data.get("tips")),
        "summary": _text(data.get("summary"))
    }


# ============================================================
# RESUME ANALYSIS
# ============================================================

def placeholder_analysis(raw: str) -> dict:
    return {
        "score": 0,
        "summary": "Unable to parse analysis. Please try again.",
        "strengths": [],
        "improvements": [],
        "atsScore": 0,
        "atsNotes": "",
        "contentAnalysis": {
            "quantifiedAchievements": False,
            "actionOriented": False,
            "skillsHighlighted": False,
            "notes": ""
        },
        "formatNotes": "",
        "recommendations": [],
        "rawResponse": raw
    }


def validate_resume_analysis(raw: str) -> dict:
    """Parse a resume review; scores are clamped to 0..100."""
    data = parse_json_reply(raw)
    if data is None:
        logger.warning("Unparsable resume analysis from AI")
        return placeholder_analysis(raw)

    content = data.get("contentAnalysis")
    if not isinstance(content, dict):
        content = {}

    return {
        "score": int(_number(data.get("score"), 0, 100)),
        "summary": _text(data.get("summary")),
        "strengths": _text_list(data.get("strengths")),
        "improvements": _text_list(data.get("improvements")),
        "atsScore": int(_number(data.get("atsScore"), 0, 100)),
        "atsNotes": _text(data.get("atsNotes")),
        "contentAnalysis": {
            "quantifiedAchievements": bool(content.get("quantifiedAchievements")),
            "actionOriented": bool(content.get("actionOriented")),
            "skillsHighlighted": bool(content.get("skillsHighlighted")),
            "notes": _text(content.get("notes"))
        },
        "formatNotes": _text(data.get("formatNotes")),
        "recommendations": _text_list(data.get("recommendations"))
    }
