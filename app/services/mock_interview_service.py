"""
Mock Interview Service - streamed interviewer turns and final feedback.

SSE FRAMES (one JSON object per "data:" line):
    {"type": "start", "interview_id": ...}
    {"type": "content", "content": <delta>}        one per token chunk
    {"type": "complete", "message": ..., "questions_asked": n}
    {"type": "error", "message": ...}

The assistant text is accumulated while streaming and appended to the
stored transcript when the stream ends. A stream that breaks part-way
keeps whatever text arrived before the break.
"""

import itertools
import json
from typing import Iterator, List

from loguru import logger
from sqlalchemy.orm import Session

from app.db.postgres import get_db_session
from app.services.ai_client import AIGatewayClient, AIServiceError
from app.services.ai_parsing_service import validate_feedback
from app.services.records_service import MOCK_INTERVIEWS, utc_now


def sse_event(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def count_questions(messages: List[dict]) -> int:
    """Every interviewer turn counts as one question."""
    return sum(1 for message in messages if message.get("role") == "assistant")


def transcript(messages: List[dict]) -> List[dict]:
    """Messages in the shape the gateway expects."""
    return [{"role": m["role"], "content": m["content"]} for m in messages]


def open_stream(ai: AIGatewayClient, interview: dict, messages: List[dict], action: str) -> Iterator[str]:
    """
    Start the interviewer stream and pull its first delta, so a rate
    limit or credit error is raised before any response is sent.
    """
    deltas = ai.stream_interview(
        transcript(messages),
        interview_type=interview["interview_type"],
        target_role=interview.get("target_role"),
        difficulty=interview["difficulty"],
        action=action
    )
    first = next(deltas, None)
    return itertools.chain([first] if first else [], deltas)


def save_reply(user_id: str, interview_id: str, messages: List[dict], reply: str) -> int:
    """Append the interviewer reply and return the question count."""
    if not reply:
        return count_questions(messages)
    messages = messages + [{"role": "assistant", "content": reply}]
    questions_asked = count_questions(messages)
    with get_db_session() as db:
        MOCK_INTERVIEWS.update(db, user_id, interview_id, {
            "messages": messages,
            "questions_asked": questions_asked
        })
    return questions_asked


def stream_turn(user_id: str, interview_id: str, messages: List[dict], deltas: Iterator[str]) -> Iterator[str]:
    """
    Relay deltas as SSE frames and persist the accumulated reply.
    Runs after the request's dependencies have closed, so it opens its
    own database session.
    """
    yield sse_event({"type": "start", "interview_id": interview_id})

    parts: List[str] = []
    error = None
    try:
        for delta in deltas:
            parts.append(delta)
            yield sse_event({"type": "content", "content": delta})
    except AIServiceError as e:
        error = e.message
    except Exception as e:
        logger.error("Interview {} stream failed: {}", interview_id, e)
        error = "The interviewer stopped responding. Please try again."
    finally:
        reply = "".join(parts)
        questions_asked = save_reply(user_id, interview_id, messages, reply)

    if error:
        yield sse_event({"type": "error", "message": error})
    else:
        yield sse_event({"type": "complete", "message": reply, "questions_asked": questions_asked})


def finish_interview(db: Session, user_id: str, interview: dict, ai: AIGatewayClient) -> dict:
    """
    One non-streaming feedback call, then mark the interview completed.
    Unparsable feedback is stored as a placeholder.
    """
    raw = ai.interview_feedback(transcript(interview["messages"]), interview["interview_type"])
    feedback = validate_feedback(raw)

    updated = MOCK_INTERVIEWS.update(db, user_id, interview["id"], {
        "feedback": feedback,
        "overall_rating": feedback["overallRating"],
        "status": "completed",
        "completed_at": utc_now()
    })
    logger.info("Mock interview {} completed, rating {}", interview["id"], feedback["overallRating"])
    return updated
