"""
Mock Interview Routes

POST /mock-interviews - Start an interview, stream the greeting (SSE)
POST /mock-interviews/{interview_id}/messages - Answer, stream the next question (SSE)
POST /mock-interviews/{interview_id}/end - End the interview and get AI feedback
GET /mock-interviews - Interview history (latest 10)
GET /mock-interviews/stats - Interview count, average rating, technical vs HR/behavioral
GET /mock-interviews/{interview_id} - Get interview with transcript
DELETE /mock-interviews/{interview_id} - Delete interview
"""

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import StreamingResponse
from typing import List

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.ai_client import AIGatewayClient, get_ai_client
from app.services.records_service import MOCK_INTERVIEWS
from app.services.progress_service import mock_interview_stats
from app.services.mock_interview_service import open_stream, stream_turn, finish_interview
from app.schemas.schemas import (
    MockInterviewCreate, MockInterviewResponse, MockInterviewStats, InterviewReply, MessageResponse
)

router = APIRouter(prefix="/mock-interviews", tags=["Mock Interviews"])

HISTORY_LIMIT = 10

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no"
}


def _get_interview_or_404(db, user_id: str, interview_id: str) -> dict:
    interview = MOCK_INTERVIEWS.get(db, user_id, interview_id)
    if not interview:
        raise HTTPException(status_code=404, detail="Mock interview not found")
    return interview


@router.post("")
def start_interview(
    request: MockInterviewCreate,
    user: dict = Depends(get_current_user),
    ai: AIGatewayClient = Depends(get_ai_client)
):
    """
    Create the interview and stream the interviewer's greeting.
    Gateway errors before the first token are returned as plain HTTP errors.
    """
    setup = {
        "interview_type": request.interview_type.value,
        "target_role": request.target_role,
        "difficulty": request.difficulty.value
    }
    deltas = open_stream(ai, setup, [], action="start")

    with get_db_session() as db:
        interview = MOCK_INTERVIEWS.create(db, user["user_id"], {
            **setup,
            "messages": [],
            "questions_asked": 0,
            "status": "in_progress"
        })

    return StreamingResponse(
        stream_turn(user["user_id"], interview["id"], [], deltas),
        media_type="text/event-stream",
        headers=SSE_HEADERS
    )


@router.post("/{interview_id}/messages")
def send_answer(
    interview_id: str,
    reply: InterviewReply,
    user: dict = Depends(get_current_user),
    ai: AIGatewayClient = Depends(get_ai_client)
):
    """Append the candidate's answer and stream the interviewer's response."""
    with get_db_session() as db:
        interview = _get_interview_or_404(db, user["user_id"], interview_id)
    if interview["status"] != "in_progress":
        raise HTTPException(status_code=409, detail="Mock interview already ended")

    messages = interview["messages"] + [{"role": "user", "content": reply.content}]
    deltas = open_stream(ai, interview, messages, action="continue")

    with get_db_session() as db:
        MOCK_INTERVIEWS.update(db, user["user_id"], interview_id, {"messages": messages})

    return StreamingResponse(
        stream_turn(user["user_id"], interview_id, messages, deltas),
        media_type="text/event-stream",
        headers=SSE_HEADERS
    )


@router.post("/{interview_id}/end", response_model=MockInterviewResponse)
def end_interview(
    interview_id: str,
    user: dict = Depends(get_current_user),
    ai: AIGatewayClient = Depends(get_ai_client)
):
    """Request feedback on the transcript and mark the interview completed."""
    with get_db_session() as db:
        interview = _get_interview_or_404(db, user["user_id"], interview_id)
        if interview["status"] != "in_progress":
            raise HTTPException(status_code=409, detail="Mock interview already ended")
        if not interview["messages"]:
            raise HTTPException(status_code=400, detail="Interview has no messages to review")
        return finish_interview(db, user["user_id"], interview, ai)


@router.get("", response_model=List[MockInterviewResponse])
async def list_interviews(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return MOCK_INTERVIEWS.list(db, user["user_id"], limit=HISTORY_LIMIT)


@router.get("/stats", response_model=MockInterviewStats)
async def get_interview_stats(user: dict = Depends(get_current_user)):
    """Counts by type and average rating over every interview."""
    with get_db_session() as db:
        interviews = MOCK_INTERVIEWS.list(db, user["user_id"])
    return mock_interview_stats(interviews)


@router.get("/{interview_id}", response_model=MockInterviewResponse)
async def get_interview(interview_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return _get_interview_or_404(db, user["user_id"], interview_id)


@router.delete("/{interview_id}", response_model=MessageResponse)
async def delete_interview(interview_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        deleted = MOCK_INTERVIEWS.delete(db, user["user_id"], interview_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Mock interview not found")
    return MessageResponse(message="Mock interview deleted")
