"""
Mock Test Routes

POST /mock-tests - Start a test (AI-generated questions)
GET /mock-tests - Completed test history (latest 10)
GET /mock-tests/stats - Tests taken, average score, correct answers, time spent
GET /mock-tests/{test_id} - Get test (auto-submits when time is up)
PUT /mock-tests/{test_id}/answers/{index} - Select an answer
POST /mock-tests/{test_id}/submit - Submit and score
DELETE /mock-tests/{test_id} - Delete test
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List, Optional

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.ai_client import AIGatewayClient, get_ai_client
from app.services.records_service import MOCK_TESTS, utc_now
from app.services.progress_service import mock_test_stats
from app.services.mock_test_service import (
    MockTestClosed, generate_questions, create_test, submit_test,
    refresh_expired, record_answer, public_view
)
from app.schemas.schemas import (
    MockTestCreate, MockTestResponse, MockTestStats, AnswerUpdate, MockTestSubmit, MessageResponse
)

router = APIRouter(prefix="/mock-tests", tags=["Mock Tests"])

HISTORY_LIMIT = 10


def _get_test_or_404(db, user_id: str, test_id: str) -> dict:
    test = MOCK_TESTS.get(db, user_id, test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Mock test not found")
    return test


@router.post("", response_model=MockTestResponse, status_code=201)
def start_test(
    request: MockTestCreate,
    user: dict = Depends(get_current_user),
    ai: AIGatewayClient = Depends(get_ai_client)
):
    """
    Generate questions and start the countdown.
    Nothing is stored when generation fails.
    """
    subcategory = request.subcategory.value if request.subcategory else None
    questions = generate_questions(
        ai, request.category.value, subcategory, request.difficulty.value, request.num_questions
    )
    with get_db_session() as db:
        test = create_test(
            db, user["user_id"], request.category.value, subcategory, request.difficulty.value, questions
        )
    return public_view(test, utc_now())


@router.get("", response_model=List[MockTestResponse])
async def list_tests(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        tests = MOCK_TESTS.list(db, user["user_id"], limit=HISTORY_LIMIT, status="completed")
    now = utc_now()
    return [public_view(test, now) for test in tests]


@router.get("/stats", response_model=MockTestStats)
async def get_test_stats(user: dict = Depends(get_current_user)):
    """Totals over every completed test."""
    with get_db_session() as db:
        tests = MOCK_TESTS.list(db, user["user_id"], status="completed")
    return mock_test_stats(tests)


@router.get("/{test_id}", response_model=MockTestResponse)
async def get_test(test_id: str, user: dict = Depends(get_current_user)):
    now = utc_now()
    with get_db_session() as db:
        test = _get_test_or_404(db, user["user_id"], test_id)
        test = refresh_expired(db, user["user_id"], test, now)
    return public_view(test, now)


@router.put("/{test_id}/answers/{index}", response_model=MockTestResponse)
async def answer_question(
    test_id: str,
    index: int,
    request: AnswerUpdate,
    user: dict = Depends(get_current_user)
):
    """Store the selected option for question `index` (0-based)."""
    now = utc_now()
    closed = False
    with get_db_session() as db:
        test = _get_test_or_404(db, user["user_id"], test_id)
        if not 0 <= index < test["total_questions"]:
            raise HTTPException(status_code=422, detail="Question index out of range")
        try:
            test = record_answer(db, user["user_id"], test, index, request.answer, now)
        except MockTestClosed:
            # a timed-out test was just auto-submitted; keep that write
            closed = True

    if closed:
        raise HTTPException(status_code=409, detail="Mock test already submitted")
    return public_view(test, now)


@router.post("/{test_id}/submit", response_model=MockTestResponse)
async def submit(
    test_id: str,
    request: Optional[MockTestSubmit] = None,
    user: dict = Depends(get_current_user)
):
    """
    Submit the test. Answers in the body replace the stored ones;
    without a body the stored selections are scored.
    """
    now = utc_now()
    with get_db_session() as db:
        test = _get_test_or_404(db, user["user_id"], test_id)
        if test["status"] != "in_progress":
            raise HTTPException(status_code=409, detail="Mock test already submitted")
        answers = request.answers if request else None
        test = submit_test(db, user["user_id"], test, answers, now)
    return public_view(test, now)


@router.delete("/{test_id}", response_model=MessageResponse)
async def delete_test(test_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        deleted = MOCK_TESTS.delete(db, user["user_id"], test_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Mock test not found")
    return MessageResponse(message="Mock test deleted")
