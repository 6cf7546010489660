"""
Coding Practice Routes

GET /coding-problems - List own problems (filters: platform, difficulty, status) with stats
POST /coding-problems - Log a problem
GET /coding-problems/{problem_id} - Get problem
PUT /coding-problems/{problem_id} - Update problem (only provided fields)
DELETE /coding-problems/{problem_id} - Delete problem
"""

from datetime import date
from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.records_service import CODING_PROBLEMS
from app.services.progress_service import filter_records, coding_stats
from app.schemas.schemas import (
    CodingProblemCreate, CodingProblemUpdate, CodingProblemResponse,
    CodingProblemListResponse, MessageResponse
)

router = APIRouter(prefix="/coding-problems", tags=["Coding Practice"])


@router.get("", response_model=CodingProblemListResponse)
async def list_problems(
    platform: Optional[str] = Query(None, description="Platform name or 'all'"),
    difficulty: Optional[str] = Query(None, description="easy/medium/hard or 'all'"),
    status: Optional[str] = Query(None, description="Problem status or 'all'"),
    user: dict = Depends(get_current_user)
):
    """List problems by practice date, newest first. Stats cover every problem."""
    with get_db_session() as db:
        problems = CODING_PROBLEMS.list(db, user["user_id"])

    filtered = filter_records(problems, platform=platform, difficulty=difficulty, status=status)
    return CodingProblemListResponse(
        problems=filtered,
        total=len(filtered),
        stats=coding_stats(problems, date.today())
    )


@router.post("", response_model=CodingProblemResponse, status_code=201)
async def create_problem(problem: CodingProblemCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return CODING_PROBLEMS.create(db, user["user_id"], problem.model_dump(mode="json"))


@router.get("/{problem_id}", response_model=CodingProblemResponse)
async def get_problem(problem_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        problem = CODING_PROBLEMS.get(db, user["user_id"], problem_id)
    if not problem:
        raise HTTPException(status_code=404, detail="Coding problem not found")
    return problem


@router.put("/{problem_id}", response_model=CodingProblemResponse)
async def update_problem(problem_id: str, update: CodingProblemUpdate, user: dict = Depends(get_current_user)):
    """Update problem. Only provided fields are updated."""
    data = update.model_dump(mode="json", exclude_unset=True)
    with get_db_session() as db:
        problem = CODING_PROBLEMS.update(db, user["user_id"], problem_id, data)
    if not problem:
        raise HTTPException(status_code=404, detail="Coding problem not found")
    return problem


@router.delete("/{problem_id}", response_model=MessageResponse)
async def delete_problem(problem_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        deleted = CODING_PROBLEMS.delete(db, user["user_id"], problem_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Coding problem not found")
    return MessageResponse(message="Coding problem deleted")
