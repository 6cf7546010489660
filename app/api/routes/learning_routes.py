"""
Learning Goal Routes

GET /learning-goals - List own goals (filters: skill, status) with per-skill progress
POST /learning-goals - Create goal
GET /learning-goals/{goal_id} - Get goal
PUT /learning-goals/{goal_id} - Update goal (only provided fields)
DELETE /learning-goals/{goal_id} - Delete goal
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.records_service import LEARNING_GOALS
from app.services.progress_service import filter_records, skill_progress
from app.schemas.schemas import (
    LearningGoalCreate, LearningGoalUpdate, LearningGoalResponse,
    LearningGoalListResponse, MessageResponse
)

router = APIRouter(prefix="/learning-goals", tags=["Learning Goals"])


@router.get("", response_model=LearningGoalListResponse)
async def list_goals(
    skill: Optional[str] = Query(None, description="Skill name or 'all'"),
    status: Optional[str] = Query(None, description="Goal status or 'all'"),
    user: dict = Depends(get_current_user)
):
    """List goals newest first. Progress is computed over all goals, not the filtered view."""
    with get_db_session() as db:
        goals = LEARNING_GOALS.list(db, user["user_id"])

    filtered = filter_records(goals, skill_name=skill, status=status)
    return LearningGoalListResponse(
        goals=filtered,
        total=len(filtered),
        skill_progress=skill_progress(goals)
    )


@router.post("", response_model=LearningGoalResponse, status_code=201)
async def create_goal(goal: LearningGoalCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return LEARNING_GOALS.create(db, user["user_id"], goal.model_dump(mode="json"))


@router.get("/{goal_id}", response_model=LearningGoalResponse)
async def get_goal(goal_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        goal = LEARNING_GOALS.get(db, user["user_id"], goal_id)
    if not goal:
        raise HTTPException(status_code=404, detail="Learning goal not found")
    return goal


@router.put("/{goal_id}", response_model=LearningGoalResponse)
async def update_goal(goal_id: str, update: LearningGoalUpdate, user: dict = Depends(get_current_user)):
    """Update goal. Only provided fields are updated."""
    with get_db_session() as db:
        goal = LEARNING_GOALS.update(
            db, user["user_id"], goal_id, update.model_dump(mode="json", exclude_unset=True)
        )
    if not goal:
        raise HTTPException(status_code=404, detail="Learning goal not found")
    return goal


@router.delete("/{goal_id}", response_model=MessageResponse)
async def delete_goal(goal_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        deleted = LEARNING_GOALS.delete(db, user["user_id"], goal_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Learning goal not found")
    return MessageResponse(message="Learning goal deleted")
