"""
Roadmap Routes

GET /roadmap - Get own roadmap (null when none saved yet)
PUT /roadmap - Create or replace own roadmap (one per user)
"""

from fastapi import APIRouter, Depends
from typing import Optional

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.records_service import ROADMAP
from app.schemas.schemas import RoadmapUpdate, RoadmapResponse

router = APIRouter(prefix="/roadmap", tags=["Roadmap"])


@router.get("", response_model=Optional[RoadmapResponse])
async def get_roadmap(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return ROADMAP.get_for_user(db, user["user_id"])


@router.put("", response_model=RoadmapResponse)
async def save_roadmap(roadmap: RoadmapUpdate, user: dict = Depends(get_current_user)):
    """
    Upsert the roadmap. Blank goals are dropped and months left without
    goals are removed before saving.
    """
    data = roadmap.model_dump(mode="json")
    with get_db_session() as db:
        existing = ROADMAP.get_for_user(db, user["user_id"])
        if existing:
            return ROADMAP.update(db, user["user_id"], existing["id"], data)
        return ROADMAP.create(db, user["user_id"], data)
