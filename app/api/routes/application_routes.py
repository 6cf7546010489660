"""
Application Routes

GET /applications - List own applications (filters: status, job_type) with upcoming interviews
POST /applications - Track a new application
GET /applications/{application_id} - Get application
PUT /applications/{application_id} - Update application (only provided fields)
DELETE /applications/{application_id} - Delete application
"""

from datetime import date
from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.records_service import APPLICATIONS
from app.services.progress_service import filter_records, upcoming_interviews
from app.schemas.schemas import (
    ApplicationCreate, ApplicationUpdate, ApplicationResponse,
    ApplicationListResponse, MessageResponse
)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    status: Optional[str] = Query(None, description="Application status or 'all'"),
    job_type: Optional[str] = Query(None, description="internship/full_time or 'all'"),
    user: dict = Depends(get_current_user)
):
    """
    List applications by apply date, newest first.
    Upcoming interviews (next 7 days) are taken from all applications.
    """
    with get_db_session() as db:
        applications = APPLICATIONS.list(db, user["user_id"])

    filtered = filter_records(applications, status=status, job_type=job_type)
    return ApplicationListResponse(
        applications=filtered,
        total=len(filtered),
        upcoming_interviews=upcoming_interviews(applications, date.today())
    )


@router.post("", response_model=ApplicationResponse, status_code=201)
async def create_application(application: ApplicationCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return APPLICATIONS.create(db, user["user_id"], application.model_dump(mode="json"))


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(application_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        application = APPLICATIONS.get(db, user["user_id"], application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: str,
    update: ApplicationUpdate,
    user: dict = Depends(get_current_user)
):
    """Update application. Only provided fields are updated."""
    with get_db_session() as db:
        application = APPLICATIONS.update(
            db, user["user_id"], application_id, update.model_dump(mode="json", exclude_unset=True)
        )
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.delete("/{application_id}", response_model=MessageResponse)
async def delete_application(application_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        deleted = APPLICATIONS.delete(db, user["user_id"], application_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Application not found")
    return MessageResponse(message="Application deleted")
