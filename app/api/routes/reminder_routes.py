"""
Reminder Routes

GET /reminders - List own reminder settings
POST /reminders - Create reminder
PUT /reminders/{reminder_id} - Update message / toggle reminder
DELETE /reminders/{reminder_id} - Delete reminder
GET /reminders/motivation - Quote of the day and a weekly reflection prompt
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.records_service import REMINDERS
from app.services.progress_service import pick_quote, pick_reflection_prompt
from app.schemas.schemas import (
    ReminderCreate, ReminderUpdate, ReminderResponse, MotivationResponse, MessageResponse
)

router = APIRouter(prefix="/reminders", tags=["Reminders"])


@router.get("", response_model=List[ReminderResponse])
async def list_reminders(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return REMINDERS.list(db, user["user_id"])


@router.post("", response_model=ReminderResponse, status_code=201)
async def create_reminder(reminder: ReminderCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return REMINDERS.create(db, user["user_id"], reminder.model_dump(mode="json"))


@router.get("/motivation", response_model=MotivationResponse)
async def get_motivation(user: dict = Depends(get_current_user)):
    quote = pick_quote()
    return MotivationResponse(
        quote=quote["quote"],
        author=quote["author"],
        reflection_prompt=pick_reflection_prompt()
    )


@router.put("/{reminder_id}", response_model=ReminderResponse)
async def update_reminder(reminder_id: str, update: ReminderUpdate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        reminder = REMINDERS.update(
            db, user["user_id"], reminder_id, update.model_dump(mode="json", exclude_unset=True)
        )
    if not reminder:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return reminder


@router.delete("/{reminder_id}", response_model=MessageResponse)
async def delete_reminder(reminder_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        deleted = REMINDERS.delete(db, user["user_id"], reminder_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return MessageResponse(message="Reminder deleted")
