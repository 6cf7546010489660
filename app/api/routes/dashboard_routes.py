"""
Dashboard Routes

GET /dashboard - Totals, last 7 days of coding activity, application status split, quote
"""

from datetime import date
from fastapi import APIRouter, Depends

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.records_service import LEARNING_GOALS, CODING_PROBLEMS, APPLICATIONS
from app.services.progress_service import (
    dashboard_stats, weekly_activity, application_status_distribution, pick_quote
)
from app.schemas.schemas import DashboardResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        goals = LEARNING_GOALS.list(db, user["user_id"])
        problems = CODING_PROBLEMS.list(db, user["user_id"])
        applications = APPLICATIONS.list(db, user["user_id"])

    today = date.today()
    quote = pick_quote()
    return DashboardResponse(
        stats=dashboard_stats(goals, problems, applications, today),
        weekly_activity=weekly_activity(problems, today),
        application_status=application_status_distribution(applications),
        quote=quote["quote"],
        quote_author=quote["author"]
    )
