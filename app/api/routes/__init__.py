"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.profile_routes import router as profile_router
from app.api.routes.dashboard_routes import router as dashboard_router
from app.api.routes.learning_routes import router as learning_router
from app.api.routes.coding_routes import router as coding_router
from app.api.routes.resume_routes import router as resume_router
from app.api.routes.application_routes import router as application_router
from app.api.routes.roadmap_routes import router as roadmap_router
from app.api.routes.reminder_routes import router as reminder_router
from app.api.routes.mock_test_routes import router as mock_test_router
from app.api.routes.mock_interview_routes import router as mock_interview_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(profile_router)
api_router.include_router(dashboard_router)
api_router.include_router(learning_router)
api_router.include_router(coding_router)
api_router.include_router(resume_router)
api_router.include_router(application_router)
api_router.include_router(roadmap_router)
api_router.include_router(reminder_router)
api_router.include_router(mock_test_router)
api_router.include_router(mock_interview_router)
