"""
API module - FastAPI routers and endpoint definitions.

One router per tracker page (learning goals, coding practice, resumes,
applications, roadmap, reminders, dashboard) plus auth, profile and the
two AI-backed sessions (mock tests, mock interviews).

Usage:
    from app.api.routes import api_router
    app.include_router(api_router, prefix="/api")
"""
