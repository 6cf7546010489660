"""
Placement Prep Tracker - Main Application

FastAPI backend with:
- PostgreSQL for tracker data
- MongoDB for resume files and AI resume analyses
- OpenAI-compatible AI gateway for mock tests, mock interviews, resume review
- JWT authentication

Run: uvicorn app.main:app --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.logging import setup_logging
from app.db.mongodb import init_mongo_indexes
from app.services.ai_client import AIServiceError

settings = get_settings()
setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Placement Prep Tracker",
    description="""
    Track placement preparation and practice with AI.

    ## Features
    - **Learning goals**: Skills and topics with per-skill progress
    - **Coding practice**: Problem log, stats and daily streak
    - **Resumes**: Versions, file storage, AI resume review
    - **Applications**: Pipeline tracking and upcoming interviews
    - **Roadmap & reminders**: Monthly goals, skill priorities, motivation
    - **Mock tests**: Timed AI-generated multiple choice tests
    - **Mock interviews**: Streamed AI interviewer with feedback

    ## Databases
    - PostgreSQL: Tracker data
    - MongoDB: Resume files (GridFS) and AI analyses
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(AIServiceError)
async def ai_service_error_handler(request: Request, exc: AIServiceError):
    """Gateway failures: 429 rate limited, 402 out of credits, 502 otherwise."""
    logger.warning("{} {} -> AI error {}: {}", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: {}", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Placement Prep Tracker"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from app.db.postgres import test_postgres_connection
    from app.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
