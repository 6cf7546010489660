"""
Resume Routes

GET /resumes - List own resume versions (highest version first)
POST /resumes - Create resume version
POST /resumes/files - Upload resume file (PDF, DOC, DOCX, TXT)
GET /resumes/files/{object_name} - Download own resume file
POST /resumes/analyze - AI review of pasted text or an uploaded file
GET /resumes/analyses - List own AI reviews
DELETE /resumes/analyses/{analysis_id} - Delete AI review
GET /resumes/{resume_id} - Get resume version
PUT /resumes/{resume_id} - Update resume version (only provided fields)
DELETE /resumes/{resume_id} - Delete resume version and its stored file
"""

from fastapi import APIRouter, HTTPException, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from loguru import logger
from typing import List, Optional

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.ai_client import AIGatewayClient, get_ai_client
from app.services.ai_parsing_service import validate_resume_analysis
from app.services.mongo_service import (
    ResumeFileService, ResumeAnalysisService,
    get_resume_file_service, get_resume_analysis_service
)
from app.services.records_service import RESUMES
from app.utils.file_upload import read_upload, extract_text_from_file, STORAGE_EXTENSIONS
from app.schemas.schemas import (
    ResumeCreate, ResumeUpdate, ResumeResponse, ResumeFileResponse,
    ResumeAnalysisResponse, MessageResponse
)

router = APIRouter(prefix="/resumes", tags=["Resumes"])


@router.get("", response_model=List[ResumeResponse])
async def list_resumes(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return RESUMES.list(db, user["user_id"])


@router.post("", response_model=ResumeResponse, status_code=201)
async def create_resume(resume: ResumeCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        return RESUMES.create(db, user["user_id"], resume.model_dump(mode="json"))


# ============================================================
# FILE STORAGE
# ============================================================

@router.post("/files", response_model=ResumeFileResponse, status_code=201)
async def upload_resume_file(
    file: UploadFile = File(...),
    user: dict = Depends(get_current_user),
    files: ResumeFileService = Depends(get_resume_file_service)
):
    """
    Store a resume file. Use the returned file_url when creating or
    updating a resume version.
    """
    content, _ = await read_upload(file, STORAGE_EXTENSIONS)
    object_name = files.upload(user["user_id"], file.filename, content, file.content_type)
    return ResumeFileResponse(file_url=object_name, filename=file.filename, size=len(content))


@router.get("/files/{object_name:path}")
async def download_resume_file(
    object_name: str,
    user: dict = Depends(get_current_user),
    files: ResumeFileService = Depends(get_resume_file_service)
):
    """Download a stored file. Files outside the caller's folder are reported as missing."""
    stored = files.download(user["user_id"], object_name)
    if stored is None:
        raise HTTPException(status_code=404, detail="File not found")

    content, content_type, filename = stored
    return Response(
        content=content,
        media_type=content_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


# ============================================================
# AI ANALYSIS
# ============================================================

@router.post("/analyze", response_model=ResumeAnalysisResponse, status_code=201)
async def analyze_resume(
    resume_text: Optional[str] = Form(None),
    target_role: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    user: dict = Depends(get_current_user),
    ai: AIGatewayClient = Depends(get_ai_client),
    analyses: ResumeAnalysisService = Depends(get_resume_analysis_service)
):
    """
    Analyze a resume with AI.

    Send either `resume_text` or a PDF/DOCX/TXT `file` (multipart form).
    """
    source = "text"
    if file is not None and file.filename:
        resume_text, source = await extract_text_from_file(file)

    if not resume_text or not resume_text.strip():
        raise HTTPException(status_code=400, detail="Resume text is required")

    target_role = target_role.strip() if target_role and target_role.strip() else None
    raw = await run_in_threadpool(ai.analyze_resume, resume_text.strip(), target_role)
    analysis = validate_resume_analysis(raw)

    stored = analyses.insert(user["user_id"], analysis, target_role=target_role, source=source)
    logger.info("Resume analysis {} stored (score {})", stored["id"], analysis["score"])
    return stored


@router.get("/analyses", response_model=List[ResumeAnalysisResponse])
async def list_analyses(
    user: dict = Depends(get_current_user),
    analyses: ResumeAnalysisService = Depends(get_resume_analysis_service)
):
    return analyses.list_for_user(user["user_id"])


@router.delete("/analyses/{analysis_id}", response_model=MessageResponse)
async def delete_analysis(
    analysis_id: str,
    user: dict = Depends(get_current_user),
    analyses: ResumeAnalysisService = Depends(get_resume_analysis_service)
):
    if not analyses.delete(user["user_id"], analysis_id):
        raise HTTPException(status_code=404, detail="Analysis not found")
    return MessageResponse(message="Analysis deleted")


# ============================================================
# SINGLE RESUME VERSION
# ============================================================

@router.get("/{resume_id}", response_model=ResumeResponse)
async def get_resume(resume_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        resume = RESUMES.get(db, user["user_id"], resume_id)
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return resume


@router.put("/{resume_id}", response_model=ResumeResponse)
async def update_resume(resume_id: str, update: ResumeUpdate, user: dict = Depends(get_current_user)):
    """Update resume version. Only provided fields are updated."""
    with get_db_session() as db:
        resume = RESUMES.update(
            db, user["user_id"], resume_id, update.model_dump(mode="json", exclude_unset=True)
        )
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return resume


@router.delete("/{resume_id}", response_model=MessageResponse)
async def delete_resume(
    resume_id: str,
    user: dict = Depends(get_current_user),
    files: ResumeFileService = Depends(get_resume_file_service)
):
    with get_db_session() as db:
        resume = RESUMES.get(db, user["user_id"], resume_id)
        if not resume:
            raise HTTPException(status_code=404, detail="Resume not found")
        RESUMES.delete(db, user["user_id"], resume_id)
        # another version may point at the same upload
        shared = bool(resume.get("file_url")) and bool(
            RESUMES.list(db, user["user_id"], file_url=resume["file_url"])
        )

    if resume.get("file_url") and not shared:
        files.delete(user["user_id"], resume["file_url"])
    return MessageResponse(message="Resume deleted")
