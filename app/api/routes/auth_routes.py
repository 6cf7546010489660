"""
Authentication Routes

POST /auth/register - Create an account (profile row created alongside)
POST /auth/login - Exchange email/password for a bearer token
GET /auth/me - Current account
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.exc import IntegrityError

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.core.security import verify_password, create_access_token
from app.services.user_service import get_user_by_email, create_user
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest):
    """Emails are unique case-insensitively. Login afterwards for a token."""
    with get_db_session() as db:
        taken = get_user_by_email(db, request.email) is not None
    if taken:
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        with get_db_session() as db:
            create_user(db, request.email, request.password, request.full_name)
    except IntegrityError:
        # lost a race with a concurrent registration
        raise HTTPException(status_code=400, detail="Email already registered")

    return MessageResponse(message="Registered successfully. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Send the token back as: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        account = get_user_by_email(db, request.email)

    if not account or not verify_password(request.password, account["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not account["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return TokenResponse(access_token=create_access_token(account["id"]), user_id=account["id"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    return UserResponse(user_id=user["user_id"], email=user["email"], is_active=True,
                        created_at=user["created_at"])
