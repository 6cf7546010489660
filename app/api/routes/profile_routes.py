"""
Profile Routes

GET /profile - Get own profile
PUT /profile - Update own profile (only provided fields)
"""

from fastapi import APIRouter, HTTPException, Depends

from app.db.postgres import get_db_session
from app.core.auth import get_current_user
from app.services.records_service import PROFILES
from app.schemas.schemas import ProfileUpdate, ProfileResponse

router = APIRouter(prefix="/profile", tags=["Profile"])


def _response(profile: dict, user: dict) -> ProfileResponse:
    return ProfileResponse(
        user_id=user["user_id"],
        email=user["email"],
        full_name=profile.get("full_name"),
        avatar_url=profile.get("avatar_url"),
        updated_at=profile["updated_at"]
    )


@router.get("", response_model=ProfileResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        profile = PROFILES.get_for_user(db, user["user_id"])
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return _response(profile, user)


@router.put("", response_model=ProfileResponse)
async def update_profile(update: ProfileUpdate, user: dict = Depends(get_current_user)):
    """Update profile. Creates the row if it is missing."""
    data = update.model_dump(mode="json", exclude_unset=True)
    with get_db_session() as db:
        profile = PROFILES.get_for_user(db, user["user_id"])
        if profile:
            profile = PROFILES.update(db, user["user_id"], profile["id"], data)
        else:
            profile = PROFILES.create(db, user["user_id"], data)
    return _response(profile, user)
