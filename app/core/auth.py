"""
Authentication dependency for protected routes.

Resolves the bearer token to the calling account. Ownership of tracker
rows is not decided here: every query issued by the routes is scoped by
the user id this module returns.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.security import decode_access_token
from app.db.postgres import get_db_session
from app.services.user_service import get_user

# auto_error off: a missing header must be a 401, not FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> dict:
    """
    FastAPI dependency - the authenticated caller.

    Returns {"user_id", "email", "created_at"}.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            ...
    """
    if credentials is None:
        raise _unauthorized()

    claims = decode_access_token(credentials.credentials)
    if claims is None:
        raise _unauthorized()

    with get_db_session() as db:
        account = get_user(db, claims["sub"])

    if account is None:
        raise _unauthorized()
    if not account["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return {
        "user_id": account["id"],
        "email": account["email"],
        "created_at": account["created_at"]
    }
