"""Session Identity — who the caller is, and where they go after signing in.

Invariants:
    - Both endpoints read the session verified by RouteGuardMiddleware; no re-decoding
    - return-path never echoes an off-site, API, or forbidden target back to the client

Design Decisions:
    - The front end asks the server for the post-login destination so the
      allow-list lives in one place (core/route_guard)
"""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_verified_session
from app.config import get_settings
from app.core.route_guard import landing_path, resolve_return_path
from app.core.session_token import VerifiedSession
from app.schemas.access import ReturnPathResponse, SessionResponse

router = APIRouter(prefix="/api/v1/session", tags=["session"])


@router.get("", response_model=SessionResponse)
async def get_session(session: VerifiedSession = Depends(get_verified_session)):
    """verify-session: the caller's subject id, role, and token lifetime."""
    return SessionResponse(
        subject_id=session.subject.id,
        role=session.subject.role,
        issued_at=session.issued_at,
        expires_at=session.expires_at,
        landing_path=landing_path(session.subject.role),
    )


@router.get("/return-path", response_model=ReturnPathResponse)
async def get_return_path(
    next_path: str | None = Query(None, alias="next", max_length=2048),
    session: VerifiedSession = Depends(get_verified_session),
):
    return ReturnPathResponse(
        location=resolve_return_path(next_path, session, get_settings().login_path),
    )
