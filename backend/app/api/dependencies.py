"""Request Dependencies — explicit session and collaborator injection for route handlers.

Invariants:
    - The verified session comes from request.state (set once by RouteGuardMiddleware)
    - Handlers receive the session as an argument; there is no ambient current-user
    - Missing session on a handler that needs one → UnauthenticatedError (401)
"""

from fastapi import Depends, Request

from app.config import get_settings
from app.core.errors import UnauthenticatedError
from app.core.repository_protocols import ResumeStorage
from app.core.session_token import Subject, VerifiedSession
from app.infrastructure.file_storage import HttpResumeStorage


def get_verified_session(request: Request) -> VerifiedSession:
    session = getattr(request.state, "session", None)
    if session is None:
        raise UnauthenticatedError()
    return session


def get_subject(session: VerifiedSession = Depends(get_verified_session)) -> Subject:
    return session.subject


def get_resume_storage() -> ResumeStorage:
    settings = get_settings()
    return HttpResumeStorage(
        settings.upload_service_url, timeout_seconds=settings.upload_timeout_seconds,
    )
