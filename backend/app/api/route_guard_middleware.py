"""Route Guard Middleware — runs core/route_guard on every request before any handler.

Invariants:
    - The token is decoded exactly once per request; the result lands on request.state.session
    - A redirect or rejection returns immediately; call_next is never invoked
    - The middleware holds no mutable state; the verification key comes from Settings

Design Decisions:
    - Token read from the `token` cookie first (browser navigation), then the
      Authorization: Bearer header (API clients)
    - 307 redirects keep the method, matching the front end's redirect semantics
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import Settings, get_settings
from app.core.errors import ForbiddenError, UnauthenticatedError
from app.core.route_guard import GuardOutcome, evaluate_route
from app.core.session_token import decode_session_token

logger = logging.getLogger(__name__)


def extract_token(request: Request, cookie_name: str) -> str | None:
    token = request.cookies.get(cookie_name)
    if token:
        return token
    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Allow, redirect, or reject each request according to the route table."""

    def __init__(self, app, settings: Settings | None = None):
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(self, request: Request, call_next):
        session = decode_session_token(
            extract_token(request, self.settings.session_cookie_name),
            self.settings.session_secret,
            algorithms=(self.settings.session_algorithm,),
        )
        request.state.session = session

        path = request.url.path
        decision = evaluate_route(
            path, session, request.url.query, self.settings.login_path,
        )
        if decision.outcome == GuardOutcome.PROCEED:
            return await call_next(request)

        subject_id = session.subject.id if session else None
        if decision.outcome == GuardOutcome.REDIRECT:
            logger.info(
                f"Guard redirect {path} → {decision.location}",
                extra={"path": path, "reason": decision.reason, "subject_id": subject_id},
            )
            return RedirectResponse(decision.location, status_code=307)

        error = (
            UnauthenticatedError() if decision.status_code == 401
            else ForbiddenError("wrong_role")
        )
        logger.warning(
            f"Guard rejected {path}: {decision.reason}",
            extra={
                "path": path, "reason": decision.reason,
                "subject_id": subject_id, "error_code": error.code,
            },
        )
        headers = {"WWW-Authenticate": "Bearer"} if error.http_status == 401 else None
        return JSONResponse(
            status_code=error.http_status, content=error.to_response(), headers=headers,
        )
