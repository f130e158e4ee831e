"""Route Guard tests — pure decision table for proceed / redirect / reject.

Tests cover:
    - Public paths proceed with or without a session
    - Unauthenticated page → login redirect carrying path and query in ?next=
    - Unauthenticated API path → 401 rejection, never a redirect
    - Wrong role on a restricted page → the caller's own landing page
    - Wrong role on a restricted API path → 403 rejection
    - Auth pages bounce signed-in subjects to their landing page
    - resolve_return_path refuses off-site, API, and forbidden targets
"""

from datetime import datetime, timedelta, timezone

from app.core.domain_types import Role
from app.core.route_guard import (
    GuardOutcome, PathAccess, classify_path, evaluate_route, is_safe_local_path,
    landing_path, login_redirect, resolve_return_path,
)
from app.core.session_token import Subject, VerifiedSession


def _session(role: Role, subject_id: int = 1) -> VerifiedSession:
    return VerifiedSession(
        subject=Subject(id=subject_id, role=role),
        issued_at=None,
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
    )


SEEKER = _session(Role.SEEKER)
EMPLOYER = _session(Role.EMPLOYER)


def test_longest_prefix_wins():
    assert classify_path("/dashboard").access == PathAccess.AUTHENTICATED
    rule = classify_path("/dashboard/seeker/applications")
    assert rule.access == PathAccess.ROLE_RESTRICTED
    assert rule.role == Role.SEEKER


def test_prefix_match_respects_segment_boundary():
    assert classify_path("/dashboards").access == PathAccess.PUBLIC


def test_public_paths_proceed():
    assert evaluate_route("/jobs", None).proceeds
    assert evaluate_route("/jobs/7", SEEKER).proceeds
    assert evaluate_route("/api/v1/health/", None).proceeds


def test_unauthenticated_page_redirects_to_login_with_next():
    decision = evaluate_route("/dashboard/employer", None)
    assert decision.outcome == GuardOutcome.REDIRECT
    assert decision.location == "/login?next=/dashboard/employer"


def test_login_redirect_keeps_query_string():
    decision = evaluate_route("/dashboard/seeker/applications", None, query="page=2")
    assert decision.location == "/login?next=/dashboard/seeker/applications%3Fpage%3D2"


def test_login_redirect_uses_configured_login_path():
    assert login_redirect("/seekers/3", login_path="/sign-in") == "/sign-in?next=/seekers/3"


def test_unauthenticated_api_rejects_with_401():
    decision = evaluate_route("/api/v1/applications/5", None)
    assert decision.outcome == GuardOutcome.REJECT
    assert decision.status_code == 401


def test_wrong_role_page_redirects_to_own_landing():
    decision = evaluate_route("/dashboard/employer", SEEKER)
    assert decision.outcome == GuardOutcome.REDIRECT
    assert decision.location == "/dashboard/seeker"


def test_wrong_role_api_rejects_with_403():
    decision = evaluate_route("/api/v1/saved-jobs/3", EMPLOYER)
    assert decision.outcome == GuardOutcome.REJECT
    assert decision.status_code == 403
    assert decision.reason == "wrong_role"


def test_matching_role_proceeds():
    assert evaluate_route("/dashboard/employer/jobs", EMPLOYER).proceeds
    assert evaluate_route("/api/v1/saved-jobs", SEEKER).proceeds


def test_any_role_proceeds_on_authenticated_path():
    assert evaluate_route("/seekers/12", EMPLOYER).proceeds
    assert evaluate_route("/dashboard", SEEKER).proceeds


def test_auth_pages():
    assert evaluate_route("/login", None).proceeds
    decision = evaluate_route("/register", EMPLOYER)
    assert decision.outcome == GuardOutcome.REDIRECT
    assert decision.location == "/dashboard/employer"


def test_configured_login_path_is_the_auth_page():
    decision = evaluate_route("/sign-in", SEEKER, login_path="/sign-in")
    assert decision.outcome == GuardOutcome.REDIRECT
    assert decision.location == "/dashboard/seeker"
    assert evaluate_route("/sign-in", None, login_path="/sign-in").proceeds
    assert classify_path("/login", login_path="/sign-in").access == PathAccess.PUBLIC


def test_landing_paths():
    assert landing_path(Role.SEEKER) == "/dashboard/seeker"
    assert landing_path(Role.EMPLOYER) == "/dashboard/employer"
    assert landing_path(Role.ADMIN) == "/dashboard/admin"


def test_is_safe_local_path():
    assert is_safe_local_path("/dashboard/seeker")
    assert not is_safe_local_path("https://evil.example/")
    assert not is_safe_local_path("//evil.example/path")
    assert not is_safe_local_path("/\\evil.example")
    assert not is_safe_local_path("dashboard")
    assert not is_safe_local_path(None)


def test_resolve_return_path_keeps_reachable_target():
    assert resolve_return_path("/dashboard/seeker/saved?tab=1", SEEKER) == "/dashboard/seeker/saved?tab=1"


def test_resolve_return_path_falls_back_to_landing():
    assert resolve_return_path("https://evil.example/", SEEKER) == "/dashboard/seeker"
    assert resolve_return_path("/dashboard/admin", SEEKER) == "/dashboard/seeker"
    assert resolve_return_path("/api/v1/session", EMPLOYER) == "/dashboard/employer"
    assert resolve_return_path("/login", EMPLOYER) == "/dashboard/employer"
    assert resolve_return_path(None, EMPLOYER) == "/dashboard/employer"
