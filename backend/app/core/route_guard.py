"""Route Guard — classifies request paths and decides proceed / redirect / reject.

Invariants:
    - evaluate_route is PURE: takes the path and an explicit VerifiedSession (or None)
    - Role mismatches are decided here, before any handler-level authorization
    - Page paths redirect; API paths (/api/...) reject with 401/403 instead
    - Unauthenticated redirects always preserve the requested path in ?next=
    - The sign-in page is whatever login_path is configured, plus /register

Design Decisions:
    - Prefix table over regex routing: same matching semantics as the front end matcher
    - Longest-prefix wins so /dashboard/seeker beats /dashboard
    - resolve_return_path re-runs the guard on the ?next= target (no open redirects)
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote, urlsplit

from app.core.domain_types import Role
from app.core.session_token import VerifiedSession


API_PREFIX = "/api/"
LOGIN_PATH = "/login"
REGISTER_PATH = "/register"

LANDING_PATHS: dict[Role, str] = {
    Role.SEEKER: "/dashboard/seeker",
    Role.EMPLOYER: "/dashboard/employer",
    Role.ADMIN: "/dashboard/admin",
}


class PathAccess(str, Enum):
    PUBLIC = "public"
    AUTH_PAGE = "auth_page"
    AUTHENTICATED = "authenticated"
    ROLE_RESTRICTED = "role_restricted"


@dataclass(frozen=True)
class PathRule:
    access: PathAccess
    role: Role | None = None


# (prefix, rule); longest matching prefix wins
ROUTE_RULES: tuple[tuple[str, PathRule], ...] = (
    ("/dashboard", PathRule(PathAccess.AUTHENTICATED)),
    ("/dashboard/seeker", PathRule(PathAccess.ROLE_RESTRICTED, Role.SEEKER)),
    ("/dashboard/employer", PathRule(PathAccess.ROLE_RESTRICTED, Role.EMPLOYER)),
    ("/dashboard/admin", PathRule(PathAccess.ROLE_RESTRICTED, Role.ADMIN)),
    # employers read applicant profiles
    ("/seekers", PathRule(PathAccess.AUTHENTICATED)),
    ("/api/v1/session", PathRule(PathAccess.AUTHENTICATED)),
    ("/api/v1/applications", PathRule(PathAccess.AUTHENTICATED)),
    ("/api/v1/jobs", PathRule(PathAccess.AUTHENTICATED)),
    ("/api/v1/access", PathRule(PathAccess.AUTHENTICATED)),
    ("/api/v1/saved-jobs", PathRule(PathAccess.ROLE_RESTRICTED, Role.SEEKER)),
)

_PUBLIC_RULE = PathRule(PathAccess.PUBLIC)
_AUTH_PAGE_RULE = PathRule(PathAccess.AUTH_PAGE)


class GuardOutcome(str, Enum):
    PROCEED = "proceed"
    REDIRECT = "redirect"
    REJECT = "reject"


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    location: str | None = None
    status_code: int | None = None
    reason: str | None = None

    @property
    def proceeds(self) -> bool:
        return self.outcome == GuardOutcome.PROCEED


_PROCEED = GuardDecision(GuardOutcome.PROCEED)


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def auth_pages(login_path: str = LOGIN_PATH) -> frozenset[str]:
    return frozenset({login_path.rstrip("/") or "/", REGISTER_PATH})


def classify_path(path: str, login_path: str = LOGIN_PATH) -> PathRule:
    """Return the access rule for a request path."""
    normalized = path.rstrip("/") or "/"
    if normalized in auth_pages(login_path):
        return _AUTH_PAGE_RULE
    best: tuple[int, PathRule] | None = None
    for prefix, rule in ROUTE_RULES:
        if _matches(normalized, prefix) and (best is None or len(prefix) > best[0]):
            best = (len(prefix), rule)
    return best[1] if best else _PUBLIC_RULE


def landing_path(role: Role) -> str:
    return LANDING_PATHS[role]


def login_redirect(path: str, query: str = "", login_path: str = LOGIN_PATH) -> str:
    """Build the login URL that carries the originally requested target."""
    target = f"{path}?{query}" if query else path
    return f"{login_path}?next={quote(target, safe='/')}"


def is_api_path(path: str) -> bool:
    return path.startswith(API_PREFIX)


def evaluate_route(
    path: str,
    session: VerifiedSession | None,
    query: str = "",
    login_path: str = LOGIN_PATH,
) -> GuardDecision:
    """Apply the decision table to one request."""
    rule = classify_path(path, login_path)

    if rule.access == PathAccess.PUBLIC:
        return _PROCEED

    if rule.access == PathAccess.AUTH_PAGE:
        if session is None:
            return _PROCEED
        return GuardDecision(
            GuardOutcome.REDIRECT, location=landing_path(session.subject.role),
            reason="already_authenticated",
        )

    if session is None:
        if is_api_path(path):
            return GuardDecision(
                GuardOutcome.REJECT, status_code=401, reason="unauthenticated",
            )
        return GuardDecision(
            GuardOutcome.REDIRECT, location=login_redirect(path, query, login_path),
            reason="unauthenticated",
        )

    if rule.access == PathAccess.ROLE_RESTRICTED and session.subject.role != rule.role:
        if is_api_path(path):
            return GuardDecision(
                GuardOutcome.REJECT, status_code=403, reason="wrong_role",
            )
        return GuardDecision(
            GuardOutcome.REDIRECT, location=landing_path(session.subject.role),
            reason="wrong_role",
        )

    return _PROCEED


def is_safe_local_path(target: str | None) -> bool:
    """True for same-origin absolute paths only (no scheme, host, or //)."""
    if not target or not target.startswith("/") or target.startswith("//"):
        return False
    if "\\" in target:
        return False
    parts = urlsplit(target)
    return not parts.scheme and not parts.netloc


def resolve_return_path(
    target: str | None, session: VerifiedSession, login_path: str = LOGIN_PATH,
) -> str:
    """Where to send a freshly signed-in subject: ?next= if reachable, else landing."""
    fallback = landing_path(session.subject.role)
    if not is_safe_local_path(target):
        return fallback
    parts = urlsplit(target)
    if is_api_path(parts.path):
        return fallback
    decision = evaluate_route(parts.path, session, parts.query, login_path)
    return target if decision.proceeds else fallback
