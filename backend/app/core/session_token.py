"""Session Token Codec — verifies a signed session token into a VerifiedSession.

Invariants:
    - decode_session_token is PURE: no IO, no clock read when `now` is given
    - Never raises past its boundary: every failure returns None
    - Expiry and not-before are judged against `now` only, never the real clock;
      iat is informational, so an issuer clock running ahead cannot void a session
    - Role claim spelling (short or identity-framework URI) is resolved here only

Design Decisions:
    - PyJWT for HS256 signature verification; time claims compared here so tests can pin `now`
    - nbf tolerates NOT_BEFORE_LEEWAY of issuer clock skew
    - Frozen dataclasses: a verified session is never mutated after decoding
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from app.core.domain_types import Role, SubjectId


NOT_BEFORE_LEEWAY = timedelta(seconds=30)

ROLE_CLAIM_KEYS: tuple[str, ...] = (
    "role",
    "http://schemas.microsoft.com/ws/2008/06/identity/claims/role",
)

_ROLE_ALIASES: dict[str, Role] = {
    "jobseeker": Role.SEEKER,
    "seeker": Role.SEEKER,
    "employer": Role.EMPLOYER,
    "admin": Role.ADMIN,
}


@dataclass(frozen=True)
class Subject:
    """The acting principal — identity plus role."""
    id: SubjectId
    role: Role


@dataclass(frozen=True)
class VerifiedSession:
    """A session whose signature and expiry have been checked."""
    subject: Subject
    issued_at: datetime | None
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


def normalize_role(raw: object) -> Role | None:
    """Map any accepted role spelling to Role. Unknown spellings → None."""
    if not isinstance(raw, str):
        return None
    return _ROLE_ALIASES.get(raw.strip().lower())


def _read_role(payload: dict) -> Role | None:
    for key in ROLE_CLAIM_KEYS:
        if key in payload:
            return normalize_role(payload[key])
    return None


def _read_subject_id(payload: dict) -> SubjectId | None:
    raw = payload.get("sub", payload.get("nameid"))
    try:
        return SubjectId(int(raw))
    except (TypeError, ValueError):
        return None


def _read_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    return datetime.fromtimestamp(raw, tz=timezone.utc)


def decode_session_token(
    token: str | None,
    key: str,
    *,
    algorithms: tuple[str, ...] = ("HS256",),
    now: datetime | None = None,
) -> VerifiedSession | None:
    """Verify token signature, claims and expiry. Returns None on any failure."""
    if not token:
        return None
    try:
        payload = jwt.decode(
            token, key, algorithms=list(algorithms),
            options={
                "verify_exp": False, "verify_iat": False, "verify_nbf": False,
                "verify_aud": False, "require": ["exp"],
            },
        )
    except jwt.PyJWTError:
        return None

    expires_at = _read_timestamp(payload.get("exp"))
    subject_id = _read_subject_id(payload)
    role = _read_role(payload)
    if expires_at is None or subject_id is None or role is None:
        return None

    session = VerifiedSession(
        subject=Subject(id=subject_id, role=role),
        issued_at=_read_timestamp(payload.get("iat")),
        expires_at=expires_at,
    )
    now = now or datetime.now(timezone.utc)
    not_before = _read_timestamp(payload.get("nbf"))
    if not_before is not None and not_before > now + NOT_BEFORE_LEEWAY:
        return None
    if session.is_expired(now):
        return None
    return session
