"""Test doubles — session tokens minted like the identity service, and an in-memory résumé store.

Invariants:
    - make_token signs with the same secret and algorithm the middleware verifies with
    - `sub` is always a string claim (PyJWT validates its type)
    - FakeResumeStorage never touches the network; `on_store` stages races mid-upload
"""

import asyncio
from datetime import datetime, timedelta, timezone

import jwt

from app.config import get_settings
from app.core.domain_types import Role

SEEKER_ID = 101
OTHER_SEEKER_ID = 102
EMPLOYER_ID = 201
OTHER_EMPLOYER_ID = 202
ADMIN_ID = 301


def make_token(
    subject_id: int,
    role: str,
    *,
    expires_in: timedelta = timedelta(hours=1),
    secret: str | None = None,
    role_key: str = "role",
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(subject_id),
        role_key: role,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(payload, secret or get_settings().session_secret, algorithm="HS256")


def auth(subject_id: int, role: Role) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(subject_id, role.value)}"}


class FakeResumeStorage:
    """In-memory ResumeStorage."""

    def __init__(self):
        self.stored: list[str] = []
        self.on_store = None
        self.delay: float = 0.0

    async def store(self, upload):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.on_store is not None:
            await self.on_store()
        await upload.read()
        reference = f"uploaded-{len(self.stored) + 1}.pdf"
        self.stored.append(reference)
        return reference

    def resolve(self, reference):
        return f"http://uploads.test/uploads/resume/{reference}"
