"""Status Concurrency — two writers, one observed version, exactly one winner.

Invariants:
    - Both callers observed version 1; the first write lands, the second gets 409
    - The losing write never changes the row (status, note, version untouched)
    - persist_transition alone refuses a second write from the same before-snapshot

Design Decisions:
    - Deterministic interleave instead of asyncio.gather: the in-memory SQLite
      connection is shared, so true parallelism would test the driver, not the rule
"""

from datetime import datetime, timezone

import pytest

from app.core.application_lifecycle import apply_transition
from app.core.domain_types import ApplicationStatus, Role
from app.core.errors import ConcurrencyError
from app.models.application import Application
from app.services.access_service import load_application
from app.services.application_service import persist_transition

from tests.services.session_fakes import EMPLOYER_ID, SEEKER_ID, auth


async def test_second_writer_with_same_version_gets_conflict(client, application, test_db):
    employer = auth(EMPLOYER_ID, Role.EMPLOYER)
    seeker = auth(SEEKER_ID, Role.SEEKER)

    first = await client.patch(
        f"/api/v1/applications/{application.id}/status",
        json={"status": "Reviewed", "version": 1, "employer_note": "first"},
        headers=employer,
    )
    second = await client.post(
        f"/api/v1/applications/{application.id}/withdraw",
        json={"version": 1}, headers=seeker,
    )

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "CONCURRENCY_CONFLICT"

    row = await test_db.get(Application, application.id, populate_existing=True)
    assert row.status == "Reviewed"
    assert row.employer_note == "first"
    assert row.version == 2


async def test_stale_writer_after_terminal_move_still_gets_conflict(client, application):
    employer = auth(EMPLOYER_ID, Role.EMPLOYER)
    await client.patch(
        f"/api/v1/applications/{application.id}/status",
        json={"status": "Rejected", "version": 1}, headers=employer,
    )
    res = await client.post(
        f"/api/v1/applications/{application.id}/withdraw",
        json={"version": 1}, headers=auth(SEEKER_ID, Role.SEEKER),
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONCURRENCY_CONFLICT"


async def test_persist_transition_is_conditional_on_version(application, test_session_factory):
    now = datetime.now(timezone.utc)
    async with test_session_factory() as db:
        before = await load_application(db, application.id)
        reviewed = apply_transition(before, ApplicationStatus.REVIEWED, now=now)
        rejected = apply_transition(before, ApplicationStatus.REJECTED, now=now)

        await persist_transition(db, before, reviewed)
        with pytest.raises(ConcurrencyError):
            await persist_transition(db, before, rejected)

        current = await load_application(db, application.id)
        assert current.status == ApplicationStatus.REVIEWED
        assert current.version == 2
