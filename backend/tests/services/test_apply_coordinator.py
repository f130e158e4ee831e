"""Apply Coordinator — résumé selection, bounded upload, and the upload/create race.

Invariants:
    - Stored résumé: storage never called, reference copied verbatim
    - Upload: file stored first, returned reference saved on the application
    - No résumé available → 400 before any upload starts
    - "stored" with nothing on file uses the supplied file instead
    - Preconditions (job open, no live application) checked before uploading
    - Upload timeout → 503, no application row
    - A competing application that lands during the upload → 409, upload orphaned
"""

import pytest
from sqlalchemy import func, select

from app.core.domain_types import ApplicationStatus, ResumeChoice, Role
from app.core.errors import UpstreamError
from app.core.session_token import Subject
from app.models.application import Application
from app.services.apply_coordinator import ApplyCoordinator, ApplyRequest

from tests.services.session_fakes import SEEKER_ID, FakeResumeStorage, auth

SEEKER = auth(SEEKER_ID, Role.SEEKER)
PDF = ("cv.pdf", b"%PDF-1.4 fake resume", "application/pdf")


class _Upload:
    filename = "cv.pdf"
    content_type = "application/pdf"

    async def read(self, size: int = -1) -> bytes:
        return b"%PDF-1.4"


async def _count(test_db) -> int:
    return await test_db.scalar(select(func.count(Application.id)))


async def test_upload_choice_stores_file_and_uses_reference(client, job, storage):
    res = await client.post(
        "/api/v1/applications",
        data={"job_id": str(job.id), "resume_choice": "upload", "cover_letter": "Hello"},
        files={"file": PDF},
        headers=SEEKER,
    )
    assert res.status_code == 201, res.json()
    assert storage.stored == ["uploaded-1.pdf"]
    assert res.json()["resume_url"] == "http://uploads.test/uploads/resume/uploaded-1.pdf"


async def test_upload_choice_without_file_is_400_and_no_upload(client, job, storage, test_db):
    res = await client.post(
        "/api/v1/applications",
        data={"job_id": str(job.id), "resume_choice": "upload"},
        headers=SEEKER,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MISSING_RESUME"
    assert storage.stored == []
    assert await _count(test_db) == 0


async def test_stored_choice_without_profile_uploads_supplied_file(client, job, storage):
    res = await client.post(
        "/api/v1/applications",
        data={"job_id": str(job.id), "resume_choice": "stored"},
        files={"file": PDF},
        headers=SEEKER,
    )
    assert res.status_code == 201, res.json()
    assert storage.stored == ["uploaded-1.pdf"]
    assert res.json()["resume_url"] == "http://uploads.test/uploads/resume/uploaded-1.pdf"


async def test_closed_job_refused_before_upload(client, closed_job, storage):
    res = await client.post(
        "/api/v1/applications",
        data={"job_id": str(closed_job.id), "resume_choice": "upload"},
        files={"file": PDF},
        headers=SEEKER,
    )
    assert res.status_code == 409
    assert storage.stored == []


async def test_upload_failure_is_503_and_no_application(client, job, storage, test_db):
    async def fail():
        raise UpstreamError("upload timed out", "resume-storage", timed_out=True)

    storage.on_store = fail
    res = await client.post(
        "/api/v1/applications",
        data={"job_id": str(job.id), "resume_choice": "upload"},
        files={"file": PDF},
        headers=SEEKER,
    )
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "UPSTREAM_TIMEOUT"
    assert await _count(test_db) == 0


async def test_competing_application_during_upload_is_conflict(
    client, job, storage, test_session_factory, test_db,
):
    async def competing_submit():
        async with test_session_factory() as db:
            db.add(Application(
                job_id=job.id, applicant_id=SEEKER_ID,
                resume_reference="profile-cv.pdf",
                status=ApplicationStatus.SUBMITTED.value, version=1,
            ))
            await db.commit()

    storage.on_store = competing_submit
    res = await client.post(
        "/api/v1/applications",
        data={"job_id": str(job.id), "resume_choice": "upload"},
        files={"file": PDF},
        headers=SEEKER,
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"
    assert storage.stored == ["uploaded-1.pdf"]
    assert await _count(test_db) == 1


async def test_upload_is_bounded_by_timeout(job, test_session_factory, test_db):
    storage = FakeResumeStorage()
    storage.delay = 1.0
    subject = Subject(id=SEEKER_ID, role=Role.SEEKER)
    async with test_session_factory() as db:
        coordinator = ApplyCoordinator(db, storage, upload_timeout_seconds=0.05)
        with pytest.raises(UpstreamError) as exc_info:
            await coordinator.apply(
                subject,
                ApplyRequest(job_id=job.id, resume_choice=ResumeChoice.UPLOAD, upload=_Upload()),
            )
    assert exc_info.value.timed_out is True
    assert storage.stored == []
    assert await _count(test_db) == 0


async def test_stored_choice_never_calls_storage(job, seeker_profile, test_session_factory):
    storage = FakeResumeStorage()
    subject = Subject(id=SEEKER_ID, role=Role.SEEKER)
    async with test_session_factory() as db:
        application = await ApplyCoordinator(db, storage).apply(
            subject,
            ApplyRequest(job_id=job.id, resume_choice=ResumeChoice.STORED, upload=_Upload()),
        )
    assert application.resume_reference == "profile-cv.pdf"
    assert application.status == "Submitted"
    assert storage.stored == []
