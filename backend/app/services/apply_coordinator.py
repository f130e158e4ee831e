"""Apply Coordinator — picks the résumé for a new application, uploading if asked.

Invariants:
    - "stored" uses the profile's reference verbatim; the storage client is never called
    - "upload" without a file, or "stored" without a profile reference → MissingResumeError
      before any upload starts
    - Role, job status, and duplicate checks run BEFORE the upload as well as at insert
    - The upload is bounded by upload_timeout_seconds; timeout → UpstreamError, no application
    - If creation fails after a successful upload the reference is orphaned and logged;
      no cleanup is attempted

Design Decisions:
    - Pre-checking before upload narrows the orphan window to the duplicate-during-upload race
    - asyncio.wait_for on top of the client's own timeout: the bound holds for any
      ResumeStorage implementation
"""

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.application_lifecycle import check_can_apply
from app.core.apply_resume import ResumePlan, plan_resume_source
from app.core.authorize import Denial, authorize
from app.core.domain_types import Action, ResumeChoice, ResumeReference
from app.core.errors import HirePathError, UpstreamError
from app.core.repository_protocols import ResumeStorage, ResumeUpload
from app.core.session_token import Subject
from app.models.application import Application
from app.models.seeker_profile import SeekerProfile
from app.services.access_service import load_job, raise_if_denied
from app.services.application_service import ApplicationService, find_live_application_id

logger = logging.getLogger(__name__)


@dataclass
class ApplyRequest:
    job_id: int
    resume_choice: ResumeChoice
    cover_letter: str | None = None
    upload: ResumeUpload | None = None


class ApplyCoordinator:
    """Resolves the résumé reference and creates the application."""

    def __init__(
        self,
        db: AsyncSession,
        storage: ResumeStorage,
        upload_timeout_seconds: float = 10.0,
    ):
        self.db = db
        self.storage = storage
        self.upload_timeout_seconds = upload_timeout_seconds
        self.applications = ApplicationService(db)

    async def stored_reference(self, subject: Subject) -> str | None:
        profile = await self.db.get(SeekerProfile, subject.id)
        return profile.resume_reference if profile else None

    async def plan(self, subject: Subject, request: ApplyRequest) -> ResumePlan:
        stored = None
        if request.resume_choice == ResumeChoice.STORED:
            stored = await self.stored_reference(subject)
        plan = plan_resume_source(
            request.resume_choice, stored, has_file=request.upload is not None,
        )
        if isinstance(plan, Denial):
            raise_if_denied(plan, subject, Action.APPLICATION_CREATE, job_id=request.job_id)
        return plan

    async def precheck(self, subject: Subject, job_id: int) -> None:
        job = await load_job(self.db, job_id)
        live_id = await find_live_application_id(self.db, job_id, subject.id)
        raise_if_denied(
            check_can_apply(subject, job, job_id, live_id),
            subject, Action.APPLICATION_CREATE, job_id=job_id,
        )

    async def upload(self, subject: Subject, upload: ResumeUpload) -> ResumeReference:
        try:
            return await asyncio.wait_for(
                self.storage.store(upload), timeout=self.upload_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Résumé upload exceeded {self.upload_timeout_seconds}s",
                extra={"subject_id": subject.id, "error_code": "UPSTREAM_TIMEOUT"},
            )
            raise UpstreamError("upload timed out", "resume-storage", timed_out=True)

    async def apply(self, subject: Subject, request: ApplyRequest) -> Application:
        """resolve-apply-resume followed by create-application."""
        raise_if_denied(
            authorize(subject, Action.APPLICATION_CREATE, None),
            subject, Action.APPLICATION_CREATE, job_id=request.job_id,
        )
        plan = await self.plan(subject, request)
        await self.precheck(subject, request.job_id)

        if not plan.needs_upload:
            return await self.applications.create(
                subject, request.job_id, plan.reference, request.cover_letter,
            )

        reference = await self.upload(subject, request.upload)
        try:
            return await self.applications.create(
                subject, request.job_id, reference, request.cover_letter,
            )
        except HirePathError as e:
            logger.warning(
                f"Uploaded résumé {reference} orphaned: {e.code}",
                extra={
                    "subject_id": subject.id, "job_id": request.job_id,
                    "error_code": e.code,
                },
            )
            raise
