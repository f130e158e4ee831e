"""Application Service — creates applications and drives their status transitions.

Invariants:
    - Creation re-checks role, job status, and live duplicates against fresh state
    - The partial unique index is authoritative: an IntegrityError on insert → ConflictError
    - Status writes are conditional on the caller's version (UPDATE ... WHERE version = :v);
      zero affected rows → ConcurrencyError, never a silent overwrite
    - Nothing here retries: Conflict and InvalidTransition go straight back to the caller
    - A job's applicant list is gated on ownership of the job's company, like any write

Design Decisions:
    - Pure checks from core/application_lifecycle run first (fast, precise errors);
      the conditional UPDATE closes the race between check and write
    - Each public method commits exactly once, so an abandoned request never leaves
      a half-written application row
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.application_lifecycle import (
    apply_transition, check_can_apply, check_transition,
)
from app.core.authorize import ApplicationSnapshot, authorize
from app.core.domain_types import (
    Action, ApplicationStatus, ResumeReference, TERMINAL_STATUSES,
)
from app.core.errors import ConcurrencyError, ConflictError, ErrorContext
from app.core.session_token import Subject
from app.models.application import Application
from app.services.access_service import (
    application_snapshot, load_application, load_job, raise_if_denied,
)

logger = logging.getLogger(__name__)


async def find_live_application_id(
    db: AsyncSession, job_id: int, applicant_id: int,
) -> int | None:
    result = await db.execute(
        select(Application.id)
        .where(Application.job_id == job_id)
        .where(Application.applicant_id == applicant_id)
        .where(Application.status.notin_([s.value for s in TERMINAL_STATUSES]))
        .limit(1)
    )
    return result.scalar_one_or_none()


async def persist_transition(
    db: AsyncSession, before: ApplicationSnapshot, after: ApplicationSnapshot,
) -> None:
    """Write `after` only if the row still carries `before.version`."""
    result = await db.execute(
        update(Application)
        .where(Application.id == before.id)
        .where(Application.version == before.version)
        .values(
            status=after.status.value,
            employer_note=after.employer_note,
            updated_at=after.updated_at,
            version=after.version,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        raise ConcurrencyError(
            "Application was changed by someone else",
            ErrorContext(debug_info={"application_id": before.id}),
        )
    await db.commit()


class ApplicationService:
    """Application lifecycle operations for one request."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_for_subject(self, subject: Subject, application_id: int) -> ApplicationSnapshot:
        """Visible to the applicant and the job owner; everyone else sees 'not permitted'."""
        snapshot = await load_application(self.db, application_id)
        raise_if_denied(
            authorize(subject, Action.APPLICATION_VIEW, snapshot),
            subject, Action.APPLICATION_VIEW, application_id=application_id,
        )
        return snapshot

    async def list_mine(self, subject: Subject) -> list[ApplicationSnapshot]:
        """The caller's own applications, newest first."""
        raise_if_denied(
            authorize(subject, Action.APPLICATION_LIST_MINE, None),
            subject, Action.APPLICATION_LIST_MINE,
        )
        return await self._list(Application.applicant_id == subject.id)

    async def list_for_job(self, subject: Subject, job_id: int) -> list[ApplicationSnapshot]:
        """Applicants for one job; only the owner of the job's company may look."""
        job = await load_job(self.db, job_id)
        raise_if_denied(
            authorize(subject, Action.JOB_APPLICATIONS_VIEW, job),
            subject, Action.JOB_APPLICATIONS_VIEW, job_id=job_id,
        )
        return await self._list(Application.job_id == job_id)

    async def _list(self, criterion) -> list[ApplicationSnapshot]:
        result = await self.db.execute(
            select(Application)
            .where(criterion)
            .order_by(Application.applied_at.desc(), Application.id.desc())
        )
        return [application_snapshot(row) for row in result.scalars().unique()]

    async def create(
        self,
        subject: Subject,
        job_id: int,
        resume_reference: ResumeReference,
        cover_letter: str | None = None,
    ) -> Application:
        """Insert a Submitted application after re-checking every precondition."""
        job = await load_job(self.db, job_id)
        live_id = await find_live_application_id(self.db, job_id, subject.id)
        raise_if_denied(
            check_can_apply(subject, job, job_id, live_id),
            subject, Action.APPLICATION_CREATE, job_id=job_id,
        )

        application = Application(
            job_id=job_id,
            applicant_id=subject.id,
            resume_reference=resume_reference,
            cover_letter=cover_letter,
            status=ApplicationStatus.SUBMITTED.value,
            version=1,
        )
        self.db.add(application)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                f"Duplicate live application for job {job_id}",
                extra={"subject_id": subject.id, "job_id": job_id, "error_code": "CONFLICT"},
            )
            raise ConflictError(
                "You already have an active application for this job",
                ErrorContext(subject_id=subject.id, action=Action.APPLICATION_CREATE.value),
            )
        await self.db.refresh(application, attribute_names=["job"])
        logger.info(
            f"Application {application.id} submitted",
            extra={
                "subject_id": subject.id, "job_id": job_id,
                "application_id": application.id,
            },
        )
        return application

    async def transition(
        self,
        subject: Subject,
        application_id: int,
        target: ApplicationStatus,
        expected_version: int,
        employer_note: str | None = None,
    ) -> ApplicationSnapshot:
        """Move an application to `target` on behalf of its employer or applicant."""
        action = (
            Action.APPLICATION_WITHDRAW
            if target == ApplicationStatus.WITHDRAWN
            else Action.APPLICATION_STATUS_UPDATE
        )
        before = await load_application(self.db, application_id)
        raise_if_denied(
            authorize(subject, Action.APPLICATION_VIEW, before),
            subject, action, application_id=application_id,
        )
        raise_if_denied(
            check_transition(before, target, subject, expected_version),
            subject, action, application_id=application_id,
        )
        if subject.id != before.job_owner_id:
            # only the employer writes notes
            employer_note = None

        after = apply_transition(
            before, target, employer_note, now=datetime.now(timezone.utc),
        )
        await persist_transition(self.db, before, after)
        logger.info(
            f"Application {application_id}: {before.status.value} → {after.status.value}",
            extra={
                "subject_id": subject.id, "application_id": application_id,
                "status_from": before.status.value, "status_to": after.status.value,
            },
        )
        return after

    async def withdraw(
        self, subject: Subject, application_id: int, expected_version: int,
    ) -> ApplicationSnapshot:
        return await self.transition(
            subject, application_id, ApplicationStatus.WITHDRAWN, expected_version,
        )
