"""Access Service — loads fresh resource snapshots and runs the ownership authorizer.

Invariants:
    - Snapshots are read from the DB on every call (authorization never uses cached state)
    - raise_if_denied is the only path from a core Denial to a raised error
    - Denials are logged with the precise reason; the raised error may be coarser

Design Decisions:
    - Snapshot loaders live here and are shared by the other services
    - load_resource maps each action to the one snapshot its rule needs
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.authorize import (
    ApplicationSnapshot, CompanySnapshot, Denial, JobSnapshot, Resource, authorize,
)
from app.core.domain_types import (
    Action, ApplicationId, ApplicationStatus, CompanyId, JobId, JobStatus,
    SubjectId, Version,
)
from app.core.errors import ErrorContext, ValidationFailedError, error_for_denial
from app.core.session_token import Subject
from app.models.application import Application
from app.models.company import Company
from app.models.job import Job

logger = logging.getLogger(__name__)


# ─── Snapshot Loaders ───────────────────────────────────────────

def company_snapshot(company: Company) -> CompanySnapshot:
    return CompanySnapshot(id=CompanyId(company.id), owner_id=SubjectId(company.owner_id))


def job_snapshot(job: Job) -> JobSnapshot:
    return JobSnapshot(
        id=JobId(job.id),
        company_id=CompanyId(job.company_id),
        owner_id=SubjectId(job.company.owner_id),
        status=JobStatus(job.status),
    )


def application_snapshot(application: Application) -> ApplicationSnapshot:
    return ApplicationSnapshot(
        id=ApplicationId(application.id),
        job_id=JobId(application.job_id),
        applicant_id=SubjectId(application.applicant_id),
        job_owner_id=SubjectId(application.job.company.owner_id),
        status=ApplicationStatus(application.status),
        employer_note=application.employer_note,
        applied_at=application.applied_at,
        updated_at=application.updated_at,
        version=Version(application.version),
        resume_reference=application.resume_reference,
    )


async def load_company(db: AsyncSession, company_id: int) -> CompanySnapshot | None:
    company = await db.get(Company, company_id)
    return company_snapshot(company) if company else None


async def load_company_owned_by(db: AsyncSession, subject_id: int) -> CompanySnapshot | None:
    result = await db.execute(select(Company).where(Company.owner_id == subject_id))
    company = result.scalar_one_or_none()
    return company_snapshot(company) if company else None


async def load_job(db: AsyncSession, job_id: int) -> JobSnapshot | None:
    job = await db.get(Job, job_id)
    return job_snapshot(job) if job else None


async def load_application(
    db: AsyncSession, application_id: int,
) -> ApplicationSnapshot | None:
    application = await db.get(Application, application_id, populate_existing=True)
    return application_snapshot(application) if application else None


# ─── Enforcement ────────────────────────────────────────────────

def raise_if_denied(
    denial: Denial | None, subject: Subject, action: Action | str,
    **log_extra: object,
) -> None:
    """Log and raise the caller-visible error for a denial. No-op when allowed."""
    if denial is None:
        return
    action_name = action.value if isinstance(action, Action) else action
    logger.warning(
        f"Denied {action_name} for subject {subject.id}: {denial.reason.value}",
        extra={
            "subject_id": subject.id, "role": subject.role.value,
            "action": action_name, "reason": denial.reason.value, **log_extra,
        },
    )
    raise error_for_denial(
        denial, ErrorContext(subject_id=subject.id, action=action_name),
    )


_ACTIONS_NEEDING_ID: frozenset[Action] = frozenset({
    Action.COMPANY_UPDATE, Action.JOB_UPDATE, Action.JOB_DELETE,
    Action.JOB_APPLICATIONS_VIEW, Action.APPLICATION_VIEW, Action.APPLICATION_STATUS_UPDATE,
    Action.APPLICATION_WITHDRAW, Action.SAVED_JOB_SAVE,
    Action.SAVED_JOB_UNSAVE, Action.SAVED_JOB_CHECK,
})


class AccessService:
    """Answers "may this subject do this?" against current resource state."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_resource(
        self, subject: Subject, action: Action, resource_id: int | None,
    ) -> Resource:
        if action in (Action.COMPANY_CREATE, Action.JOB_CREATE):
            return await load_company_owned_by(self.db, subject.id)
        if action in (Action.APPLICATION_CREATE, Action.APPLICATION_LIST_MINE):
            return None
        if resource_id is None:
            return None
        if action == Action.COMPANY_UPDATE:
            return await load_company(self.db, resource_id)
        if action in (
            Action.JOB_UPDATE, Action.JOB_DELETE, Action.JOB_APPLICATIONS_VIEW,
            Action.SAVED_JOB_SAVE, Action.SAVED_JOB_UNSAVE, Action.SAVED_JOB_CHECK,
        ):
            return await load_job(self.db, resource_id)
        return await load_application(self.db, resource_id)

    async def authorize_action(
        self, subject: Subject, action: Action, resource_id: int | None = None,
    ) -> Resource:
        """Raise if denied; return the snapshot the decision was made on."""
        if action in _ACTIONS_NEEDING_ID and resource_id is None:
            raise ValidationFailedError(
                f"{action.value} requires a resource_id", "resource_id",
            )
        resource = await self.load_resource(subject, action, resource_id)
        raise_if_denied(
            authorize(subject, action, resource), subject, action,
        )
        return resource
