"""Ownership Authorization — decides whether a subject may act on a resource.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return Denial on violation, None on success
    - Resource snapshots are loaded fresh by the shell for every check (never cached)
    - Ownership is always resolved through company.owner_id (job → company → owner)
    - authorize() chains checks; first denial wins

Design Decisions:
    - Pure functions over method dispatch: testable without mocks
    - Denial keeps the precise reason (NOT_OWNER vs NOT_FOUND) for logs;
      core/errors.error_for_denial() collapses them for the caller
    - A missing resource is passed as None; the check itself reports NOT_FOUND
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from app.core.domain_types import (
    Action, ApplicationStatus, CompanyId, JobId, JobStatus, Role, SubjectId,
    ApplicationId, Version,
)
from app.core.session_token import Subject


class DenialReason(str, Enum):
    WRONG_ROLE = "wrong_role"
    NOT_OWNER = "not_owner"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_TRANSITION = "invalid_transition"
    JOB_NOT_OPEN = "job_not_open"
    DUPLICATE_APPLICATION = "duplicate_application"
    STALE_VERSION = "stale_version"
    MISSING_RESUME = "missing_resume"


@dataclass(frozen=True)
class Denial:
    reason: DenialReason
    message: str
    resource_type: str | None = None
    resource_id: int | None = None
    public_resource: bool = False


# ─── Resource Snapshots ─────────────────────────────────────────

@dataclass(frozen=True)
class CompanySnapshot:
    id: CompanyId
    owner_id: SubjectId


@dataclass(frozen=True)
class JobSnapshot:
    id: JobId
    company_id: CompanyId
    owner_id: SubjectId
    status: JobStatus


@dataclass(frozen=True)
class ApplicationSnapshot:
    id: ApplicationId
    job_id: JobId
    applicant_id: SubjectId
    job_owner_id: SubjectId
    status: ApplicationStatus
    employer_note: str | None
    applied_at: datetime
    updated_at: datetime | None
    version: Version
    resume_reference: str | None = None


Resource = CompanySnapshot | JobSnapshot | ApplicationSnapshot | None


# ─── Individual Rules ───────────────────────────────────────────

def check_role(subject: Subject, role: Role) -> Denial | None:
    if subject.role != role:
        return Denial(
            DenialReason.WRONG_ROLE,
            f"Action requires role {role.value}",
        )
    return None


def check_exists(
    resource: Resource, resource_type: str, resource_id: int | None,
    public: bool = False,
) -> Denial | None:
    if resource is None:
        return Denial(
            DenialReason.NOT_FOUND, f"{resource_type} not found",
            resource_type=resource_type, resource_id=resource_id,
            public_resource=public,
        )
    return None


def check_owner(subject: Subject, owner_id: SubjectId, resource_type: str) -> Denial | None:
    if subject.id != owner_id:
        return Denial(
            DenialReason.NOT_OWNER, f"{resource_type} belongs to another subject",
            resource_type=resource_type,
        )
    return None


def check_no_company(subject: Subject, company: CompanySnapshot | None) -> Denial | None:
    if company is not None:
        return Denial(
            DenialReason.ALREADY_EXISTS,
            "Employer already has a company",
            resource_type="Company",
        )
    return None


def check_owns_company(subject: Subject, company: CompanySnapshot | None) -> Denial | None:
    if company is None or company.owner_id != subject.id:
        return Denial(
            DenialReason.NOT_OWNER,
            "Create a company before posting jobs",
            resource_type="Company",
        )
    return None


def check_participant(subject: Subject, application: ApplicationSnapshot) -> Denial | None:
    if subject.id not in (application.applicant_id, application.job_owner_id):
        return Denial(
            DenialReason.NOT_OWNER, "Application belongs to another subject",
            resource_type="Application",
        )
    return None


# ─── Composite Authorization ────────────────────────────────────

def authorize(subject: Subject, action: Action, resource: Resource) -> Denial | None:
    """Evaluate one action against the current resource snapshot.

    For COMPANY_CREATE and JOB_CREATE the resource is the subject's own
    company (or None). For SAVED_JOB_* and JOB_APPLICATIONS_VIEW it is the job.
    """
    if action == Action.COMPANY_CREATE:
        return check_role(subject, Role.EMPLOYER) or check_no_company(subject, resource)

    if action == Action.COMPANY_UPDATE:
        return (
            check_exists(resource, "Company", None)
            or check_owner(subject, resource.owner_id, "Company")
        )

    if action == Action.JOB_CREATE:
        return check_role(subject, Role.EMPLOYER) or check_owns_company(subject, resource)

    if action in (Action.JOB_UPDATE, Action.JOB_DELETE):
        return (
            check_role(subject, Role.EMPLOYER)
            or check_exists(resource, "Job", None, public=True)
            or check_owner(subject, resource.owner_id, "Job")
        )

    if action == Action.JOB_APPLICATIONS_VIEW:
        return (
            check_role(subject, Role.EMPLOYER)
            or check_exists(resource, "Job", None, public=True)
            or check_owner(subject, resource.owner_id, "Job")
        )

    if action in (Action.APPLICATION_CREATE, Action.APPLICATION_LIST_MINE):
        return check_role(subject, Role.SEEKER)

    if action == Action.APPLICATION_VIEW:
        return (
            check_exists(resource, "Application", None)
            or check_participant(subject, resource)
        )

    if action == Action.APPLICATION_STATUS_UPDATE:
        return (
            check_exists(resource, "Application", None)
            or check_owner(subject, resource.job_owner_id, "Application")
        )

    if action == Action.APPLICATION_WITHDRAW:
        return (
            check_exists(resource, "Application", None)
            or check_owner(subject, resource.applicant_id, "Application")
        )

    if action in (Action.SAVED_JOB_SAVE, Action.SAVED_JOB_UNSAVE, Action.SAVED_JOB_CHECK):
        # the pair's subject is always the caller; only the role can be wrong
        return check_role(subject, Role.SEEKER)

    raise ValueError(f"Unknown action: {action}")
