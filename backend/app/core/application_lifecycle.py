"""Application Lifecycle — the status state machine for a single application.

Invariants:
    - Submitted → Reviewed → Shortlisted → Interview → Offered is the only forward path
    - Rejected and Withdrawn are side exits from any non-terminal state
    - Offered, Rejected, Withdrawn are terminal: nothing leaves them
    - Only the job owner moves forward or rejects; only the applicant withdraws
    - apply_transition never touches applied_at, applicant_id, job_id
    - All functions are PURE: the shell persists the returned snapshot

Design Decisions:
    - Forward moves may skip stages (Submitted → Offered is legal); backward moves are not
    - Check order: participant → stale version → terminal → direction, so a stale
      caller always gets CONFLICT and a current caller on a terminal application
      gets INVALID_TRANSITION regardless of role
"""

from dataclasses import replace
from datetime import datetime, timezone

from app.core.authorize import (
    ApplicationSnapshot, Denial, DenialReason, JobSnapshot, check_participant,
    check_role,
)
from app.core.domain_types import (
    ApplicationStatus, JobStatus, PIPELINE_ORDER, Role, TERMINAL_STATUSES,
    Version,
)
from app.core.session_token import Subject


EMPLOYER_TARGETS: frozenset[ApplicationStatus] = frozenset(
    set(PIPELINE_ORDER[1:]) | {ApplicationStatus.REJECTED},
)
APPLICANT_TARGETS: frozenset[ApplicationStatus] = frozenset({ApplicationStatus.WITHDRAWN})


def is_terminal(status: ApplicationStatus) -> bool:
    return status in TERMINAL_STATUSES


def _invalid(message: str) -> Denial:
    return Denial(DenialReason.INVALID_TRANSITION, message)


def check_not_terminal(application: ApplicationSnapshot) -> Denial | None:
    if is_terminal(application.status):
        return _invalid(
            f"Application is {application.status.value}; no further changes are allowed",
        )
    return None


def check_version(
    application: ApplicationSnapshot, expected_version: int | None,
) -> Denial | None:
    """Fail fast when the caller already observed an older version."""
    if expected_version is not None and expected_version != application.version:
        return Denial(
            DenialReason.STALE_VERSION,
            "Application was changed by someone else",
        )
    return None


def check_direction(
    application: ApplicationSnapshot, target: ApplicationStatus, actor: Subject,
) -> Denial | None:
    current = application.status
    if actor.id == application.job_owner_id:
        if target not in EMPLOYER_TARGETS:
            return _invalid(f"Employers cannot move an application to {target.value}")
        if target in PIPELINE_ORDER and PIPELINE_ORDER.index(target) <= PIPELINE_ORDER.index(current):
            return _invalid(
                f"Cannot move an application from {current.value} back to {target.value}",
            )
        return None
    if target not in APPLICANT_TARGETS:
        return _invalid("Applicants can only withdraw their application")
    return None


def check_transition(
    application: ApplicationSnapshot,
    target: ApplicationStatus,
    actor: Subject,
    expected_version: int | None = None,
) -> Denial | None:
    """Chain all transition checks. Returns first denial or None."""
    return (
        check_participant(actor, application)
        or check_version(application, expected_version)
        or check_not_terminal(application)
        or check_direction(application, target, actor)
    )


def apply_transition(
    application: ApplicationSnapshot,
    target: ApplicationStatus,
    employer_note: str | None = None,
    now: datetime | None = None,
) -> ApplicationSnapshot:
    """Produce the post-transition snapshot. Caller must run check_transition first."""
    return replace(
        application,
        status=target,
        employer_note=employer_note if employer_note is not None else application.employer_note,
        updated_at=now or datetime.now(timezone.utc),
        version=Version(application.version + 1),
    )


# ─── Creation ───────────────────────────────────────────────────

def check_job_open(job: JobSnapshot | None, job_id: int) -> Denial | None:
    if job is None:
        return Denial(
            DenialReason.NOT_FOUND, "Job not found",
            resource_type="Job", resource_id=job_id, public_resource=True,
        )
    if job.status != JobStatus.ACTIVE:
        return Denial(
            DenialReason.JOB_NOT_OPEN,
            f"Job is {job.status.value} and not accepting applications",
        )
    return None


def check_no_live_application(live_application_id: int | None) -> Denial | None:
    if live_application_id is not None:
        return Denial(
            DenialReason.DUPLICATE_APPLICATION,
            "You already have an active application for this job",
        )
    return None


def check_can_apply(
    actor: Subject,
    job: JobSnapshot | None,
    job_id: int,
    live_application_id: int | None,
) -> Denial | None:
    """Preconditions for creating a Submitted application."""
    return (
        check_role(actor, Role.SEEKER)
        or check_job_open(job, job_id)
        or check_no_live_application(live_application_id)
    )
