"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SubjectId, CompanyId, JobId, ApplicationId wrap ints; never mix them in domain logic
    - All valid states encoded as Enums — no raw string matching
    - ApplicationStatus order in PIPELINE_ORDER is the only forward direction

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Enum values match the wire spelling used by the identity service and front end
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

SubjectId = NewType("SubjectId", int)
CompanyId = NewType("CompanyId", int)
JobId = NewType("JobId", int)
ApplicationId = NewType("ApplicationId", int)


# ─── Value Types ─────────────────────────────────────────────────

ResumeReference = NewType("ResumeReference", str)   # opaque storage token
Version = NewType("Version", int)                    # optimistic-concurrency token


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Subject roles carried in the session token."""
    SEEKER = "JobSeeker"
    EMPLOYER = "Employer"
    ADMIN = "Admin"


class JobStatus(str, Enum):
    """Job posting states — only ACTIVE accepts applications."""
    DRAFT = "Draft"
    ACTIVE = "Active"
    PAUSED = "Paused"
    CLOSED = "Closed"
    EXPIRED = "Expired"


class ApplicationStatus(str, Enum):
    """Application lifecycle states — maps to DB `status` column."""
    SUBMITTED = "Submitted"
    REVIEWED = "Reviewed"
    SHORTLISTED = "Shortlisted"
    INTERVIEW = "Interview"
    OFFERED = "Offered"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


PIPELINE_ORDER: tuple[ApplicationStatus, ...] = (
    ApplicationStatus.SUBMITTED,
    ApplicationStatus.REVIEWED,
    ApplicationStatus.SHORTLISTED,
    ApplicationStatus.INTERVIEW,
    ApplicationStatus.OFFERED,
)

TERMINAL_STATUSES: frozenset[ApplicationStatus] = frozenset({
    ApplicationStatus.OFFERED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WITHDRAWN,
})


class Action(str, Enum):
    """Mutations and reads gated by the ownership authorizer."""
    COMPANY_CREATE = "company.create"
    COMPANY_UPDATE = "company.update"
    JOB_CREATE = "job.create"
    JOB_UPDATE = "job.update"
    JOB_DELETE = "job.delete"
    JOB_APPLICATIONS_VIEW = "job.applications_view"
    APPLICATION_CREATE = "application.create"
    APPLICATION_VIEW = "application.view"
    APPLICATION_LIST_MINE = "application.list_mine"
    APPLICATION_STATUS_UPDATE = "application.status_update"
    APPLICATION_WITHDRAW = "application.withdraw"
    SAVED_JOB_SAVE = "saved_job.save"
    SAVED_JOB_UNSAVE = "saved_job.unsave"
    SAVED_JOB_CHECK = "saved_job.check"


class ResumeChoice(str, Enum):
    """Which résumé the applicant picked in the apply form."""
    STORED = "stored"
    UPLOAD = "upload"
