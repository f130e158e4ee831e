"""Access Schemas — Pydantic models for session, authorization, application, and saved-job endpoints.

Invariants:
    - Status transitions always carry the version the caller observed
    - employer_note max 2000 chars, stripped; empty note → None
    - Response models expose ids and statuses only, never the job owner id

Design Decisions:
    - Enum-typed fields from core/domain_types: Pydantic rejects unknown statuses at the boundary
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.core.domain_types import Action, ApplicationStatus, Role


class SessionResponse(BaseModel):
    """verify-session result — the caller's own identity."""
    subject_id: int
    role: Role
    issued_at: datetime | None = None
    expires_at: datetime
    landing_path: str


class ReturnPathResponse(BaseModel):
    location: str


class AccessCheckRequest(BaseModel):
    action: Action
    resource_id: int | None = Field(None, ge=1)


class AccessCheckResponse(BaseModel):
    allowed: bool = True
    action: Action


class StatusUpdateRequest(BaseModel):
    """PATCH /applications/{id}/status body."""
    status: ApplicationStatus
    version: int = Field(ge=1)
    employer_note: str | None = Field(None, max_length=2000)

    @field_validator("employer_note")
    @classmethod
    def strip_note(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class WithdrawRequest(BaseModel):
    version: int = Field(ge=1)


class ApplicationResponse(BaseModel):
    id: int
    job_id: int
    applicant_id: int
    status: ApplicationStatus
    employer_note: str | None = None
    applied_at: datetime
    updated_at: datetime | None = None
    version: int
    resume_url: str | None = None


class SavedJobStatus(BaseModel):
    job_id: int
    is_saved: bool


class SavedJobItem(BaseModel):
    job_id: int
    saved_at: datetime
