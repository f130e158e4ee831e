"""Applications — submit, view, list, move through the pipeline, and withdraw.

Invariants:
    - Submission is multipart (résumé file optional); everything else is JSON
    - Every status write carries the version the caller last saw
    - Responses never include the job owner's id
    - /mine is declared before /{application_id} so it is never parsed as an id

Design Decisions:
    - Routes only translate HTTP ↔ service calls; all rules live in core/ and services/
    - An empty file part (browsers send one when no file is picked) counts as no file
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_resume_storage, get_subject
from app.config import get_settings
from app.core.domain_types import ResumeChoice
from app.core.repository_protocols import ResumeStorage
from app.core.session_token import Subject
from app.infrastructure.database import get_db
from app.schemas.access import (
    ApplicationResponse, StatusUpdateRequest, WithdrawRequest,
)
from app.services.application_service import ApplicationService
from app.services.apply_coordinator import ApplyCoordinator, ApplyRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/applications", tags=["applications"])


def to_application_response(application, storage: ResumeStorage) -> ApplicationResponse:
    """Build the response from either an ORM row or an ApplicationSnapshot."""
    reference = application.resume_reference
    return ApplicationResponse(
        id=application.id,
        job_id=application.job_id,
        applicant_id=application.applicant_id,
        status=application.status,
        employer_note=application.employer_note,
        applied_at=application.applied_at,
        updated_at=application.updated_at,
        version=application.version,
        resume_url=storage.resolve(reference) if reference else None,
    )


@router.post(
    "", response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_application(
    job_id: int = Form(..., ge=1),
    resume_choice: ResumeChoice = Form(...),
    cover_letter: str | None = Form(None, max_length=5000),
    file: UploadFile | None = File(None),
    subject: Subject = Depends(get_subject),
    storage: ResumeStorage = Depends(get_resume_storage),
    db: AsyncSession = Depends(get_db),
):
    """Submit an application using the stored résumé or a freshly uploaded one."""
    upload = file if file is not None and file.filename else None
    coordinator = ApplyCoordinator(
        db, storage, upload_timeout_seconds=get_settings().upload_timeout_seconds,
    )
    application = await coordinator.apply(
        subject,
        ApplyRequest(
            job_id=job_id,
            resume_choice=resume_choice,
            cover_letter=(cover_letter or "").strip() or None,
            upload=upload,
        ),
    )
    return to_application_response(application, storage)


@router.get("/mine", response_model=list[ApplicationResponse])
async def list_my_applications(
    subject: Subject = Depends(get_subject),
    storage: ResumeStorage = Depends(get_resume_storage),
    db: AsyncSession = Depends(get_db),
):
    snapshots = await ApplicationService(db).list_mine(subject)
    return [to_application_response(s, storage) for s in snapshots]


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: int,
    subject: Subject = Depends(get_subject),
    storage: ResumeStorage = Depends(get_resume_storage),
    db: AsyncSession = Depends(get_db),
):
    snapshot = await ApplicationService(db).get_for_subject(subject, application_id)
    return to_application_response(snapshot, storage)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: int,
    body: StatusUpdateRequest,
    subject: Subject = Depends(get_subject),
    storage: ResumeStorage = Depends(get_resume_storage),
    db: AsyncSession = Depends(get_db),
):
    """Employer pipeline move (or applicant withdrawal) guarded by version."""
    snapshot = await ApplicationService(db).transition(
        subject, application_id, body.status, body.version, body.employer_note,
    )
    return to_application_response(snapshot, storage)


@router.post("/{application_id}/withdraw", response_model=ApplicationResponse)
async def withdraw_application(
    application_id: int,
    body: WithdrawRequest,
    subject: Subject = Depends(get_subject),
    storage: ResumeStorage = Depends(get_resume_storage),
    db: AsyncSession = Depends(get_db),
):
    snapshot = await ApplicationService(db).withdraw(subject, application_id, body.version)
    return to_application_response(snapshot, storage)
