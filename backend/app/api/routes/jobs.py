"""Job Applicants — the employer's view of who applied to one of their jobs.

Invariants:
    - Only the owner of the job's company gets the list; other employers get 403
    - A job that does not exist is a public 404, as for every job lookup
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_resume_storage, get_subject
from app.api.routes.applications import to_application_response
from app.core.repository_protocols import ResumeStorage
from app.core.session_token import Subject
from app.infrastructure.database import get_db
from app.schemas.access import ApplicationResponse
from app.services.application_service import ApplicationService

router = APIRouter(prefix="/api/v1/jobs", tags=["jobs"])


@router.get("/{job_id}/applications", response_model=list[ApplicationResponse])
async def list_job_applications(
    job_id: int,
    subject: Subject = Depends(get_subject),
    storage: ResumeStorage = Depends(get_resume_storage),
    db: AsyncSession = Depends(get_db),
):
    snapshots = await ApplicationService(db).list_for_job(subject, job_id)
    return [to_application_response(s, storage) for s in snapshots]
