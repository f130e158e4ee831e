"""Saved Jobs — a seeker's bookmark set.

Invariants:
    - save and unsave are idempotent and answer 204 whether or not anything changed
    - Only seekers reach these handlers (route table) and the service re-checks the role
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_subject
from app.core.session_token import Subject
from app.infrastructure.database import get_db
from app.schemas.access import SavedJobItem, SavedJobStatus
from app.services.saved_job_service import SavedJobService

router = APIRouter(prefix="/api/v1/saved-jobs", tags=["saved-jobs"])


@router.get("", response_model=list[SavedJobItem])
async def list_saved_jobs(
    subject: Subject = Depends(get_subject),
    db: AsyncSession = Depends(get_db),
):
    rows = await SavedJobService(db).list_for(subject)
    return [SavedJobItem(job_id=r.job_id, saved_at=r.saved_at) for r in rows]


@router.post("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def save_job(
    job_id: int,
    subject: Subject = Depends(get_subject),
    db: AsyncSession = Depends(get_db),
):
    await SavedJobService(db).save(subject, job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unsave_job(
    job_id: int,
    subject: Subject = Depends(get_subject),
    db: AsyncSession = Depends(get_db),
):
    await SavedJobService(db).unsave(subject, job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{job_id}/check", response_model=SavedJobStatus)
async def check_saved_job(
    job_id: int,
    subject: Subject = Depends(get_subject),
    db: AsyncSession = Depends(get_db),
):
    is_saved = await SavedJobService(db).check(subject, job_id)
    return SavedJobStatus(job_id=job_id, is_saved=is_saved)
