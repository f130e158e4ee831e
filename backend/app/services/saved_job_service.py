"""Saved-Job Service — idempotent bookmark set between a seeker and jobs.

Invariants:
    - save on an existing pair is a successful no-op (ON CONFLICT DO NOTHING)
    - unsave on an absent pair is a successful no-op
    - Concurrent duplicate saves are absorbed by the unique constraint, never two rows
    - Saving requires the job to exist; unsaving and checking do not

Design Decisions:
    - Dialect-specific insert (postgresql / sqlite) for ON CONFLICT: a savepoint +
      IntegrityError dance would be slower and racier
    - No version token: the final state is whichever save/unsave lands last
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.authorize import authorize
from app.core.domain_types import Action
from app.core.errors import ResourceNotFoundError
from app.core.session_token import Subject
from app.models.saved_job import SavedJob
from app.services.access_service import load_job, raise_if_denied

logger = logging.getLogger(__name__)


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    return pg_insert if dialect == "postgresql" else sqlite_insert


class SavedJobService:
    """Save / unsave / check for the calling seeker."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _authorize(
        self, subject: Subject, action: Action, job_id: int | None = None,
    ) -> None:
        raise_if_denied(authorize(subject, action, None), subject, action, job_id=job_id)

    async def save(self, subject: Subject, job_id: int) -> None:
        self._authorize(subject, Action.SAVED_JOB_SAVE, job_id)
        if await load_job(self.db, job_id) is None:
            raise ResourceNotFoundError("Job", str(job_id))

        insert = _insert_for(self.db)
        await self.db.execute(
            insert(SavedJob)
            .values(subject_id=subject.id, job_id=job_id, saved_at=datetime.now(timezone.utc))
            .on_conflict_do_nothing(index_elements=["subject_id", "job_id"])
        )
        await self.db.commit()
        logger.info(
            f"Job {job_id} saved",
            extra={"subject_id": subject.id, "job_id": job_id},
        )

    async def unsave(self, subject: Subject, job_id: int) -> None:
        self._authorize(subject, Action.SAVED_JOB_UNSAVE, job_id)
        await self.db.execute(
            delete(SavedJob)
            .where(SavedJob.subject_id == subject.id)
            .where(SavedJob.job_id == job_id)
        )
        await self.db.commit()

    async def check(self, subject: Subject, job_id: int) -> bool:
        self._authorize(subject, Action.SAVED_JOB_CHECK, job_id)
        result = await self.db.execute(
            select(SavedJob.id)
            .where(SavedJob.subject_id == subject.id)
            .where(SavedJob.job_id == job_id)
        )
        return result.scalar_one_or_none() is not None

    async def list_for(self, subject: Subject) -> list[SavedJob]:
        self._authorize(subject, Action.SAVED_JOB_CHECK)
        result = await self.db.execute(
            select(SavedJob)
            .where(SavedJob.subject_id == subject.id)
            .order_by(SavedJob.saved_at.desc(), SavedJob.id.desc())
        )
        return list(result.scalars().all())
