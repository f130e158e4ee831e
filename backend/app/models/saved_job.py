"""SavedJob ORM — a (subject, job) bookmark pair.

Invariants:
    - (subject_id, job_id) is unique: the table is a true set
    - No state beyond existence and saved_at
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class SavedJob(Base):
    """Saved-job membership record."""
    __tablename__ = "saved_jobs"
    __table_args__ = (
        UniqueConstraint("subject_id", "job_id", name="uq_saved_jobs_subject_job"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    job_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False,
    )
    saved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
