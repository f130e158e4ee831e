"""Application ORM — a seeker's application to a job.

Invariants:
    - job_id and applicant_id are set once and never change
    - At most one live (non-terminal) application per (job_id, applicant_id):
      enforced by the partial unique index uq_applications_live
    - version increments on every status change (optimistic-concurrency token)
    - Rows are never deleted; withdrawn/rejected/offered are terminal states

Design Decisions:
    - Integer version column alongside updated_at: timestamp equality is not
      reliable across drivers, an integer compare is
    - Partial index declared for both postgresql and sqlite dialects
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.core.domain_types import ApplicationStatus, TERMINAL_STATUSES

_LIVE_PREDICATE = text(
    "status NOT IN ({})".format(
        ", ".join(f"'{s.value}'" for s in sorted(TERMINAL_STATUSES, key=lambda s: s.value)),
    ),
)


class Application(Base):
    """Application entity — status is the only field that moves after creation."""
    __tablename__ = "applications"
    __table_args__ = (
        Index(
            "uq_applications_live", "job_id", "applicant_id", unique=True,
            postgresql_where=_LIVE_PREDICATE, sqlite_where=_LIVE_PREDICATE,
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("jobs.id"), nullable=False, index=True,
    )
    applicant_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    resume_reference: Mapped[str] = mapped_column(String(500), nullable=False)
    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApplicationStatus.SUBMITTED.value,
    )
    employer_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    job: Mapped["Job"] = relationship("Job", lazy="joined")
