"""Job ORM — a posting that belongs to exactly one company.

Invariants:
    - company_id is non-nullable; the owning employer is company.owner_id
    - status is a JobStatus value; only Active accepts applications
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.core.domain_types import JobStatus


class Job(Base):
    """Job entity — mutable only by its company's owner."""
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("companies.id"), nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=JobStatus.ACTIVE.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    company: Mapped["Company"] = relationship(
        "Company", lazy="joined",
    )
