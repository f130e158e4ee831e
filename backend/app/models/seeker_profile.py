"""SeekerProfile ORM — the profile-level résumé reference of a job seeker.

Invariants:
    - user_id is the primary key: one profile per seeker
    - resume_reference is opaque; only the file store can resolve it
"""

from datetime import datetime

from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class SeekerProfile(Base):
    __tablename__ = "seeker_profiles"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    resume_reference: Mapped[str | None] = mapped_column(String(500), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
