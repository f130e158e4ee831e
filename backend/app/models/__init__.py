"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Ownership flows Company.owner_id → Job.company_id → Application.job_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.company import Company  # noqa: F401
from app.models.job import Job  # noqa: F401
from app.models.application import Application  # noqa: F401
from app.models.saved_job import SavedJob  # noqa: F401
from app.models.seeker_profile import SeekerProfile  # noqa: F401
