"""Apply Résumé Selection — decides which résumé source an application will use.

Invariants:
    - plan_resume_source is PURE: it never uploads, it only decides
    - A stored reference is used verbatim; no upload is planned for it
    - A "stored" choice with no stored reference falls back to the supplied file
    - MISSING_RESUME only when neither source is available, before any upload starts
"""

from dataclasses import dataclass

from app.core.authorize import Denial, DenialReason
from app.core.domain_types import ResumeChoice, ResumeReference


@dataclass(frozen=True)
class ResumePlan:
    """Either a ready reference, or an instruction to upload the supplied file."""
    reference: ResumeReference | None
    needs_upload: bool


def plan_resume_source(
    choice: ResumeChoice,
    stored_reference: str | None,
    has_file: bool,
) -> ResumePlan | Denial:
    """Stored reference if chosen and present, otherwise the supplied file."""
    if choice == ResumeChoice.STORED and stored_reference:
        return ResumePlan(reference=ResumeReference(stored_reference), needs_upload=False)
    if has_file:
        return ResumePlan(reference=None, needs_upload=True)
    return Denial(
        DenialReason.MISSING_RESUME,
        "A résumé is required: choose your stored résumé or upload a file",
    )
