"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never are — the shell orchestrates the async calls
"""

from typing import Protocol

from app.core.domain_types import ResumeReference


class ResumeUpload(Protocol):
    """A file handed over by the caller at apply time."""
    filename: str | None
    content_type: str | None

    async def read(self, size: int = -1) -> bytes: ...


class ResumeStorage(Protocol):
    """Contract for the external résumé file store.

    The store enforces accepted types (pdf, doc, docx) and the 5 MB limit;
    implementations raise ValidationFailedError when it refuses a file and
    UpstreamError when it is unreachable or times out.
    """
    async def store(self, upload: ResumeUpload) -> ResumeReference: ...
    def resolve(self, reference: ResumeReference) -> str: ...
