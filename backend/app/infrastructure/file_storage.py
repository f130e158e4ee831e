"""Résumé File Storage Client — talks to the external upload service over HTTP.

Invariants:
    - Every call carries a bounded timeout (settings.upload_timeout_seconds)
    - Timeouts and 5xx/connection failures → UpstreamError (retryable by the caller)
    - 4xx refusals (bad type, too large) → ValidationFailedError (not retryable)
    - Never retries on its own: the upload-then-create step is retried by the caller

Design Decisions:
    - httpx.AsyncClient per call: the collaborator is hit once per apply, pooling buys nothing
    - Response contract mirrors the upload service: {"data": {"fileName": "..."}}
"""

import logging
from urllib.parse import quote

import httpx

from app.core.domain_types import ResumeReference
from app.core.errors import UpstreamError, ValidationFailedError
from app.core.repository_protocols import ResumeUpload

logger = logging.getLogger(__name__)

SERVICE_NAME = "resume-storage"


class HttpResumeStorage:
    """ResumeStorage implementation backed by the upload service's REST API."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def store(self, upload: ResumeUpload) -> ResumeReference:
        """Upload one résumé file and return the stored reference."""
        content = await upload.read()
        files = {
            "file": (
                upload.filename or "resume",
                content,
                upload.content_type or "application/octet-stream",
            ),
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post("/uploads/resume", files=files)
        except httpx.TimeoutException as e:
            logger.error(f"Résumé upload timed out: {e}")
            raise UpstreamError("upload timed out", SERVICE_NAME, timed_out=True)
        except httpx.HTTPError as e:
            logger.error(f"Résumé upload failed: {e}")
            raise UpstreamError("upload service unreachable", SERVICE_NAME)

        if 400 <= response.status_code < 500:
            raise ValidationFailedError(
                _extract_message(response) or "Résumé file was rejected",
                "file",
            )
        if response.status_code >= 500:
            logger.error(
                f"Résumé upload returned {response.status_code}",
            )
            raise UpstreamError(
                f"upload service returned {response.status_code}", SERVICE_NAME,
            )

        reference = _extract_reference(response)
        if not reference:
            raise UpstreamError("upload response had no file reference", SERVICE_NAME)
        return ResumeReference(reference)

    def resolve(self, reference: ResumeReference) -> str:
        return f"{self.base_url}/uploads/resume/{quote(reference, safe='')}"


def _extract_reference(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    data = body.get("data") if isinstance(body, dict) else None
    if isinstance(data, dict):
        return data.get("fileName") or data.get("file_name")
    return None


def _extract_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("message") if isinstance(body, dict) else None
