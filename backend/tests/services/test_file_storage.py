"""Résumé File Storage Client — HTTP contract with the upload service.

Tests cover:
    - 2xx with {"data": {"fileName": ...}} → reference returned
    - Timeouts and connection errors → UpstreamError
    - 4xx refusal → ValidationFailedError on "file"
    - 5xx and malformed bodies → UpstreamError
    - resolve() builds a URL under the configured base
"""

import httpx
import pytest

from app.core.errors import UpstreamError, ValidationFailedError
from app.infrastructure.file_storage import HttpResumeStorage


class _Upload:
    filename = "cv.pdf"
    content_type = "application/pdf"

    async def read(self, size: int = -1) -> bytes:
        return b"%PDF-1.4"


def _storage(handler) -> HttpResumeStorage:
    return HttpResumeStorage(
        "http://uploads.test/", timeout_seconds=1.0,
        transport=httpx.MockTransport(handler),
    )


async def test_store_returns_reference():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = request.content
        return httpx.Response(200, json={"data": {"fileName": "abc123.pdf"}})

    reference = await _storage(handler).store(_Upload())
    assert reference == "abc123.pdf"
    assert seen["path"] == "/uploads/resume"
    assert b"%PDF-1.4" in seen["body"]


async def test_timeout_is_upstream_timeout():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(UpstreamError) as exc_info:
        await _storage(handler).store(_Upload())
    assert exc_info.value.timed_out is True


async def test_connection_error_is_upstream_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(UpstreamError) as exc_info:
        await _storage(handler).store(_Upload())
    assert exc_info.value.code == "UPSTREAM_FAILURE"


async def test_client_error_is_validation_failure():
    def handler(request):
        return httpx.Response(413, json={"message": "File too large"})

    with pytest.raises(ValidationFailedError) as exc_info:
        await _storage(handler).store(_Upload())
    assert exc_info.value.field == "file"
    assert exc_info.value.message == "File too large"


async def test_server_error_is_upstream_failure():
    def handler(request):
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(UpstreamError):
        await _storage(handler).store(_Upload())


async def test_missing_reference_is_upstream_failure():
    def handler(request):
        return httpx.Response(200, json={"data": {}})

    with pytest.raises(UpstreamError):
        await _storage(handler).store(_Upload())


def test_resolve_quotes_reference():
    storage = HttpResumeStorage("http://uploads.test/")
    assert storage.resolve("my cv.pdf") == "http://uploads.test/uploads/resume/my%20cv.pdf"
