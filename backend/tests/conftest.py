"""Root conftest — shared test configuration."""

import os

# Tests never talk to a real identity service or upload service
os.environ.setdefault(
    "SESSION_SECRET", "test-session-secret-that-is-at-least-32-bytes-long",
)
os.environ.setdefault("UPLOAD_SERVICE_URL", "http://uploads.test")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
