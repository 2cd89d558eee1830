"""Shared helpers for tests."""
from typing import Any, List, Optional

from fastapi.testclient import TestClient

DEFAULT_PASSWORD = "Password123!"


def login(client: TestClient, email: str, password: str = DEFAULT_PASSWORD):
    """Log a client in; the session cookie is kept in the client's jar."""
    return client.post("/api/auth/login", json={"email": email, "password": password})


def pdf_upload(name: str = "cv.pdf", content: bytes = b"%PDF-1.4 test cv"):
    return {"cv": (name, content, "application/pdf")}


class MockQuery:
    """Mock SQLAlchemy query object for testing."""

    def __init__(self, results: Optional[List[Any]] = None, count_value: Optional[int] = None):
        self._results = results or []
        self._count_value = count_value if count_value is not None else len(self._results)

    def filter(self, *args, **kwargs):
        return self

    def options(self, *args, **kwargs):
        return self

    def order_by(self, *args, **kwargs):
        return self

    def offset(self, n):
        return self

    def limit(self, n):
        return self

    def first(self):
        return self._results[0] if self._results else None

    def all(self):
        return self._results

    def count(self):
        return self._count_value

    def delete(self, *args, **kwargs):
        return len(self._results)
