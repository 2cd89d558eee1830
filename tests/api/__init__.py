"""
Job Application API Tests

Tests in this package drive the FastAPI app through TestClient, covering
the auth, user, job role and application routers end to end.
"""
