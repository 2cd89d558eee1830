"""
Job Application Backend Tests

Test Organization:
- test_*.py: unit tests for auth, validation, sessions and services
- api/: HTTP tests against the FastAPI app with an in-memory database

Running Tests:
    # Run all tests
    pytest tests/

    # Run only API tests
    pytest tests/api/
"""
