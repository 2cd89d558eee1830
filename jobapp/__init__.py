"""
Job Application Backend

FastAPI backend for a job board: account registration and login with
server-side sessions, job role management, and job applications with
CV upload.

Packages:
- api: FastAPI routers and services for job roles and applications
- auth: Accounts, passwords, sessions, id obfuscation, access policy
- core: Configuration
- db: Database engine and session management
- models: SQLAlchemy ORM models
- schemas: Pydantic schemas for request/response validation
- cli: Command-line management commands

Usage:
    # Run the API server
    uvicorn jobapp.main:app --reload --port 8000

Environment Variables:
    DATABASE_URL: Database connection URL (default: sqlite:///./database.sqlite)
    LOG_LEVEL: Logging level (default: INFO)
"""

__version__ = "0.1.0"
