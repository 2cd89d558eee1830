"""
Job Application API Routers

This package contains FastAPI routers that define the API endpoints.

Routers:
- health_router: Health check endpoint
- job_role_router: Job role listing, search and administration
- application_router: Job application submission, review and withdrawal
- user_router: Account administration
"""

from .health_router import router as health_router
from .job_role_router import router as job_role_router
from .application_router import router as application_router
from .user_router import router as user_router

__all__ = [
    "health_router",
    "job_role_router",
    "application_router",
    "user_router",
]
