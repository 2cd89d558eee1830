"""
Pydantic Schemas

This package contains Pydantic models for request/response validation
in the FastAPI application.

Schemas:
- common_schema: Pagination and generic message schemas
- job_role_schema: Job role schemas
- application_schema: Job application schemas
"""
