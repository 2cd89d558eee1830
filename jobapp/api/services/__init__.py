"""
API Services

This package contains service modules that implement business logic
for the API endpoints.

Services:
- job_role_service: Job role listing, search and admin CRUD
- application_service: Application submission, updates and withdrawal
"""
