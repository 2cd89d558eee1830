"""API routers and services for job roles and job applications."""
