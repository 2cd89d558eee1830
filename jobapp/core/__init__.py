"""
Job Application Core Package

Modules:
- settings: Application settings loaded from the environment / .env
"""
