"""Command-line management commands."""
