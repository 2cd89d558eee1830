"""
Utility Library.

Modules:
--------
logging_setup
    Logging configuration for the app and the CLI.
dates
    UTC timestamp helpers.
pagination
    Page/limit parsing and pagination metadata.
"""

from jobapp.utils.logging_setup import configure_basic_logging
from jobapp.utils.dates import utcnow, to_iso
