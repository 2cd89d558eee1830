"""
CLI management commands for the job application backend.

Usage:
    python -m jobapp.cli.commands init-db
    python -m jobapp.cli.commands cleanup-sessions
    python -m jobapp.cli.commands create-admin --email ... --password ... \\
        --forename ... --surname ...
"""
from __future__ import annotations

import argparse
import logging
import sys

from jobapp.auth.cleanup import cleanup_expired_sessions
from jobapp.auth.repository import DuplicateEmailError
from jobapp.auth.service import AuthService
from jobapp.auth.validation import ValidationFailed, validate_registration
from jobapp.core.settings import settings
from jobapp.db.engine import SessionLocal, init_db
from jobapp.models import Role
from jobapp.utils.logging_setup import configure_basic_logging

logger = logging.getLogger(__name__)


def cmd_init_db() -> None:
    """Create any missing database tables."""
    logger.info("Creating database tables...")
    init_db()
    logger.info("Database ready")


def cmd_cleanup_sessions() -> int:
    """Delete expired sessions."""
    removed = cleanup_expired_sessions(SessionLocal)
    logger.info(f"Removed {removed} expired session(s)")
    return removed


def cmd_create_admin(email: str, password: str, forename: str, surname: str) -> None:
    """Create an administrator account, validated like a registration."""
    try:
        data = validate_registration({
            "email": email,
            "password": password,
            "forename": forename,
            "surname": surname,
        })
    except ValidationFailed as e:
        for violation in e.violations:
            logger.error(f"{violation.field}: {violation.message}")
        sys.exit(1)

    db = SessionLocal()
    try:
        user = AuthService(db).create_account(data, Role.ADMIN)
        logger.info(f"Created admin account {user.email}")
    except DuplicateEmailError as e:
        logger.error(f"Cannot create admin: {e}")
        sys.exit(1)
    finally:
        db.close()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entrypoint."""
    configure_basic_logging(level=settings.log_level)

    parser = argparse.ArgumentParser(
        description="Job application backend management commands",
        prog="python -m jobapp.cli.commands"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "init-db",
        help="Create database tables"
    )

    subparsers.add_parser(
        "cleanup-sessions",
        help="Delete expired sessions"
    )

    admin_parser = subparsers.add_parser(
        "create-admin",
        help="Create an administrator account"
    )
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--forename", required=True)
    admin_parser.add_argument("--surname", required=True)

    args = parser.parse_args(argv)

    if args.command == "init-db":
        cmd_init_db()
    elif args.command == "cleanup-sessions":
        cmd_cleanup_sessions()
    elif args.command == "create-admin":
        cmd_create_admin(args.email, args.password, args.forename, args.surname)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
