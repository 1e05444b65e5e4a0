"""Operator commands for bootstrapping accounts.

Usage::

    python -m teamflow.db.seed create-admin --name "Ops" --email ops@example.com --password '...'
    python -m teamflow.db.seed reset-password ops@example.com '...'
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from ..core.config import get_settings
from ..core.logging import configure_logging
from ..errors import NotFoundError
from ..models import User, UserRole
from ..services import UserService
from .session import Database

logger = logging.getLogger(__name__)


async def create_admin(database: Database, *, name: str, email: str, password: str) -> User:
    """Create an admin account, or promote the existing account with that email."""
    async with database.session() as session:
        user_service = UserService(session)
        user = await user_service.get_user_by_email(email)
        if user is None:
            user = await user_service.create_user(name=name, email=email, password=password, role=UserRole.ADMIN)
            logger.info("Admin account created", extra={"target_user_id": user.id})
            return user
        user.role = UserRole.ADMIN
        await user_service.set_password(user, password)
        logger.info("Existing account promoted to admin", extra={"target_user_id": user.id})
        return user


async def reset_password(database: Database, *, email: str, password: str) -> User:
    async with database.session() as session:
        user_service = UserService(session)
        user = await user_service.get_user_by_email(email)
        if user is None:
            raise NotFoundError(f"User with email {email} not found.")
        await user_service.set_password(user, password)
        logger.info("Password reset from the command line", extra={"target_user_id": user.id})
        return user


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="teamflow-admin", description="TeamFlow account maintenance")
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create-admin", help="create or promote an admin account")
    create.add_argument("--name", required=True)
    create.add_argument("--email", required=True)
    create.add_argument("--password", required=True)

    reset = commands.add_parser("reset-password", help="set a new password for an account")
    reset.add_argument("email")
    reset.add_argument("password")
    return parser


async def _run(args: argparse.Namespace, database: Database) -> int:
    try:
        if args.command == "create-admin":
            user = await create_admin(database, name=args.name, email=args.email, password=args.password)
            print(f"Admin ready: {user.email} (id {user.id})")
        else:
            user = await reset_password(database, email=args.email, password=args.password)
            print(f"Password updated for {user.email}")
    except NotFoundError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    finally:
        await database.dispose()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry-point hook for ``python -m`` execution."""
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)
    return asyncio.run(_run(args, Database.from_settings(settings)))


if __name__ == "__main__":  # pragma: no cover - manual execution entry-point
    sys.exit(main())
