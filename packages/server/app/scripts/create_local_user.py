"""
Script to create a user with a password for local testing.

Usage:
    taskboard-create-user --email a@x.com --password secret1 --name Alice --country US
"""

import asyncio
import argparse
import sys

import structlog

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory, init_db, session_scope
from app.core.errors import ConflictError
from app.core.logging_config import configure_logging
from app.services.users import signup
from taskboard_shared.schemas.users import SignupRequest

log = structlog.get_logger()


async def create_user(req: SignupRequest) -> int:
    settings = get_settings()
    engine = build_engine(settings)
    try:
        await init_db(engine)
        async with session_scope(build_session_factory(engine)) as session:
            user = await signup(session, req, bcrypt_rounds=settings.bcrypt_rounds)
            print(f"Created user: {user.email} ({user.id})")
    except ConflictError:
        print(f"User {req.email} already exists.")
        return 1
    finally:
        await engine.dispose()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a local user.")
    parser.add_argument("--email", required=True, help="Email address for the user")
    parser.add_argument("--password", required=True, help="Password for the user")
    parser.add_argument("--name", required=True, help="Display name")
    parser.add_argument("--country", default="US", help="Country (default: US)")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, "text")
    req = SignupRequest(
        email=args.email, password=args.password, name=args.name, country=args.country
    )
    sys.exit(asyncio.run(create_user(req)))


if __name__ == "__main__":
    main()
