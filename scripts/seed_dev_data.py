#!/usr/bin/env python3
"""Seed a development database with a demo user, members, and tasks.

Usage:
    python scripts/seed_dev_data.py

Reads TB_DATABASE_URL (defaults to ./taskboard.db). Safe to re-run: exits early
when the demo user already exists.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory, init_db, session_scope
from app.services.members import create_member
from app.services.tasks import create_task
from app.services.users import get_user_by_email, signup
from taskboard_shared.schemas.members import MemberCreate
from taskboard_shared.schemas.tasks import TaskCreate
from taskboard_shared.schemas.users import SignupRequest

DEMO_EMAIL = "alice@taskboard.dev"
DEMO_PASSWORD = "secret1"

MEMBERS = [
    ("Bob", "bob@taskboard.dev", "Developer"),
    ("Carol", "carol@taskboard.dev", "Designer"),
]

# (member index, title, priority, status, due in days)
TASKS = [
    (0, "Set up CI pipeline", "high", "todo", 3),
    (0, "Implement auth middleware", "urgent", "in-progress", 1),
    (0, "Fix login redirect bug", "high", "review", 2),
    (0, "Add health check endpoint", "medium", "completed", -1),
    (1, "Design task board", "high", "in-progress", 5),
    (1, "Write style guide", "low", "todo", 14),
]


async def seed():
    settings = get_settings()
    engine = build_engine(settings)
    await init_db(engine)
    session_factory = build_session_factory(engine)
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    async with session_scope(session_factory) as session:
        if await get_user_by_email(session, DEMO_EMAIL):
            print(f"{DEMO_EMAIL} already seeded.")
            await engine.dispose()
            return

        user = await signup(
            session,
            SignupRequest(email=DEMO_EMAIL, password=DEMO_PASSWORD, name="Alice", country="US"),
            bcrypt_rounds=settings.bcrypt_rounds,
        )
        members = [
            await create_member(session, user.id, MemberCreate(name=name, email=email, role=role))
            for name, email, role in MEMBERS
        ]
        for idx, title, priority, status, due_in in TASKS:
            await create_task(
                session,
                members[idx],
                TaskCreate(
                    title=title,
                    description=f"{title} for the demo board.",
                    status=status,
                    priority=priority,
                    due_date=today + timedelta(days=due_in),
                ),
            )

    await engine.dispose()
    print(f"Seeded {DEMO_EMAIL} / {DEMO_PASSWORD} with {len(MEMBERS)} members and {len(TASKS)} tasks.")


if __name__ == "__main__":
    asyncio.run(seed())
