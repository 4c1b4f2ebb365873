"""
Client entry point.

Loads configuration, configures logging, and runs one command against the API.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from taskboard_shared.schemas.common import TASK_STATUS_ORDER, TaskPriority, TaskStatus
from taskboard_shared.schemas.members import MemberCreate
from taskboard_shared.schemas.tasks import TaskCreate, TaskRead, TaskUpdate
from taskboard_shared.schemas.users import SignupRequest

from .api import APIError, TaskboardAPI
from .cache import MemberCache
from .config import ClientConfig, load_config
from .session import AuthSession
from .state import SessionStore

DEFAULT_CONFIG = "taskboard.yaml"


def configure_logging(level: str = "warning", fmt: str = "text") -> None:
    """Configure structlog with the specified level and format."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def print_notification(level: str, message: str) -> None:
    stream = sys.stderr if level == "error" else sys.stdout
    print(message, file=stream)


STATUS_TITLES = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.REVIEW: "Review",
    TaskStatus.COMPLETED: "Completed",
}


def is_overdue(task: TaskRead, now: Optional[datetime] = None) -> bool:
    """A task is overdue once its due date has passed, unless it is completed."""
    now = now or datetime.now(timezone.utc)
    return task.status is not TaskStatus.COMPLETED and task.due_date < now


def format_task(task: TaskRead, now: Optional[datetime] = None) -> str:
    done = f" done {task.completed_at:%Y-%m-%d %H:%M}" if task.completed_at else ""
    overdue = " OVERDUE" if is_overdue(task, now) else ""
    return (
        f"{task.id}  [{task.status.value:<11}] {task.priority.value:<6} "
        f"due {task.due_date:%Y-%m-%d}{overdue}  {task.title}{done}"
    )


def format_board(tasks: List[TaskRead], now: Optional[datetime] = None) -> List[str]:
    """Render tasks grouped by status column, each headed by its task count."""
    lines: List[str] = []
    for status in TASK_STATUS_ORDER:
        column = [t for t in tasks if t.status is status]
        lines.append(f"{STATUS_TITLES[status]} ({len(column)})")
        lines.extend(f"  {format_task(t, now)}" for t in column)
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskboard", description="Taskboard command-line client")
    parser.add_argument(
        "-c", "--config",
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG} if present)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("signup", help="Create an account and sign in")
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--country", required=True)

    p = sub.add_parser("login", help="Sign in")
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)

    sub.add_parser("logout", help="Forget the stored session")
    sub.add_parser("whoami", help="Show the signed-in user")
    sub.add_parser("members", help="List your members")

    p = sub.add_parser("add-member", help="Add a member")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--role", required=True)

    p = sub.add_parser("tasks", help="List a member's tasks")
    p.add_argument("member_id", type=uuid.UUID)

    p = sub.add_parser("add-task", help="Create a task for a member")
    p.add_argument("member_id", type=uuid.UUID)
    p.add_argument("--title", required=True)
    p.add_argument("--description", default="")
    p.add_argument("--status", choices=[s.value for s in TaskStatus], default=TaskStatus.TODO.value)
    p.add_argument("--priority", choices=[pr.value for pr in TaskPriority], default=TaskPriority.MEDIUM.value)
    p.add_argument("--due", required=True, help="Due date, e.g. 2025-01-01")

    p = sub.add_parser("update-task", help="Change some fields of a task")
    p.add_argument("member_id", type=uuid.UUID)
    p.add_argument("task_id", type=uuid.UUID)
    p.add_argument("--title")
    p.add_argument("--description")
    p.add_argument("--status", choices=[s.value for s in TaskStatus])
    p.add_argument("--priority", choices=[pr.value for pr in TaskPriority])
    p.add_argument("--due")

    p = sub.add_parser("delete-task", help="Delete a task")
    p.add_argument("member_id", type=uuid.UUID)
    p.add_argument("task_id", type=uuid.UUID)
    return parser


async def run_command(args: argparse.Namespace, config: ClientConfig, api: TaskboardAPI) -> int:
    """Execute one parsed command. Returns the process exit code."""
    store = SessionStore(config.state.db_path)
    await store.open()
    try:
        auth = AuthSession(api, store)
        cache = MemberCache(api, notify=print_notification)

        if args.command == "signup":
            user = await auth.signup(
                SignupRequest(email=args.email, password=args.password, name=args.name, country=args.country)
            )
            print(f"Signed up as {user.name} <{user.email}>")
            return 0
        if args.command == "login":
            user = await auth.login(args.email, args.password)
            print(f"Logged in as {user.name} <{user.email}>")
            return 0
        if args.command == "logout":
            await auth.logout()
            print("Logged out")
            return 0

        user = await auth.restore()
        if user is None:
            print("Not logged in. Run `taskboard login` first.", file=sys.stderr)
            return 1

        if args.command == "whoami":
            print(f"{user.name} <{user.email}> ({user.country})")
            return 0
        if args.command == "members":
            for m in await cache.load_members():
                print(f"{m.id}  {m.name:<20} {m.role:<15} {m.email}")
            return 0
        if args.command == "add-member":
            member = await cache.add_member(MemberCreate(name=args.name, email=args.email, role=args.role))
            return 0 if member else 1
        if args.command == "tasks":
            tasks = await cache.fetch_member_tasks(args.member_id)
            for line in format_board(tasks):
                print(line)
            return 0
        if args.command == "add-task":
            req = TaskCreate(
                title=args.title,
                description=args.description,
                status=args.status,
                priority=args.priority,
                due_date=args.due,
            )
            task = await cache.add_task(args.member_id, req)
            if task:
                print(format_task(task))
            return 0 if task else 1

        await cache.fetch_member_tasks(args.member_id)
        if args.command == "update-task":
            fields = {
                "title": args.title,
                "description": args.description,
                "status": args.status,
                "priority": args.priority,
                "due_date": args.due,
            }
            req = TaskUpdate(**{k: v for k, v in fields.items() if v is not None})
            task = await cache.update_task(args.task_id, req)
            if task:
                print(format_task(task))
            return 0 if task else 1
        if args.command == "delete-task":
            return 0 if await cache.delete_task(args.task_id) else 1
        raise ValueError(f"Unknown command: {args.command}")
    finally:
        await store.close()


async def _main(args: argparse.Namespace, config: ClientConfig) -> int:
    async with TaskboardAPI(
        config.api.url,
        verify_tls=config.api.verify_tls,
        request_timeout=config.api.request_timeout_seconds,
    ) as api:
        return await run_command(args, config, api)


def run() -> None:
    """CLI entry point for the client."""
    args = build_parser().parse_args()

    try:
        if args.config:
            config = load_config(args.config)
        elif Path(DEFAULT_CONFIG).exists():
            config = load_config(DEFAULT_CONFIG)
        else:
            config = ClientConfig()
    except FileNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.logging.level, config.logging.format)

    try:
        sys.exit(asyncio.run(_main(args, config)))
    except ValidationError as exc:
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "input"
            print(f"{field}: {err['msg']}", file=sys.stderr)
        sys.exit(2)
    except APIError as exc:
        print(f"Error ({exc.status_code}): {exc.message}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
