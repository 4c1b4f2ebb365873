"""Tests for the ``taskboard`` command-line client."""

import uuid
from datetime import datetime, timezone

import pytest

from taskboard_client.config import ClientConfig, StateConfig
from taskboard_client.main import build_parser, format_board, is_overdue, run_command
from taskboard_shared.schemas.tasks import TaskRead


@pytest.fixture
def config(tmp_path):
    return ClientConfig(state=StateConfig(db_path=str(tmp_path / "cli.db")))


@pytest.fixture
def cli(api, config):
    async def _run(*argv: str) -> int:
        args = build_parser().parse_args(list(argv))
        return await run_command(args, config, api)

    return _run


SIGNUP = ["signup", "--email", "alice@example.com", "--password", "secret1", "--name", "Alice", "--country", "NZ"]


async def test_requires_login(cli, capsys):
    assert await cli("members") == 1
    assert "Not logged in" in capsys.readouterr().err


async def test_signup_whoami_logout(cli, capsys):
    assert await cli(*SIGNUP) == 0
    assert await cli("whoami") == 0
    out = capsys.readouterr().out
    assert "Signed up as Alice <alice@example.com>" in out
    assert "Alice <alice@example.com> (NZ)" in out

    assert await cli("logout") == 0
    assert await cli("whoami") == 1


async def test_member_and_task_commands(api, cli, capsys):
    await cli(*SIGNUP)
    assert await cli("add-member", "--name", "Bob", "--email", "bob@example.com", "--role", "Dev") == 0
    member_id = (await api.list_members())[0].id

    assert await cli("add-task", str(member_id), "--title", "Write report", "--due", "2025-01-01") == 0
    task_id = (await api.list_tasks(member_id))[0].id

    assert await cli("add-task", str(member_id), "--title", "Chase invoices", "--due", "2020-01-01") == 0

    assert await cli("update-task", str(member_id), str(task_id), "--status", "completed") == 0
    assert "Member added successfully" in capsys.readouterr().out

    assert await cli("tasks", str(member_id)) == 0
    board = capsys.readouterr().out.splitlines()
    assert "To Do (1)" in board
    assert "In Progress (0)" in board
    assert "Review (0)" in board
    assert "Completed (1)" in board
    assert board.index("To Do (1)") < board.index("Completed (1)")
    assert any("[completed  ]" in line and "done " in line for line in board)
    overdue = [line for line in board if "OVERDUE" in line]
    assert len(overdue) == 1 and "Chase invoices" in overdue[0]

    assert await cli("delete-task", str(member_id), str(task_id)) == 0
    assert [t.title for t in await api.list_tasks(member_id)] == ["Chase invoices"]


async def test_failed_mutation_exit_code(cli, capsys):
    await cli(*SIGNUP)
    missing = "00000000-0000-4000-8000-000000000000"
    assert await cli("add-task", missing, "--title", "x", "--due", "2025-01-01") == 1
    assert "Member not found" in capsys.readouterr().err


def test_parser_rejects_unknown_status():
    with pytest.raises(SystemExit):
        build_parser().parse_args(
            ["update-task", "00000000-0000-4000-8000-000000000000",
             "00000000-0000-4000-8000-000000000001", "--status", "done"]
        )


def _task(status: str, due: str) -> TaskRead:
    return TaskRead.model_validate(
        {
            "id": str(uuid.uuid4()),
            "memberId": str(uuid.uuid4()),
            "title": f"{status} task",
            "description": "",
            "status": status,
            "priority": "medium",
            "dueDate": due,
            "completedAt": "2025-01-02T00:00:00Z" if status == "completed" else None,
            "createdAt": "2025-01-01T00:00:00Z",
            "updatedAt": "2025-01-01T00:00:00Z",
        }
    )


NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def test_overdue_means_past_due_and_not_completed():
    assert is_overdue(_task("todo", "2025-05-31T00:00:00Z"), NOW)
    assert is_overdue(_task("review", "2025-05-31T00:00:00Z"), NOW)
    assert not is_overdue(_task("completed", "2025-05-31T00:00:00Z"), NOW)
    assert not is_overdue(_task("todo", "2025-06-02T00:00:00Z"), NOW)


def test_board_lists_every_column_with_counts():
    tasks = [
        _task("in-progress", "2025-05-01T00:00:00Z"),
        _task("todo", "2025-07-01T00:00:00Z"),
        _task("in-progress", "2025-07-01T00:00:00Z"),
    ]
    lines = format_board(tasks, NOW)
    headers = [line for line in lines if not line.startswith("  ")]
    assert headers == ["To Do (1)", "In Progress (2)", "Review (0)", "Completed (0)"]
    assert sum("OVERDUE" in line for line in lines) == 1


def test_empty_board_still_shows_columns():
    assert format_board([], NOW) == ["To Do (0)", "In Progress (0)", "Review (0)", "Completed (0)"]
