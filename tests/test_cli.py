"""Tests for the command line interface."""

import asyncio
from datetime import date

import pytest
from typer.testing import CliRunner

from todocockpit.cli import app, format_due_date
from todocockpit.config import get_settings
from todocockpit.database import close_db, get_async_session_maker, reset_db_state
from todocockpit.models import TodoStatus
from todocockpit.services.todo_service import CategoryService, LabelService, TodoService

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_database(tmp_path, monkeypatch):
    """Point the CLI at a throwaway SQLite file."""
    monkeypatch.setenv("TODOCOCKPIT_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/cli.db")
    monkeypatch.setenv("TODOCOCKPIT_DATA_DIR", str(tmp_path))
    get_settings.cache_clear()
    reset_db_state()
    yield
    get_settings.cache_clear()
    reset_db_state()


def query(service_class, method="get_all"):
    """Run one service read against the CLI database."""

    async def _query():
        try:
            async with get_async_session_maker()() as session:
                return await getattr(service_class(session), method)()
        finally:
            await close_db()

    return asyncio.run(_query())


class TestFormatDueDate:
    """Tests for format_due_date."""

    TODAY = date(2026, 10, 19)  # a Monday

    def test_today_and_tomorrow(self):
        assert format_due_date(date(2026, 10, 19), self.TODAY) == "Today"
        assert format_due_date(date(2026, 10, 20), self.TODAY) == "Tomorrow"

    def test_overdue(self):
        assert format_due_date(date(2026, 10, 1), self.TODAY) == "Overdue: Oct 1"

    def test_this_week_shows_weekday(self):
        assert format_due_date(date(2026, 10, 23), self.TODAY) == "Friday"

    def test_later_shows_full_date(self):
        assert format_due_date(date(2027, 1, 5), self.TODAY) == "Jan 5, 2027"


class TestTodoCommands:
    """Tests for todo commands."""

    def test_add_todo(self):
        """Test adding a todo puts it in the inbox."""
        result = runner.invoke(app, ["add", "Buy milk"])

        assert result.exit_code == 0, result.output
        assert "Buy milk" in result.output
        todos = query(TodoService)
        assert [(t.title, t.status, t.category_id) for t in todos] == [
            ("Buy milk", TodoStatus.INBOX, None)
        ]

    def test_add_creates_category_and_labels(self):
        """Test unknown category and label names are created on the fly."""
        result = runner.invoke(
            app,
            ["add", "Report", "-c", "Work", "-l", "urgent, home", "-i", "--due", "2026-11-01"],
        )

        assert result.exit_code == 0, result.output
        assert [c.name for c in query(CategoryService)] == ["Work"]
        assert [label.name for label in query(LabelService)] == ["home", "urgent"]
        todo = query(TodoService)[0]
        assert todo.is_important is True
        assert todo.due_date == date(2026, 11, 1)
        assert len(todo.label_ids) == 2

    def test_add_invalid_date(self):
        """Test a malformed due date is refused."""
        result = runner.invoke(app, ["add", "Oops", "--due", "tomorrow"])

        assert result.exit_code == 1
        assert "Invalid date format" in result.output

    def test_list_todos(self):
        """Test listing shows open todos."""
        runner.invoke(app, ["add", "Walk dog"])

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0, result.output
        assert "Walk dog" in result.output

    def test_list_empty(self):
        """Test listing with nothing to show."""
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "No todos found" in result.output

    def test_done_by_partial_id(self):
        """Test completing a todo by an id prefix."""
        runner.invoke(app, ["add", "Pay rent"])
        todo_id = query(TodoService)[0].id

        result = runner.invoke(app, ["done", todo_id[:8]])

        assert result.exit_code == 0, result.output
        assert query(TodoService)[0].status == TodoStatus.DONE

    def test_delete_force(self):
        """Test deleting without confirmation."""
        runner.invoke(app, ["add", "Throw away"])
        todo_id = query(TodoService)[0].id

        result = runner.invoke(app, ["delete", todo_id, "--force"])

        assert result.exit_code == 0, result.output
        assert query(TodoService) == []

    def test_done_unknown(self):
        """Test completing a missing todo fails."""
        result = runner.invoke(app, ["done", "nothing"])

        assert result.exit_code == 1
        assert "Todo not found" in result.output

    def test_stats(self):
        """Test the statistics table."""
        runner.invoke(app, ["add", "One"])
        runner.invoke(app, ["add", "Two", "-s", "DONE"])

        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0, result.output
        assert "50%" in result.output


class TestCategoryCommands:
    """Tests for category commands."""

    def test_add_and_move(self):
        """Test moving Home onto Work puts it first."""
        runner.invoke(app, ["category-add", "Work"])
        runner.invoke(app, ["category-add", "Home"])

        result = runner.invoke(app, ["category-move", "Home", "Work"])

        assert result.exit_code == 0, result.output
        assert "Home > Work" in result.output
        assert [c.name for c in query(CategoryService)] == ["Home", "Work"]

    def test_category_limit(self):
        """Test the limit error is reported with a non-zero exit."""
        for i in range(5):
            assert runner.invoke(app, ["category-add", f"Cat {i}"]).exit_code == 0

        result = runner.invoke(app, ["category-add", "Sixth"])

        assert result.exit_code == 1
        assert "Maximum of 5 categories reached" in result.output

    def test_delete_category_keeps_todos(self):
        """Test todos of a deleted category stay in the inbox."""
        runner.invoke(app, ["add", "Report", "-c", "Work"])

        result = runner.invoke(app, ["category-delete", "work", "--force"])

        assert result.exit_code == 0, result.output
        assert query(CategoryService) == []
        assert query(TodoService)[0].category_id is None

    def test_rename(self):
        """Test renaming by name."""
        runner.invoke(app, ["category-add", "Work"])

        result = runner.invoke(app, ["category-rename", "Work", "Job"])

        assert result.exit_code == 0, result.output
        assert [c.name for c in query(CategoryService)] == ["Job"]


class TestLabelCommands:
    """Tests for label commands."""

    def test_add_and_delete(self):
        """Test adding and deleting a label."""
        result = runner.invoke(app, ["label-add", "urgent", "--color", "#FF0000"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["label-delete", "urgent"])

        assert result.exit_code == 0, result.output
        assert query(LabelService) == []

    def test_add_bad_color(self):
        """Test a bad color is reported."""
        result = runner.invoke(app, ["label-add", "urgent", "--color", "red"])

        assert result.exit_code == 1
        assert "Invalid label color" in result.output
