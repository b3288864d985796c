"""Tests for the Alembic migrations."""

import sqlite3
from pathlib import Path

from alembic import command
from alembic.config import Config

ROOT = Path(__file__).resolve().parent.parent


def make_config(db_path: Path) -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    config.attributes["configure_logger"] = False
    return config


class TestMigrations:
    """Tests for migration scripts."""

    def test_upgrade_creates_schema(self, tmp_path):
        """Test upgrading an empty database creates every table."""
        db_path = tmp_path / "migrated.db"

        command.upgrade(make_config(db_path), "head")

        with sqlite3.connect(db_path) as conn:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
            todo_columns = {row[1] for row in conn.execute("PRAGMA table_info(todos)")}

        assert {"categories", "labels", "todos", "todo_labels", "alembic_version"} <= tables
        assert {"title", "due_date", "is_important", "status", "position", "category_id"} <= todo_columns

    def test_downgrade_drops_schema(self, tmp_path):
        """Test downgrading to base removes the tables again."""
        db_path = tmp_path / "migrated.db"
        config = make_config(db_path)

        command.upgrade(config, "head")
        command.downgrade(config, "base")

        with sqlite3.connect(db_path) as conn:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}

        assert tables <= {"alembic_version"}
