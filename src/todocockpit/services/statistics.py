"""Aggregate statistics over a list of todos."""

from dataclasses import dataclass, asdict
from datetime import date, timedelta
from typing import Iterable

from todocockpit.models import Todo


@dataclass(frozen=True)
class TodoStatistics:
    """Counts shown on the dashboard.

    Due-date buckets only count todos that are not DONE. ``due_this_week``
    excludes today and tomorrow and covers the five days after them.
    """

    total: int = 0
    completed: int = 0
    active: int = 0
    important: int = 0
    overdue: int = 0
    due_today: int = 0
    due_tomorrow: int = 0
    due_this_week: int = 0
    completion_rate: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def compute_statistics(todos: Iterable[Todo], today: date | None = None) -> TodoStatistics:
    """Compute dashboard statistics for ``todos`` relative to ``today``."""
    today = today or date.today()
    tomorrow = today + timedelta(days=1)
    week_end = today + timedelta(days=7)

    total = completed = important = 0
    overdue = due_today = due_tomorrow = due_this_week = 0

    for todo in todos:
        total += 1
        if todo.is_important:
            important += 1
        if todo.is_done:
            completed += 1
            continue
        due = todo.due_date
        if due is None:
            continue
        if due < today:
            overdue += 1
        elif due == today:
            due_today += 1
        elif due == tomorrow:
            due_tomorrow += 1
        elif due <= week_end:
            due_this_week += 1

    # round() is banker's rounding; the dashboard rounds halves up
    completion_rate = int(completed * 100 / total + 0.5) if total else 0

    return TodoStatistics(
        total=total,
        completed=completed,
        active=total - completed,
        important=important,
        overdue=overdue,
        due_today=due_today,
        due_tomorrow=due_tomorrow,
        due_this_week=due_this_week,
        completion_rate=completion_rate,
    )
