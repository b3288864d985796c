"""Business logic services for ToDo Cockpit."""

from todocockpit.services.todo_service import TodoService, CategoryService, LabelService
from todocockpit.services.statistics import TodoStatistics, compute_statistics
from todocockpit.services.ordering import PositionAssignment, move_item, assign_positions, plan_move

__all__ = [
    "TodoService",
    "CategoryService",
    "LabelService",
    "TodoStatistics",
    "compute_statistics",
    "PositionAssignment",
    "move_item",
    "assign_positions",
    "plan_move",
]
