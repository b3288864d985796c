"""Tests for drag-and-drop ordering helpers."""

import pytest

from todocockpit.exceptions import ValidationError
from todocockpit.services.ordering import (
    PositionAssignment,
    assign_positions,
    move_item,
    plan_move,
)


class TestMoveItem:
    """Tests for move_item."""

    def test_move_down(self):
        """Test dragging an item onto a later one."""
        assert move_item(["a", "b", "c", "d"], "a", "c") == ["b", "c", "a", "d"]

    def test_move_up(self):
        """Test dragging an item onto an earlier one."""
        assert move_item(["a", "b", "c", "d"], "d", "b") == ["a", "d", "b", "c"]

    def test_drop_on_itself(self):
        """Test dropping an item onto itself changes nothing."""
        assert move_item(["a", "b"], "b", "b") == ["a", "b"]

    def test_input_not_modified(self):
        """Test the caller's sequence is left alone."""
        order = ["a", "b", "c"]
        move_item(order, "c", "a")
        assert order == ["a", "b", "c"]

    @pytest.mark.parametrize("dragged, target", [("x", "a"), ("a", "x")])
    def test_unknown_id(self, dragged, target):
        """Test ids must be part of the current order."""
        with pytest.raises(ValidationError):
            move_item(["a", "b"], dragged, target)

    def test_duplicates(self):
        """Test an order with repeated ids is refused."""
        with pytest.raises(ValidationError):
            move_item(["a", "b", "a"], "a", "b")


class TestPlanMove:
    """Tests for position assignment."""

    def test_assign_positions(self):
        """Test positions are contiguous from zero."""
        assert assign_positions(["x", "y"]) == [
            PositionAssignment(id="x", position=0),
            PositionAssignment(id="y", position=1),
        ]

    def test_plan_move(self):
        """Test Home dropped onto Work comes first."""
        plan = plan_move(["work", "home"], "home", "work")
        assert [p.as_dict() for p in plan] == [
            {"id": "home", "position": 0},
            {"id": "work", "position": 1},
        ]

    def test_plan_move_empty_order(self):
        """Test moving within an empty list is an error."""
        with pytest.raises(ValidationError):
            plan_move([], "a", "b")
