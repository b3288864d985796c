"""Pure helpers turning a drag-and-drop gesture into a reorder payload."""

from dataclasses import dataclass
from typing import Sequence

from todocockpit.exceptions import ValidationError


@dataclass(frozen=True)
class PositionAssignment:
    """New position for one item."""

    id: str
    position: int

    def as_dict(self) -> dict:
        return {"id": self.id, "position": self.position}


def move_item(order: Sequence[str], dragged_id: str, target_id: str) -> list[str]:
    """Move ``dragged_id`` to the index currently held by ``target_id``.

    Items between the two indices shift by one, the same way a sortable
    list reacts when an item is dropped onto another.
    """
    items = list(order)
    if len(set(items)) != len(items):
        raise ValidationError("Order contains duplicate ids")
    try:
        old_index = items.index(dragged_id)
        new_index = items.index(target_id)
    except ValueError:
        raise ValidationError("Dragged and target ids must both be in the current order")

    if old_index == new_index:
        return items

    items.insert(new_index, items.pop(old_index))
    return items


def assign_positions(order: Sequence[str]) -> list[PositionAssignment]:
    """Assign contiguous positions 0..n-1 following ``order``."""
    return [PositionAssignment(id=item_id, position=index) for index, item_id in enumerate(order)]


def plan_move(order: Sequence[str], dragged_id: str, target_id: str) -> list[PositionAssignment]:
    """Compute the full position assignment after a drag-and-drop move."""
    return assign_positions(move_item(order, dragged_id, target_id))
