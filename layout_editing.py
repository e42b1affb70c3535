"""
Manual edits of a placed sheet: moving, rotating and changing edge banding.

Each helper returns a new SheetLayout. Cut lines and remainders of the
returned layout are stale until recompute_layout is run on it.
"""

import logging
from dataclasses import replace
from typing import List

from data_models import SheetLayout, PlacedPart, PvcEdges
from validation import LayoutInconsistencyError, validate_layout

logger = logging.getLogger(__name__)


def _index_of(layout: SheetLayout, placed_id: str) -> int:
    for index, part in enumerate(layout.parts):
        if part.id == placed_id:
            return index
    raise KeyError(f"No part {placed_id} on {layout.chipboard.id}")


def _with_part(layout: SheetLayout, index: int, part: PlacedPart) -> SheetLayout:
    parts: List[PlacedPart] = list(layout.parts)
    parts[index] = part
    return SheetLayout(chipboard=layout.chipboard, parts=parts,
                       cut_lines=list(layout.cut_lines), remainders=list(layout.remainders))


def move_part(layout: SheetLayout, placed_id: str, x: float, y: float) -> SheetLayout:
    """
    Move a part to a new lower-left position.

    Raises:
        KeyError: If the part is not on this sheet
        LayoutInconsistencyError: If the part would leave the usable area or overlap another part
    """
    index = _index_of(layout, placed_id)
    edited = _with_part(layout, index, layout.parts[index].moved_to(x, y))
    validate_layout(edited.parts, edited.chipboard)
    logger.info(f"Moved {placed_id} to ({x:g},{y:g}) on {layout.chipboard.id}")
    return edited


def rotate_part(layout: SheetLayout, placed_id: str) -> SheetLayout:
    """
    Turn a part by 90 degrees around its lower-left corner.

    Raises:
        KeyError: If the part is not on this sheet
        LayoutInconsistencyError: If the part must keep its orientation, or the
            rotated part would leave the usable area or overlap another part
    """
    index = _index_of(layout, placed_id)
    part = layout.parts[index]
    if not part.can_rotate:
        raise LayoutInconsistencyError(f"Part {placed_id} must keep its orientation", [placed_id])

    edited = _with_part(layout, index, part.turned())
    validate_layout(edited.parts, edited.chipboard)
    logger.info(f"Rotated {placed_id} on {layout.chipboard.id}")
    return edited


def set_pvc_edges(layout: SheetLayout, placed_id: str, edges: PvcEdges) -> SheetLayout:
    """Replace the edge banding of a part, given in its placed orientation."""
    index = _index_of(layout, placed_id)
    return _with_part(layout, index, replace(layout.parts[index], pvc_edges=edges))
