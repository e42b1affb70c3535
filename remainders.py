"""
Remainder (offcut) calculation for a single sheet.

The sheet is first cut into horizontal strips along every part top and bottom,
then each strip is cut along the part edges inside it. Free segments become
remainders after the saw kerf is taken off every side that is not the edge of
the usable area.
"""

import logging
from typing import List, Sequence

from config import EPSILON
from data_models import Chipboard, PlacedPart, Remainder
from geometry import same

logger = logging.getLogger(__name__)

EMPTY_SHEET = "empty sheet"


def _distinct_sorted(values: List[float]) -> List[float]:
    result: List[float] = []
    for value in sorted(values):
        if not result or not same(result[-1], value):
            result.append(value)
    return result


def compute_remainders(parts: Sequence[PlacedPart], chipboard: Chipboard, kerf: float) -> List[Remainder]:
    """
    Calculate the reusable offcuts left on a sheet.

    Args:
        parts: Parts placed on the sheet
        chipboard: Sheet the parts are placed on
        kerf: Saw kerf in mm

    Returns:
        Remainders ordered by strip (bottom to top), then left to right
    """
    usable = chipboard.usable_rect()
    if not parts:
        if usable.is_empty():
            return []
        return [Remainder(usable.x, usable.y, usable.width, usable.height, EMPTY_SHEET)]

    remainders: List[Remainder] = []

    y_coords = [usable.y, usable.top]
    for part in parts:
        y_coords.extend((part.y, part.top))
    y_coords = _distinct_sorted(y_coords)

    for strip_index in range(len(y_coords) - 1):
        strip_bottom = y_coords[strip_index]
        strip_top = y_coords[strip_index + 1]
        if strip_top - strip_bottom <= EPSILON:
            continue

        strip_parts = [part for part in parts
                       if part.y < strip_top - EPSILON and part.top > strip_bottom + EPSILON]

        x_coords = [usable.x, usable.right]
        for part in strip_parts:
            x_coords.extend((part.x, part.right))
        x_coords = _distinct_sorted(x_coords)

        for segment_index in range(len(x_coords) - 1):
            segment_left = x_coords[segment_index]
            segment_right = x_coords[segment_index + 1]
            if segment_right - segment_left <= EPSILON:
                continue

            occupied = any(part.x < segment_right - EPSILON and part.right > segment_left + EPSILON
                           for part in strip_parts)
            if occupied:
                continue

            x = segment_left
            y = strip_bottom
            width = segment_right - segment_left
            height = strip_top - strip_bottom

            if not same(segment_left, usable.x):
                x += kerf
                width -= kerf
            if not same(segment_right, usable.right):
                width -= kerf
            if not same(strip_bottom, usable.y):
                y += kerf
                height -= kerf
            if not same(strip_top, usable.top):
                height -= kerf

            if width > EPSILON and height > EPSILON:
                remainders.append(Remainder(x, y, width, height, f"strip {strip_index + 1}"))

    logger.debug(f"{chipboard.id}: {len(remainders)} remainders from {len(parts)} parts")
    return remainders
