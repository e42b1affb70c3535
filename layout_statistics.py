"""
Summary statistics over the sheets of a placement.
"""

import logging
import math
from typing import Sequence

from data_models import Chipboard, SheetLayout, PlacementStatistics

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with exact halves going up, so 700.5 becomes 701."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def compute_statistics(sheets: Sequence[SheetLayout], requested_total_count: int,
                       chipboard: Chipboard) -> PlacementStatistics:
    """
    Aggregate cut, area and edge banding figures over all sheets.

    Args:
        sheets: Sheet layouts with their cut lines already derived
        requested_total_count: Number of part instances that were requested
        chipboard: Chipboard template used for every sheet

    Returns:
        PlacementStatistics; efficiency is the part area over the usable
        area of all sheets, in percent with two decimals
    """
    total_cut_length = 0.0
    total_cut_operations = 0
    total_used_area = 0.0
    total_pvc_length = 0.0
    total_parts = 0

    for sheet in sheets:
        total_cut_operations += len(sheet.cut_lines)
        total_cut_length += sum(line.length for line in sheet.cut_lines)
        total_parts += len(sheet.parts)
        for part in sheet.parts:
            total_used_area += part.dimensions.area
            total_pvc_length += part.banding_length()

    total_available_area = len(sheets) * chipboard.usable_area
    efficiency = total_used_area / total_available_area * 100 if total_available_area > 0 else 0.0

    return PlacementStatistics(
        total_parts=total_parts,
        total_sheets=len(sheets),
        total_cut_length=int(round_half_up(total_cut_length)),
        total_cut_operations=total_cut_operations,
        efficiency=round_half_up(efficiency, 2),
        total_pvc_length=total_pvc_length,
        requested_parts=requested_total_count,
    )
