"""
Placement pipeline: part expansion, the sheet-by-sheet placement loop and the
recompute operations used after a layout has been edited by hand.
"""

import logging
import time
from typing import List, Tuple, Optional, Sequence

from config import MAX_SHEETS
from cut_lines import derive_cut_lines
from data_models import (Chipboard, PartSpec, PartInstance, SheetLayout, UnplacedPart,
                         PlacementStatistics, PlacementResult, UNPLACEABLE, RESOURCE_BOUND)
from geometry import fits
from layout_statistics import compute_statistics
from packing_strategies import PackingStrategy, AlignedGuillotinePacker
from remainders import compute_remainders
from validation import validate_chipboard, validate_part_specs, validate_kerf, validate_layout

logger = logging.getLogger(__name__)


def expand_parts(specs: Sequence[PartSpec]) -> List[PartInstance]:
    """
    Create one instance per requested piece, ordered for packing.

    Instance ids are "<spec id>_<n>" with n starting at 1, so repeated runs
    produce identical ids.

    Args:
        specs: Validated part specifications

    Returns:
        Instances sorted by width, then height, both descending
    """
    instances = []
    for spec in specs:
        for i in range(spec.count):
            instances.append(PartInstance(
                id=f"{spec.id}_{i + 1}",
                part_id=spec.id,
                name=spec.name or f"Part {spec.id}",
                dimensions=spec.dimensions,
                can_rotate=spec.can_rotate,
                pvc_edges=spec.pvc_edges,
            ))
    return sort_for_packing(instances)


def sort_for_packing(instances: Sequence[PartInstance]) -> List[PartInstance]:
    # Longer, then wider parts are the hardest to fit later
    return sorted(instances, key=lambda inst: (-inst.dimensions.width, -inst.dimensions.height))


def fits_empty_sheet(instance: PartInstance, chipboard: Chipboard) -> bool:
    """Check whether an instance fits the usable area in any allowed orientation."""
    usable = chipboard.usable_rect()
    width = instance.dimensions.width
    height = instance.dimensions.height
    if fits(width, height, usable):
        return True
    return instance.can_rotate and fits(height, width, usable)


def run_placement(chipboard: Chipboard, instances: Sequence[PartInstance], kerf: float,
                  strategy: Optional[PackingStrategy] = None,
                  max_sheets: int = MAX_SHEETS) -> Tuple[List[SheetLayout], List[UnplacedPart], bool]:
    """
    Fill fresh sheets one after another until every instance is placed.

    Instances that cannot fit an empty sheet are reported as unplaceable up
    front. The loop also stops when a fresh sheet places nothing, and as a
    last resort after max_sheets sheets.

    Returns:
        Tuple of (sheet layouts with parts only, unplaced parts, partial flag)
    """
    strategy = strategy or AlignedGuillotinePacker()
    sheets: List[SheetLayout] = []
    unplaced: List[UnplacedPart] = []

    remaining = []
    for instance in instances:
        if fits_empty_sheet(instance, chipboard):
            remaining.append(instance)
        else:
            logger.warning(f"Part {instance.id} ({instance.dimensions}) can never fit on "
                           f"{chipboard.id} (usable {chipboard.usable_width:g}x{chipboard.usable_height:g})")
            unplaced.append(UnplacedPart.from_instance(instance, UNPLACEABLE))

    while remaining:
        if len(sheets) >= max_sheets:
            logger.warning(f"Sheet limit of {max_sheets} reached with {len(remaining)} parts left")
            unplaced.extend(UnplacedPart.from_instance(inst, RESOURCE_BOUND) for inst in remaining)
            return sheets, unplaced, True

        result = strategy.pack_sheet(chipboard, remaining, kerf)
        if not result.placed:
            logger.warning(f"No progress on a fresh sheet, {len(remaining)} parts left unplaced")
            unplaced.extend(UnplacedPart.from_instance(inst, UNPLACEABLE) for inst in remaining)
            break

        sheets.append(SheetLayout(chipboard=chipboard, parts=result.placed))
        logger.info(f"Sheet {len(sheets)}: placed {len(result.placed)} parts, "
                    f"{len(result.unplaced)} remaining")
        remaining = result.unplaced

    return sheets, unplaced, False


def _derive_layout(sheet: SheetLayout, kerf: float) -> SheetLayout:
    return SheetLayout(
        chipboard=sheet.chipboard,
        parts=list(sheet.parts),
        cut_lines=derive_cut_lines(sheet.parts, sheet.chipboard, kerf),
        remainders=compute_remainders(sheet.parts, sheet.chipboard, kerf),
    )


def recompute_layout(sheet_layout: SheetLayout, kerf: float) -> SheetLayout:
    """
    Re-derive cut lines and remainders for a possibly hand-edited sheet.

    Part positions are left untouched.

    Raises:
        LayoutInconsistencyError: If a part leaves the usable area or two parts overlap
    """
    validate_kerf(kerf)
    validate_layout(sheet_layout.parts, sheet_layout.chipboard)
    return _derive_layout(sheet_layout, kerf)


def recompute_statistics(sheet_layouts: Sequence[SheetLayout], requested_total_count: int,
                         chipboard: Chipboard) -> PlacementStatistics:
    return compute_statistics(sheet_layouts, requested_total_count, chipboard)


def recompute_result(result: PlacementResult, kerf: float) -> PlacementResult:
    """
    Recompute every sheet and the statistics of a result after manual edits.
    """
    sheets = [recompute_layout(sheet, kerf) for sheet in result.sheets]
    requested = result.statistics.requested_parts or (result.placed_count + len(result.unplaced))
    chipboard = sheets[0].chipboard if sheets else None
    if chipboard is None:
        statistics = PlacementStatistics(requested_parts=requested)
    else:
        statistics = recompute_statistics(sheets, requested, chipboard)
    return PlacementResult(sheets=sheets, statistics=statistics,
                           unplaced=list(result.unplaced), is_partial=result.is_partial)


def place_all(chipboard: Chipboard, part_specs: Sequence[PartSpec], kerf: float,
              strategy: Optional[PackingStrategy] = None,
              max_sheets: int = MAX_SHEETS) -> PlacementResult:
    """
    Main entry point: validate, expand, place, and derive cut lines,
    remainders and statistics.

    Args:
        chipboard: Chipboard template; every sheet is a fresh copy of it
        part_specs: Requested parts
        kerf: Saw kerf in mm
        strategy: Single-sheet packer, AlignedGuillotinePacker by default
        max_sheets: Hard ceiling on the number of sheets

    Returns:
        PlacementResult with unplaced parts listed rather than raised

    Raises:
        InvalidSpecError: If the chipboard, a part specification or the kerf is invalid
    """
    start_time = time.time()
    validate_chipboard(chipboard)
    validate_kerf(kerf)
    validate_part_specs(part_specs)

    instances = expand_parts(part_specs)
    strategy = strategy or AlignedGuillotinePacker()
    logger.info(f"Starting placement of {len(instances)} parts on {chipboard} "
                f"with kerf {kerf:g}mm using {strategy!r}")

    sheets, unplaced, is_partial = run_placement(chipboard, instances, kerf, strategy, max_sheets)
    sheets = [_derive_layout(sheet, kerf) for sheet in sheets]
    statistics = compute_statistics(sheets, len(instances), chipboard)

    logger.info(f"Placement complete in {time.time() - start_time:.2f}s: {len(sheets)} sheets, "
                f"{statistics.efficiency:.2f}% efficiency, {len(unplaced)} unplaced")

    return PlacementResult(sheets=sheets, statistics=statistics, unplaced=unplaced, is_partial=is_partial)
