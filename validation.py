"""
Error types and structural validation for chipboards, part specifications
and placed layouts.
"""

import logging
from typing import List, Sequence, Optional

from data_models import Chipboard, PartSpec, PlacedPart
from geometry import overlaps, contains

logger = logging.getLogger(__name__)


class CutPlannerError(ValueError):
    """Base class for errors raised by the cut planner."""


class InvalidSpecError(CutPlannerError):
    """
    Raised when a chipboard, part specification or kerf is structurally invalid.

    Attributes:
        errors: Human-readable description of every problem found
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class LayoutInconsistencyError(CutPlannerError):
    """
    Raised when placed parts leave the usable area or overlap each other.

    Attributes:
        part_ids: Ids of the offending part, or of the overlapping pair
    """

    def __init__(self, message: str, part_ids: Sequence[str] = ()):
        self.part_ids = tuple(part_ids)
        super().__init__(message)


def chipboard_errors(chipboard: Chipboard) -> List[str]:
    errors = []
    width = chipboard.dimensions.width
    height = chipboard.dimensions.height
    if width <= 0 or height <= 0:
        errors.append(f"Chipboard {chipboard.id}: dimensions must be positive, got {width}x{height}")
    if chipboard.margin < 0:
        errors.append(f"Chipboard {chipboard.id}: margin must not be negative, got {chipboard.margin}")
    elif width > 0 and height > 0 and chipboard.margin * 2 >= min(width, height):
        errors.append(f"Chipboard {chipboard.id}: margin {chipboard.margin} leaves no usable area")
    return errors


def part_spec_errors(spec: PartSpec) -> List[str]:
    errors = []
    if spec.dimensions.width <= 0 or spec.dimensions.height <= 0:
        errors.append(f"Part {spec.id}: dimensions must be positive, got {spec.dimensions}")
    if spec.count < 1:
        errors.append(f"Part {spec.id}: count must be at least 1, got {spec.count}")
    return errors


def validate_chipboard(chipboard: Chipboard) -> None:
    errors = chipboard_errors(chipboard)
    if errors:
        raise InvalidSpecError(errors)


def validate_kerf(kerf: float) -> None:
    if kerf < 0:
        raise InvalidSpecError([f"Saw kerf must not be negative, got {kerf}"])


def validate_part_specs(specs: Sequence[PartSpec]) -> None:
    """
    Check every part specification and raise one error listing all problems.

    Raises:
        InvalidSpecError: If any specification is invalid or ids repeat
    """
    errors = []
    seen_ids = set()
    for spec in specs:
        errors.extend(part_spec_errors(spec))
        if spec.id in seen_ids:
            errors.append(f"Part {spec.id}: duplicate id")
        seen_ids.add(spec.id)
    if errors:
        raise InvalidSpecError(errors)


def find_layout_problem(parts: Sequence[PlacedPart], chipboard: Chipboard) -> Optional[LayoutInconsistencyError]:
    """
    Look for the first part outside the usable rectangle or the first overlapping pair.

    Returns:
        The error describing the problem, or None for a valid layout
    """
    usable = chipboard.usable_rect()
    for part in parts:
        if not contains(usable, part.rect()):
            return LayoutInconsistencyError(
                f"Part {part.id} at ({part.x:g},{part.y:g}) size {part.dimensions} "
                f"is outside the usable area of {chipboard.id}",
                [part.id])

    for i, first in enumerate(parts):
        first_rect = first.rect()
        for second in parts[i + 1:]:
            if overlaps(first_rect, second.rect()):
                return LayoutInconsistencyError(
                    f"Parts {first.id} and {second.id} overlap on {chipboard.id}",
                    [first.id, second.id])
    return None


def validate_layout(parts: Sequence[PlacedPart], chipboard: Chipboard) -> None:
    problem = find_layout_problem(parts, chipboard)
    if problem is not None:
        logger.warning(f"Layout rejected: {problem}")
        raise problem
