"""
Single-sheet packing strategies.
Every strategy takes one chipboard, a kerf and the ordered part instances, and
returns the parts it placed plus the instances that did not fit.
"""

import logging
from typing import List, Dict, Tuple, Optional, Iterator, NamedTuple, Sequence

from config import ALIGNMENT_BONUS, EPSILON
from data_models import Chipboard, PartInstance, PlacedPart
from geometry import Rect, fits

logger = logging.getLogger(__name__)


class SheetPackResult(NamedTuple):
    placed: List[PlacedPart]
    unplaced: List[PartInstance]


class Candidate(NamedTuple):
    """A feasible position for one instance inside one free rectangle."""
    handle: int
    x: float
    y: float
    rotated: bool
    score: float


class FreeRectangleArena:
    """
    Free space of one sheet during packing, addressed by integer handles.

    Handles are issued in increasing order and iteration follows that order,
    which keeps placement deterministic.
    """

    def __init__(self, initial: Rect):
        self._rectangles: Dict[int, Rect] = {}
        self._next_handle = 0
        self.add(initial)

    def add(self, rect: Rect) -> Optional[int]:
        if rect.is_empty():
            return None
        handle = self._next_handle
        self._next_handle += 1
        self._rectangles[handle] = rect
        return handle

    def remove(self, handle: int) -> Rect:
        return self._rectangles.pop(handle)

    def items(self) -> Iterator[Tuple[int, Rect]]:
        return iter(list(self._rectangles.items()))

    def __len__(self) -> int:
        return len(self._rectangles)

    def split(self, handle: int, placed: Rect, kerf: float) -> List[int]:
        """
        Replace a free rectangle by the guillotine leftovers around a placed part.

        The right piece starts one kerf past the part's right edge and keeps the
        full height of the consumed rectangle. The top piece starts one kerf
        above the part and covers the part's column; the kerf strip beside it is
        the slot of the vertical cut.

        Args:
            handle: Handle of the consumed rectangle
            placed: Rectangle occupied by the part (inside the consumed one)
            kerf: Saw kerf in mm

        Returns:
            Handles of the new rectangles (zero, one or two)
        """
        rect = self.remove(handle)

        far_x = placed.right + kerf
        right = Rect(far_x, rect.y, rect.right - far_x, rect.height)

        far_y = placed.top + kerf
        top = Rect(rect.x, far_y, placed.right - rect.x, rect.top - far_y)

        new_handles = []
        for piece in (right, top):
            new_handle = self.add(piece)
            if new_handle is not None:
                new_handles.append(new_handle)
        return new_handles


class PackingStrategy:
    """Interface shared by all single-sheet packers."""

    name = "base"

    def pack_sheet(self, chipboard: Chipboard, instances: Sequence[PartInstance],
                   kerf: float) -> SheetPackResult:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class GuillotinePacker(PackingStrategy):
    """
    Free-rectangle guillotine packer. Subclasses decide where each instance goes.
    """

    def pack_sheet(self, chipboard: Chipboard, instances: Sequence[PartInstance],
                   kerf: float) -> SheetPackResult:
        arena = FreeRectangleArena(chipboard.usable_rect())
        x_marks = {chipboard.margin}
        y_marks = {chipboard.margin}
        placed: List[PlacedPart] = []
        unplaced: List[PartInstance] = []

        for instance in instances:
            candidate = self._find_placement(instance, arena, sorted(x_marks), sorted(y_marks))
            if candidate is None:
                logger.debug(f"{instance.id} does not fit on {chipboard.id} ({len(arena)} free rectangles)")
                unplaced.append(instance)
                continue

            part = PlacedPart.from_instance(instance, candidate.x, candidate.y, candidate.rotated)
            placed.append(part)

            # Saw line coordinates; a free rectangle origin sits one kerf past them
            x_marks.update((part.x, part.right))
            y_marks.update((part.y, part.top))

            arena.split(candidate.handle, part.rect(), kerf)

        return SheetPackResult(placed, unplaced)

    def _find_placement(self, instance: PartInstance, arena: FreeRectangleArena,
                        x_marks: List[float], y_marks: List[float]) -> Optional[Candidate]:
        raise NotImplementedError

    @staticmethod
    def _orientations(instance: PartInstance) -> List[Tuple[float, float, bool]]:
        width = instance.dimensions.width
        height = instance.dimensions.height
        orientations = [(width, height, False)]
        if instance.can_rotate and width != height:
            orientations.append((height, width, True))
        return orientations


def _aligned_coordinate(start: float, end: float, size: float, marks: List[float]) -> Tuple[float, int]:
    """
    Find the lowest mark in [start, end - size].

    Returns:
        Tuple of (coordinate, 1) when aligned, (start, 0) otherwise
    """
    for mark in marks:
        if mark >= start - EPSILON and mark + size <= end + EPSILON:
            return mark, 1
    return start, 0


class AlignedGuillotinePacker(GuillotinePacker):
    """
    Best-fit guillotine packer that prefers positions on existing cut lines.

    Score per (rectangle, orientation) is the rectangle area minus a bonus for
    every axis on which the part can start on an existing cut coordinate.
    Lowest score wins; the first candidate found wins ties.
    """

    name = "aligned"

    def __init__(self, alignment_bonus: float = ALIGNMENT_BONUS):
        self.alignment_bonus = alignment_bonus

    def _find_placement(self, instance: PartInstance, arena: FreeRectangleArena,
                        x_marks: List[float], y_marks: List[float]) -> Optional[Candidate]:
        best: Optional[Candidate] = None

        for handle, rect in arena.items():
            for width, height, rotated in self._orientations(instance):
                if not fits(width, height, rect):
                    continue

                x, x_aligned = _aligned_coordinate(rect.x, rect.right, width, x_marks)
                y, y_aligned = _aligned_coordinate(rect.y, rect.top, height, y_marks)
                score = rect.area - self.alignment_bonus * (x_aligned + y_aligned)

                if best is None or score < best.score:
                    best = Candidate(handle, x, y, rotated, score)

        return best


class FirstFitGuillotinePacker(GuillotinePacker):
    """
    Places each instance at the origin of the first free rectangle it fits in,
    trying the normal orientation before the rotated one.
    """

    name = "first_fit"

    def _find_placement(self, instance: PartInstance, arena: FreeRectangleArena,
                        x_marks: List[float], y_marks: List[float]) -> Optional[Candidate]:
        for handle, rect in arena.items():
            for width, height, rotated in self._orientations(instance):
                if fits(width, height, rect):
                    return Candidate(handle, rect.x, rect.y, rotated, rect.area)
        return None


STRATEGIES = {
    AlignedGuillotinePacker.name: AlignedGuillotinePacker,
    FirstFitGuillotinePacker.name: FirstFitGuillotinePacker,
}


def get_strategy(name: str) -> PackingStrategy:
    """
    Create a packing strategy by name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown packing strategy '{name}'. Available: {', '.join(sorted(STRATEGIES))}")
