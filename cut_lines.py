"""
Cut line derivation for a single sheet.
Turns the part edges of a layout into the set of saw passes needed to free
every part, merging collinear passes that one cut can cover.
"""

import logging
from typing import List, Dict, Tuple, Sequence, Callable

from config import EPSILON
from data_models import Chipboard, PlacedPart, CutLine
from geometry import Rect, same

logger = logging.getLogger(__name__)

Span = Tuple[float, float]


def _find_key(value: float, keys: List[float]) -> float:
    for key in keys:
        if same(key, value):
            return key
    keys.append(value)
    return value


def _merge_spans(spans: List[Span], gap: float) -> List[Span]:
    """
    Merge spans that overlap, touch or are separated by at most gap.

    Args:
        spans: (start, end) pairs in any order
        gap: Largest separation that one pass still covers (the kerf)

    Returns:
        Maximal merged spans sorted by start
    """
    merged: List[Span] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1] + gap + EPSILON:
            previous_start, previous_end = merged[-1]
            merged[-1] = (previous_start, max(previous_end, end))
        else:
            merged.append((start, end))
    return merged


def _cut_positions(parts: Sequence[PlacedPart], low: float, high: float, span_low: float,
                   span_high: float, kerf: float,
                   near: Callable[[PlacedPart], float], far: Callable[[PlacedPart], float],
                   span: Callable[[PlacedPart], Span]) -> Dict[float, List[Span]]:
    """
    Collect, per cut coordinate on one axis, the spans of the parts needing that cut.

    Edges on the usable boundary need no cut. A near edge exactly one kerf past
    some far edge belongs to the pass at that far edge.
    """
    keys: List[float] = []
    positions: Dict[float, List[Span]] = {}

    def add(coordinate: float, part: PlacedPart) -> None:
        coordinate = min(max(coordinate, low), high)
        if same(coordinate, low) or same(coordinate, high):
            return
        start, end = span(part)
        start = max(start, span_low)
        end = min(end, span_high)
        if end - start <= EPSILON:
            return
        key = _find_key(coordinate, keys)
        positions.setdefault(key, []).append((start, end))

    far_edges = [far(part) for part in parts]
    for part in parts:
        add(far(part), part)

    for part in parts:
        coordinate = near(part)
        for edge in far_edges:
            if same(coordinate, edge + kerf):
                coordinate = edge
                break
        add(coordinate, part)

    return positions


def derive_cut_lines(parts: Sequence[PlacedPart], chipboard: Chipboard, kerf: float = 0.0) -> List[CutLine]:
    """
    Compute the saw passes that reproduce the boundaries of the placed parts.

    Args:
        parts: Parts placed on the sheet
        chipboard: Sheet the parts are placed on
        kerf: Saw kerf in mm, used to recognise both faces of one pass

    Returns:
        Vertical lines sorted by x then y, followed by horizontal lines sorted by y then x
    """
    if not parts:
        return []

    usable: Rect = chipboard.usable_rect()

    vertical = _cut_positions(
        parts, usable.x, usable.right, usable.y, usable.top, kerf,
        near=lambda p: p.x, far=lambda p: p.right, span=lambda p: (p.y, p.top))
    horizontal = _cut_positions(
        parts, usable.y, usable.top, usable.x, usable.right, kerf,
        near=lambda p: p.y, far=lambda p: p.top, span=lambda p: (p.x, p.right))

    lines = set()
    for x, spans in vertical.items():
        for start, end in _merge_spans(spans, kerf):
            lines.add(CutLine(x, start, x, end))
    for y, spans in horizontal.items():
        for start, end in _merge_spans(spans, kerf):
            lines.add(CutLine(start, y, end, y))

    vertical_lines = sorted((line for line in lines if line.is_vertical),
                            key=lambda line: (line.x1, line.y1, line.y2))
    horizontal_lines = sorted((line for line in lines if not line.is_vertical),
                              key=lambda line: (line.y1, line.x1, line.x2))

    logger.debug(f"{chipboard.id}: {len(vertical_lines)} vertical and "
                 f"{len(horizontal_lines)} horizontal cuts for {len(parts)} parts")
    return vertical_lines + horizontal_lines
