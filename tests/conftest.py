"""Shared fixtures for the cut planner tests."""

from typing import List

import pytest

from data_models import Chipboard, Dimensions, PartSpec, PvcEdges, PlacedPart, SheetLayout
from geometry import overlaps


@pytest.fixture
def small_sheet() -> Chipboard:
    """1000x500 sheet without margin."""
    return Chipboard(id="small", name="Small sheet", dimensions=Dimensions(1000, 500))


@pytest.fixture
def trimmed_sheet() -> Chipboard:
    """2800x2070 sheet with a 10mm trim on every side."""
    return Chipboard(id="trimmed", name="Standard trimmed", dimensions=Dimensions(2800, 2070), margin=10)


@pytest.fixture
def cabinet_parts() -> List[PartSpec]:
    """A realistic mixed cutlist for a kitchen cabinet run."""
    return [
        PartSpec(id="side", name="Side panel", dimensions=Dimensions(720, 560), count=6,
                 pvc_edges=PvcEdges(top=True, right=True)),
        PartSpec(id="shelf", name="Shelf", dimensions=Dimensions(564, 520), count=8,
                 pvc_edges=PvcEdges(top=True)),
        PartSpec(id="door", name="Door", dimensions=Dimensions(715, 396), count=6, can_rotate=False,
                 pvc_edges=PvcEdges(True, True, True, True)),
        PartSpec(id="rail", name="Rail", dimensions=Dimensions(564, 100), count=12),
        PartSpec(id="back", name="Back", dimensions=Dimensions(1200, 720), count=2),
    ]


@pytest.fixture
def single_part_layout(small_sheet: Chipboard) -> SheetLayout:
    part = PlacedPart(id="a_1", part_id="a", name="A", dimensions=Dimensions(400, 300), x=0, y=0)
    return SheetLayout(chipboard=small_sheet, parts=[part])


def assert_valid_layout(sheet: SheetLayout, kerf: float = 0.0) -> None:
    """Check bounds, no overlap and kerf spacing between every pair of parts."""
    usable = sheet.chipboard.usable_rect()
    for part in sheet.parts:
        assert part.x >= usable.x - 1e-6
        assert part.y >= usable.y - 1e-6
        assert part.right <= usable.right + 1e-6
        assert part.top <= usable.top + 1e-6

    for i, first in enumerate(sheet.parts):
        for second in sheet.parts[i + 1:]:
            assert not overlaps(first.rect(), second.rect()), f"{first} overlaps {second}"
            if kerf > 0:
                x_gap = max(second.x - first.right, first.x - second.right)
                y_gap = max(second.y - first.top, first.y - second.top)
                assert max(x_gap, y_gap) >= kerf - 1e-6, f"{first} and {second} closer than kerf"
