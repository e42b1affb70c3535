"""Tests for manual layout edits and input validation."""

import pytest

from data_models import Chipboard, Dimensions, PartSpec, PlacedPart, PvcEdges, SheetLayout
from layout_editing import move_part, rotate_part, set_pvc_edges
from optimization_core import recompute_layout
from validation import (InvalidSpecError, LayoutInconsistencyError, validate_chipboard,
                        validate_kerf, validate_part_specs, find_layout_problem)


@pytest.fixture
def two_part_layout(small_sheet: Chipboard) -> SheetLayout:
    parts = [
        PlacedPart(id="a_1", part_id="a", name="A", dimensions=Dimensions(400, 300), x=0, y=0,
                   can_rotate=True),
        PlacedPart(id="b_1", part_id="b", name="B", dimensions=Dimensions(200, 100), x=403, y=0,
                   can_rotate=False),
    ]
    return recompute_layout(SheetLayout(chipboard=small_sheet, parts=parts), 3)


class TestMovePart:

    def test_move_returns_new_layout(self, two_part_layout: SheetLayout) -> None:
        moved = move_part(two_part_layout, "b_1", 700, 300)
        assert moved.find_part("b_1").x == 700
        assert moved.find_part("b_1").y == 300
        assert two_part_layout.find_part("b_1").x == 403

    def test_move_outside_sheet(self, two_part_layout: SheetLayout) -> None:
        with pytest.raises(LayoutInconsistencyError) as excinfo:
            move_part(two_part_layout, "b_1", 900, 0)
        assert excinfo.value.part_ids == ("b_1",)

    def test_move_onto_another_part(self, two_part_layout: SheetLayout) -> None:
        with pytest.raises(LayoutInconsistencyError) as excinfo:
            move_part(two_part_layout, "b_1", 300, 200)
        assert set(excinfo.value.part_ids) == {"a_1", "b_1"}

    def test_unknown_part(self, two_part_layout: SheetLayout) -> None:
        with pytest.raises(KeyError):
            move_part(two_part_layout, "zz_1", 0, 0)

    def test_recompute_after_move(self, two_part_layout: SheetLayout) -> None:
        moved = recompute_layout(move_part(two_part_layout, "b_1", 700, 300), 3)
        assert moved.cut_lines != two_part_layout.cut_lines
        assert moved.remainders != two_part_layout.remainders


class TestRotatePart:

    def test_rotate_swaps_dimensions(self, two_part_layout: SheetLayout) -> None:
        rotated = rotate_part(two_part_layout, "a_1")
        part = rotated.find_part("a_1")
        assert part.dimensions == Dimensions(300, 400)
        assert part.rotated is True

    def test_fixed_grain_part_refuses_rotation(self, two_part_layout: SheetLayout) -> None:
        with pytest.raises(LayoutInconsistencyError, match="orientation"):
            rotate_part(two_part_layout, "b_1")

    def test_hand_built_part_is_fixed_unless_marked_rotatable(self, small_sheet: Chipboard) -> None:
        part = PlacedPart(id="g_1", part_id="g", name="Grain", dimensions=Dimensions(200, 100), x=0, y=0)
        layout = SheetLayout(chipboard=small_sheet, parts=[part])
        assert part.can_rotate is False
        with pytest.raises(LayoutInconsistencyError, match="orientation"):
            rotate_part(layout, "g_1")

    def test_rotation_that_leaves_the_sheet(self, small_sheet: Chipboard) -> None:
        part = PlacedPart(id="w_1", part_id="w", name="W", dimensions=Dimensions(900, 100), x=0, y=0,
                          can_rotate=True)
        layout = SheetLayout(chipboard=small_sheet, parts=[part])
        with pytest.raises(LayoutInconsistencyError):
            rotate_part(layout, "w_1")


class TestSetPvcEdges:

    def test_banding_follows_edges(self, two_part_layout: SheetLayout) -> None:
        edited = set_pvc_edges(two_part_layout, "a_1", PvcEdges(top=True, left=True))
        assert edited.find_part("a_1").banding_length() == 700
        assert two_part_layout.find_part("a_1").pvc_edges is None


class TestValidation:

    def test_valid_inputs_pass(self, small_sheet: Chipboard) -> None:
        validate_chipboard(small_sheet)
        validate_kerf(0)
        validate_part_specs([PartSpec(id="a", name="A", dimensions=Dimensions(10, 10))])

    @pytest.mark.parametrize("width,height,margin", [(0, 500, 0), (1000, -1, 0), (1000, 500, -5),
                                                     (1000, 500, 250)])
    def test_invalid_chipboards(self, width: float, height: float, margin: float) -> None:
        chipboard = Chipboard(id="bad", name="Bad", dimensions=Dimensions(width, height), margin=margin)
        with pytest.raises(InvalidSpecError):
            validate_chipboard(chipboard)

    def test_negative_kerf(self) -> None:
        with pytest.raises(InvalidSpecError):
            validate_kerf(-0.5)

    def test_all_part_problems_are_reported(self) -> None:
        specs = [
            PartSpec(id="a", name="A", dimensions=Dimensions(-1, 10)),
            PartSpec(id="b", name="B", dimensions=Dimensions(10, 10), count=0),
            PartSpec(id="a", name="A again", dimensions=Dimensions(10, 10)),
        ]
        with pytest.raises(InvalidSpecError) as excinfo:
            validate_part_specs(specs)
        assert len(excinfo.value.errors) == 3
        assert any("duplicate" in error for error in excinfo.value.errors)

    def test_find_layout_problem_accepts_touching_parts(self, two_part_layout: SheetLayout) -> None:
        assert find_layout_problem(two_part_layout.parts, two_part_layout.chipboard) is None
