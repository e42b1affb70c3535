"""Tests for the single-sheet guillotine packers."""

from typing import List

import pytest

from conftest import assert_valid_layout
from data_models import Chipboard, Dimensions, PartInstance, PartSpec, SheetLayout
from geometry import Rect
from optimization_core import expand_parts
from packing_strategies import (
    STRATEGIES,
    AlignedGuillotinePacker,
    FirstFitGuillotinePacker,
    FreeRectangleArena,
    get_strategy,
    _aligned_coordinate,
)


def _instances(specs: List[PartSpec]) -> List[PartInstance]:
    return expand_parts(specs)


class TestFreeRectangleArena:

    def test_empty_rect_gets_no_handle(self) -> None:
        arena = FreeRectangleArena(Rect(0, 0, 100, 100))
        assert arena.add(Rect(0, 0, 0, 50)) is None
        assert len(arena) == 1

    def test_split_leaves_kerf_slots(self) -> None:
        arena = FreeRectangleArena(Rect(0, 0, 1000, 500))
        handles = arena.split(0, Rect(0, 0, 400, 300), kerf=3)

        rects = dict(arena.items())
        assert len(handles) == 2
        assert rects[handles[0]] == Rect(403, 0, 597, 500)
        assert rects[handles[1]] == Rect(0, 303, 400, 197)

    def test_split_of_exact_fit_leaves_nothing(self) -> None:
        arena = FreeRectangleArena(Rect(0, 0, 500, 500))
        assert arena.split(0, Rect(0, 0, 500, 500), kerf=3) == []
        assert len(arena) == 0

    def test_handles_keep_insertion_order(self) -> None:
        arena = FreeRectangleArena(Rect(0, 0, 10, 10))
        arena.add(Rect(20, 0, 10, 10))
        arena.add(Rect(40, 0, 10, 10))
        arena.remove(1)
        assert [handle for handle, _ in arena.items()] == [0, 2]


class TestAlignedCoordinate:

    def test_lowest_fitting_mark_wins(self) -> None:
        assert _aligned_coordinate(0, 1000, 300, [0, 403, 800]) == (0, 1)
        assert _aligned_coordinate(100, 1000, 300, [0, 403, 800]) == (403, 1)

    def test_no_mark_falls_back_to_start(self) -> None:
        assert _aligned_coordinate(100, 500, 300, [0, 403]) == (100, 0)


class TestStrategyRegistry:

    def test_known_names(self) -> None:
        assert isinstance(get_strategy("aligned"), AlignedGuillotinePacker)
        assert isinstance(get_strategy("first_fit"), FirstFitGuillotinePacker)

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown packing strategy"):
            get_strategy("random")


@pytest.mark.parametrize("strategy_name", sorted(STRATEGIES))
class TestPackerProperties:

    def test_single_part_at_origin_unrotated(self, strategy_name: str, small_sheet: Chipboard) -> None:
        spec = PartSpec(id="a", name="A", dimensions=Dimensions(400, 300))
        result = get_strategy(strategy_name).pack_sheet(small_sheet, _instances([spec]), kerf=3)

        assert result.unplaced == []
        (part,) = result.placed
        assert (part.x, part.y) == (0, 0)
        assert part.dimensions == Dimensions(400, 300)
        assert part.rotated is False

    def test_layout_invariants(self, strategy_name: str, trimmed_sheet: Chipboard,
                               cabinet_parts: List[PartSpec]) -> None:
        instances = _instances(cabinet_parts)
        result = get_strategy(strategy_name).pack_sheet(trimmed_sheet, instances, kerf=4)

        assert result.placed
        assert_valid_layout(SheetLayout(chipboard=trimmed_sheet, parts=result.placed), kerf=4)

        placed_ids = [part.id for part in result.placed]
        unplaced_ids = [instance.id for instance in result.unplaced]
        assert len(set(placed_ids)) == len(placed_ids)
        assert sorted(placed_ids + unplaced_ids) == sorted(instance.id for instance in instances)

    def test_rotation_legality(self, strategy_name: str, trimmed_sheet: Chipboard,
                               cabinet_parts: List[PartSpec]) -> None:
        specs = {spec.id: spec for spec in cabinet_parts}
        result = get_strategy(strategy_name).pack_sheet(trimmed_sheet, _instances(cabinet_parts), kerf=4)

        for part in result.placed:
            spec = specs[part.part_id]
            if part.rotated:
                assert spec.can_rotate
                assert part.dimensions == spec.dimensions.rotated()
            else:
                assert part.dimensions == spec.dimensions

    def test_rotation_used_when_needed(self, strategy_name: str, small_sheet: Chipboard) -> None:
        spec = PartSpec(id="tall", name="Tall", dimensions=Dimensions(300, 800))
        result = get_strategy(strategy_name).pack_sheet(small_sheet, _instances([spec]), kerf=0)

        (part,) = result.placed
        assert part.rotated
        assert part.dimensions == Dimensions(800, 300)

    def test_fixed_grain_part_is_left_over(self, strategy_name: str, small_sheet: Chipboard) -> None:
        spec = PartSpec(id="tall", name="Tall", dimensions=Dimensions(300, 800), can_rotate=False)
        result = get_strategy(strategy_name).pack_sheet(small_sheet, _instances([spec]), kerf=0)

        assert result.placed == []
        assert [instance.id for instance in result.unplaced] == ["tall_1"]

    def test_kerf_reduces_capacity(self, strategy_name: str, small_sheet: Chipboard) -> None:
        spec = PartSpec(id="strip", name="Strip", dimensions=Dimensions(250, 500), can_rotate=False, count=4)
        packer = get_strategy(strategy_name)

        assert len(packer.pack_sheet(small_sheet, _instances([spec]), kerf=0).placed) == 4
        assert len(packer.pack_sheet(small_sheet, _instances([spec]), kerf=3).placed) == 3


def test_aligned_packer_reuses_cut_coordinates(small_sheet: Chipboard) -> None:
    specs = [PartSpec(id="p", name="Panel", dimensions=Dimensions(300, 200), can_rotate=False, count=4)]
    result = AlignedGuillotinePacker().pack_sheet(small_sheet, _instances(specs), kerf=3)

    assert len(result.placed) == 4
    assert_valid_layout(SheetLayout(chipboard=small_sheet, parts=result.placed), kerf=3)
    allowed = {0, 303, 606, 203}
    for part in result.placed:
        assert part.x in allowed
        assert part.y in allowed


def test_bonus_picks_the_aligned_rectangle() -> None:
    arena = FreeRectangleArena(Rect(0, 0, 30, 30))
    arena.add(Rect(100, 0, 31, 30))
    instance = PartInstance(id="s_1", part_id="s", name="S", dimensions=Dimensions(20, 20), can_rotate=False)

    aligned = AlignedGuillotinePacker()._find_placement(instance, arena, [100], [])
    plain = AlignedGuillotinePacker(alignment_bonus=0)._find_placement(instance, arena, [100], [])

    assert (aligned.handle, aligned.x, aligned.y) == (1, 100, 0)
    assert (plain.handle, plain.x, plain.y) == (0, 0, 0)


def test_rectangle_origin_past_the_kerf_is_not_aligned(small_sheet: Chipboard) -> None:
    specs = [
        PartSpec(id="a", name="A", dimensions=Dimensions(400, 200), can_rotate=False),
        PartSpec(id="b", name="B", dimensions=Dimensions(300, 300), can_rotate=False),
        PartSpec(id="c", name="C", dimensions=Dimensions(300, 200), can_rotate=False),
    ]
    result = AlignedGuillotinePacker().pack_sheet(small_sheet, _instances(specs), kerf=3)

    positions = {part.part_id: (part.x, part.y) for part in result.placed}
    assert positions["a"] == (0, 0)
    assert positions["b"] == (403, 0)
    # Free space above A starts at y=203; C lines up with the top of B instead
    assert positions["c"] == (0, 300)
    assert_valid_layout(SheetLayout(chipboard=small_sheet, parts=result.placed), kerf=3)
