"""
Core data models for the chipboard cut planner.
Defines Dimensions, Chipboard, PvcEdges, PartSpec, PartInstance, PlacedPart,
CutLine, Remainder, SheetLayout, PlacementStatistics and PlacementResult.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Optional, List, Dict, Any

from geometry import Rect


@dataclass(frozen=True)
class Dimensions:
    """Width and height of a rectangular piece in millimeters."""
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    def rotated(self) -> 'Dimensions':
        """Return the dimensions turned by 90 degrees."""
        return Dimensions(width=self.height, height=self.width)

    def __str__(self) -> str:
        return f"{self.width:g}x{self.height:g}"


@dataclass(frozen=True)
class Chipboard:
    """
    Represents a stock sheet definition.

    The usable rectangle is the sheet minus a uniform margin on every side:
    [margin, width - margin] x [margin, height - margin].
    """
    id: str
    name: str
    dimensions: Dimensions
    thickness: float = 18.0
    margin: float = 0.0

    @property
    def usable_width(self) -> float:
        return self.dimensions.width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        return self.dimensions.height - 2 * self.margin

    @property
    def usable_area(self) -> float:
        return max(self.usable_width, 0.0) * max(self.usable_height, 0.0)

    def usable_rect(self) -> Rect:
        return Rect(self.margin, self.margin, self.usable_width, self.usable_height)

    def __str__(self) -> str:
        return f"Chipboard({self.id}, {self.dimensions}, margin={self.margin:g})"


@dataclass(frozen=True)
class PvcEdges:
    """
    Edge banding flags for the four sides of a part.
    """
    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False

    def rotated(self) -> 'PvcEdges':
        """
        Remap the flags for a part turned by 90 degrees.

        The side that was on the left ends up on top, top goes right,
        right goes to the bottom and bottom goes left.
        """
        return PvcEdges(top=self.left, right=self.top, bottom=self.right, left=self.bottom)

    def banding_length(self, dimensions: Dimensions) -> float:
        """
        Calculate the banding length needed for a part of the given size.

        Args:
            dimensions: Part dimensions in the same frame as these flags

        Returns:
            Length in mm: width per top/bottom side, height per left/right side
        """
        horizontal_sides = int(self.top) + int(self.bottom)
        vertical_sides = int(self.left) + int(self.right)
        return horizontal_sides * dimensions.width + vertical_sides * dimensions.height

    def any(self) -> bool:
        return self.top or self.right or self.bottom or self.left

    def to_dict(self) -> Dict[str, bool]:
        return {'top': self.top, 'right': self.right, 'bottom': self.bottom, 'left': self.left}


@dataclass(frozen=True)
class PartSpec:
    """
    Represents a requested part with its quantity.

    Attributes:
        id: Unique identifier of the specification
        name: Display name
        dimensions: Size in the part's own (unrotated) frame
        can_rotate: False when the grain direction must be kept
        count: Number of pieces needed
        pvc_edges: Optional edge banding, in the unrotated frame
    """
    id: str
    name: str
    dimensions: Dimensions
    can_rotate: bool = True
    count: int = 1
    pvc_edges: Optional[PvcEdges] = None

    def __str__(self) -> str:
        return f"PartSpec({self.id}, {self.dimensions} x{self.count})"


@dataclass(frozen=True)
class PartInstance:
    """One physical copy of a PartSpec. Only lives for one placement run."""
    id: str
    part_id: str
    name: str
    dimensions: Dimensions
    can_rotate: bool
    pvc_edges: Optional[PvcEdges] = None

    def __str__(self) -> str:
        return f"PartInstance({self.id}, {self.dimensions})"


@dataclass(frozen=True)
class PlacedPart:
    """
    A part instance at its final position on a sheet.

    Dimensions and pvc_edges are already in the placed orientation. Parts
    built by hand keep their orientation unless can_rotate is set.
    """
    id: str
    part_id: str
    name: str
    dimensions: Dimensions
    x: float
    y: float
    rotated: bool = False
    can_rotate: bool = False
    pvc_edges: Optional[PvcEdges] = None

    @classmethod
    def from_instance(cls, instance: PartInstance, x: float, y: float, rotated: bool) -> 'PlacedPart':
        dimensions = instance.dimensions.rotated() if rotated else instance.dimensions
        pvc_edges = instance.pvc_edges
        if rotated and pvc_edges is not None:
            pvc_edges = pvc_edges.rotated()
        return cls(
            id=instance.id,
            part_id=instance.part_id,
            name=instance.name,
            dimensions=dimensions,
            x=x,
            y=y,
            rotated=rotated,
            can_rotate=instance.can_rotate,
            pvc_edges=pvc_edges,
        )

    @property
    def right(self) -> float:
        return self.x + self.dimensions.width

    @property
    def top(self) -> float:
        return self.y + self.dimensions.height

    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.dimensions.width, self.dimensions.height)

    def banding_length(self) -> float:
        if self.pvc_edges is None:
            return 0.0
        return self.pvc_edges.banding_length(self.dimensions)

    def moved_to(self, x: float, y: float) -> 'PlacedPart':
        return replace(self, x=x, y=y)

    def turned(self) -> 'PlacedPart':
        """Return this part turned by 90 degrees around its origin."""
        pvc_edges = self.pvc_edges.rotated() if self.pvc_edges is not None else None
        return replace(self, dimensions=self.dimensions.rotated(),
                       rotated=not self.rotated, pvc_edges=pvc_edges)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'part_id': self.part_id,
            'name': self.name,
            'width': self.dimensions.width,
            'height': self.dimensions.height,
            'x': self.x,
            'y': self.y,
            'rotated': self.rotated,
            'pvc_edges': self.pvc_edges.to_dict() if self.pvc_edges else None,
        }

    def __str__(self) -> str:
        suffix = " R" if self.rotated else ""
        return f"PlacedPart({self.id}, {self.dimensions} @ ({self.x:g},{self.y:g}){suffix})"


@dataclass(frozen=True)
class CutLine:
    """One straight saw pass. Either x1 == x2 (vertical) or y1 == y2 (horizontal)."""
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    @property
    def is_vertical(self) -> bool:
        return self.x1 == self.x2

    def to_dict(self) -> Dict[str, float]:
        return {'x1': self.x1, 'y1': self.y1, 'x2': self.x2, 'y2': self.y2, 'length': self.length}


@dataclass(frozen=True)
class Remainder:
    """
    Represents a leftover piece that can be reused for a later job.
    """
    x: float
    y: float
    width: float
    height: float
    created_from: str = ""

    @property
    def area(self) -> float:
        return self.width * self.height

    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'area': self.area,
            'created_from': self.created_from,
        }

    def __str__(self) -> str:
        return f"Remainder({self.width:g}x{self.height:g} @ ({self.x:g},{self.y:g}))"


@dataclass
class SheetLayout:
    """
    One chipboard with its placed parts and the derived cut lines and remainders.
    """
    chipboard: Chipboard
    parts: List[PlacedPart] = field(default_factory=list)
    cut_lines: List[CutLine] = field(default_factory=list)
    remainders: List[Remainder] = field(default_factory=list)

    def get_used_area(self) -> float:
        return sum(part.dimensions.area for part in self.parts)

    def get_utilization_percentage(self) -> float:
        """
        Calculate the percentage of the usable area covered by parts.

        Returns:
            Utilization percentage (0-100)
        """
        usable_area = self.chipboard.usable_area
        if usable_area <= 0:
            return 0.0
        return self.get_used_area() / usable_area * 100

    def find_part(self, placed_id: str) -> Optional[PlacedPart]:
        for part in self.parts:
            if part.id == placed_id:
                return part
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'chipboard': {
                'id': self.chipboard.id,
                'name': self.chipboard.name,
                'width': self.chipboard.dimensions.width,
                'height': self.chipboard.dimensions.height,
                'thickness': self.chipboard.thickness,
                'margin': self.chipboard.margin,
            },
            'parts': [part.to_dict() for part in self.parts],
            'cut_lines': [line.to_dict() for line in self.cut_lines],
            'remainders': [remainder.to_dict() for remainder in self.remainders],
        }

    def __str__(self) -> str:
        return f"SheetLayout({self.chipboard.id}, {len(self.parts)} parts)"


UNPLACEABLE = "unplaceable"
RESOURCE_BOUND = "resource_bound"


@dataclass(frozen=True)
class UnplacedPart:
    """A part instance that could not be placed, with the reason why."""
    id: str
    part_id: str
    name: str
    dimensions: Dimensions
    reason: str = UNPLACEABLE

    @classmethod
    def from_instance(cls, instance: PartInstance, reason: str) -> 'UnplacedPart':
        return cls(id=instance.id, part_id=instance.part_id, name=instance.name,
                   dimensions=instance.dimensions, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'part_id': self.part_id,
            'name': self.name,
            'width': self.dimensions.width,
            'height': self.dimensions.height,
            'reason': self.reason,
        }


@dataclass(frozen=True)
class PlacementStatistics:
    total_parts: int = 0
    total_sheets: int = 0
    total_cut_length: int = 0
    total_cut_operations: int = 0
    efficiency: float = 0.0
    total_pvc_length: float = 0.0
    requested_parts: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_parts': self.total_parts,
            'requested_parts': self.requested_parts,
            'total_sheets': self.total_sheets,
            'total_cut_length': self.total_cut_length,
            'total_cut_operations': self.total_cut_operations,
            'efficiency': self.efficiency,
            'total_pvc_length': self.total_pvc_length,
        }


@dataclass
class PlacementResult:
    """
    Output of a full placement run.

    is_partial is set when the sheet bound stopped the run with parts left over.
    """
    sheets: List[SheetLayout]
    statistics: PlacementStatistics
    unplaced: List[UnplacedPart] = field(default_factory=list)
    is_partial: bool = False

    @property
    def placed_count(self) -> int:
        return sum(len(sheet.parts) for sheet in self.sheets)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sheets': [sheet.to_dict() for sheet in self.sheets],
            'statistics': self.statistics.to_dict(),
            'unplaced': [part.to_dict() for part in self.unplaced],
            'is_partial': self.is_partial,
        }


@dataclass
class Project:
    """A named job: one chipboard template, a saw kerf and the requested parts."""
    id: str
    name: str
    saw_thickness: float
    chipboard: Chipboard
    parts: List[PartSpec] = field(default_factory=list)
    placement_result: Optional[PlacementResult] = None
