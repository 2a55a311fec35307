"""Layout types shared across layout strategies and the serializer."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Union

from diagram_layout.ir.ast import Edge, Entity, Group
from diagram_layout.types import Archetype, EdgeKind, LayoutMode, RankDirection


@dataclass(frozen=True)
class Point:
    """A point in layout units, origin top-left."""

    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """An axis-aligned box with a top-left origin."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_center(cls, cx: float, cy: float, width: float, height: float) -> Rect:
        return cls(x=cx - width / 2, y=cy - height / 2, width=width, height=height)

    @classmethod
    def union(cls, rects: Iterable[Rect]) -> Rect | None:
        """Smallest rect covering *rects*, or None when there are none."""
        rects = list(rects)
        if not rects:
            return None
        left = min(r.x for r in rects)
        top = min(r.y for r in rects)
        right = max(r.right for r in rects)
        bottom = max(r.bottom for r in rects)
        return cls(x=left, y=top, width=right - left, height=bottom - top)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def expand(self, amount: float) -> Rect:
        return Rect(self.x - amount, self.y - amount, self.width + 2 * amount, self.height + 2 * amount)

    def translate(self, dx: float, dy: float) -> Rect:
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def contains(self, other: Rect) -> bool:
        return self.x <= other.x and self.y <= other.y and other.right <= self.right and other.bottom <= self.bottom


# ─── Path commands ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MoveTo:
    to: Point


@dataclass(frozen=True)
class LineTo:
    to: Point


@dataclass(frozen=True)
class QuadTo:
    """Quadratic curve through control point *control* ending at *to*."""

    control: Point
    to: Point


PathCommand = Union[MoveTo, LineTo, QuadTo]


# ─── Layout entities ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NodeLayout:
    id: str
    source_entity: Entity
    bounds: Rect
    stub: bool = False


@dataclass(frozen=True)
class GroupLayout:
    name: str
    source_group: Group | None
    child_ids: tuple[str, ...]
    bounds: Rect
    padding: float


@dataclass(frozen=True)
class RoutedEdge:
    id: str
    from_id: str
    to_id: str
    kind: EdgeKind
    label: str | None
    points: tuple[Point, ...]
    source_edge: Edge
    path: tuple[PathCommand, ...] = ()


@dataclass(frozen=True)
class LayoutResult:
    """Everything a renderer needs: absolutely positioned nodes, groups and edges."""

    nodes: Mapping[str, NodeLayout]
    groups: Mapping[str, GroupLayout]
    edges: tuple[RoutedEdge, ...]
    width: float
    height: float
    bounds: Rect
    archetype: Archetype = Archetype.UNKNOWN
    direction: RankDirection = RankDirection.TB
    mode: LayoutMode = LayoutMode.GRAPH


# Prefix constants for synthetic nodes inside ranked placement
DUMMY_PREFIX = "__dummy_"
COMPOUND_PREFIX = "__sg_"
