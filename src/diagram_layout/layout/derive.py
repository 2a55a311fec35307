"""Group and edge derivation helpers, and the fallback column layout."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from diagram_layout.config import LayoutConfig
from diagram_layout.ir.ast import Document
from diagram_layout.ir.graph import DocumentGraph
from diagram_layout.layout.routing import rounded_path
from diagram_layout.layout.types import GroupLayout, LayoutResult, NodeLayout, Point, Rect, RoutedEdge
from diagram_layout.types import LayoutMode, RankDirection

logger = logging.getLogger(__name__)


def group_bounds(child_rects: Sequence[Rect], padding: float) -> Rect | None:
    """Padded union of *child_rects*; None for a group with nothing to enclose."""
    union = Rect.union(child_rects)
    if union is None:
        return None
    return union.expand(padding)


def anchor_route(source: Rect, target: Rect) -> list[Point]:
    """Two-point route from the source's right-middle to the target's left-middle."""
    return [Point(source.right, source.y + source.height / 2), Point(target.x, target.y + target.height / 2)]


def diagram_bounds(rects: Sequence[Rect], config: LayoutConfig) -> tuple[Rect, float, float]:
    """(content bounds, canvas width, canvas height); the empty canvas has a fixed size."""
    union = Rect.union(rects)
    if union is None:
        return Rect(0, 0, config.empty_width, config.empty_height), config.empty_width, config.empty_height
    return union, union.right + config.margin, union.bottom + config.margin


def layout_simple(document: Document, config: LayoutConfig | None = None) -> LayoutResult:
    """Stack every node in one column and join edges with straight anchor routes."""
    config = config or LayoutConfig()
    graph = DocumentGraph.from_document(document)

    nodes: dict[str, NodeLayout] = {}
    y = config.simple_y
    for node_id in graph.node_ids():
        data = graph.node(node_id)
        bounds = Rect(config.simple_x, y, config.simple_width, config.simple_height)
        nodes[node_id] = NodeLayout(id=node_id, source_entity=data.entity, bounds=bounds, stub=data.stub)
        y += config.simple_step

    groups: dict[str, GroupLayout] = {}
    for data in reversed(graph.groups()):
        members = graph.members(data.key)
        rects = [groups[m.key].bounds if m.is_group else nodes[m.key].bounds for m in members]
        bounds = group_bounds(rects, config.group_padding)
        if bounds is None:
            continue
        groups[data.key] = GroupLayout(
            name=data.key,
            source_group=data.group,
            child_ids=tuple(m.key for m in members),
            bounds=bounds,
            padding=config.group_padding,
        )

    edges: list[RoutedEdge] = []
    for resolved in graph.edges:
        ends = []
        for endpoint in (resolved.source, resolved.target):
            ends.append(groups[endpoint.key].bounds if endpoint.is_group else nodes[endpoint.key].bounds)
        points = tuple(anchor_route(*ends))
        edges.append(
            RoutedEdge(
                id=f"edge_{resolved.index}",
                from_id=resolved.source.key,
                to_id=resolved.target.key,
                kind=resolved.edge.kind,
                label=resolved.edge.label,
                points=points,
                source_edge=resolved.edge,
                path=tuple(rounded_path(points, config.corner_radius)),
            )
        )

    rects = [n.bounds for n in nodes.values()] + [g.bounds for g in groups.values()]
    bounds, width, height = diagram_bounds(rects, config)
    logger.debug("simple layout: %d nodes in one column, %d groups", len(nodes), len(groups))
    return LayoutResult(
        nodes=nodes,
        groups={d.key: groups[d.key] for d in graph.groups() if d.key in groups},
        edges=tuple(edges),
        width=width,
        height=height,
        bounds=bounds,
        archetype=document.archetype,
        direction=RankDirection.TB,
        mode=LayoutMode.SIMPLE,
    )
