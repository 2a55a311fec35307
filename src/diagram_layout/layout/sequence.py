"""Sequence layout — fixed participant columns, one row per message.

Independent of ranked placement: temporal order is the input order of edges and
columns are the first-seen order of participants, so the same document always
yields the same columns.
"""

from __future__ import annotations

import logging

from diagram_layout.config import LayoutConfig
from diagram_layout.ir.ast import Document, Entity
from diagram_layout.layout.derive import diagram_bounds
from diagram_layout.layout.routing import rounded_path
from diagram_layout.layout.types import LayoutResult, NodeLayout, Point, Rect, RoutedEdge
from diagram_layout.types import LayoutMode, RankDirection

logger = logging.getLogger(__name__)


def participants(document: Document) -> dict[str, Entity | None]:
    """Participant ids in first-seen order: declared entities, then edge endpoints.

    The first declaration of an id is its source entity; ids only seen on edges
    map to None.
    """
    seen: dict[str, Entity | None] = {}
    for entity in document.iter_entities():
        seen.setdefault(entity.id, entity)
    for edge in document.edges:
        seen.setdefault(edge.from_id, None)
        seen.setdefault(edge.to_id, None)
    return seen


def layout_sequence(document: Document, config: LayoutConfig | None = None) -> LayoutResult:
    """Columns at fixed x-offsets, messages as horizontal rows top to bottom; groups are ignored."""
    config = config or LayoutConfig()

    nodes: dict[str, NodeLayout] = {}
    x = config.sequence_start_x
    for pid, entity in participants(document).items():
        bounds = Rect(x, config.sequence_start_y, config.participant_width, config.participant_height)
        nodes[pid] = NodeLayout(id=pid, source_entity=entity or Entity(id=pid), bounds=bounds, stub=entity is None)
        x += config.participant_spacing

    edges: list[RoutedEdge] = []
    y = config.sequence_start_y + config.header_height + config.sequence_gap
    for index, edge in enumerate(document.edges):
        x1 = nodes[edge.from_id].bounds.center.x
        x2 = nodes[edge.to_id].bounds.center.x
        if edge.is_self_loop:
            points = (
                Point(x1, y),
                Point(x1 + config.self_loop_width, y),
                Point(x1 + config.self_loop_width, y + config.self_loop_height),
                Point(x1, y + config.self_loop_height),
            )
            y += config.self_loop_extra
        else:
            points = (Point(x1, y), Point(x2, y))
        edges.append(
            RoutedEdge(
                id=f"seq_{index}",
                from_id=edge.from_id,
                to_id=edge.to_id,
                kind=edge.kind,
                label=edge.label,
                points=points,
                source_edge=edge,
                path=tuple(rounded_path(points, config.corner_radius)),
            )
        )
        y += config.message_spacing

    rects = [n.bounds for n in nodes.values()]
    rects.extend(Rect(p.x, p.y, 0, 0) for e in edges for p in e.points)
    bounds, width, height = diagram_bounds(rects, config)
    if nodes:
        width, height = x, y + config.sequence_gap
    logger.debug("sequence layout: %d participants, %d messages", len(nodes), len(edges))
    return LayoutResult(
        nodes=nodes,
        groups={},
        edges=tuple(edges),
        width=width,
        height=height,
        bounds=bounds,
        archetype=document.archetype,
        direction=RankDirection.TB,
        mode=LayoutMode.SEQUENCE,
    )
