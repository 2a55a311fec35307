"""Graph layout engine — compound ranked placement of a whole Document.

Groups are laid out inside-out. Each container's direct members (nodes and
populated child groups) are placed by rank_layout; a child group takes part in
its parent's placement as a single compound node sized to its own padded
content. Every edge is placed at the lowest container holding both endpoints,
with each endpoint lifted to that container's direct member.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from diagram_layout.config import LayoutConfig
from diagram_layout.ir.ast import Document, Entity
from diagram_layout.ir.graph import ROOT, DocumentGraph, Endpoint, ResolvedEdge
from diagram_layout.layout.derive import anchor_route, diagram_bounds, group_bounds
from diagram_layout.layout.measure import ApproximateTextMeasurer, TextMeasurer
from diagram_layout.layout.ranked import RankEdge, RankNode, rank_layout
from diagram_layout.layout.routing import rounded_path
from diagram_layout.layout.types import COMPOUND_PREFIX, GroupLayout, LayoutResult, NodeLayout, Point, Rect, RoutedEdge
from diagram_layout.types import LayoutMode, RankDirection

logger = logging.getLogger(__name__)


def resolve_direction(document: Document, config: LayoutConfig) -> RankDirection:
    """Config override, else LR when metadata ``direction`` mentions L or R, else TB."""
    if config.direction is not None:
        return config.direction
    value = document.metadata.get("direction")
    if isinstance(value, str) and any(c in value.upper() for c in "LR"):
        return RankDirection.LR
    return RankDirection.default()


def node_size(entity: Entity, config: LayoutConfig, measurer: TextMeasurer) -> tuple[float, float]:
    """Title width plus padding (with a floor); field rows stack below the title."""
    title = measurer.measure(entity.label, config.title_font)
    width = max(title.width + config.label_padding, config.min_node_width)
    height = config.node_height
    if entity.fields:
        widest = max(measurer.measure(f.display_text, config.field_font).width for f in entity.fields)
        width = max(width, widest + config.label_padding)
        height += len(entity.fields) * config.field_row_height
    return width, height


# ─── Compound placement ──────────────────────────────────────────────────────


@dataclass
class _Placed:
    """One container's members placed relative to its own content origin."""

    rects: dict[str, Rect] = field(default_factory=dict)  # rank id -> rect
    routes: dict[int, list[Point]] = field(default_factory=dict)
    children: dict[str, _Placed] = field(default_factory=dict)  # group key -> placement
    width: float = 0.0
    height: float = 0.0


def _rank_id(endpoint: Endpoint) -> str:
    return f"{COMPOUND_PREFIX}{endpoint.key}" if endpoint.is_group else endpoint.key


class _GraphLayout:
    def __init__(self, graph: DocumentGraph, config: LayoutConfig, measurer: TextMeasurer, direction: RankDirection):
        self.graph = graph
        self.config = config
        self.direction = direction
        self.sizes = {nid: self._size(nid, measurer) for nid in graph.node_ids()}
        self.edges_at: dict[str, list[tuple[ResolvedEdge, Endpoint, Endpoint]]] = {}
        self.detached: list[ResolvedEdge] = []
        for resolved in graph.edges:
            self._assign(resolved)

    def _size(self, node_id: str, measurer: TextMeasurer) -> tuple[float, float]:
        data = self.graph.node(node_id)
        if data.stub:
            return self.config.stub_width, self.config.stub_height
        return node_size(data.entity, self.config, measurer)

    def _assign(self, resolved: ResolvedEdge) -> None:
        src, tgt = resolved.source, resolved.target
        if (src.is_group and self.graph.encloses(src.key, tgt)) or (tgt.is_group and self.graph.encloses(tgt.key, src)):
            # a group and something inside it: no rank relation exists
            self.detached.append(resolved)
            return
        container = self.graph.lowest_common_container(src, tgt)
        lifted = (resolved, self.graph.lift(src, container), self.graph.lift(tgt, container))
        self.edges_at.setdefault(container, []).append(lifted)

    def place(self, container: str) -> _Placed:
        placed = _Placed()
        pad = self.config.group_padding
        rank_nodes: list[RankNode] = []
        for member in self.graph.members(container):
            if member.is_group:
                child = self.place(member.key)
                placed.children[member.key] = child
                rank_nodes.append(RankNode(_rank_id(member), child.width + 2 * pad, child.height + 2 * pad))
            else:
                width, height = self.sizes[member.key]
                rank_nodes.append(RankNode(member.key, width, height))

        rank_edges = [
            RankEdge(key=resolved.index, source=_rank_id(src), target=_rank_id(tgt))
            for resolved, src, tgt in self.edges_at.get(container, [])
        ]
        ranked = rank_layout(rank_nodes, rank_edges, self.direction, self.config)
        placed.rects = ranked.rects
        placed.routes = ranked.routes
        placed.width, placed.height = ranked.width, ranked.height
        return placed


# ─── Absolute positions ──────────────────────────────────────────────────────


@dataclass
class _Collected:
    nodes: dict[str, NodeLayout] = field(default_factory=dict)
    groups: dict[str, GroupLayout] = field(default_factory=dict)
    routes: dict[int, list[Point]] = field(default_factory=dict)


def _collect(layout: _GraphLayout, container: str, placed: _Placed, dx: float, dy: float, out: _Collected) -> list[Rect]:
    """Emit absolute layouts for *container*; return the absolute rects of its direct children."""
    graph = layout.graph
    pad = layout.config.group_padding
    child_rects: list[Rect] = []

    for key, points in placed.routes.items():
        out.routes[key] = [Point(p.x + dx, p.y + dy) for p in points]

    for member in graph.members(container):
        rect = placed.rects[_rank_id(member)].translate(dx, dy)
        if not member.is_group:
            data = graph.node(member.key)
            out.nodes[member.key] = NodeLayout(id=member.key, source_entity=data.entity, bounds=rect, stub=data.stub)
            child_rects.append(rect)
            continue

        data = graph.containers[member.key]
        inner = _collect(layout, member.key, placed.children[member.key], rect.x + pad, rect.y + pad, out)
        bounds = group_bounds(inner, pad)
        if bounds is None:
            continue
        child_ids = tuple(m.key for m in graph.members(member.key))
        out.groups[member.key] = GroupLayout(
            name=member.key, source_group=data.group, child_ids=child_ids, bounds=bounds, padding=pad
        )
        child_rects.append(bounds)
    return child_rects


def _endpoint_rect(endpoint: Endpoint, out: _Collected) -> Rect:
    if endpoint.is_group:
        return out.groups[endpoint.key].bounds
    return out.nodes[endpoint.key].bounds


def layout_graph(
    document: Document,
    config: LayoutConfig | None = None,
    measurer: TextMeasurer | None = None,
) -> LayoutResult:
    """Compute absolute node, group and edge geometry for *document*."""
    config = config or LayoutConfig()
    measurer = measurer or ApproximateTextMeasurer()
    direction = resolve_direction(document, config)

    graph = DocumentGraph.from_document(document)
    engine = _GraphLayout(graph, config, measurer, direction)
    placed = engine.place(ROOT)

    out = _Collected()
    _collect(engine, ROOT, placed, config.margin, config.margin, out)

    for resolved in engine.detached:
        out.routes[resolved.index] = anchor_route(
            _endpoint_rect(resolved.source, out), _endpoint_rect(resolved.target, out)
        )

    edges: list[RoutedEdge] = []
    for resolved in graph.edges:
        points = tuple(out.routes.get(resolved.index, ()))
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

    bounds, width, height = diagram_bounds(
        [n.bounds for n in out.nodes.values()] + [g.bounds for g in out.groups.values()], config
    )
    logger.debug(
        "graph layout: %d nodes, %d groups, %d edges, %s, %.0fx%.0f",
        len(out.nodes),
        len(out.groups),
        len(edges),
        direction.value,
        width,
        height,
    )
    return LayoutResult(
        nodes={nid: out.nodes[nid] for nid in graph.node_ids() if nid in out.nodes},
        groups={g.key: out.groups[g.key] for g in graph.groups() if g.key in out.groups},
        edges=tuple(edges),
        width=width,
        height=height,
        bounds=bounds,
        archetype=document.archetype,
        direction=direction,
        mode=LayoutMode.GRAPH,
    )
