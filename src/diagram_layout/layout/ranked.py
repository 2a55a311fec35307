"""Ranked placement — Sugiyama-style layered layout over sized nodes.

Phases:
  1. Cycle removal (greedy-FAS)
  2. Layer assignment (longest path)
  3. Dummy node insertion
  4. Crossing minimization (barycenter)
  5. Coordinate assignment
  6. Bend points

The algorithm works in "rank space": ranks run along y for TB and along x for
LR. Node extents are swapped on the way in and positions on the way out, so the
phases themselves never look at the direction.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import networkx as nx

from diagram_layout.config import LayoutConfig
from diagram_layout.layout.routing import simplify_path
from diagram_layout.layout.types import DUMMY_PREFIX, Point, Rect
from diagram_layout.types import RankDirection

logger = logging.getLogger(__name__)

# ─── Geometry constants ──────────────────────────────────────────────────────

MAX_ORDER_PASSES: int = 24
REFINE_PASSES: int = 4
SELF_LOOP_SIZE: float = 20.0


@dataclass(frozen=True)
class RankNode:
    id: str
    width: float
    height: float


@dataclass(frozen=True)
class RankEdge:
    key: int
    source: str
    target: str


@dataclass
class RankedLayout:
    """Placement result with the content box starting at (0, 0)."""

    rects: dict[str, Rect] = field(default_factory=dict)
    routes: dict[int, list[Point]] = field(default_factory=dict)
    width: float = 0.0
    height: float = 0.0


# ─── Cycle Removal (Greedy-FAS) ─────────────────────────────────────────────


def greedy_fas_ordering(graph: nx.DiGraph) -> list[str]:
    """Compute a node ordering using the greedy-FAS heuristic.

    Ties are broken by node insertion order so the result is stable across runs.
    """
    active: dict[str, None] = dict.fromkeys(graph.nodes)
    out_deg: dict[str, int] = {n: graph.out_degree(n) for n in graph.nodes}
    in_deg: dict[str, int] = {n: graph.in_degree(n) for n in graph.nodes}

    s1: list[str] = []
    s2: list[str] = []

    def drop(node: str) -> None:
        del active[node]
        for succ in graph.successors(node):
            if succ in active:
                in_deg[succ] -= 1
        for pred in graph.predecessors(node):
            if pred in active:
                out_deg[pred] -= 1

    while active:
        changed = True
        while changed:
            sinks = [n for n in active if out_deg[n] == 0]
            changed = bool(sinks)
            for sink in sinks:
                drop(sink)
                s2.append(sink)

        changed = True
        while changed:
            sources = [n for n in active if in_deg[n] == 0]
            changed = bool(sources)
            for source in sources:
                drop(source)
                s1.append(source)

        if active:
            best = max(active, key=lambda n: out_deg[n] - in_deg[n])
            drop(best)
            s1.append(best)

    s2.reverse()
    s1.extend(s2)
    return s1


def remove_cycles(graph: nx.DiGraph) -> tuple[nx.DiGraph, set[tuple[str, str]]]:
    """Remove cycles using greedy-FAS. Returns (dag, reversed_edges)."""
    if graph.number_of_nodes() == 0:
        return graph.copy(), set()

    position = {node: pos for pos, node in enumerate(greedy_fas_ordering(graph))}
    reversed_edges = {(src, tgt) for src, tgt in graph.edges() if src != tgt and position[src] > position[tgt]}

    dag: nx.DiGraph = nx.DiGraph()
    dag.add_nodes_from(graph.nodes)
    for src, tgt in graph.edges():
        if src == tgt:
            continue
        if (src, tgt) in reversed_edges:
            dag.add_edge(tgt, src)
        else:
            dag.add_edge(src, tgt)
    return dag, reversed_edges


# ─── Layer Assignment ────────────────────────────────────────────────────────


def assign_layers(dag: nx.DiGraph) -> dict[str, int]:
    """Longest-path layering: every edge goes down at least one layer."""
    layers: dict[str, int] = dict.fromkeys(dag.nodes, 0)
    for node in nx.topological_sort(dag):
        for succ in dag.successors(node):
            if layers[succ] < layers[node] + 1:
                layers[succ] = layers[node] + 1
    return layers


# ─── Dummy Node Insertion ────────────────────────────────────────────────────


@dataclass
class AugmentedGraph:
    graph: nx.DiGraph
    layers: dict[str, int]
    layer_count: int
    chains: dict[tuple[str, str], list[str]]

    def is_dummy(self, node_id: str) -> bool:
        return node_id.startswith(DUMMY_PREFIX)


def insert_dummy_nodes(dag: nx.DiGraph, layers: dict[str, int]) -> AugmentedGraph:
    """Split every edge spanning more than one layer into a chain through dummies."""
    g: nx.DiGraph = nx.DiGraph()
    g.add_nodes_from(dag.nodes)
    out_layers = dict(layers)
    chains: dict[tuple[str, str], list[str]] = {}

    for counter, (src, tgt) in enumerate(dag.edges()):
        span = layers[tgt] - layers[src]
        if span <= 1:
            g.add_edge(src, tgt)
            chains[(src, tgt)] = []
            continue
        dummies: list[str] = []
        prev = src
        for i in range(span - 1):
            dummy_id = f"{DUMMY_PREFIX}{counter}_{i}"
            g.add_node(dummy_id)
            out_layers[dummy_id] = layers[src] + i + 1
            g.add_edge(prev, dummy_id)
            dummies.append(dummy_id)
            prev = dummy_id
        g.add_edge(prev, tgt)
        chains[(src, tgt)] = dummies

    layer_count = (max(out_layers.values()) + 1) if out_layers else 0
    return AugmentedGraph(graph=g, layers=out_layers, layer_count=layer_count, chains=chains)


# ─── Crossing Minimization ───────────────────────────────────────────────────


def minimise_crossings(aug: AugmentedGraph) -> list[list[str]]:
    """Minimise edge crossings using the barycenter heuristic.

    The initial order within each layer is node insertion order; sweeps stop as
    soon as a full down-and-up pass no longer reduces the crossing count.
    """
    ordering: list[list[str]] = [[] for _ in range(aug.layer_count)]
    for node_id in aug.graph.nodes:
        ordering[aug.layers[node_id]].append(node_id)

    best = count_crossings(ordering, aug.graph)
    best_ordering = [list(layer) for layer in ordering]

    for _pass in range(MAX_ORDER_PASSES):
        if best == 0:
            break
        for layer_idx in range(1, aug.layer_count):
            prev = {nid: float(i) for i, nid in enumerate(ordering[layer_idx - 1])}
            ordering[layer_idx].sort(key=lambda n, p=prev: _barycenter(n, aug.graph, p, incoming=True))

        for layer_idx in range(aug.layer_count - 2, -1, -1):
            nxt = {nid: float(i) for i, nid in enumerate(ordering[layer_idx + 1])}
            ordering[layer_idx].sort(key=lambda n, q=nxt: _barycenter(n, aug.graph, q, incoming=False))

        new = count_crossings(ordering, aug.graph)
        if new >= best:
            break
        best = new
        best_ordering = [list(layer) for layer in ordering]

    return best_ordering


def _barycenter(node_id: str, graph: nx.DiGraph, neighbor_pos: dict[str, float], incoming: bool) -> float:
    neighbors = graph.predecessors(node_id) if incoming else graph.successors(node_id)
    positions = [neighbor_pos[nb] for nb in neighbors if nb in neighbor_pos]
    if not positions:
        return float("inf")
    return sum(positions) / len(positions)


def count_crossings(ordering: list[list[str]], graph: nx.DiGraph) -> int:
    total = 0
    for l_idx in range(len(ordering) - 1):
        tgt_pos = {nid: i for i, nid in enumerate(ordering[l_idx + 1])}
        edges: list[tuple[int, int]] = []
        for sp, src_id in enumerate(ordering[l_idx]):
            for nb in graph.successors(src_id):
                if nb in tgt_pos:
                    edges.append((sp, tgt_pos[nb]))
        for i in range(len(edges)):
            for j in range(i + 1, len(edges)):
                ei, ej = edges[i], edges[j]
                if (ei[0] < ej[0] and ei[1] > ej[1]) or (ei[0] > ej[0] and ei[1] < ej[1]):
                    total += 1
    return total


# ─── Coordinate Assignment ───────────────────────────────────────────────────


@dataclass
class _Coordinates:
    across: dict[str, float]  # center along the layer
    rank_center: list[float]
    rank_depth: list[float]


def assign_coordinates(
    ordering: list[list[str]],
    aug: AugmentedGraph,
    extents: dict[str, tuple[float, float]],
    config: LayoutConfig,
) -> _Coordinates:
    """Place layers along the rank axis and nodes within each layer.

    *extents* maps node id to (breadth, depth): size across the layer and along
    the rank axis. Nodes are packed left to right with separation, then pulled
    toward the barycenter of their neighbors in alternating down/up passes while
    never overlapping the node to their left.
    """

    def breadth(n: str) -> float:
        return extents.get(n, (0.0, 0.0))[0]

    def sep(a: str, b: str) -> float:
        dummies = aug.is_dummy(a) + aug.is_dummy(b)
        if dummies == 2:
            return config.edge_sep
        if dummies == 1:
            return (config.node_sep + config.edge_sep) / 2
        return config.node_sep

    def pack(layer: list[str], desired: dict[str, float]) -> None:
        prev: str | None = None
        for n in layer:
            want = desired[n]
            if prev is not None:
                want = max(want, across[prev] + breadth(prev) / 2 + sep(prev, n) + breadth(n) / 2)
            across[n] = want
            prev = n

    across: dict[str, float] = {}
    for layer in ordering:
        pack(layer, {n: breadth(n) / 2 for n in layer})

    for pass_idx in range(REFINE_PASSES):
        downward = pass_idx % 2 == 0
        layer_range = range(1, len(ordering)) if downward else range(len(ordering) - 2, -1, -1)
        for layer_idx in layer_range:
            layer = ordering[layer_idx]
            desired: dict[str, float] = {}
            for n in layer:
                neighbors = list(aug.graph.predecessors(n) if downward else aug.graph.successors(n))
                if neighbors:
                    desired[n] = sum(across[nb] for nb in neighbors) / len(neighbors)
                else:
                    desired[n] = across[n]
            pack(layer, desired)

    if across:
        min_left = min(across[n] - breadth(n) / 2 for n in across)
        for n in across:
            across[n] -= min_left

    rank_depth = [max((extents.get(n, (0.0, 0.0))[1] for n in layer), default=0.0) for layer in ordering]
    rank_center: list[float] = []
    top = 0.0
    for depth in rank_depth:
        rank_center.append(top + depth / 2)
        top += depth + config.rank_sep

    return _Coordinates(across=across, rank_center=rank_center, rank_depth=rank_depth)


# ─── Bend points ─────────────────────────────────────────────────────────────


def _self_loop(rect: Rect, direction: RankDirection) -> list[Point]:
    if direction.is_horizontal:
        q = rect.width / 4
        cx, bottom = rect.center.x, rect.bottom
        return [
            Point(cx - q, bottom),
            Point(cx - q, bottom + SELF_LOOP_SIZE),
            Point(cx + q, bottom + SELF_LOOP_SIZE),
            Point(cx + q, bottom),
        ]
    q = rect.height / 4
    right, cy = rect.right, rect.center.y
    return [
        Point(right, cy - q),
        Point(right + SELF_LOOP_SIZE, cy - q),
        Point(right + SELF_LOOP_SIZE, cy + q),
        Point(right, cy + q),
    ]


def _chain_points(
    src: str,
    tgt: str,
    dummies: list[str],
    rects: dict[str, Rect],
    dummy_points: dict[str, Point],
    direction: RankDirection,
) -> list[Point]:
    """Source boundary, dummy centers, target boundary for one downward dag edge."""
    a, b = rects[src], rects[tgt]
    if direction.is_horizontal:
        start, end = Point(a.right, a.center.y), Point(b.x, b.center.y)
    else:
        start, end = Point(a.center.x, a.bottom), Point(b.center.x, b.y)
    return simplify_path([start, *(dummy_points[d] for d in dummies), end])


# ─── Orchestration ───────────────────────────────────────────────────────────


def rank_layout(
    nodes: Sequence[RankNode],
    edges: Sequence[RankEdge],
    direction: RankDirection,
    config: LayoutConfig,
) -> RankedLayout:
    """Place sized nodes in ranks and route every edge as a bend-point polyline."""
    if not nodes:
        return RankedLayout()

    graph: nx.DiGraph = nx.DiGraph()
    graph.add_nodes_from(n.id for n in nodes)
    for e in edges:
        if e.source != e.target:
            graph.add_edge(e.source, e.target)

    dag, reversed_edges = remove_cycles(graph)
    layers = assign_layers(dag)
    aug = insert_dummy_nodes(dag, layers)
    ordering = minimise_crossings(aug)

    horizontal = direction.is_horizontal
    extents: dict[str, tuple[float, float]] = {}
    for n in nodes:
        extents[n.id] = (n.height, n.width) if horizontal else (n.width, n.height)

    coords = assign_coordinates(ordering, aug, extents, config)

    def to_xy(across: float, along: float) -> Point:
        return Point(along, across) if horizontal else Point(across, along)

    rects: dict[str, Rect] = {}
    for n in nodes:
        center = to_xy(coords.across[n.id], coords.rank_center[aug.layers[n.id]])
        rects[n.id] = Rect.from_center(center.x, center.y, n.width, n.height)

    dummy_points = {
        d: to_xy(coords.across[d], coords.rank_center[aug.layers[d]]) for d in aug.graph.nodes if aug.is_dummy(d)
    }

    routes: dict[int, list[Point]] = {}
    for e in edges:
        if e.source == e.target:
            routes[e.key] = _self_loop(rects[e.source], direction)
            continue
        if (e.source, e.target) in reversed_edges:
            points = _chain_points(e.target, e.source, aug.chains[(e.target, e.source)], rects, dummy_points, direction)
            routes[e.key] = list(reversed(points))
        else:
            routes[e.key] = _chain_points(e.source, e.target, aug.chains[(e.source, e.target)], rects, dummy_points, direction)

    extent = Rect.union(
        [*rects.values(), *(Rect(p.x, p.y, 0, 0) for route in routes.values() for p in route)]
    )
    logger.debug(
        "ranked %d nodes into %d layers (%d reversed, %d dummies)",
        len(nodes),
        aug.layer_count,
        len(reversed_edges),
        len(dummy_points),
    )
    return RankedLayout(rects=rects, routes=routes, width=extent.right, height=extent.bottom)
