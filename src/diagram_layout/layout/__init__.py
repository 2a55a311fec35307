"""Layout strategy registry and public API."""

from __future__ import annotations

import logging

from diagram_layout.config import LayoutConfig
from diagram_layout.ir.ast import Document
from diagram_layout.layout.derive import anchor_route, group_bounds, layout_simple
from diagram_layout.layout.graph import layout_graph, node_size, resolve_direction
from diagram_layout.layout.measure import ApproximateTextMeasurer, TextMeasurer, TextSize
from diagram_layout.layout.ranked import RankedLayout, RankEdge, RankNode, count_crossings, rank_layout
from diagram_layout.layout.routing import rounded_path, simplify_path, to_svg_path
from diagram_layout.layout.sequence import layout_sequence
from diagram_layout.layout.types import (
    GroupLayout,
    LayoutResult,
    LineTo,
    MoveTo,
    NodeLayout,
    PathCommand,
    Point,
    QuadTo,
    Rect,
    RoutedEdge,
)
from diagram_layout.types import LayoutMode

__all__ = [
    "ApproximateTextMeasurer",
    "GroupLayout",
    "LayoutMode",
    "LayoutResult",
    "LineTo",
    "MoveTo",
    "NodeLayout",
    "PathCommand",
    "Point",
    "QuadTo",
    "RankEdge",
    "RankNode",
    "RankedLayout",
    "Rect",
    "RoutedEdge",
    "TextMeasurer",
    "TextSize",
    "anchor_route",
    "count_crossings",
    "group_bounds",
    "layout",
    "layout_graph",
    "layout_sequence",
    "layout_simple",
    "node_size",
    "rank_layout",
    "resolve_direction",
    "rounded_path",
    "simplify_path",
    "to_svg_path",
]

logger = logging.getLogger(__name__)


def layout(
    document: Document,
    config: LayoutConfig | None = None,
    measurer: TextMeasurer | None = None,
    mode: LayoutMode | str | None = None,
) -> LayoutResult:
    """Lay out *document* with the strategy for *mode*, or the one its archetype calls for.

    Raises:
        ValueError: If *mode* is not one of graph, sequence or simple.
    """
    if mode is None:
        mode = LayoutMode.for_archetype(document.archetype)
    elif isinstance(mode, str):
        mode = LayoutMode(mode.lower())
    logger.debug("layout mode %s for %s document", mode.value, document.archetype.value)

    if mode is LayoutMode.SEQUENCE:
        return layout_sequence(document, config)
    if mode is LayoutMode.SIMPLE:
        return layout_simple(document, config)
    return layout_graph(document, config, measurer)
