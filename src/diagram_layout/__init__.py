"""diagram-layout: parse diagram text into a Document and compute its geometry."""

from __future__ import annotations

from dataclasses import replace

from diagram_layout.classifier import classify
from diagram_layout.config import ClassifierConfig, LayoutConfig
from diagram_layout.errors import DiagramError, UnknownDirectionError
from diagram_layout.ir.ast import Document, ParseResult
from diagram_layout.layout import layout as layout_document
from diagram_layout.layout.types import LayoutResult
from diagram_layout.parsers import parse, parse_with_diagnostics
from diagram_layout.types import Archetype, LayoutMode, RankDirection

__all__ = [
    "Archetype",
    "ClassifierConfig",
    "DiagramError",
    "Document",
    "LayoutConfig",
    "LayoutMode",
    "LayoutResult",
    "ParseResult",
    "RankDirection",
    "UnknownDirectionError",
    "classify",
    "layout_document",
    "layout_text",
    "parse",
    "parse_direction",
    "parse_with_diagnostics",
]

_DIRECTION_MAP: dict[str, RankDirection] = {
    "TB": RankDirection.TB,
    "TD": RankDirection.TB,
    "LR": RankDirection.LR,
}


def parse_direction(direction: str) -> RankDirection:
    """Map a direction override string to a RankDirection.

    Raises:
        UnknownDirectionError: If *direction* is not TB, TD or LR.
    """
    key = direction.strip().upper()
    if key not in _DIRECTION_MAP:
        raise UnknownDirectionError(direction)
    return _DIRECTION_MAP[key]


def layout_text(
    src: str,
    mode: LayoutMode | str | None = None,
    direction: str | None = None,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Parse diagram source text and lay it out in one call.

    Args:
        src: Diagram source in any supported dialect.
        mode: Layout strategy ('graph', 'sequence', 'simple'); None picks one from the archetype.
        direction: Override rank direction ('TB', 'TD', 'LR'); None keeps the document's own.
        config: Geometry constants; defaults to LayoutConfig().

    Returns:
        The LayoutResult. Empty input yields an empty result on the default canvas.

    Raises:
        UnknownDirectionError: If *direction* is not recognized.
        ValueError: If *mode* is not a layout mode name.
    """
    config = config or LayoutConfig()
    if direction is not None:
        config = replace(config, direction=parse_direction(direction))
    return layout_document(parse(src), config, mode=mode)
