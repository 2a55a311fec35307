"""Centralized configuration for diagram-layout."""

from __future__ import annotations

from dataclasses import dataclass

from diagram_layout.types import RankDirection


@dataclass
class LayoutConfig:
    """Geometry constants for every layout strategy."""

    # ranked placement
    node_sep: float = 60
    rank_sep: float = 80
    edge_sep: float = 10
    margin: float = 40
    direction: RankDirection | None = None

    # node sizing
    min_node_width: float = 140
    node_height: float = 50
    label_padding: float = 32
    field_row_height: float = 24
    title_font: str = "600 14px sans-serif"
    field_font: str = "12px monospace"
    stub_width: float = 140
    stub_height: float = 50

    group_padding: float = 32
    corner_radius: float = 8.0

    empty_width: float = 800
    empty_height: float = 600

    # sequence mode
    sequence_start_x: float = 40
    sequence_start_y: float = 20
    participant_width: float = 120
    participant_height: float = 40
    participant_spacing: float = 150
    message_spacing: float = 60
    header_height: float = 60
    sequence_gap: float = 40
    self_loop_width: float = 40
    self_loop_height: float = 20
    self_loop_extra: float = 30

    # fallback column mode
    simple_x: float = 200
    simple_y: float = 120
    simple_step: float = 120
    simple_width: float = 160
    simple_height: float = 60


@dataclass
class ClassifierConfig:
    """Vocabulary and thresholds for diagram-type classification."""

    styled_attribute_keys: tuple[str, ...] = ("icon", "color", "label", "shape")
    role_words: tuple[str, ...] = ("participant", "actor", "lifeline", "boundary", "control")
    control_flow_words: tuple[str, ...] = (
        "alt",
        "else",
        "opt",
        "loop",
        "par",
        "break",
        "activate",
        "deactivate",
        "return",
        "returns",
        "reply",
        "response",
    )
    numbering_keys: tuple[str, ...] = ("autonumber", "numbering")
    min_styled_nodes: int = 2
    min_styled_edges: int = 4
