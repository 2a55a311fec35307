"""Diagram-type classifier.

A pure function over a finished Document. Explicit ``type`` metadata always wins;
otherwise signals are gathered in one walk and checked highest-confidence first:

  1. sequence signals: numbering metadata, participant-like names, control-flow
     words in edge labels
  2. styled nodes plus enough edges (secondary sequence signal)
  3. any entity with fields -> entity-relationship
  4. any edge -> graph
  5. otherwise unknown

The ordering is a heuristic; ties go to the earlier rule, never to input order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from diagram_layout.config import ClassifierConfig
from diagram_layout.ir.ast import Document, Entity
from diagram_layout.types import Archetype

logger = logging.getLogger(__name__)

TYPE_ALIASES: dict[str, Archetype] = {
    "flow": Archetype.GRAPH,
    "graph": Archetype.GRAPH,
    "flowchart": Archetype.GRAPH,
    "cloud": Archetype.GRAPH,
    "architecture": Archetype.GRAPH,
    "er": Archetype.ENTITY_RELATIONSHIP,
    "entity-relationship": Archetype.ENTITY_RELATIONSHIP,
    "class": Archetype.ENTITY_RELATIONSHIP,
    "sequence": Archetype.SEQUENCE,
    "process": Archetype.PROCESS,
    "bpmn": Archetype.PROCESS,
}

_NAME_PARTS = re.compile(r"[-_.\s]+")
_WORDS = re.compile(r"[A-Za-z]+")


@dataclass(frozen=True)
class Classification:
    archetype: Archetype
    reason: str


@dataclass
class _Signals:
    has_fields: bool = False
    styled_nodes: int = 0
    participants: list[str] | None = None
    control_flow: list[str] | None = None


def _is_participant_like(entity: Entity, role_words: set[str]) -> bool:
    for key in ("role", "type"):
        value = entity.attributes.get(key)
        if value and value.lower() in role_words:
            return True
    return any(part.lower() in role_words for part in _NAME_PARTS.split(entity.id) if part)


def _gather(document: Document, config: ClassifierConfig) -> _Signals:
    role_words = {w.lower() for w in config.role_words}
    control_words = {w.lower() for w in config.control_flow_words}
    styled_keys = set(config.styled_attribute_keys)

    signals = _Signals(participants=[], control_flow=[])
    for entity in document.iter_entities():
        if entity.has_fields:
            signals.has_fields = True
        if styled_keys.intersection(entity.attributes):
            signals.styled_nodes += 1
        if _is_participant_like(entity, role_words):
            signals.participants.append(entity.id)
    for edge in document.edges:
        if not edge.label:
            continue
        hits = [w for w in _WORDS.findall(edge.label) if w.lower() in control_words]
        signals.control_flow.extend(hits)
    return signals


def explain(document: Document, config: ClassifierConfig | None = None) -> Classification:
    """Classify *document* and say which rule decided it."""
    config = config or ClassifierConfig()

    declared = document.metadata.get("type")
    if isinstance(declared, str):
        archetype = TYPE_ALIASES.get(declared.strip().lower())
        if archetype is not None:
            return Classification(archetype, f"explicit type {declared!r}")
        logger.debug("unrecognized type %r, falling back to heuristics", declared)

    numbering = [k for k in config.numbering_keys if k in document.metadata]
    if numbering:
        return Classification(Archetype.SEQUENCE, f"numbering metadata {numbering[0]!r}")

    signals = _gather(document, config)
    if signals.participants:
        return Classification(Archetype.SEQUENCE, f"participant-like entity {signals.participants[0]!r}")
    if signals.control_flow:
        return Classification(Archetype.SEQUENCE, f"control-flow word {signals.control_flow[0]!r} in edge label")

    edge_count = len(document.edges)
    if signals.styled_nodes >= config.min_styled_nodes and edge_count >= config.min_styled_edges:
        return Classification(
            Archetype.SEQUENCE, f"{signals.styled_nodes} styled nodes with {edge_count} edges"
        )
    if signals.has_fields:
        return Classification(Archetype.ENTITY_RELATIONSHIP, "entities with fields")
    if edge_count:
        return Classification(Archetype.GRAPH, f"{edge_count} edge(s)")
    return Classification(Archetype.UNKNOWN, "no structural signals")


def classify(document: Document, config: ClassifierConfig | None = None) -> Archetype:
    """Return the archetype of *document*."""
    result = explain(document, config)
    logger.debug("classified as %s: %s", result.archetype.value, result.reason)
    return result.archetype


def with_archetype(document: Document, config: ClassifierConfig | None = None) -> Document:
    """Return a copy of *document* with its archetype filled in."""
    return document.with_archetype(classify(document, config))
