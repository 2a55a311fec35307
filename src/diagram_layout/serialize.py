"""JSON-ready dict conversion for documents and layout results."""

from __future__ import annotations

from typing import Any

from diagram_layout.ir.ast import Block, Diagnostic, Document, Edge, Entity, Field
from diagram_layout.layout.routing import to_svg_path
from diagram_layout.layout.types import GroupLayout, LayoutResult, NodeLayout, Point, Rect, RoutedEdge


def _round(value: float) -> float | int:
    rounded = round(value, 2)
    return int(rounded) if rounded == int(rounded) else rounded


# ─── Document ────────────────────────────────────────────────────────────────


def field_to_dict(f: Field) -> dict[str, Any]:
    return {
        "name": f.name,
        "type": f.type,
        "constraints": list(f.constraints),
        "visibility": f.visibility.value if f.visibility else None,
        "memberType": f.member_type.value,
    }


def entity_to_dict(entity: Entity) -> dict[str, Any]:
    out: dict[str, Any] = {"kind": "entity", "id": entity.id, "attributes": dict(entity.attributes)}
    if entity.fields is not None:
        out["fields"] = [field_to_dict(f) for f in entity.fields]
    return out


def block_to_dict(block: Block) -> dict[str, Any]:
    if isinstance(block, Entity):
        return entity_to_dict(block)
    return {"kind": "group", "name": block.name, "children": [block_to_dict(c) for c in block.children]}


def edge_to_dict(edge: Edge) -> dict[str, Any]:
    out: dict[str, Any] = {"from": edge.from_id, "to": edge.to_id, "kind": edge.kind.value, "label": edge.label}
    if edge.cardinality is not None:
        out["cardinality"] = {"from": edge.cardinality.from_, "to": edge.cardinality.to}
    return out


def diagnostic_to_dict(d: Diagnostic) -> dict[str, Any]:
    return {"line": d.line, "column": d.column, "message": d.message, "severity": d.severity.value}


def document_to_dict(document: Document) -> dict[str, Any]:
    return {
        "archetype": document.archetype.value,
        "dialect": document.dialect.name.lower(),
        "metadata": dict(document.metadata),
        "rootBlocks": [block_to_dict(b) for b in document.root_blocks],
        "edges": [edge_to_dict(e) for e in document.edges],
    }


# ─── Layout ──────────────────────────────────────────────────────────────────


def point_to_dict(p: Point) -> dict[str, Any]:
    return {"x": _round(p.x), "y": _round(p.y)}


def rect_to_dict(r: Rect) -> dict[str, Any]:
    return {"x": _round(r.x), "y": _round(r.y), "width": _round(r.width), "height": _round(r.height)}


def node_layout_to_dict(node: NodeLayout) -> dict[str, Any]:
    out = {"id": node.id, "label": node.source_entity.label, "bounds": rect_to_dict(node.bounds)}
    if node.stub:
        out["stub"] = True
    return out


def group_layout_to_dict(group: GroupLayout) -> dict[str, Any]:
    return {
        "name": group.name,
        "childIds": list(group.child_ids),
        "bounds": rect_to_dict(group.bounds),
        "padding": _round(group.padding),
    }


def routed_edge_to_dict(edge: RoutedEdge) -> dict[str, Any]:
    return {
        "id": edge.id,
        "from": edge.from_id,
        "to": edge.to_id,
        "kind": edge.kind.value,
        "label": edge.label,
        "points": [point_to_dict(p) for p in edge.points],
        "path": to_svg_path(edge.path),
    }


def layout_to_dict(result: LayoutResult) -> dict[str, Any]:
    return {
        "mode": result.mode.value,
        "archetype": result.archetype.value,
        "direction": result.direction.value,
        "width": _round(result.width),
        "height": _round(result.height),
        "bounds": rect_to_dict(result.bounds),
        "nodes": {k: node_layout_to_dict(v) for k, v in result.nodes.items()},
        "groups": {k: group_layout_to_dict(v) for k, v in result.groups.items()},
        "edges": [routed_edge_to_dict(e) for e in result.edges],
    }
