"""Intermediate representation: document AST and DocumentGraph."""

from diagram_layout.ir.ast import (
    Block,
    Cardinality,
    Diagnostic,
    Document,
    Edge,
    Entity,
    Field,
    Group,
    ParseResult,
)
from diagram_layout.ir.graph import ROOT, DocumentGraph, Endpoint, EndpointKind, NodeData, ResolvedEdge

__all__ = [
    "ROOT",
    "Block",
    "Cardinality",
    "Diagnostic",
    "Document",
    "DocumentGraph",
    "Edge",
    "Endpoint",
    "EndpointKind",
    "Entity",
    "Field",
    "Group",
    "NodeData",
    "ParseResult",
    "ResolvedEdge",
]
