"""AST data structures for the diagram DSL.

These types represent the parsed form of the input, independent of the dialect it
was written in: a Document holds metadata, a forest of blocks (groups and
entities, arbitrarily nested) and a flat list of already-expanded edges.

Everything here is frozen; sequences are tuples and maps are read-only proxies.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Union

from diagram_layout.types import Archetype, Dialect, EdgeKind, MemberType, Severity, Visibility

MetadataValue = Union[str, bool]

_EMPTY: Mapping[str, str] = MappingProxyType({})


def freeze(mapping: Mapping | None) -> Mapping:
    """Return a read-only copy of *mapping*."""
    if not mapping:
        return MappingProxyType({})
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Field:
    name: str
    type: str | None = None
    constraints: tuple[str, ...] = ()
    visibility: Visibility | None = None
    member_type: MemberType = MemberType.FIELD
    raw: str = ""

    @property
    def display_text(self) -> str:
        return self.raw or f"{self.name} {self.type or ''}".strip()


@dataclass(frozen=True)
class Entity:
    id: str
    attributes: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    fields: tuple[Field, ...] | None = None

    @property
    def label(self) -> str:
        return self.attributes.get("label") or self.id

    @property
    def has_fields(self) -> bool:
        return bool(self.fields)


@dataclass(frozen=True)
class Group:
    name: str
    children: tuple[Block, ...] = ()

    def iter_entities(self) -> Iterator[Entity]:
        """Yield every entity below this group, depth-first."""
        for child in self.children:
            if isinstance(child, Entity):
                yield child
            else:
                yield from child.iter_entities()


Block = Union[Group, Entity]


@dataclass(frozen=True)
class Cardinality:
    from_: str | None = None
    to: str | None = None


@dataclass(frozen=True)
class Edge:
    from_id: str
    to_id: str
    kind: EdgeKind = EdgeKind.DIRECTED
    label: str | None = None
    cardinality: Cardinality | None = None

    @property
    def is_self_loop(self) -> bool:
        return self.from_id == self.to_id


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal anomaly found while tokenizing or parsing."""

    line: int
    column: int
    message: str
    severity: Severity = Severity.WARNING


@dataclass(frozen=True)
class Document:
    archetype: Archetype = Archetype.UNKNOWN
    metadata: Mapping[str, MetadataValue] = field(default_factory=lambda: _EMPTY)
    root_blocks: tuple[Block, ...] = ()
    edges: tuple[Edge, ...] = ()
    dialect: Dialect = Dialect.NATIVE
    raw_line_count: int = 0

    def iter_entities(self) -> Iterator[Entity]:
        """Yield every entity in declaration order, descending into groups."""
        for block in self.root_blocks:
            if isinstance(block, Entity):
                yield block
            else:
                yield from block.iter_entities()

    def iter_groups(self) -> Iterator[Group]:
        """Yield every group in pre-order."""
        stack: list[Block] = list(reversed(self.root_blocks))
        while stack:
            block = stack.pop()
            if isinstance(block, Group):
                yield block
                stack.extend(reversed(block.children))

    def with_archetype(self, archetype: Archetype) -> Document:
        return replace(self, archetype=archetype)


@dataclass(frozen=True)
class ParseResult:
    document: Document
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        """True when nothing worse than informational notes was reported."""
        return all(d.severity is Severity.INFO for d in self.diagnostics)
