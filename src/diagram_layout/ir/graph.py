"""Document graph — resolves a parsed Document into nodes, containers and edges.

This module owns the structure every layout strategy works from. Entities become
graph nodes; groups become containers in a tree rooted at ROOT; edge endpoints
are resolved against both. Endpoints that name nothing get a stub node so that
every edge can be laid out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum, auto

import networkx as nx

from diagram_layout.ir.ast import Block, Document, Edge, Entity, Group, freeze

logger = logging.getLogger(__name__)

ROOT = ""


class EndpointKind(Enum):
    NODE = auto()
    GROUP = auto()


@dataclass(frozen=True)
class Endpoint:
    kind: EndpointKind
    key: str

    @property
    def is_group(self) -> bool:
        return self.kind is EndpointKind.GROUP


@dataclass
class NodeData:
    id: str
    entity: Entity
    container: str = ROOT
    stub: bool = False


@dataclass
class ContainerData:
    key: str
    name: str
    parent: str | None
    members: list[Endpoint] = field(default_factory=list)
    populated: bool = False
    group: Group | None = None


@dataclass(frozen=True)
class ResolvedEdge:
    index: int
    edge: Edge
    source: Endpoint
    target: Endpoint


class DocumentGraph:
    """Nodes, containers and resolved edges built from a Document.

    ``digraph`` is a networkx MultiDiGraph over node ids carrying every
    node-to-node edge; ``tree`` is a networkx DiGraph of container keys with
    edges from parent to child.
    """

    def __init__(
        self,
        digraph: nx.MultiDiGraph,
        tree: nx.DiGraph,
        containers: dict[str, ContainerData],
        edges: list[ResolvedEdge],
    ) -> None:
        self.digraph = digraph
        self.tree = tree
        self.containers = containers
        self.edges = edges

    @classmethod
    def from_document(cls, document: Document) -> DocumentGraph:
        """Build a DocumentGraph from a Document."""
        builder = _Builder()
        builder.walk(document.root_blocks, ROOT)
        builder.mark_populated(ROOT)
        for index, edge in enumerate(document.edges):
            source = builder.resolve(edge.from_id)
            target = builder.resolve(edge.to_id)
            resolved = ResolvedEdge(index=index, edge=edge, source=source, target=target)
            builder.edges.append(resolved)
            if not source.is_group and not target.is_group:
                builder.digraph.add_edge(source.key, target.key, key=index, data=resolved)
        stubs = [n for n, d in builder.digraph.nodes(data="data") if d.stub]
        if stubs:
            logger.debug("created %d stub node(s): %s", len(stubs), ", ".join(stubs))
        return cls(builder.digraph, builder.tree, builder.containers, builder.edges)

    # ── Queries ─────────────────────────────────────────────────────────────

    def node(self, node_id: str) -> NodeData:
        return self.digraph.nodes[node_id]["data"]

    def node_ids(self) -> list[str]:
        return list(self.digraph.nodes)

    def node_count(self) -> int:
        return self.digraph.number_of_nodes()

    def edge_count(self) -> int:
        return len(self.edges)

    def groups(self) -> list[ContainerData]:
        """Every container except the root, in pre-order."""
        return [self.containers[k] for k in nx.dfs_preorder_nodes(self.tree, ROOT) if k != ROOT]

    def container_of(self, endpoint: Endpoint) -> str:
        if endpoint.is_group:
            parent = self.containers[endpoint.key].parent
            return ROOT if parent is None else parent
        return self.node(endpoint.key).container

    def members(self, container: str) -> list[Endpoint]:
        """Direct members of *container* that take up space: nodes and populated groups."""
        return [
            m for m in self.containers[container].members if not m.is_group or self.containers[m.key].populated
        ]

    def lowest_common_container(self, a: Endpoint, b: Endpoint) -> str:
        return nx.lowest_common_ancestor(self.tree, self.container_of(a), self.container_of(b))

    def lift(self, endpoint: Endpoint, container: str) -> Endpoint:
        """The direct member of *container* that holds *endpoint*."""
        current = endpoint
        while self.container_of(current) != container:
            current = Endpoint(EndpointKind.GROUP, self.container_of(current))
        return current

    def encloses(self, group_key: str, endpoint: Endpoint) -> bool:
        """True when *endpoint* lies strictly inside the container *group_key*."""
        if endpoint.is_group and endpoint.key == group_key:
            return False
        return nx.has_path(self.tree, group_key, self.container_of(endpoint))


class _Builder:
    def __init__(self) -> None:
        self.digraph: nx.MultiDiGraph = nx.MultiDiGraph()
        self.tree: nx.DiGraph = nx.DiGraph()
        self.tree.add_node(ROOT)
        self.containers: dict[str, ContainerData] = {ROOT: ContainerData(key=ROOT, name="", parent=None)}
        self.names: dict[str, list[str]] = {}
        self.edges: list[ResolvedEdge] = []

    def walk(self, blocks: tuple[Block, ...], parent: str) -> None:
        for block in blocks:
            if isinstance(block, Entity):
                self.place(block, parent)
                continue
            key = self.unique_key(block.name)
            self.containers[key] = ContainerData(key=key, name=block.name, parent=parent, group=block)
            self.containers[parent].members.append(Endpoint(EndpointKind.GROUP, key))
            self.tree.add_edge(parent, key)
            self.names.setdefault(block.name, []).append(key)
            self.walk(block.children, key)

    def unique_key(self, name: str) -> str:
        key = name
        n = 1
        while key in self.containers or key == ROOT:
            n += 1
            key = f"{name}#{n}"
        return key

    def place(self, entity: Entity, container: str) -> None:
        """Add or re-declare a node; the last declaration decides its container."""
        endpoint = Endpoint(EndpointKind.NODE, entity.id)
        if entity.id in self.digraph:
            data: NodeData = self.digraph.nodes[entity.id]["data"]
            data.entity = _merge(data.entity, entity)
            if data.container != container:
                self.containers[data.container].members.remove(endpoint)
                self.containers[container].members.append(endpoint)
                data.container = container
            return
        self.digraph.add_node(entity.id, data=NodeData(id=entity.id, entity=entity, container=container))
        self.containers[container].members.append(endpoint)

    def mark_populated(self, key: str) -> bool:
        data = self.containers[key]
        populated = False
        for member in data.members:
            if member.is_group:
                populated = self.mark_populated(member.key) or populated
            else:
                populated = True
        data.populated = populated
        return populated

    def resolve(self, ref: str) -> Endpoint:
        """Node id, then populated group name, then longest dotted prefix, then a stub."""
        if ref in self.digraph:
            return Endpoint(EndpointKind.NODE, ref)
        for key in self.names.get(ref, []):
            if self.containers[key].populated:
                return Endpoint(EndpointKind.GROUP, key)
        parts = ref.split(".")
        for k in range(len(parts) - 1, 0, -1):
            prefix = ".".join(parts[:k])
            if prefix in self.digraph:
                return Endpoint(EndpointKind.NODE, prefix)
        self.digraph.add_node(ref, data=NodeData(id=ref, entity=Entity(id=ref), stub=True))
        self.containers[ROOT].members.append(Endpoint(EndpointKind.NODE, ref))
        self.containers[ROOT].populated = True
        return Endpoint(EndpointKind.NODE, ref)


def _merge(earlier: Entity, later: Entity) -> Entity:
    """Later declarations add attributes and may supply fields."""
    attributes = {**earlier.attributes, **later.attributes}
    fields = later.fields if later.fields is not None else earlier.fields
    return replace(later, attributes=freeze(attributes), fields=fields)
