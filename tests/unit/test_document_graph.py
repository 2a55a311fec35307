"""Tests for diagram_layout.ir.graph — DocumentGraph construction and endpoint resolution."""

from diagram_layout.ir.ast import Document, Edge, Entity, Group, freeze
from diagram_layout.ir.graph import ROOT, DocumentGraph, Endpoint, EndpointKind
from diagram_layout.parsers import parse


def _make_doc(*blocks, edges: list[Edge] | None = None) -> Document:
    return Document(root_blocks=tuple(blocks), edges=tuple(edges or []))


def _group(name: str, *children) -> Group:
    return Group(name=name, children=tuple(children))


def _node(key: str) -> Endpoint:
    return Endpoint(EndpointKind.NODE, key)


def _grp(key: str) -> Endpoint:
    return Endpoint(EndpointKind.GROUP, key)


class TestBasicConstruction:
    def test_empty_document(self):
        g = DocumentGraph.from_document(_make_doc())
        assert g.node_count() == 0
        assert g.edge_count() == 0
        assert g.groups() == []

    def test_entities_become_nodes_in_order(self):
        g = DocumentGraph.from_document(_make_doc(Entity("B"), Entity("A")))
        assert g.node_ids() == ["B", "A"]
        assert not g.node("A").stub

    def test_edge_between_declared_nodes(self):
        g = DocumentGraph.from_document(_make_doc(Entity("A"), Entity("B"), edges=[Edge("A", "B")]))
        assert g.edge_count() == 1
        assert g.digraph.has_edge("A", "B")
        assert g.edges[0].source == _node("A")

    def test_parallel_edges_kept(self):
        doc = _make_doc(Entity("A"), Entity("B"), edges=[Edge("A", "B"), Edge("A", "B", label="again")])
        g = DocumentGraph.from_document(doc)
        assert g.digraph.number_of_edges("A", "B") == 2


class TestStubs:
    def test_dangling_endpoint_gets_stub(self):
        g = DocumentGraph.from_document(_make_doc(Entity("A"), edges=[Edge("A", "Ghost")]))
        assert g.node("Ghost").stub
        assert g.container_of(_node("Ghost")) == ROOT

    def test_stub_created_once(self):
        g = DocumentGraph.from_document(_make_doc(edges=[Edge("X", "Y"), Edge("Y", "X")]))
        assert g.node_ids() == ["X", "Y"]

    def test_dotted_reference_resolves_to_prefix(self):
        doc = _make_doc(Entity("users"), Entity("orders"), edges=[Edge("orders.user_id", "users.id")])
        g = DocumentGraph.from_document(doc)
        assert g.edges[0].source == _node("orders")
        assert g.edges[0].target == _node("users")
        assert g.node_count() == 2


class TestContainers:
    def test_membership(self):
        g = DocumentGraph.from_document(_make_doc(_group("G", Entity("A")), Entity("B")))
        assert g.container_of(_node("A")) == "G"
        assert g.container_of(_node("B")) == ROOT
        assert g.members(ROOT) == [_grp("G"), _node("B")]

    def test_groups_preorder(self):
        doc = _make_doc(_group("Outer", _group("Inner", Entity("A"))), _group("Side", Entity("B")))
        g = DocumentGraph.from_document(doc)
        assert [c.key for c in g.groups()] == ["Outer", "Inner", "Side"]
        assert g.containers["Inner"].parent == "Outer"

    def test_empty_group_is_not_a_member(self):
        g = DocumentGraph.from_document(_make_doc(_group("Empty"), Entity("A")))
        assert g.members(ROOT) == [_node("A")]
        assert not g.containers["Empty"].populated

    def test_duplicate_group_names_get_distinct_keys(self):
        g = DocumentGraph.from_document(_make_doc(_group("G", Entity("A")), _group("G", Entity("B"))))
        assert [c.key for c in g.groups()] == ["G", "G#2"]
        assert g.container_of(_node("B")) == "G#2"

    def test_redeclaration_merges_and_moves(self):
        doc = _make_doc(
            Entity("A", attributes=freeze({"icon": "db"})),
            _group("G", Entity("A", attributes=freeze({"label": "Alpha"}))),
        )
        g = DocumentGraph.from_document(doc)
        assert g.node_count() == 1
        assert g.container_of(_node("A")) == "G"
        assert dict(g.node("A").entity.attributes) == {"icon": "db", "label": "Alpha"}
        assert g.members(ROOT) == [_grp("G")]


class TestResolution:
    def test_group_name_endpoint(self):
        doc = _make_doc(_group("Backend", Entity("api")), Entity("web"), edges=[Edge("web", "Backend")])
        g = DocumentGraph.from_document(doc)
        assert g.edges[0].target == _grp("Backend")

    def test_node_id_beats_group_name(self):
        doc = _make_doc(_group("X", Entity("a")), Entity("X"), edges=[Edge("a", "X")])
        g = DocumentGraph.from_document(doc)
        assert g.edges[0].target == _node("X")

    def test_lowest_common_container_and_lift(self):
        src = "Outer {\n  Left {\n    A\n  }\n  Right {\n    B\n  }\n}\nA -> B\n"
        g = DocumentGraph.from_document(parse(src))
        a, b = g.edges[0].source, g.edges[0].target
        assert g.lowest_common_container(a, b) == "Outer"
        assert g.lift(a, "Outer") == _grp("Left")
        assert g.lift(b, "Outer") == _grp("Right")
        assert g.lift(a, "Left") == a

    def test_encloses(self):
        g = DocumentGraph.from_document(_make_doc(_group("Outer", _group("Inner", Entity("A"))), Entity("B")))
        assert g.encloses("Outer", _node("A"))
        assert g.encloses("Outer", _grp("Inner"))
        assert not g.encloses("Outer", _grp("Outer"))
        assert not g.encloses("Inner", _node("B"))
