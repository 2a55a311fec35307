"""Tests for diagram_layout.parsers — statements, dialects and diagnostics."""

import pytest

from diagram_layout.ir.ast import Entity, Group
from diagram_layout.parsers import parse, parse_with_diagnostics
from diagram_layout.types import Dialect, EdgeKind, MemberType, Visibility


def _entities(src: str) -> dict[str, Entity]:
    return {e.id: e for e in parse(src).iter_entities()}


def _pairs(src: str) -> list[tuple[str, str]]:
    return [(e.from_id, e.to_id) for e in parse(src).edges]


class TestEdges:
    def test_simple_edge(self):
        doc = parse("A -> B\n")
        assert len(doc.edges) == 1
        assert doc.edges[0].from_id == "A"
        assert doc.edges[0].to_id == "B"
        assert doc.edges[0].kind is EdgeKind.DIRECTED
        assert doc.edges[0].label is None

    def test_fan_out_is_cross_product(self):
        doc = parse("A, B -> C, D : text\n")
        assert [(e.from_id, e.to_id) for e in doc.edges] == [("A", "C"), ("A", "D"), ("B", "C"), ("B", "D")]
        assert all(e.label == "text" for e in doc.edges)
        assert all(e.kind is EdgeKind.DIRECTED for e in doc.edges)

    def test_chain(self):
        assert _pairs("X > Y -> Z") == [("X", "Y"), ("Y", "Z")]

    def test_kebab_case_ids(self):
        doc = parse("api-gateway > database-user")
        assert len(doc.edges) == 1
        assert doc.edges[0].from_id == "api-gateway"
        assert doc.edges[0].to_id == "database-user"

    def test_dotted_ids(self):
        assert _pairs("orders.id > users.id") == [("orders.id", "users.id")]

    def test_edge_kinds(self):
        doc = parse("A - B\nC <> D\nE --> F\n")
        assert [e.kind for e in doc.edges] == [EdgeKind.UNDIRECTED, EdgeKind.BIDIRECTIONAL, EdgeKind.DIRECTED]

    def test_multi_word_label(self):
        assert parse("A -> B : sends the invoice").edges[0].label == "sends the invoice"

    def test_quoted_label(self):
        assert parse('A -> B : "say \\"hi\\""').edges[0].label == 'say "hi"'

    def test_cardinality(self):
        edge = parse('User "1" -> "*" Order').edges[0]
        assert (edge.from_id, edge.to_id) == ("User", "Order")
        assert edge.cardinality is not None
        assert edge.cardinality.from_ == "1"
        assert edge.cardinality.to == "*"

    def test_reverse_arrow_swaps_cardinality(self):
        edge = parse('Order "1" <- "*" Item').edges[0]
        assert (edge.from_id, edge.to_id) == ("Item", "Order")
        assert (edge.cardinality.from_, edge.cardinality.to) == ("*", "1")

    def test_edges_do_not_declare_entities(self):
        doc = parse("A -> B")
        assert doc.root_blocks == ()

    def test_inline_declaration(self):
        doc = parse("A [label: Start] -> B")
        assert _pairs("A [label: Start] -> B") == [("A", "B")]
        assert len(doc.root_blocks) == 1
        assert doc.root_blocks[0].id == "A"
        assert doc.root_blocks[0].label == "Start"


class TestEntities:
    def test_quoted_attribute_escapes(self):
        entities = _entities('MyNode [label: "It\\\'s a label, \\"quoted\\""]')
        assert entities["MyNode"].attributes["label"] == 'It\'s a label, "quoted"'

    def test_attributes(self):
        entities = _entities("api [icon: server, color: light blue]")
        assert dict(entities["api"].attributes) == {"icon": "server", "color": "light blue"}

    def test_flag_attribute(self):
        assert _entities("A [primary]")["A"].attributes["primary"] == "true"

    def test_entity_with_one_field(self):
        doc = parse("User { id integer pk }")
        assert len(doc.root_blocks) == 1
        user = doc.root_blocks[0]
        assert isinstance(user, Entity)
        assert len(user.fields) == 1
        assert user.fields[0].name == "id"
        assert user.fields[0].type == "integer"
        assert user.fields[0].constraints == ("pk",)

    def test_multi_row_fields(self):
        src = "User {\n  id integer pk\n  // audit\n  email string unique\n}\n"
        user = _entities(src)["User"]
        assert [f.name for f in user.fields] == ["id", "email"]
        assert user.fields[1].type == "string"
        assert user.fields[1].constraints == ("unique",)

    def test_attributes_and_fields(self):
        user = _entities("User [icon: user] {\n  id int\n}")["User"]
        assert user.attributes["icon"] == "user"
        assert user.fields[0].name == "id"

    def test_lone_identifier_in_group_is_entity(self):
        doc = parse("group G {\n  A\n}")
        assert isinstance(doc.root_blocks[0].children[0], Entity)


class TestGroups:
    def test_identifier_body_is_group(self):
        doc = parse("Region {\n  Node1\n  Node2\n}\n")
        region = doc.root_blocks[0]
        assert isinstance(region, Group)
        assert region.name == "Region"
        assert [c.id for c in region.children] == ["Node1", "Node2"]

    def test_bracket_body_is_group(self):
        doc = parse("Cloud {\n  Server [icon: aws]\n}")
        assert isinstance(doc.root_blocks[0], Group)

    def test_empty_body_is_group(self):
        assert isinstance(parse("Empty {}").root_blocks[0], Group)

    def test_group_keyword_with_quoted_name(self):
        doc = parse('group "Back end" {\n  api\n}')
        assert doc.root_blocks[0].name == "Back end"

    def test_three_levels(self):
        src = "Outer {\n  Middle {\n    Inner {\n      A [label: Alpha]\n    }\n  }\n}\n"
        outer = parse(src).root_blocks[0]
        middle = outer.children[0]
        inner = middle.children[0]
        assert (outer.name, middle.name, inner.name) == ("Outer", "Middle", "Inner")
        assert inner.children[0].id == "A"
        assert [g.name for g in parse(src).iter_groups()] == ["Outer", "Middle", "Inner"]

    def test_closing_brace_after_member_on_same_line(self):
        result = parse_with_diagnostics("Cloud {\n  Web }\nOther [icon: x]\n")
        cloud, other = result.document.root_blocks
        assert [c.id for c in cloud.children] == ["Web"]
        assert other.id == "Other"
        assert result.diagnostics == ()

    def test_edges_inside_groups_are_document_edges(self):
        doc = parse("group G {\n  A\n  B\n  A -> B\n}")
        assert [(e.from_id, e.to_id) for e in doc.edges] == [("A", "B")]


class TestMetadata:
    def test_key_value(self):
        doc = parse("title Payment flow\ndirection right\n")
        assert doc.metadata["title"] == "Payment flow"
        assert doc.metadata["direction"] == "right"

    def test_flag_is_true(self):
        assert parse("autonumber\nA -> B").metadata["autonumber"] is True

    def test_metadata_is_read_only(self):
        doc = parse("title X")
        with pytest.raises(TypeError):
            doc.metadata["title"] = "Y"


class TestIdempotence:
    def test_same_text_same_document(self):
        src = 'title T\ngroup G {\n  User { id int pk }\n}\nUser "1" -> "*" Order : places\nA, B > C\n'
        assert parse(src) == parse(src)


class TestMermaid:
    def test_header_sets_type_and_direction(self):
        doc = parse("graph LR\n  A --> B\n")
        assert doc.dialect is Dialect.MERMAID
        assert doc.metadata["type"] == "flow"
        assert doc.metadata["direction"] == "LR"

    def test_shapes_declare_labels(self):
        entities = _entities("graph TD\n  A[Start] -->|go| B(Round)\n  B --> C{Decision}\n")
        assert entities["A"].label == "Start"
        assert entities["B"].label == "Round"
        assert entities["C"].label == "Decision"

    def test_pipe_label(self):
        assert parse("graph TD\n  A -->|yes| B\n").edges[0].label == "yes"

    def test_subgraph_end_block(self):
        doc = parse("graph TD\n  subgraph Cluster\n    A[One]\n    B[Two]\n  end\n  A --> B\n")
        cluster = doc.root_blocks[0]
        assert isinstance(cluster, Group)
        assert cluster.name == "Cluster"
        assert [c.id for c in cluster.children] == ["A", "B"]
        assert len(doc.edges) == 1

    def test_participant_alias(self):
        entities = _entities("sequenceDiagram\n  participant A as Alice\n  A->>B: hi\n")
        assert entities["A"].label == "Alice"
        assert entities["A"].attributes["role"] == "participant"


class TestPlantUml:
    def test_declarations_and_alias(self):
        src = '@startuml\nparticipant Alice\nactor "Bob the Builder" as Bob\nAlice -> Bob : hello\n@enduml\n'
        doc = parse(src)
        assert doc.dialect is Dialect.PLANTUML
        entities = {e.id: e for e in doc.iter_entities()}
        assert entities["Alice"].attributes["role"] == "participant"
        assert entities["Bob"].label == "Bob the Builder"
        assert doc.edges[0].label == "hello"

    def test_direction_directive(self):
        doc = parse("@startuml\nleft to right direction\nA -> B\n@enduml")
        assert doc.metadata["direction"] == "LR"

    def test_class_members(self):
        src = "@startuml\nclass User {\n  +id : int\n  -password string\n  +login(name, pass) bool\n}\n@enduml\n"
        user = _entities(src)["User"]
        id_field, password, login = user.fields
        assert id_field.name == "id"
        assert id_field.type == "int"
        assert id_field.visibility is Visibility.PUBLIC
        assert password.name == "password"
        assert password.visibility is Visibility.PRIVATE
        assert login.name == "login(name, pass)"
        assert login.type == "bool"
        assert login.member_type is MemberType.METHOD

    def test_reverse_arrow(self):
        src = "@startuml\nBob <- Alice : hello\nBob <-- Alice\n@enduml"
        edges = parse(src).edges
        assert [(e.from_id, e.to_id, e.kind) for e in edges] == [
            ("Alice", "Bob", EdgeKind.DIRECTED),
            ("Alice", "Bob", EdgeKind.DIRECTED),
        ]
        assert edges[0].label == "hello"

    def test_sequence_blocks_skipped(self):
        src = "@startuml\nAlice -> Bob : ask\nalt ok\nBob -> Alice : yes\nelse\nBob -> Alice : no\nend\n@enduml"
        assert len(parse(src).edges) == 3


class TestDiagnostics:
    def test_clean_input_is_ok(self):
        result = parse_with_diagnostics("A -> B\n")
        assert result.ok
        assert result.diagnostics == ()

    def test_unclosed_group_keeps_content(self):
        result = parse_with_diagnostics("group G {\n  A\n")
        assert not result.ok
        assert "unclosed" in result.diagnostics[0].message
        assert result.document.root_blocks[0].children[0].id == "A"

    def test_unmatched_brace(self):
        result = parse_with_diagnostics("}\nA -> B\n")
        assert any("unmatched" in d.message for d in result.diagnostics)
        assert len(result.document.edges) == 1

    def test_unrecognized_character_is_informational(self):
        result = parse_with_diagnostics("A -> B ;\n")
        assert result.ok
        assert len(result.diagnostics) == 1

    def test_garbage_never_raises(self):
        for src in ["}}}", "[[[ -> ", ": : :", "-> -> ->", "{ A -> }", '"', "@", "| x |"]:
            parse_with_diagnostics(src)

    def test_diagnostics_sorted_by_position(self):
        result = parse_with_diagnostics("A ; B\n}\n")
        positions = [(d.line, d.column) for d in result.diagnostics]
        assert positions == sorted(positions)
