"""Tests for diagram_layout.serialize."""

import json

from diagram_layout.layout import layout
from diagram_layout.parsers import parse, parse_with_diagnostics
from diagram_layout.serialize import diagnostic_to_dict, document_to_dict, layout_to_dict


class TestDocumentToDict:
    def test_blocks_and_edges(self):
        doc = parse('title Shop\ngroup G {\n  User { id int pk }\n}\nUser "1" -> "*" Order : places\n')
        out = document_to_dict(doc)
        assert out["archetype"] == "er"
        assert out["dialect"] == "native"
        assert out["metadata"] == {"title": "Shop"}
        group = out["rootBlocks"][0]
        assert group["kind"] == "group"
        user = group["children"][0]
        assert user["fields"][0] == {
            "name": "id",
            "type": "int",
            "constraints": ["pk"],
            "visibility": None,
            "memberType": "field",
        }
        assert out["edges"][0] == {
            "from": "User",
            "to": "Order",
            "kind": "directed",
            "label": "places",
            "cardinality": {"from": "1", "to": "*"},
        }

    def test_entity_without_fields_has_no_fields_key(self):
        out = document_to_dict(parse("A [icon: x]"))
        assert "fields" not in out["rootBlocks"][0]

    def test_json_compatible(self):
        doc = parse("autonumber\nA -> B : hi")
        assert json.loads(json.dumps(document_to_dict(doc)))["metadata"] == {"autonumber": True}

    def test_diagnostic(self):
        result = parse_with_diagnostics("group G {\n")
        out = diagnostic_to_dict(result.diagnostics[0])
        assert out["line"] == 1
        assert out["severity"] == "warning"


class TestLayoutToDict:
    def test_shape(self):
        out = layout_to_dict(layout(parse("group G {\n  A\n}\nA -> Ghost : x")))
        assert out["mode"] == "graph"
        assert out["direction"] == "TB"
        assert set(out["nodes"]) == {"A", "Ghost"}
        assert out["nodes"]["Ghost"]["stub"] is True
        assert "stub" not in out["nodes"]["A"]
        assert out["groups"]["G"]["childIds"] == ["A"]
        edge = out["edges"][0]
        assert edge["id"] == "edge_0"
        assert edge["path"].startswith("M ")
        assert edge["label"] == "x"

    def test_whole_numbers_stay_integers(self):
        out = layout_to_dict(layout(parse("A -> B")))
        assert out["nodes"]["A"]["bounds"] == {"x": 40, "y": 40, "width": 140, "height": 50}
        assert isinstance(out["width"], int)

    def test_json_round_trip(self):
        out = layout_to_dict(layout(parse("A -> B\nB -> C\nC -> A")))
        assert json.loads(json.dumps(out)) == out
