"""Tests for diagram_layout.layout.sequence."""

from diagram_layout.config import LayoutConfig
from diagram_layout.layout.sequence import layout_sequence, participants
from diagram_layout.layout.types import Point
from diagram_layout.parsers import parse
from diagram_layout.types import LayoutMode

CHAT = "@startuml\nparticipant Alice\nparticipant Bob\nAlice -> Bob : hello\nBob -> Alice : hi\nAlice -> Carol : cc\n@enduml\n"


def _columns(result) -> dict[str, float]:
    return {pid: node.bounds.x for pid, node in result.nodes.items()}


class TestParticipants:
    def test_declared_first_then_edge_endpoints(self):
        assert list(participants(parse(CHAT))) == ["Alice", "Bob", "Carol"]

    def test_edge_only_participants_map_to_none(self):
        found = participants(parse(CHAT))
        assert found["Carol"] is None
        assert found["Alice"].id == "Alice"


class TestColumns:
    def test_fixed_offsets(self):
        config = LayoutConfig()
        result = layout_sequence(parse(CHAT), config)
        assert _columns(result) == {"Alice": 40, "Bob": 190, "Carol": 340}
        alice = result.nodes["Alice"].bounds
        assert (alice.y, alice.width, alice.height) == (20, 120, 40)

    def test_column_stability(self):
        doc = parse(CHAT)
        assert _columns(layout_sequence(doc)) == _columns(layout_sequence(doc))
        assert layout_sequence(doc) == layout_sequence(doc)

    def test_more_messages_keep_columns(self):
        longer = CHAT.replace("@enduml", "Bob -> Alice : again\n@enduml")
        assert _columns(layout_sequence(parse(longer))) == _columns(layout_sequence(parse(CHAT)))

    def test_undeclared_participant_is_stub(self):
        result = layout_sequence(parse(CHAT))
        assert result.nodes["Carol"].stub
        assert not result.nodes["Alice"].stub


class TestMessages:
    def test_rows_top_to_bottom(self):
        result = layout_sequence(parse(CHAT))
        ys = [e.points[0].y for e in result.edges]
        assert ys == [120, 180, 240]

    def test_horizontal_between_centers(self):
        result = layout_sequence(parse(CHAT))
        first = result.edges[0]
        assert first.points == (Point(100, 120), Point(250, 120))
        assert result.edges[1].points == (Point(250, 180), Point(100, 180))

    def test_edge_ids_and_labels(self):
        result = layout_sequence(parse(CHAT))
        assert [e.id for e in result.edges] == ["seq_0", "seq_1", "seq_2"]
        assert [e.label for e in result.edges] == ["hello", "hi", "cc"]

    def test_self_message_takes_extra_room(self):
        config = LayoutConfig()
        result = layout_sequence(parse("A -> A : think\nA -> B : tell"), config)
        loop, after = result.edges
        assert len(loop.points) == 4
        assert loop.points[1].x == loop.points[0].x + config.self_loop_width
        assert after.points[0].y - loop.points[0].y == config.message_spacing + config.self_loop_extra

    def test_canvas_size(self):
        result = layout_sequence(parse(CHAT))
        assert result.width == 40 + 3 * 150
        assert result.height == 240 + 60 + 40
        assert result.mode is LayoutMode.SEQUENCE
        assert result.groups == {}

    def test_groups_ignored(self):
        result = layout_sequence(parse("group G {\n  A\n  B\n}\nA -> B"))
        assert result.groups == {}
        assert set(result.nodes) == {"A", "B"}

    def test_empty(self):
        result = layout_sequence(parse(""))
        assert result.nodes == {}
        assert (result.width, result.height) == (800, 600)
