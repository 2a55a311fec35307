"""Tests for diagram_layout.layout.routing."""

from diagram_layout.layout.routing import rounded_path, simplify_path, to_svg_path
from diagram_layout.layout.types import LineTo, MoveTo, Point, QuadTo


def _pts(*coords: tuple[float, float]) -> list[Point]:
    return [Point(x, y) for x, y in coords]


class TestSimplifyPath:
    def test_collinear_points_removed(self):
        assert simplify_path(_pts((0, 0), (0, 50), (0, 100))) == _pts((0, 0), (0, 100))

    def test_duplicates_removed(self):
        assert simplify_path(_pts((0, 0), (0, 0), (10, 0))) == _pts((0, 0), (10, 0))

    def test_corners_kept(self):
        points = _pts((0, 0), (0, 100), (100, 100))
        assert simplify_path(points) == points

    def test_reversal_kept(self):
        points = _pts((0, 0), (0, 100), (0, 50))
        assert simplify_path(points) == points

    def test_short_inputs(self):
        assert simplify_path([]) == []
        assert simplify_path(_pts((1, 1))) == _pts((1, 1))


class TestRoundedPath:
    def test_empty(self):
        assert rounded_path([], 8) == []

    def test_single_point(self):
        p = Point(5, 5)
        assert rounded_path([p], 8) == [MoveTo(p), LineTo(p)]

    def test_straight_segment(self):
        a, b = Point(0, 0), Point(0, 100)
        assert rounded_path([a, b], 8) == [MoveTo(a), LineTo(b)]

    def test_corner_is_rounded(self):
        commands = rounded_path(_pts((0, 0), (0, 100), (100, 100)), 8)
        assert commands == [
            MoveTo(Point(0, 0)),
            LineTo(Point(0, 92)),
            QuadTo(control=Point(0, 100), to=Point(8, 100)),
            LineTo(Point(100, 100)),
        ]

    def test_radius_clamped_to_half_segment(self):
        commands = rounded_path(_pts((0, 0), (0, 10), (100, 10)), 8)
        assert commands[1] == LineTo(Point(0, 5))
        assert commands[2] == QuadTo(control=Point(0, 10), to=Point(5, 10))

    def test_zero_radius_is_polyline(self):
        points = _pts((0, 0), (0, 100), (100, 100))
        assert rounded_path(points, 0) == [MoveTo(points[0]), LineTo(points[1]), LineTo(points[2])]

    def test_ends_at_last_point(self):
        points = _pts((0, 0), (0, 40), (60, 40), (60, 120))
        commands = rounded_path(points, 8)
        assert commands[0] == MoveTo(points[0])
        assert commands[-1] == LineTo(points[-1])
        assert sum(isinstance(c, QuadTo) for c in commands) == 2


class TestSvgPath:
    def test_format(self):
        commands = rounded_path(_pts((0, 0), (0, 100), (100, 100)), 8)
        assert to_svg_path(commands) == "M 0 0 L 0 92 Q 0 100 8 100 L 100 100"

    def test_decimals_trimmed(self):
        assert to_svg_path([MoveTo(Point(1.5, 2.25)), LineTo(Point(3.333, -0.001))]) == "M 1.5 2.25 L 3.33 0"

    def test_empty(self):
        assert to_svg_path([]) == ""
