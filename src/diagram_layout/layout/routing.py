"""Edge routing helpers: polyline cleanup and rounded-corner paths."""

from __future__ import annotations

import math
from collections.abc import Sequence

from diagram_layout.layout.types import LineTo, MoveTo, PathCommand, Point, QuadTo

_EPSILON = 1e-9


def simplify_path(points: Sequence[Point]) -> list[Point]:
    """Remove repeated and collinear intermediate points, keeping only direction changes."""
    deduped: list[Point] = []
    for p in points:
        if not deduped or not _same(deduped[-1], p):
            deduped.append(p)
    if len(deduped) <= 2:
        return deduped

    result = [deduped[0]]
    for i in range(1, len(deduped) - 1):
        prev = result[-1]
        curr = deduped[i]
        nxt = deduped[i + 1]
        dx1, dy1 = curr.x - prev.x, curr.y - prev.y
        dx2, dy2 = nxt.x - curr.x, nxt.y - curr.y
        cross = dx1 * dy2 - dy1 * dx2
        dot = dx1 * dx2 + dy1 * dy2
        # Keep point if direction changes
        if abs(cross) > _EPSILON or dot < 0:
            result.append(curr)
    result.append(deduped[-1])
    return result


def _same(a: Point, b: Point) -> bool:
    return abs(a.x - b.x) <= _EPSILON and abs(a.y - b.y) <= _EPSILON


def rounded_path(points: Sequence[Point], radius: float) -> list[PathCommand]:
    """Turn a bend-point polyline into path commands with rounded interior corners.

    At each interior point the corner radius is clamped to half of either adjacent
    segment, the path is cut back by that radius along both segments, and the two
    cut points are joined by a quadratic curve whose control point is the original
    bend. Fewer than two points degrade to a straight (possibly zero-length) line.
    """
    if not points:
        return []
    if len(points) == 1:
        return [MoveTo(points[0]), LineTo(points[0])]

    commands: list[PathCommand] = [MoveTo(points[0])]
    for i in range(1, len(points) - 1):
        prev, curr, nxt = points[i - 1], points[i], points[i + 1]
        d1 = math.hypot(prev.x - curr.x, prev.y - curr.y)
        d2 = math.hypot(nxt.x - curr.x, nxt.y - curr.y)
        if d1 <= _EPSILON or d2 <= _EPSILON:
            commands.append(LineTo(curr))
            continue
        r = min(radius, d1 / 2, d2 / 2)
        if r <= _EPSILON:
            commands.append(LineTo(curr))
            continue
        ux1, uy1 = (prev.x - curr.x) / d1, (prev.y - curr.y) / d1
        ux2, uy2 = (nxt.x - curr.x) / d2, (nxt.y - curr.y) / d2
        start = Point(curr.x + ux1 * r, curr.y + uy1 * r)
        end = Point(curr.x + ux2 * r, curr.y + uy2 * r)
        commands.append(LineTo(start))
        commands.append(QuadTo(control=curr, to=end))
    commands.append(LineTo(points[-1]))
    return commands


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def to_svg_path(commands: Sequence[PathCommand]) -> str:
    """Render path commands as an SVG ``d`` attribute."""
    parts: list[str] = []
    for cmd in commands:
        if isinstance(cmd, MoveTo):
            parts.append(f"M {_fmt(cmd.to.x)} {_fmt(cmd.to.y)}")
        elif isinstance(cmd, LineTo):
            parts.append(f"L {_fmt(cmd.to.x)} {_fmt(cmd.to.y)}")
        else:
            parts.append(f"Q {_fmt(cmd.control.x)} {_fmt(cmd.control.y)} {_fmt(cmd.to.x)} {_fmt(cmd.to.y)}")
    return " ".join(parts)
