"""Douglas-Peucker point importance ranking."""

from __future__ import annotations

from .types import VtPoint


def get_sq_seg_dist(p: VtPoint, a: VtPoint, b: VtPoint) -> float:
    """Return the squared distance from ``p`` to the segment a-b."""
    x, y = a.x, a.y
    dx, dy = b.x - a.x, b.y - a.y

    if dx != 0.0 or dy != 0.0:
        t = ((p.x - a.x) * dx + (p.y - a.y) * dy) / (dx * dx + dy * dy)
        if t > 1.0:
            x, y = b.x, b.y
        elif t > 0.0:
            x += dx * t
            y += dy * t

    dx = p.x - x
    dy = p.y - y
    return dx * dx + dy * dy


def simplify(points: list[VtPoint], first: int, last: int, sq_tolerance: float) -> None:
    """Store the importance of points between ``first`` and ``last`` in their ``z``."""
    pending = [(first, last)]
    while pending:
        first, last = pending.pop()
        max_sq_dist = sq_tolerance
        index = 0
        mid = first + ((last - first) >> 1)
        min_pos_to_mid = last - first
        a, b = points[first], points[last]

        for i, point in enumerate(points[first + 1:last], start=first + 1):
            sq_dist = get_sq_seg_dist(point, a, b)
            if sq_dist > max_sq_dist:
                index = i
                max_sq_dist = sq_dist
            elif sq_dist == max_sq_dist:
                # prefer a pivot near the middle to keep degenerate inputs shallow
                pos_to_mid = abs(i - mid)
                if pos_to_mid < min_pos_to_mid:
                    index = i
                    min_pos_to_mid = pos_to_mid

        if max_sq_dist > sq_tolerance:
            points[index].z = max_sq_dist
            if index - first > 1:
                pending.append((first, index))
            if last - index > 1:
                pending.append((index, last))


def simplify_wrapper(points: list[VtPoint], tolerance: float) -> None:
    """Rank all points of a line, always keeping both endpoints."""
    if not points:
        raise ValueError("cannot simplify an empty point list")
    points[0].z = 1.0
    points[-1].z = 1.0
    simplify(points, 0, len(points) - 1, tolerance * tolerance)