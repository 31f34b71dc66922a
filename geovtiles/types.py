"""Geometry and feature types expressed in projected unit-square coordinates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union


@dataclass
class Point2D:
    """A plain two-dimensional point."""

    x: float = 0.0
    y: float = 0.0


@dataclass
class BBox:
    """An axis-aligned bounding box."""

    min: Point2D = field(default_factory=Point2D)
    max: Point2D = field(default_factory=Point2D)


@dataclass
class VtPoint:
    """A projected point; ``z`` holds its simplification importance."""

    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class VtEmpty:
    """A geometry without any points."""


class _GeometryList(list):
    """A list that only compares equal to a list of the same geometry kind."""

    __hash__ = None  # type: ignore[assignment]

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and list.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list.__repr__(self)})"


class VtMultiPoint(_GeometryList):
    """A list of :class:`VtPoint`."""


@dataclass
class VtLineString:
    """A projected line with its length and, optionally, clip distances."""

    elements: list[VtPoint] = field(default_factory=list)
    dist: float = 0.0
    seg_start: float = 0.0
    seg_end: float = 0.0


@dataclass
class VtLinearRing:
    """A projected polygon ring with its area."""

    elements: list[VtPoint] = field(default_factory=list)
    area: float = 0.0


class VtMultiLineString(_GeometryList):
    """A list of :class:`VtLineString`."""


class VtPolygon(_GeometryList):
    """A list of :class:`VtLinearRing`, outer ring first."""


class VtMultiPolygon(_GeometryList):
    """A list of :class:`VtPolygon`."""


class VtGeometryCollection(_GeometryList):
    """A list of arbitrary geometries."""


VtGeometry = Union[
    VtEmpty,
    VtPoint,
    VtMultiPoint,
    VtLineString,
    VtMultiLineString,
    VtPolygon,
    VtMultiPolygon,
    VtGeometryCollection,
]


def for_each_point(geometry: VtGeometry) -> Iterator[VtPoint]:
    """Yield every point of ``geometry``; the points may be modified in place."""
    if isinstance(geometry, VtEmpty):
        return
    if isinstance(geometry, VtPoint):
        yield geometry
    elif isinstance(geometry, (VtLineString, VtLinearRing)):
        yield from geometry.elements
    elif isinstance(geometry, _GeometryList):
        for part in geometry:
            yield from for_each_point(part)
    else:
        raise TypeError(f"not a geometry: {geometry!r}")


@dataclass
class VtFeature:
    """A projected feature with its bounding box and point count."""

    geometry: VtGeometry
    properties: dict[str, Any] = field(default_factory=dict)
    id: Any = None
    bbox: BBox = field(default_factory=lambda: BBox(Point2D(2.0, 1.0), Point2D(-1.0, 0.0)))
    num_points: int = 0

    @classmethod
    def create(cls, geometry: VtGeometry, properties: dict[str, Any], id: Any) -> Optional["VtFeature"]:
        """Build a feature, or return None when the geometry has no points."""
        feature = cls(geometry, properties, id)
        box = feature.bbox
        for point in for_each_point(geometry):
            box.min.x = min(point.x, box.min.x)
            box.min.y = min(point.y, box.min.y)
            box.max.x = max(point.x, box.max.x)
            box.max.y = max(point.y, box.max.y)
            feature.num_points += 1
        return feature if feature.num_points else None


def _check_axis(axis: int) -> None:
    if axis not in (0, 1):
        raise ValueError(f"axis must be 0 or 1, got {axis!r}")


def get_coordinate(point: Union[VtPoint, Point2D], axis: int) -> float:
    """Return the x (axis 0) or y (axis 1) coordinate of ``point``."""
    _check_axis(axis)
    return point.x if axis == 0 else point.y


def calc_progress(a: VtPoint, b: VtPoint, v: float, axis: int) -> float:
    """Return the fraction along segment a-b where the axis coordinate equals ``v``."""
    _check_axis(axis)
    if axis == 0:
        return (v - a.x) / (b.x - a.x)
    return (v - a.y) / (b.y - a.y)


def intersect(a: VtPoint, b: VtPoint, v: float, t: float, axis: int) -> VtPoint:
    """Return the point at fraction ``t`` of a-b, pinned to ``v`` on ``axis``."""
    _check_axis(axis)
    if axis == 0:
        return VtPoint(v, (b.y - a.y) * t + a.y, 1.0)
    return VtPoint((b.x - a.x) * t + a.x, v, 1.0)