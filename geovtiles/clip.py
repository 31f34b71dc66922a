"""Clipping of projected features between two axis-parallel lines."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from itertools import pairwise
from typing import Any

from .types import (
    VtEmpty,
    VtFeature,
    VtGeometry,
    VtGeometryCollection,
    VtLinearRing,
    VtLineString,
    VtMultiLineString,
    VtMultiPoint,
    VtMultiPolygon,
    VtPoint,
    VtPolygon,
    calc_progress,
    get_coordinate,
    intersect,
)


def _copy_point(p: VtPoint) -> VtPoint:
    return VtPoint(p.x, p.y, p.z)


@dataclass
class Clipper:
    """Clips geometries to the band ``k1 <= coordinate <= k2`` along ``axis``."""

    axis: int
    k1: float
    k2: float
    line_metrics: bool = False

    def __post_init__(self) -> None:
        if self.axis not in (0, 1):
            raise ValueError(f"axis must be 0 or 1, got {self.axis!r}")

    def _coord(self, p: VtPoint) -> float:
        return get_coordinate(p, self.axis)

    def _cut(self, a: VtPoint, b: VtPoint, v: float) -> tuple[VtPoint, float]:
        t = calc_progress(a, b, v, self.axis)
        return intersect(a, b, v, t, self.axis), t

    def clip_empty(self) -> VtEmpty:
        return VtEmpty()

    def clip_point(self, point: VtPoint) -> VtPoint:
        return _copy_point(point)

    def clip_multi_point(self, points: VtMultiPoint) -> VtMultiPoint:
        return VtMultiPoint(
            _copy_point(p) for p in points if self.k1 <= self._coord(p) <= self.k2
        )

    def clip_line_string(self, line: VtLineString) -> VtGeometry:
        parts: list[VtLineString] = []
        self._clip_line(line, parts)
        if len(parts) == 1:
            return parts[0]
        return VtMultiLineString(parts)

    def clip_multi_line_string(self, lines: VtMultiLineString) -> VtGeometry:
        parts: list[VtLineString] = []
        for line in lines:
            self._clip_line(line, parts)
        if len(parts) == 1:
            return parts[0]
        return VtMultiLineString(parts)

    def _clip_rings(self, polygon: VtPolygon) -> VtPolygon:
        rings = (self._clip_ring(ring) for ring in polygon)
        return VtPolygon(ring for ring in rings if ring.elements)

    def clip_polygon(self, polygon: VtPolygon) -> VtPolygon:
        return self._clip_rings(polygon)

    def clip_multi_polygon(self, polygons: VtMultiPolygon) -> VtMultiPolygon:
        clipped = (self._clip_rings(polygon) for polygon in polygons)
        return VtMultiPolygon(polygon for polygon in clipped if polygon)

    def clip_geometry_collection(self, geometries: VtGeometryCollection) -> VtGeometryCollection:
        return VtGeometryCollection(self.clip_geometry(g) for g in geometries)

    def clip_geometry(self, geometry: VtGeometry) -> VtGeometry:
        """Clip any geometry kind."""
        if isinstance(geometry, VtEmpty):
            return self.clip_empty()
        if isinstance(geometry, VtPoint):
            return self.clip_point(geometry)
        if isinstance(geometry, VtMultiPoint):
            return self.clip_multi_point(geometry)
        if isinstance(geometry, VtLineString):
            return self.clip_line_string(geometry)
        if isinstance(geometry, VtMultiLineString):
            return self.clip_multi_line_string(geometry)
        if isinstance(geometry, VtPolygon):
            return self.clip_polygon(geometry)
        if isinstance(geometry, VtMultiPolygon):
            return self.clip_multi_polygon(geometry)
        if isinstance(geometry, VtGeometryCollection):
            return self.clip_geometry_collection(geometry)
        raise TypeError(f"not a geometry: {geometry!r}")

    def _new_slice(self, line: VtLineString) -> VtLineString:
        piece = VtLineString(dist=line.dist)
        if self.line_metrics:
            piece.seg_start = line.seg_start
            piece.seg_end = line.seg_end
        return piece

    def _clip_line(self, line: VtLineString, slices: list[VtLineString]) -> None:
        count = len(line.elements)
        if count < 2:
            return

        k1, k2 = self.k1, self.k2
        metrics = self.line_metrics
        line_len = line.seg_start
        seg_len = 0.0
        piece = self._new_slice(line)

        for i, (a, b) in enumerate(pairwise(line.elements)):
            ak = self._coord(a)
            bk = self._coord(b)
            is_last_seg = i == count - 2

            if metrics:
                seg_len = math.hypot(b.x - a.x, b.y - a.y)

            if ak < k1:
                if bk > k2:
                    # ---|-----|-->
                    point, t = self._cut(a, b, k1)
                    piece.elements.append(point)
                    if metrics:
                        piece.seg_start = line_len + seg_len * t
                    point, t = self._cut(a, b, k2)
                    piece.elements.append(point)
                    if metrics:
                        piece.seg_end = line_len + seg_len * t
                    slices.append(piece)
                    piece = self._new_slice(line)
                elif bk > k1:
                    # ---|-->  |
                    point, t = self._cut(a, b, k1)
                    piece.elements.append(point)
                    if metrics:
                        piece.seg_start = line_len + seg_len * t
                    if is_last_seg:
                        piece.elements.append(_copy_point(b))
                elif bk == k1 and not is_last_seg:
                    # --->|..  |
                    if metrics:
                        piece.seg_start = line_len + seg_len
                    piece.elements.append(_copy_point(b))
            elif ak > k2:
                if bk < k1:
                    # <--|-----|---
                    point, t = self._cut(a, b, k2)
                    piece.elements.append(point)
                    if metrics:
                        piece.seg_start = line_len + seg_len * t
                    point, t = self._cut(a, b, k1)
                    piece.elements.append(point)
                    if metrics:
                        piece.seg_end = line_len + seg_len * t
                    slices.append(piece)
                    piece = self._new_slice(line)
                elif bk < k2:
                    # |  <--|---
                    point, t = self._cut(a, b, k2)
                    piece.elements.append(point)
                    if metrics:
                        piece.seg_start = line_len + seg_len * t
                    if is_last_seg:
                        piece.elements.append(_copy_point(b))
                elif bk == k2 and not is_last_seg:
                    # |  ..|<---
                    if metrics:
                        piece.seg_start = line_len + seg_len
                    piece.elements.append(_copy_point(b))
            else:
                piece.elements.append(_copy_point(a))
                if bk < k1:
                    # <--|---  |
                    point, t = self._cut(a, b, k1)
                    piece.elements.append(point)
                    if metrics:
                        piece.seg_end = line_len + seg_len * t
                    slices.append(piece)
                    piece = self._new_slice(line)
                elif bk > k2:
                    # |  ---|-->
                    point, t = self._cut(a, b, k2)
                    piece.elements.append(point)
                    if metrics:
                        piece.seg_end = line_len + seg_len * t
                    slices.append(piece)
                    piece = self._new_slice(line)
                elif is_last_seg:
                    # | --> |
                    piece.elements.append(_copy_point(b))

            if metrics:
                line_len += seg_len

        if piece.elements:
            if metrics:
                piece.seg_end = line_len
            slices.append(piece)

    def _clip_ring(self, ring: VtLinearRing) -> VtLinearRing:
        count = len(ring.elements)
        result = VtLinearRing(area=ring.area)
        if count < 2:
            return result

        k1, k2 = self.k1, self.k2
        out = result.elements
        for i, (a, b) in enumerate(pairwise(ring.elements)):
            ak = self._coord(a)
            bk = self._coord(b)
            is_last_seg = i == count - 2

            if ak < k1:
                if bk > k1:
                    # ---|-->  |
                    out.append(self._cut(a, b, k1)[0])
                    if bk > k2:
                        # ---|-----|-->
                        out.append(self._cut(a, b, k2)[0])
                    elif is_last_seg:
                        out.append(_copy_point(b))
            elif ak > k2:
                if bk < k2:
                    # |  <--|---
                    out.append(self._cut(a, b, k2)[0])
                    if bk < k1:
                        # <--|-----|---
                        out.append(self._cut(a, b, k1)[0])
                    elif is_last_seg:
                        out.append(_copy_point(b))
            else:
                # | --> |
                out.append(_copy_point(a))
                if bk < k1:
                    # <--|---  |
                    out.append(self._cut(a, b, k1)[0])
                elif bk > k2:
                    # |  ---|-->
                    out.append(self._cut(a, b, k2)[0])

        # close the ring if clipping left its ends apart
        if out and out[0] != out[-1]:
            out.append(_copy_point(out[0]))

        return result


def clip(
    features: list[VtFeature],
    axis: int,
    k1: float,
    k2: float,
    min_all: float,
    max_all: float,
    line_metrics: bool,
) -> list[VtFeature]:
    """Clip features to the band between ``k1`` and ``k2`` along ``axis``.

    ``min_all`` and ``max_all`` bound all features on that axis and allow
    the whole set to be accepted or rejected at once. The result never
    shares points with the input.
    """
    if axis not in (0, 1):
        raise ValueError(f"axis must be 0 or 1, got {axis!r}")

    if min_all >= k1 and max_all < k2:
        return copy.deepcopy(features)
    if max_all < k1 or min_all >= k2:
        return []

    clipper = Clipper(axis, k1, k2, line_metrics)
    clipped: list[VtFeature] = []

    for feature in features:
        low = get_coordinate(feature.bbox.min, axis)
        high = get_coordinate(feature.bbox.max, axis)

        if low >= k1 and high < k2:
            clipped.append(copy.deepcopy(feature))
            continue
        if high < k1 or low >= k2:
            continue

        geometry = clipper.clip_geometry(feature.geometry)
        props: dict[str, Any] = feature.properties

        if isinstance(geometry, VtMultiLineString) and line_metrics:
            for segment in geometry:
                part = VtFeature.create(segment, copy.deepcopy(props), copy.deepcopy(feature.id))
                if part is not None:
                    clipped.append(part)
        else:
            result = VtFeature.create(geometry, copy.deepcopy(props), copy.deepcopy(feature.id))
            if result is not None:
                clipped.append(result)

    return clipped