"""Projection of GeoJSON features into the unit square."""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import pairwise
from typing import Any, Mapping, Sequence

from .simplify import simplify_wrapper
from .types import (
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
)


@dataclass
class Projector:
    """Projects longitude/latitude geometry to Web Mercator unit coordinates."""

    tolerance: float

    def project_point(self, p: Sequence[float]) -> VtPoint:
        sine = math.sin(p[1] * math.pi / 180.0)
        x = p[0] / 360.0 + 0.5
        if sine >= 1.0:
            y = 0.0
        elif sine <= -1.0:
            y = 1.0
        else:
            y = 0.5 - 0.25 * math.log((1.0 + sine) / (1.0 - sine)) / math.pi
            y = max(min(y, 1.0), 0.0)
        return VtPoint(x, y, 0.0)

    def project_line_string(self, points: Sequence[Sequence[float]]) -> VtLineString:
        result = VtLineString()
        if not points:
            return result
        result.elements = [self.project_point(p) for p in points]
        result.dist = sum(math.hypot(b.x - a.x, b.y - a.y) for a, b in pairwise(result.elements))
        simplify_wrapper(result.elements, self.tolerance)
        result.seg_start = 0.0
        result.seg_end = result.dist
        return result

    def project_linear_ring(self, ring: Sequence[Sequence[float]]) -> VtLinearRing:
        result = VtLinearRing()
        if not ring:
            return result
        result.elements = [self.project_point(p) for p in ring]
        area = sum(a.x * b.y - b.x * a.y for a, b in pairwise(result.elements))
        result.area = abs(area / 2.0)
        simplify_wrapper(result.elements, self.tolerance)
        return result

    def project_polygon(self, rings: Sequence[Sequence[Sequence[float]]]) -> VtPolygon:
        return VtPolygon(self.project_linear_ring(ring) for ring in rings)

    def project_multi_point(self, points: Sequence[Sequence[float]]) -> VtMultiPoint:
        return VtMultiPoint(self.project_point(p) for p in points)

    def project_multi_line_string(self, lines: Sequence[Sequence[Sequence[float]]]) -> VtMultiLineString:
        return VtMultiLineString(self.project_line_string(line) for line in lines)

    def project_multi_polygon(self, polygons: Sequence[Any]) -> VtMultiPolygon:
        return VtMultiPolygon(self.project_polygon(polygon) for polygon in polygons)

    def project_geometry_collection(self, geometries: Sequence[Mapping[str, Any]]) -> VtGeometryCollection:
        return VtGeometryCollection(self.project_geometry(g) for g in geometries)

    def project_geometry(self, geometry: Mapping[str, Any]) -> VtGeometry:
        """Project a GeoJSON geometry object."""
        kind = geometry.get("type")
        if kind == "GeometryCollection":
            return self.project_geometry_collection(geometry.get("geometries", []))
        if "coordinates" not in geometry:
            raise ValueError(f"geometry of type {kind!r} has no coordinates")
        coordinates = geometry["coordinates"]
        match kind:
            case "Point":
                return self.project_point(coordinates)
            case "MultiPoint":
                return self.project_multi_point(coordinates)
            case "LineString":
                return self.project_line_string(coordinates)
            case "MultiLineString":
                return self.project_multi_line_string(coordinates)
            case "Polygon":
                return self.project_polygon(coordinates)
            case "MultiPolygon":
                return self.project_multi_polygon(coordinates)
        raise ValueError(f"unknown geometry type: {kind!r}")


def convert(features: Mapping[str, Any], tolerance: float, generate_id: bool) -> list[VtFeature]:
    """Project a GeoJSON FeatureCollection, dropping features without points."""
    projector = Projector(tolerance)
    projected: list[VtFeature] = []
    for gen_id, feature in enumerate(features.get("features", [])):
        geometry = feature.get("geometry")
        if geometry is None:
            raise ValueError("feature has no geometry")
        feature_id = gen_id if generate_id else feature.get("id")
        properties = dict(feature.get("properties") or {})
        vt_feature = VtFeature.create(projector.project_geometry(geometry), properties, feature_id)
        if vt_feature is not None:
            projected.append(vt_feature)
    return projected