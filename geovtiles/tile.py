"""Conversion of projected features into tile-local GeoJSON features."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional

from .types import (
    BBox,
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
)

Position = list[float]


def _empty_collection() -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": []}


def _round_half_away(value: float) -> float:
    """Round to the nearest integer, halves away from zero, keeping a float."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _metric_number(value: float) -> float | int:
    return int(value) if value.is_integer() else value


@dataclass
class Tile:
    """A finished tile: a GeoJSON FeatureCollection in tile coordinates."""

    features: dict[str, Any] = field(default_factory=_empty_collection)
    num_points: int = 0
    num_simplified: int = 0


class InternalTile:
    """A tile being built from projected features, with its source data."""

    def __init__(
        self,
        source: list[VtFeature],
        z: int,
        x: int,
        y: int,
        extent: int,
        tolerance: float,
        line_metrics: bool,
    ) -> None:
        self.extent = extent
        self.z = z
        self.x = x
        self.y = y
        self.z2 = float(2**z)
        self.tolerance = tolerance
        self.sq_tolerance = tolerance * tolerance
        self.line_metrics = line_metrics
        self.source_features: list[VtFeature] = []
        self.bbox = BBox()
        self.tile = Tile()

        for feature in source:
            self.tile.num_points += feature.num_points
            props = dict(feature.properties) if feature.properties else None
            self._add_geometry(feature.geometry, props, feature.id)

            box = self.bbox
            box.min.x = min(feature.bbox.min.x, box.min.x)
            box.min.y = min(feature.bbox.min.y, box.min.y)
            box.max.x = max(feature.bbox.max.x, box.max.x)
            box.max.y = max(feature.bbox.max.y, box.max.y)

    def __repr__(self) -> str:
        return (
            f"InternalTile(z={self.z}, x={self.x}, y={self.y}, "
            f"features={len(self.tile.features['features'])})"
        )

    def _emit(self, kind: str, coordinates: Any, props: Optional[dict[str, Any]], feature_id: Any) -> None:
        feature: dict[str, Any] = {
            "type": "Feature",
            "geometry": {"type": kind, "coordinates": coordinates},
            "properties": props,
        }
        if feature_id is not None:
            feature["id"] = feature_id
        self.tile.features["features"].append(feature)

    def _emit_single_or_multi(
        self,
        single: str,
        multi: str,
        parts: list[Any],
        props: Optional[dict[str, Any]],
        feature_id: Any,
    ) -> None:
        if len(parts) == 1:
            self._emit(single, parts[0], props, feature_id)
        elif parts:
            self._emit(multi, parts, props, feature_id)

    def _add_geometry(self, geometry: VtGeometry, props: Optional[dict[str, Any]], feature_id: Any) -> None:
        if isinstance(geometry, VtEmpty):
            raise ValueError("an empty geometry cannot be added to a tile")
        if isinstance(geometry, VtPoint):
            self._emit("Point", self._transform_point(geometry), props, feature_id)
        elif isinstance(geometry, VtMultiPoint):
            points = [self._transform_point(p) for p in geometry]
            self._emit_single_or_multi("Point", "MultiPoint", points, props, feature_id)
        elif isinstance(geometry, VtLineString):
            self._add_line_string(geometry, props, feature_id)
        elif isinstance(geometry, VtMultiLineString):
            lines = [
                self._transform_line_string(line) for line in geometry if line.dist > self.tolerance
            ]
            self._emit_single_or_multi("LineString", "MultiLineString", lines, props, feature_id)
        elif isinstance(geometry, VtPolygon):
            rings = self._transform_polygon(geometry)
            if rings:
                self._emit("Polygon", rings, props, feature_id)
        elif isinstance(geometry, VtMultiPolygon):
            polygons = [p for p in map(self._transform_polygon, geometry) if p]
            self._emit_single_or_multi("Polygon", "MultiPolygon", polygons, props, feature_id)
        elif isinstance(geometry, VtGeometryCollection):
            for part in geometry:
                self._add_geometry(part, dict(props) if props is not None else None, feature_id)
        else:
            raise TypeError(f"not a geometry: {geometry!r}")

    def _add_line_string(self, line: VtLineString, props: Optional[dict[str, Any]], feature_id: Any) -> None:
        coordinates = self._transform_line_string(line)
        if not coordinates:
            return
        if self.line_metrics:
            props = dict(props or {})
            props["mapbox_clip_start"] = _metric_number(line.seg_start / line.dist)
            props["mapbox_clip_end"] = _metric_number(line.seg_end / line.dist)
        self._emit("LineString", coordinates, props, feature_id)

    def _transform_point(self, p: VtPoint) -> Position:
        self.tile.num_simplified += 1
        return [
            _round_half_away((p.x * self.z2 - self.x) * self.extent),
            _round_half_away((p.y * self.z2 - self.y) * self.extent),
        ]

    def _transform_line_string(self, line: VtLineString) -> list[Position]:
        if line.dist <= self.tolerance:
            return []
        return [self._transform_point(p) for p in line.elements if p.z > self.sq_tolerance]

    def _transform_linear_ring(self, ring: VtLinearRing) -> list[Position]:
        if ring.area <= self.sq_tolerance:
            return []
        return [self._transform_point(p) for p in ring.elements if p.z > self.sq_tolerance]

    def _transform_polygon(self, rings: VtPolygon) -> list[list[Position]]:
        return [self._transform_linear_ring(ring) for ring in rings if ring.area > self.sq_tolerance]