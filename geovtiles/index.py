"""Tile index over a GeoJSON document, built lazily from the top tile down."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .clip import clip
from .convert import convert
from .tile import InternalTile, Tile
from .types import VtFeature
from .wrap import wrap

_GEOMETRY_TYPES = frozenset(
    {
        "Point",
        "MultiPoint",
        "LineString",
        "MultiLineString",
        "Polygon",
        "MultiPolygon",
        "GeometryCollection",
    }
)


@dataclass
class TileOptions:
    """Options that shape each generated tile."""

    tolerance: float = 3.0  # simplification tolerance (higher means simpler)
    extent: int = 4096  # tile extent
    buffer: int = 64  # tile buffer on each side
    line_metrics: bool = False  # record clip start/end on line features


@dataclass
class Options:
    """Options for building a tile index."""

    max_zoom: int = 18  # max zoom to preserve detail on
    index_max_zoom: int = 5  # max zoom in the initial tile index
    index_max_points: int = 100000  # max points per tile in the initial index
    generate_id: bool = False  # number features, overriding existing ids
    tile: TileOptions = field(default_factory=TileOptions)


def to_id(z: int, x: int, y: int) -> int:
    """Return a unique integer key for tile ``z/x/y``."""
    return (((1 << z) * y + x) * 32) + z


def geojson_to_feature_collection(geojson: Mapping[str, Any]) -> dict[str, Any]:
    """Wrap a GeoJSON geometry or feature into a FeatureCollection."""
    kind = geojson.get("type")
    if kind == "FeatureCollection":
        return dict(geojson)
    if kind == "Feature":
        return {"type": "FeatureCollection", "features": [geojson]}
    if kind in _GEOMETRY_TYPES:
        return {
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "geometry": geojson, "properties": None}],
        }
    raise ValueError(f"not a GeoJSON object: type {kind!r}")


def geojson_to_tile(
    geojson: Mapping[str, Any],
    z: int,
    x: int,
    y: int,
    options: Optional[TileOptions] = None,
    do_wrap: bool = False,
    do_clip: bool = False,
) -> Tile:
    """Build the single tile ``z/x/y`` straight from GeoJSON, without an index."""
    options = options or TileOptions()
    collection = geojson_to_feature_collection(geojson)
    z2 = float(1 << z)
    tolerance = (options.tolerance / options.extent) / z2
    features = convert(collection, tolerance, False)

    if do_wrap:
        features = wrap(features, options.buffer / options.extent, options.line_metrics)

    if do_clip or options.line_metrics:
        p = options.buffer / options.extent
        left = clip(features, 0, (x - p) / z2, (x + 1.0 + p) / z2, -1.0, 2.0, options.line_metrics)
        features = clip(left, 1, (y - p) / z2, (y + 1.0 + p) / z2, -1.0, 2.0, options.line_metrics)

    return InternalTile(features, z, x, y, options.extent, tolerance, options.line_metrics).tile


class GeoJSONVT:
    """A vector tile index over a GeoJSON FeatureCollection."""

    def __init__(self, features: Mapping[str, Any], options: Optional[Options] = None) -> None:
        self._options = options or Options()
        self._stats: dict[int, int] = {}
        self._total = 0
        self._tiles: dict[int, InternalTile] = {}

        tile_opts = self._options.tile
        z2 = float(1 << self._options.max_zoom)
        converted = convert(
            features,
            (tile_opts.tolerance / tile_opts.extent) / z2,
            self._options.generate_id,
        )
        wrapped = wrap(converted, tile_opts.buffer / tile_opts.extent, tile_opts.line_metrics)
        self._split_tile(wrapped, 0, 0, 0)

    @classmethod
    def from_geojson(cls, geojson: Mapping[str, Any], options: Optional[Options] = None) -> "GeoJSONVT":
        """Build an index from any GeoJSON geometry, feature or collection."""
        return cls(geojson_to_feature_collection(geojson), options)

    @property
    def internal_tiles(self) -> dict[int, InternalTile]:
        """All tiles built so far, keyed by :func:`to_id`."""
        return self._tiles

    @property
    def stats(self) -> dict[int, int]:
        """Number of tiles built per zoom level."""
        return self._stats

    @property
    def total(self) -> int:
        """Total number of tiles built."""
        return self._total

    def get_tile(self, z: int, x: int, y: int) -> Tile:
        """Return tile ``z/x/y``, cutting it from an ancestor when needed."""
        if z > self._options.max_zoom:
            raise ValueError(f"requested zoom higher than max_zoom: {z}")

        x %= 1 << z  # wrap the tile x coordinate
        tile_id = to_id(z, x, y)

        if tile_id in self._tiles:
            return self._tiles[tile_id].tile

        parent = self._find_parent(z, x, y)
        if parent is None:
            raise LookupError("parent tile not found")

        # drill down from the parent holding the source geometry
        self._split_tile(parent.source_features, parent.z, parent.x, parent.y, z, x, y)

        if tile_id in self._tiles:
            return self._tiles[tile_id].tile
        if self._find_parent(z, x, y) is None:
            raise LookupError("parent tile not found")
        return Tile()

    def _find_parent(self, z: int, x: int, y: int) -> Optional[InternalTile]:
        parent = None
        while parent is None and z != 0:
            z -= 1
            x //= 2
            y //= 2
            parent = self._tiles.get(to_id(z, x, y))
        return parent

    def _split_tile(
        self,
        features: list[VtFeature],
        z: int,
        x: int,
        y: int,
        cz: int = 0,
        cx: int = 0,
        cy: int = 0,
    ) -> None:
        opts = self._options
        tile_opts = opts.tile
        z2 = float(1 << z)
        tile_id = to_id(z, x, y)

        tile = self._tiles.get(tile_id)
        if tile is None:
            tolerance = 0.0 if z == opts.max_zoom else tile_opts.tolerance / (z2 * tile_opts.extent)
            tile = InternalTile(
                features, z, x, y, tile_opts.extent, tolerance, tile_opts.line_metrics
            )
            self._tiles[tile_id] = tile
            self._stats[z] = self._stats.get(z, 0) + 1
            self._total += 1

        if not features:
            return

        if cz == 0:
            # first-pass tiling: stop at the index zoom or when the tile is simple enough
            if z == opts.index_max_zoom or tile.tile.num_points <= opts.index_max_points:
                tile.source_features = features
                return
        else:
            # drilling down to a specific tile
            if z == opts.max_zoom:
                return
            if z == cz:
                tile.source_features = features
                return
            m = 1 << (cz - z)
            if x != cx // m or y != cy // m:
                tile.source_features = features
                return

        p = 0.5 * tile_opts.buffer / tile_opts.extent
        low, high = tile.bbox.min, tile.bbox.max
        metrics = tile_opts.line_metrics

        left = clip(features, 0, (x - p) / z2, (x + 0.5 + p) / z2, low.x, high.x, metrics)
        self._split_tile(
            clip(left, 1, (y - p) / z2, (y + 0.5 + p) / z2, low.y, high.y, metrics),
            z + 1, x * 2, y * 2, cz, cx, cy,
        )
        self._split_tile(
            clip(left, 1, (y + 0.5 - p) / z2, (y + 1.0 + p) / z2, low.y, high.y, metrics),
            z + 1, x * 2, y * 2 + 1, cz, cx, cy,
        )

        right = clip(features, 0, (x + 0.5 - p) / z2, (x + 1.0 + p) / z2, low.x, high.x, metrics)
        self._split_tile(
            clip(right, 1, (y - p) / z2, (y + 0.5 + p) / z2, low.y, high.y, metrics),
            z + 1, x * 2 + 1, y * 2, cz, cx, cy,
        )
        self._split_tile(
            clip(right, 1, (y + 0.5 - p) / z2, (y + 1.0 + p) / z2, low.y, high.y, metrics),
            z + 1, x * 2 + 1, y * 2 + 1, cz, cx, cy,
        )

        # the children hold the geometry now
        tile.source_features = []