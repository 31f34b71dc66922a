import math

import pytest

from geovtiles.index import (
    GeoJSONVT,
    Options,
    TileOptions,
    geojson_to_feature_collection,
    geojson_to_tile,
    to_id,
)
from geovtiles.tile import Tile


def point_feature(lon, lat, properties=None, feature_id=None):
    feature = {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": properties,
    }
    if feature_id is not None:
        feature["id"] = feature_id
    return feature


def collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


def coordinates(tile, index=0):
    return tile.features["features"][index]["geometry"]["coordinates"]


def test_to_id_is_unique_and_encodes_zoom():
    seen = set()
    for z in range(4):
        for x in range(1 << z):
            for y in range(1 << z):
                tile_id = to_id(z, x, y)
                assert tile_id % 32 == z
                seen.add(tile_id)
    assert len(seen) == sum(4**z for z in range(4))
    assert to_id(0, 0, 0) == 0


def test_feature_collection_from_geometry_feature_and_collection():
    geometry = {"type": "Point", "coordinates": [1.0, 2.0]}
    wrapped = geojson_to_feature_collection(geometry)
    assert wrapped["type"] == "FeatureCollection"
    assert wrapped["features"][0]["geometry"] == geometry

    feature = point_feature(1.0, 2.0, {"name": "a"})
    assert geojson_to_feature_collection(feature)["features"] == [feature]

    fc = collection(feature, point_feature(3.0, 4.0))
    assert geojson_to_feature_collection(fc)["features"] == fc["features"]


def test_feature_collection_rejects_unknown_type():
    with pytest.raises(ValueError):
        geojson_to_feature_collection({"type": "Nonsense"})


def test_point_at_origin_lands_in_tile_centre():
    index = GeoJSONVT(collection(point_feature(0.0, 0.0, {"name": "origin"})))
    tile = index.get_tile(0, 0, 0)
    assert coordinates(tile) == [2048.0, 2048.0]
    assert tile.features["features"][0]["properties"] == {"name": "origin"}
    assert tile.num_points == 1


def test_zoom_above_max_raises():
    index = GeoJSONVT(collection(point_feature(0.0, 0.0)), Options(max_zoom=4))
    with pytest.raises(ValueError):
        index.get_tile(5, 0, 0)


def test_missing_tile_is_empty_and_stats_are_kept():
    index = GeoJSONVT(collection(point_feature(0.0, 0.0)))
    assert index.total == 1
    assert index.stats == {0: 1}

    empty = index.get_tile(11, 800, 400)
    assert empty == Tile()
    assert empty.features["features"] == []
    assert index.get_tile(11, 800, 400) == Tile()

    fresh = GeoJSONVT(collection(point_feature(0.0, 0.0)))
    fresh.get_tile(1, 1, 1)
    assert fresh.total == 5
    assert fresh.stats == {0: 1, 1: 4}
    assert len(fresh.internal_tiles) == 5


def test_tile_x_wraps_around():
    index = GeoJSONVT(collection(point_feature(90.0, 45.0)))
    assert index.get_tile(1, 3, 0) == index.get_tile(1, 1, 0)
    assert index.get_tile(1, 1, 0).features["features"]


def test_generate_ids_override_existing():
    fc = collection(point_feature(10.0, 10.0, feature_id="x"), point_feature(20.0, 20.0, feature_id="y"))
    index = GeoJSONVT(fc, Options(generate_id=True))
    ids = [f["id"] for f in index.get_tile(0, 0, 0).features["features"]]
    assert ids == [0, 1]

    plain = GeoJSONVT(fc)
    assert [f["id"] for f in plain.get_tile(0, 0, 0).features["features"]] == ["x", "y"]


def test_antimeridian_triangle_reaches_all_quadrants():
    triangle = {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[160.0, -20.0], [200.0, -20.0], [180.0, 20.0], [160.0, -20.0]]],
        },
        "properties": {},
    }
    index = GeoJSONVT.from_geojson(triangle)
    for x, y in [(0, 0), (0, 1), (1, 0), (1, 1)]:
        tile = index.get_tile(1, x, y)
        assert tile.num_points == tile.num_simplified
        assert len(tile.features["features"]) == 1, (x, y)


TILE_PATH = [
    (0, 0, 0), (1, 0, 0), (2, 0, 1), (3, 1, 3), (4, 2, 6), (5, 5, 12), (6, 10, 24),
    (7, 20, 49), (8, 40, 98), (9, 81, 197), (10, 163, 395), (11, 327, 791),
    (12, 655, 1583), (13, 1310, 3166), (14, 2620, 6332), (15, 5241, 12664),
    (16, 10482, 25329), (17, 20964, 50660), (18, 41929, 101320),
    (19, 83859, 202640), (20, 167719, 405281),
]


def test_projection_round_trips_through_every_zoom():
    line = {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": [
                [-122.41822421550751, 37.77852514599172],
                [-122.41707086563109, 37.780424620898664],
            ],
        },
        "properties": {},
    }
    index = GeoJSONVT.from_geojson(
        line, Options(max_zoom=20, tile=TileOptions(extent=8192, tolerance=0.0))
    )

    for z, x, y in TILE_PATH:
        tile = index.get_tile(z, x, y)
        assert tile.num_points == tile.num_simplified
        assert len(tile.features["features"]) == 1
        geometry = tile.features["features"][0]["geometry"]
        assert geometry["type"] == "LineString"
        points = geometry["coordinates"]
        assert len(points) == 2

        total = (1 << z) * 8192.0

        def lon(point):
            return (8192.0 * x + point[0]) * 360.0 / total - 180.0

        def lat(point):
            y2 = 180.0 - (8192.0 * y + point[1]) * 360.0 / total
            return 360.0 / math.pi * math.atan(math.exp(y2 * math.pi / 180.0)) - 90.0

        tolerance = 0.1 / (1.0 + z)
        assert lon(points[0]) == pytest.approx(-122.41822421550751, abs=tolerance)
        assert lat(points[0]) == pytest.approx(37.77852514599172, abs=tolerance)
        assert lon(points[1]) == pytest.approx(-122.41707086563109, abs=tolerance)
        assert lat(points[1]) == pytest.approx(37.780424620898664, abs=tolerance)


def test_clip_vertex_on_tile_border():
    feature = {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": [
                [-77.031373697916663, 38.895516493055553],
                [-77.01416015625, 38.887532552083336],
                [-76.99, 38.87],
            ],
        },
    }
    options = Options(tile=TileOptions(extent=8192, buffer=2048, line_metrics=True))
    index = GeoJSONVT.from_geojson(feature, options)

    tile = index.get_tile(13, 2344, 3134)
    assert tile.features["features"]
    first = tile.features["features"][0]
    assert first["geometry"]["type"] == "LineString"
    assert first["geometry"]["coordinates"] == [[-2048.0, 2747.0], [408.0, 5037.0]]
    assert first["properties"]["mapbox_clip_start"] == pytest.approx(0.660622, abs=1e-5)
    assert first["properties"]["mapbox_clip_end"] == pytest.approx(1.0, abs=1e-5)


def test_geojson_to_tile_without_clipping():
    fc = collection(point_feature(0.0, 0.0, {"name": "origin"}))
    tile = geojson_to_tile(fc, 0, 0, 0)
    assert coordinates(tile) == [2048.0, 2048.0]
    assert tile.features["features"][0]["properties"] == {"name": "origin"}


def test_geojson_to_tile_clips_to_tile():
    fc = collection(point_feature(0.0, 0.0))
    assert coordinates(geojson_to_tile(fc, 1, 1, 1, do_clip=True)) == [0.0, 0.0]
    assert coordinates(geojson_to_tile(fc, 1, 0, 0, do_clip=True)) == [4096.0, 4096.0]

    east = collection(point_feature(90.0, 0.0))
    outside = geojson_to_tile(east, 1, 0, 1, do_clip=True)
    assert outside.features["features"] == []
    assert outside.num_points == 0
    inside = geojson_to_tile(east, 1, 1, 1, do_clip=True)
    assert inside.num_points == 1
    assert coordinates(inside) == [2048.0, 0.0]