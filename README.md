# geovtiles

Slice GeoJSON data into vector tiles, on the fly.

`geovtiles` takes GeoJSON as plain Python dictionaries, such as those that
`json.load` returns. The input can be a geometry, a feature or a feature collection.
The package projects the data to Web Mercator and ranks its points for
Douglas–Peucker simplification. Then it cuts the data into a pyramid of tiles. Each
tile holds GeoJSON features in integer tile coordinates (`0..extent`), plus a buffer
around the edges. Geometry that crosses the antimeridian is wrapped into the world.

## Installation

```
pip install geovtiles
```

The package needs only the standard library.

## Building a tile index

```python
import json

from geovtiles.index import GeoJSONVT, Options, TileOptions

with open("us-states.json") as fh:
    data = json.load(fh)

index = GeoJSONVT.from_geojson(
    data,
    Options(max_zoom=14, index_max_zoom=5, tile=TileOptions(extent=4096, buffer=64)),
)

tile = index.get_tile(7, 37, 48)
for feature in tile.features["features"]:
    print(feature["geometry"]["type"], feature["properties"])

print(tile.num_points, tile.num_simplified)
```

`GeoJSONVT(collection, options)` takes a FeatureCollection. `GeoJSONVT.from_geojson`
also takes a single feature or a bare geometry.

When the index is created, it splits the data down to `index_max_zoom`. It stops
early at any tile that holds no more than `index_max_points` points. `get_tile(z, x, y)`
builds deeper tiles on demand, up to `max_zoom`, by drilling down from the nearest
ancestor that still holds source geometry. The `x` coordinate wraps around at the
world edge. If a tile has no data, you get an empty `Tile` with no features. A zoom
above `max_zoom` raises `ValueError`.

A returned `Tile` has these fields:

- `features`: a GeoJSON `FeatureCollection` dictionary. Each feature has
  `geometry` and `properties`. `properties` is `None` when the source had none. The
  feature has an `id` only when the source feature had one or ids were generated.
- `num_points`: the number of projected points in the tile's source features.
- `num_simplified`: the number of points that were written into the tile.

These properties of the index report its state:

- `index.total`: the number of tiles built so far.
- `index.stats`: a dictionary that maps each zoom level to its tile count.
- `index.internal_tiles`: the built `InternalTile` objects, keyed by `to_id(z, x, y)`.

## Options

`Options`:

| field              | default         | meaning                                                   |
|--------------------|-----------------|-----------------------------------------------------------|
| `max_zoom`         | 18              | deepest zoom; tiles at this zoom are not simplified        |
| `index_max_zoom`   | 5               | deepest zoom built when the index is created               |
| `index_max_points` | 100000          | stop the initial split at tiles with at most this many points |
| `generate_id`      | False           | number features 0, 1, 2, … replacing their ids             |
| `tile`             | `TileOptions()` | per-tile settings                                          |

`TileOptions`:

| field          | default | meaning                                                        |
|----------------|---------|----------------------------------------------------------------|
| `tolerance`    | 3.0     | simplification tolerance in tile units (higher is simpler)     |
| `extent`       | 4096    | tile extent                                                    |
| `buffer`       | 64      | buffer on each side of the tile, in tile units                 |
| `line_metrics` | False   | record where clipped lines start and end along the source line |

With `line_metrics` enabled, each LineString feature gets two properties,
`mapbox_clip_start` and `mapbox_clip_end`. They give the fraction of the original
line at which the clipped piece starts and ends.

## A single tile without an index

To build only one tile, `geojson_to_tile` works straight from the input:

```python
from geovtiles.index import TileOptions, geojson_to_tile

tile = geojson_to_tile(data, 12, 1171, 1566, TileOptions(), do_wrap=False, do_clip=True)
```

`do_wrap` wraps geometry across the antimeridian first. `do_clip` clips the data to
the tile and its buffer. Clipping also happens whenever `line_metrics` is on.

## Errors

- GeoJSON whose `type` is not a geometry, `Feature` or `FeatureCollection` raises `ValueError`.
- A feature without a geometry raises `ValueError`.
- A geometry of unknown type, or one without `coordinates`, raises `ValueError`.
- Features whose geometry has no points are dropped.

## Lower-level building blocks

You can also use the modules below the index on their own:

- `geovtiles.types`: the projected geometry types (`VtPoint`, `VtLineString`,
  `VtLinearRing`, `VtPolygon`, …) and `VtFeature`.
- `geovtiles.convert`: `convert` and `Projector`, which project GeoJSON to the unit square.
- `geovtiles.simplify`: `simplify_wrapper`, `simplify` and `get_sq_seg_dist`, which rank points for Douglas–Peucker simplification.
- `geovtiles.clip`: `clip` and `Clipper`, which clip between two axis-parallel lines.
- `geovtiles.wrap`: `wrap` and `shift_coords`, which handle the antimeridian.
- `geovtiles.tile`: `InternalTile` and `Tile`, which turn projected features into tile coordinates.

## What it does not do

Tiles come out as GeoJSON dictionaries in tile coordinates. The package does not
encode them as binary (protobuf) vector tiles. It has no command-line tool and no
tile server, and it does not read or write files itself.