"""Slice GeoJSON into vector tiles: projection, simplification, clipping and a tile index."""

__version__ = "0.1.1"