"""Wrapping of features that cross the antimeridian."""

from __future__ import annotations

import copy

from .clip import clip
from .types import VtFeature, for_each_point


def shift_coords(features: list[VtFeature], offset: float) -> None:
    """Move every feature horizontally by ``offset``, in place."""
    for feature in features:
        for point in for_each_point(feature.geometry):
            point.x += offset
        feature.bbox.min.x += offset
        feature.bbox.max.x += offset


def wrap(features: list[VtFeature], buffer: float, line_metrics: bool) -> list[VtFeature]:
    """Fold parts lying beyond the world's left and right edges back into it."""
    left = clip(features, 0, -1.0 - buffer, buffer, -1.0, 2.0, line_metrics)
    right = clip(features, 0, 1.0 - buffer, 2.0 + buffer, -1.0, 2.0, line_metrics)

    if not left and not right:
        return copy.deepcopy(features)

    merged = clip(features, 0, -buffer, 1.0 + buffer, -1.0, 2.0, line_metrics)

    if left:
        shift_coords(left, 1.0)
        merged = left + merged
    if right:
        shift_coords(right, -1.0)
        merged.extend(right)
    return merged