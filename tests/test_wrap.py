import pytest

from geovtiles.types import VtFeature, VtMultiPoint, VtPoint
from geovtiles.wrap import shift_coords, wrap


def _feature(*xs, props=None):
    feature = VtFeature.create(VtMultiPoint(VtPoint(x, 0.5) for x in xs), props or {}, None)
    assert feature is not None
    return feature


def test_shift_coords_moves_points_and_bbox():
    feature = _feature(0.25, 0.5)
    shift_coords([feature], 1.0)
    assert [p.x for p in feature.geometry] == [1.25, 1.5]
    assert feature.bbox.min.x == 1.25
    assert feature.bbox.max.x == 1.5


def test_shift_coords_round_trip():
    feature = _feature(0.25, 0.75)
    shift_coords([feature], -1.0)
    shift_coords([feature], 1.0)
    assert [p.x for p in feature.geometry] == [0.25, 0.75]
    assert (feature.bbox.min.x, feature.bbox.max.x) == (0.25, 0.75)


def test_wrap_without_crossing_returns_copy():
    features = [_feature(0.3, 0.7)]
    result = wrap(features, 0.1, False)
    assert result == features
    assert result[0] is not features[0]


def test_wrap_folds_right_overflow():
    features = [_feature(0.5, 1.05, props={"k": "v"})]
    result = wrap(features, 0.1, False)
    assert len(result) == 2
    assert [p.x for p in result[0].geometry] == [0.5, 1.05]
    assert len(result[1].geometry) == 1
    assert result[1].geometry[0].x == pytest.approx(1.05 - 1.0)
    assert result[1].properties == {"k": "v"}
    # input untouched
    assert [p.x for p in features[0].geometry] == [0.5, 1.05]


def test_wrap_folds_left_overflow_first():
    features = [_feature(-0.05, 0.5)]
    result = wrap(features, 0.1, False)
    assert len(result) == 2
    assert len(result[0].geometry) == 1
    assert result[0].geometry[0].x == pytest.approx(-0.05 + 1.0)
    assert result[0].bbox.min.x == pytest.approx(result[0].geometry[0].x)
    assert [p.x for p in result[1].geometry] == [-0.05, 0.5]


def test_wrap_all_results_within_buffered_world():
    buffer = 0.1
    features = [_feature(-0.05, 0.5, 1.05)]
    result = wrap(features, buffer, False)
    for feature in result:
        for point in feature.geometry:
            assert -buffer <= point.x <= 1.0 + buffer