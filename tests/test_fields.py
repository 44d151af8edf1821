"""
Example fields and the NaN-safe evaluator adapter.
"""

import math

import numpy as np
import pytest

from isoplot.fields import CircleField, HalfPlaneField, UnionField, nan_safe


def test_nan_safe_passes_values_through():
    fn = nan_safe(lambda p: p[0] * 2.0)
    assert fn([1.5, 0.0]) == 3.0


@pytest.mark.parametrize("raw", [
    lambda p: 1.0 / p[0],
    lambda p: math.log(p[0]),
    lambda p: math.sqrt(p[0] - 1.0),
    lambda p: math.exp(1e6),
    lambda p: None,
])
def test_nan_safe_turns_failures_into_nan(raw):
    assert math.isnan(nan_safe(raw)([0.0, 0.0]))


def test_nan_safe_turns_infinities_into_nan():
    assert math.isnan(nan_safe(lambda p: math.inf)([0.0, 0.0]))
    assert math.isnan(nan_safe(lambda p: -math.inf)([0.0, 0.0]))


def test_nan_safe_does_not_hide_other_errors():
    def broken(p):
        raise KeyError("x")
    with pytest.raises(KeyError):
        nan_safe(broken)([0.0, 0.0])


def test_circle_field():
    c = CircleField(center=(1.0, 2.0), radius=2.0)
    assert c([1.0, 2.0]) == pytest.approx(-4.0)
    assert c([3.0, 2.0]) == pytest.approx(0.0)
    poly = c.polyline(num=50)
    assert poly.shape == (50, 2)
    np.testing.assert_allclose(np.hypot(poly[:, 0] - 1.0, poly[:, 1] - 2.0), 2.0)


def test_half_plane_is_signed_distance():
    h = HalfPlaneField(normal=(0.0, 2.0), offset=2.0)
    assert h([5.0, 1.0]) == pytest.approx(0.0)
    assert h([0.0, 3.0]) == pytest.approx(2.0)
    assert h([0.0, -1.0]) == pytest.approx(-2.0)


def test_union_is_pointwise_minimum():
    u = UnionField((CircleField((0.0, 0.0), 1.0), CircleField((3.0, 0.0), 1.0)))
    assert u([0.0, 0.0]) == pytest.approx(-1.0)
    assert u([3.0, 0.0]) == pytest.approx(-1.0)
    assert u([1.5, 0.0]) == pytest.approx(1.25)


def test_union_propagates_nan():
    u = UnionField((lambda p: math.nan, lambda p: -1.0))
    assert math.isnan(u([0.0, 0.0]))
