import os

# must be set before isoplot.viz.plot2d is imported
os.environ.setdefault("ISOPLOT_MPL_BACKEND", "Agg")

import math

import pytest

from isoplot.fields import CircleField


class CountingField:
    """Wraps a field and counts evaluations."""

    def __init__(self, fn):
        self.fn = fn
        self.calls = 0

    def __call__(self, p):
        self.calls += 1
        return self.fn(p)


@pytest.fixture
def unit_circle():
    return CircleField(center=(0.0, 0.0), radius=1.0)


@pytest.fixture
def diagonal_line():
    return lambda p: p[1] - p[0]


@pytest.fixture
def counting():
    return CountingField


@pytest.fixture
def log_x():
    def fn(p):
        if p[0] <= 0.0:
            return math.nan
        return math.log(p[0])
    return fn
