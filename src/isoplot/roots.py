from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

import numpy as np

from isoplot.geometry import FieldSample, intersect_zero, midpoint
from isoplot.math_utils import is_outside, sign, within_tolerance

if TYPE_CHECKING:
    from isoplot.protocols import ScalarField

BLOWUP_LIMIT: float = 1e200
EDGE_PROBE_OFFSET: float = 0.01
# values this small relative to the larger endpoint are rounding noise
ZERO_RELATIVE_EPS: float = 1e-10


def bisect_zero(p1: FieldSample, p2: FieldSample, fn: ScalarField, tol: Any) -> tuple[FieldSample, bool]:
    """Locate the zero crossing between two samples of opposite sign.

    An endpoint that already sits on the zero level (up to rounding relative
    to the other endpoint) is returned as is. Otherwise halves the segment,
    keeping the half that still straddles the sign of p1, until the endpoints
    are closer than tol on every axis; then interpolates linearly. The second
    element is False when the interpolated sample is not bracketed by the
    endpoint values, blows up, or cannot be computed.
    """
    noise = ZERO_RELATIVE_EPS * max(abs(p1.val), abs(p2.val))
    for end in (p1, p2):
        if abs(end.val) <= noise:
            return end, True

    while not within_tolerance(p2.pos - p1.pos, tol):
        mid = midpoint(p1, p2, fn)
        if np.array_equal(mid.pos, p1.pos) or np.array_equal(mid.pos, p2.pos):
            break
        if mid.val == 0.0:
            return mid, True
        if is_outside(mid.val) == is_outside(p1.val):
            p1 = mid
        else:
            p2 = mid

    if p1.val == p2.val or math.isnan(p1.val) or math.isnan(p2.val):
        return p1, False

    pt = intersect_zero(p1, p2, fn)
    is_zero = abs(pt.val) <= noise or (
        sign(pt.val - p1.val) == sign(p2.val - pt.val)
        and abs(pt.val) < BLOWUP_LIMIT
    )
    return pt, is_zero


def edge_dual(p1: FieldSample, p2: FieldSample, fn: ScalarField) -> FieldSample:
    """Representative point on the edge shared by two adjacent cells.

    Opposite-sign endpoints give the linear zero crossing directly. For
    same-sign endpoints two probes are taken EDGE_PROBE_OFFSET in from each
    end; if they disagree in sign the crossing between them is used,
    otherwise the plain midpoint. Only one pair of sign changes is detected.
    """
    if math.isnan(p1.val) or math.isnan(p2.val):
        return midpoint(p1, p2, fn)

    if is_outside(p1.val) != is_outside(p2.val):
        return intersect_zero(p1, p2, fn)

    dt = EDGE_PROBE_OFFSET
    q1 = FieldSample.at(p1.pos * (1.0 - dt) + p2.pos * dt, fn)
    q2 = FieldSample.at(p1.pos * dt + p2.pos * (1.0 - dt), fn)

    if math.isnan(q1.val) or math.isnan(q2.val) or is_outside(q1.val) == is_outside(q2.val):
        return midpoint(p1, p2, fn)
    return intersect_zero(q1, q2, fn)
