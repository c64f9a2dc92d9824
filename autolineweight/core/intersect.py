"""
Curve/curve intersection for host-free polylines.

Mirrors the host intersector contract: a list of IntersectionEvent, where an
overlap event describes a coincident run (with parameter intervals on both
curves) and a point event describes a single crossing or touch.
"""

import math

from .curves import _add, _dist, _dot, _scale, _sub
from .intervals import Interval


class IntersectionEvent:
    """One curve/curve intersection result.

    Attributes:
        is_overlap (bool): True for a coincident run, False for a point event
        overlap_a (Interval): Run on curve A (overlap events only)
        overlap_b (Interval): Run on curve B (overlap events only)
        param_a (float): Parameter on A (point events; run start for overlaps)
        param_b (float): Parameter on B
        point_a, point_b: (x, y, z) locations on A and B
    """

    def __init__(self, is_overlap, param_a, param_b, point_a, point_b,
                 overlap_a=None, overlap_b=None):
        self.is_overlap = bool(is_overlap)
        self.param_a = float(param_a)
        self.param_b = float(param_b)
        self.point_a = point_a
        self.point_b = point_b
        self.overlap_a = overlap_a
        self.overlap_b = overlap_b

    @property
    def is_point(self):
        return not self.is_overlap

    def __repr__(self):
        if self.is_overlap:
            return "IntersectionEvent(overlap A={}, B={})".format(self.overlap_a, self.overlap_b)
        return "IntersectionEvent(point tA={:.4f}, tB={:.4f})".format(self.param_a, self.param_b)


def _point_line_distance(p, a, u):
    """Distance from p to the infinite line through a with unit direction u."""
    ap = _sub(p, a)
    along = _dot(ap, u)
    foot = _add(a, _scale(u, along))
    return _dist(p, foot)


def _closest_params(p1, q1, p2, q2):
    """Closest points between segments p1q1 and p2q2.

    Returns (s, t) in [0, 1] on each segment.
    """
    d1 = _sub(q1, p1)
    d2 = _sub(q2, p2)
    r = _sub(p1, p2)
    a = _dot(d1, d1)
    e = _dot(d2, d2)
    f = _dot(d2, r)

    if a <= 1e-24 and e <= 1e-24:
        return 0.0, 0.0
    if a <= 1e-24:
        return 0.0, min(1.0, max(0.0, f / e))

    c = _dot(d1, r)
    if e <= 1e-24:
        return min(1.0, max(0.0, -c / a)), 0.0

    b = _dot(d1, d2)
    denom = a * e - b * b
    s = min(1.0, max(0.0, (b * f - c * e) / denom)) if denom > 1e-24 else 0.0
    t = (b * s + f) / e
    if t < 0.0:
        t = 0.0
        s = min(1.0, max(0.0, -c / a))
    elif t > 1.0:
        t = 1.0
        s = min(1.0, max(0.0, (b - c) / a))
    return s, t


def _span_events(a0, a1, ta0, ta1, b0, b1, tb0, tb1, tol, overlap_tol):
    len_a = _dist(a0, a1)
    len_b = _dist(b0, b1)
    if len_a <= 0.0 or len_b <= 0.0:
        return []

    ua = _scale(_sub(a1, a0), 1.0 / len_a)

    # Coincident run: both ends of B lie on A's carrier line
    if (_point_line_distance(b0, a0, ua) <= tol
            and _point_line_distance(b1, a0, ua) <= tol):
        sb0 = _dot(_sub(b0, a0), ua)
        sb1 = _dot(_sub(b1, a0), ua)
        lo = max(0.0, min(sb0, sb1))
        hi = min(len_a, max(sb0, sb1))
        if hi - lo > overlap_tol:
            # Parameters on B for the run ends
            ub = _scale(_sub(b1, b0), 1.0 / len_b)
            pa_lo = _add(a0, _scale(ua, lo))
            pa_hi = _add(a0, _scale(ua, hi))
            tb_lo = tb0 + _dot(_sub(pa_lo, b0), ub)
            tb_hi = tb0 + _dot(_sub(pa_hi, b0), ub)
            run_a = Interval(ta0 + lo, ta0 + hi)
            run_b = Interval(tb_lo, tb_hi)
            return [IntersectionEvent(True, run_a.t0, tb_lo, pa_lo, pa_lo, run_a, run_b)]

    s, t = _closest_params(a0, a1, b0, b1)
    pa = _add(a0, _scale(_sub(a1, a0), s))
    pb = _add(b0, _scale(_sub(b1, b0), t))
    if _dist(pa, pb) <= tol:
        return [IntersectionEvent(False, ta0 + s * (ta1 - ta0), tb0 + t * (tb1 - tb0), pa, pb)]
    return []


def curve_curve(curve_a, curve_b, tol, overlap_tol=None):
    """Intersect two PolylineCurves.

    Args:
        curve_a, curve_b: PolylineCurve
        tol: Distance tolerance for coincidence
        overlap_tol: Minimum run length reported as an overlap
            (default: tol; shorter runs are reported as point events)

    Returns:
        List of IntersectionEvent, overlap events first then point events,
        each group ordered by parameter on curve_a. Point events that fall
        inside a reported overlap run are dropped.
    """
    tol = float(tol)
    if overlap_tol is None:
        overlap_tol = tol

    overlaps = []
    points = []
    for a0, a1, ta0, ta1 in curve_a.spans():
        for b0, b1, tb0, tb1 in curve_b.spans():
            for ev in _span_events(a0, a1, ta0, ta1, b0, b1, tb0, tb1, tol, overlap_tol):
                (overlaps if ev.is_overlap else points).append(ev)

    overlaps.sort(key=lambda ev: ev.overlap_a.min)

    kept_points = []
    for ev in sorted(points, key=lambda ev: ev.param_a):
        if any(o.overlap_a.min - tol <= ev.param_a <= o.overlap_a.max + tol for o in overlaps):
            continue
        if kept_points and math.isclose(kept_points[-1].param_a, ev.param_a, abs_tol=tol):
            continue
        kept_points.append(ev)

    return overlaps + kept_points
