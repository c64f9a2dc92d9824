"""
Host-free parametric curves.

PolylineCurve is the offline stand-in for a host curve (Rhino.Geometry.Curve).
It implements the small curve protocol the engine relies on:

    domain                -> Interval
    length()              -> float
    length_parameter(s)   -> parameter at arc length s from the start
    point_at(t)           -> (x, y, z)
    point_at_start / point_at_end
    bounding_box()        -> BoundingBox
    trim(interval)        -> curve or None (degenerate)
    translate(dx, dy, dz) -> curve

Parameters are arc length offset by the start of the domain, so a curve
trimmed to [3, 6] keeps parameters 3..6 (same as a trimmed host curve).
"""

import math

from .bbox import BoundingBox, _xyz
from .intervals import Interval


def _sub(a, b):
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _add(a, b):
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _scale(a, s):
    return (a[0] * s, a[1] * s, a[2] * s)


def _dot(a, b):
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def _dist(a, b):
    d = _sub(a, b)
    return math.sqrt(_dot(d, d))


def _lerp(a, b, s):
    return (a[0] + (b[0] - a[0]) * s, a[1] + (b[1] - a[1]) * s, a[2] + (b[2] - a[2]) * s)


class PolylineCurve:
    """Open polyline parameterised by arc length.

    Attributes:
        points: List of (x, y, z) vertices
        t_start: Parameter value at the first vertex

    Example:
        >>> c = PolylineCurve([(0, 0), (10, 0)])
        >>> c.domain
        Interval(t0=0.0, t1=10.0)
        >>> c.trim(Interval(3, 6)).point_at_start
        (3.0, 0.0, 0.0)
    """

    def __init__(self, points, t_start=0.0):
        self.points = [_xyz(p) for p in points]
        if len(self.points) < 2:
            raise ValueError("PolylineCurve needs at least two points")
        self.t_start = float(t_start)

        # Cumulative arc length at each vertex
        self._cum = [0.0]
        for a, b in zip(self.points, self.points[1:]):
            self._cum.append(self._cum[-1] + _dist(a, b))

    # ------------------------------------------------------------------
    # Curve protocol
    # ------------------------------------------------------------------

    @property
    def domain(self):
        return Interval(self.t_start, self.t_start + self._cum[-1])

    def length(self):
        return self._cum[-1]

    def length_parameter(self, s):
        """Parameter at arc length s (clamped to the curve)."""
        s = max(0.0, min(float(s), self.length()))
        return self.t_start + s

    def point_at(self, t):
        s = max(0.0, min(float(t) - self.t_start, self.length()))
        i = self._span_index(s)
        a, b = self.points[i], self.points[i + 1]
        span = self._cum[i + 1] - self._cum[i]
        if span <= 0.0:
            return a
        return _lerp(a, b, (s - self._cum[i]) / span)

    @property
    def point_at_start(self):
        return self.points[0]

    @property
    def point_at_end(self):
        return self.points[-1]

    def point_at_length(self, s):
        return self.point_at(self.length_parameter(s))

    def bounding_box(self):
        return BoundingBox.from_points(self.points)

    def trim(self, interval):
        """Return the sub-curve over `interval`, or None if it has no length."""
        iv = interval.increasing()
        lo = max(iv.min, self.domain.min)
        hi = min(iv.max, self.domain.max)
        if hi <= lo:
            return None

        s0 = lo - self.t_start
        s1 = hi - self.t_start
        pts = [self.point_at(lo)]
        for p, s in zip(self.points, self._cum):
            if s0 < s < s1:
                pts.append(p)
        pts.append(self.point_at(hi))
        return PolylineCurve(pts, t_start=lo)

    def translate(self, dx, dy, dz=0.0):
        v = (float(dx), float(dy), float(dz))
        return PolylineCurve([_add(p, v) for p in self.points], t_start=self.t_start)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def spans(self):
        """Yield (start_point, end_point, t0, t1) for each linear span."""
        for i in range(len(self.points) - 1):
            yield (
                self.points[i],
                self.points[i + 1],
                self.t_start + self._cum[i],
                self.t_start + self._cum[i + 1],
            )

    def _span_index(self, s):
        last = len(self.points) - 2
        for i in range(last + 1):
            if s <= self._cum[i + 1]:
                return i
        return last

    def __repr__(self):
        return "PolylineCurve({} pts, domain=[{:.3f}, {:.3f}])".format(
            len(self.points), self.domain.t0, self.domain.t1
        )


def line(a, b):
    """Straight PolylineCurve from a to b."""
    return PolylineCurve([a, b])


def midpoint(curve):
    """Point halfway along the curve by arc length."""
    return curve.point_at(curve.length_parameter(0.5 * curve.length()))
