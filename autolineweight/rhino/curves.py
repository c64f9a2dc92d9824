"""
RhinoCurve: the engine's curve protocol over Rhino.Geometry.Curve.

Parameters are the host curve's own parameters (not arc length); the engine
only needs length_parameter() to find the domain ends, and the host
intersector reports overlaps in the same parameter space.
"""

from ..core.bbox import BoundingBox
from ..core.intersect import IntersectionEvent
from ..core.intervals import Interval


def _out_value(result):
    """RhinoCommon `out` parameters come back as (bool, value) tuples."""
    if isinstance(result, tuple):
        ok = bool(result[0])
        return ok, (result[1] if len(result) > 1 else None)
    return bool(result), None


def _xyz(pt):
    return (float(pt.X), float(pt.Y), float(pt.Z))


class RhinoCurve(object):
    """Wraps a Rhino.Geometry.Curve.

    Attributes:
        geometry: The wrapped host curve
    """

    def __init__(self, geometry):
        if geometry is None:
            raise ValueError("geometry is None")
        self.geometry = geometry

    @property
    def domain(self):
        d = self.geometry.Domain
        return Interval(d.T0, d.T1)

    def length(self):
        return float(self.geometry.GetLength())

    def length_parameter(self, s):
        ok, t = _out_value(self.geometry.LengthParameter(float(s)))
        if not ok:
            d = self.domain
            return d.t0 if s <= 0.0 else d.t1
        return float(t)

    def point_at(self, t):
        return _xyz(self.geometry.PointAt(float(t)))

    @property
    def point_at_start(self):
        return _xyz(self.geometry.PointAtStart)

    @property
    def point_at_end(self):
        return _xyz(self.geometry.PointAtEnd)

    def bounding_box(self):
        bb = self.geometry.GetBoundingBox(False)
        if not bb.IsValid:
            return None
        return BoundingBox(bb.Min.X, bb.Min.Y, bb.Min.Z, bb.Max.X, bb.Max.Y, bb.Max.Z)

    def trim(self, interval):
        from Rhino.Geometry import Interval as RhinoInterval

        iv = interval.increasing()
        trimmed = self.geometry.Trim(RhinoInterval(iv.t0, iv.t1))
        if trimmed is None:
            return None
        return RhinoCurve(trimmed)

    def translate(self, dx, dy, dz=0.0):
        from Rhino.Geometry import Vector3d

        dup = self.geometry.DuplicateCurve()
        dup.Translate(Vector3d(float(dx), float(dy), float(dz)))
        return RhinoCurve(dup)

    def __repr__(self):
        return "RhinoCurve({})".format(type(self.geometry).__name__)


def rhino_curve_intersector(curve_a, curve_b, tol):
    """Intersection.CurveCurve as a list of IntersectionEvent."""
    from Rhino.Geometry.Intersect import Intersection

    events = Intersection.CurveCurve(curve_a.geometry, curve_b.geometry, tol, tol)
    out = []
    if events is None:
        return out
    for i in range(events.Count):
        ev = events[i]
        if ev.IsOverlap:
            run_a = Interval(ev.OverlapA.T0, ev.OverlapA.T1)
            run_b = Interval(ev.OverlapB.T0, ev.OverlapB.T1)
            out.append(IntersectionEvent(True, run_a.t0, run_b.t0,
                                         _xyz(ev.PointA), _xyz(ev.PointB), run_a, run_b))
        else:
            out.append(IntersectionEvent(False, ev.ParameterA, ev.ParameterB,
                                         _xyz(ev.PointA), _xyz(ev.PointB)))
    return out
