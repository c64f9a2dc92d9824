"""
Curve boolean difference against a curve family.

Splits a subject curve into the parts that run along any curve of a second
family (overlap) and the parts that do not (remainder). Used to find where an
outline or convex line is physically crossed by a solid/solid intersection
curve, so that portion can be drawn as concave.

Algorithm:
1. Cull family curves whose bounding box does not coincide with the subject's
   (grown by the tolerance)
2. Intersect subject with each survivor; keep overlap events only
3. Remainder starts as the subject's full length domain; every overlap run
   is subtracted from it (intervals.difference)
4. Overlap runs are merged (intervals.merge)
5. Subject is trimmed to each remainder and each merged overlap interval

The curve protocol is the one documented in core.curves; the intersector is
injected (host Intersection.CurveCurve in Rhino, core.intersect offline).
"""

from .bbox import coincides
from .intervals import Interval, difference, merge
from .safe_api import safe_call


class CurveFamily:
    """Subtractor curves with their bounding boxes computed once per run.

    Example:
        >>> from .curves import line
        >>> fam = CurveFamily([line((0, 0), (1, 0)), None])
        >>> len(fam)
        1
    """

    def __init__(self, curves):
        self.members = []
        for crv in curves or []:
            if crv is None:
                continue
            bb = crv.bounding_box()
            if bb is None:
                continue
            self.members.append((crv, bb))

    def __len__(self):
        return len(self.members)

    def __iter__(self):
        return iter(self.members)


class BooleanDifferenceResult:
    """Outcome of curve_boolean_difference.

    Attributes:
        remainder_intervals, overlap_intervals: Sorted, disjoint Interval lists
        remainder_curves, overlap_curves: Subject trimmed to those intervals
        domain (Interval or None): Examined domain of the subject
    """

    def __init__(self, domain=None, remainder_intervals=None, overlap_intervals=None,
                 remainder_curves=None, overlap_curves=None):
        self.domain = domain
        self.remainder_intervals = list(remainder_intervals or [])
        self.overlap_intervals = list(overlap_intervals or [])
        self.remainder_curves = list(remainder_curves or [])
        self.overlap_curves = list(overlap_curves or [])

    @property
    def has_overlap(self):
        return bool(self.overlap_intervals)

    @property
    def is_empty(self):
        return not self.remainder_curves and not self.overlap_curves

    def __repr__(self):
        return "BooleanDifferenceResult(remainder={}, overlap={})".format(
            self.remainder_intervals, self.overlap_intervals
        )


class DifferenceStats(object):
    """Counters across many subjects (reported in the run summary)."""

    def __init__(self):
        self.subjects = 0
        self.pairs_culled = 0
        self.pairs_tested = 0
        self.overlap_events = 0
        self.query_failures = 0

    def to_dict(self):
        return {
            "subjects": self.subjects,
            "pairs_culled": self.pairs_culled,
            "pairs_tested": self.pairs_tested,
            "overlap_events": self.overlap_events,
            "query_failures": self.query_failures,
        }


def length_domain(curve):
    """Parameter interval from arc length 0 to the full curve length."""
    length = curve.length()
    return Interval(curve.length_parameter(0.0), curve.length_parameter(length))


def curve_boolean_difference(subject, family, tol, intersector, diag=None, stats=None,
                             segment_index=None):
    """Split `subject` against every curve in `family`.

    Args:
        subject: Curve to split
        family: CurveFamily (or iterable of curves)
        tol: Intersection tolerance
        intersector: fn(curve_a, curve_b, tol) -> iterable of events with
            .is_overlap and .overlap_a (Interval on curve_a)
        diag: Diagnostics for per-pair query failures (optional)
        stats: DifferenceStats to update (optional)
        segment_index: Diagnostics context

    Returns:
        BooleanDifferenceResult. A zero-length or missing subject gives an
        empty result. With no overlaps the remainder is [subject] unchanged.

    Example:
        >>> from .curves import line
        >>> from .intersect import curve_curve
        >>> r = curve_boolean_difference(line((0, 0), (10, 0)),
        ...                              [line((3, 0), (6, 0))], 0.001, curve_curve)
        >>> r.remainder_intervals
        [Interval(t0=0.0, t1=3.0), Interval(t0=6.0, t1=10.0)]
    """
    if not isinstance(family, CurveFamily):
        family = CurveFamily(family)
    if stats is not None:
        stats.subjects += 1

    if subject is None or subject.length() <= 0.0:
        return BooleanDifferenceResult()

    bb_subject = subject.bounding_box()
    if bb_subject is not None:
        # Parallel runs within tol can sit just outside the exact box
        bb_subject = bb_subject.inflate(tol)
    domain = length_domain(subject)

    remaining = [domain]
    overlaps = []

    for other, bb_other in family:
        if bb_subject is None or not coincides(bb_subject, bb_other):
            if stats is not None:
                stats.pairs_culled += 1
            continue

        if stats is not None:
            stats.pairs_tested += 1

        failed = []

        def _query(a=subject, b=other):
            return list(intersector(a, b, tol))

        events = safe_call(
            diag,
            phase="boolean_difference",
            callsite="curve_curve",
            fn=_query,
            default=failed,
            context={"segment_index": segment_index},
        )
        if events is failed and stats is not None:
            stats.query_failures += 1

        for ev in events:
            if not getattr(ev, "is_overlap", False):
                continue
            run = _clip(ev.overlap_a, domain)
            if run is None:
                continue
            if stats is not None:
                stats.overlap_events += 1
            overlaps.append(run)
            remaining = difference(remaining, run)

    if not overlaps:
        return BooleanDifferenceResult(
            domain=domain,
            remainder_intervals=[domain],
            remainder_curves=[subject],
        )

    merged = merge(overlaps)
    remaining = sorted(remaining, key=lambda iv: iv.min)

    return BooleanDifferenceResult(
        domain=domain,
        remainder_intervals=remaining,
        overlap_intervals=merged,
        remainder_curves=_trim_all(subject, remaining),
        overlap_curves=_trim_all(subject, merged),
    )


def _clip(interval, domain):
    iv = interval.increasing()
    lo = max(iv.min, domain.min)
    hi = min(iv.max, domain.max)
    if hi <= lo:
        return None
    return Interval(lo, hi)


def _trim_all(curve, intervals):
    out = []
    for iv in intervals:
        piece = curve.trim(iv)
        if piece is not None:
            out.append(piece)
    return out
