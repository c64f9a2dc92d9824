"""
Interval arithmetic over curve parameters.

Pure operations on closed 1D intervals. No geometry imports.

Conventions:
- An interval is [t0, t1]; it may be stored decreasing and is normalised
  (made increasing) before any comparison.
- difference() treats the removal interval as open at its ends: an interval
  that only touches it (interval.min == remove.max or interval.max ==
  remove.min) is kept whole. Removing the same interval twice is a no-op.
- merge() returns the minimal sorted, disjoint cover of its input.
"""

from collections import namedtuple


class Interval(namedtuple("Interval", ["t0", "t1"])):
    """Closed parameter interval [t0, t1].

    Example:
        >>> Interval(6.0, 3.0).increasing()
        Interval(t0=3.0, t1=6.0)
        >>> Interval(0.0, 10.0).length
        10.0
    """

    __slots__ = ()

    def __new__(cls, t0, t1):
        return super(Interval, cls).__new__(cls, float(t0), float(t1))

    @property
    def min(self):
        return min(self.t0, self.t1)

    @property
    def max(self):
        return max(self.t0, self.t1)

    @property
    def length(self):
        return self.max - self.min

    @property
    def is_increasing(self):
        return self.t0 <= self.t1

    def increasing(self):
        """Return this interval with t0 <= t1."""
        if self.is_increasing:
            return self
        return Interval(self.t1, self.t0)

    def overlaps(self, other):
        """True if the interiors overlap (touching endpoints do not count)."""
        return self.min < other.max and self.max > other.min


def difference(intervals, remove):
    """Subtract `remove` from every interval in `intervals`.

    Args:
        intervals: Iterable of Interval
        remove: Interval to take away

    Returns:
        List of Interval, each increasing. Input order is kept; an interval
        straddling `remove` yields its left fragment then its right fragment.

    Example:
        >>> difference([Interval(0, 10)], Interval(3, 6))
        [Interval(t0=0.0, t1=3.0), Interval(t0=6.0, t1=10.0)]
        >>> difference([Interval(0, 3)], Interval(3, 6))
        [Interval(t0=0.0, t1=3.0)]
    """
    remove = remove.increasing()
    remaining = []
    for interval in intervals:
        interval = interval.increasing()

        if interval.min >= remove.max or interval.max <= remove.min:
            remaining.append(interval)
            continue

        if interval.min < remove.min:
            remaining.append(Interval(interval.min, min(remove.min, interval.max)))

        if interval.max > remove.max:
            remaining.append(Interval(max(remove.max, interval.min), interval.max))

    return remaining


def merge(intervals):
    """Coalesce overlapping or touching intervals.

    Returns a new sorted list; the input is not modified.

    Example:
        >>> merge([Interval(4, 7), Interval(2, 5)])
        [Interval(t0=2.0, t1=7.0)]
    """
    ordered = sorted((iv.increasing() for iv in intervals), key=lambda iv: iv.min)
    if len(ordered) <= 1:
        return ordered

    merged = [ordered[0]]
    for current in ordered[1:]:
        previous = merged[-1]
        if current.min <= previous.max:
            merged[-1] = Interval(previous.min, max(previous.max, current.max))
        else:
            merged.append(current)

    return merged


def total_length(intervals):
    """Sum of interval lengths (callers pass disjoint lists)."""
    return sum(iv.length for iv in intervals)
