"""
Bounding-box prefilter.

Cheap axis-aligned overlap test used to cull curve or solid pairs before any
expensive intersection query. The test may pass pairs that do not actually
touch (the next stage re-checks); it must never reject a pair that does.
"""


class BoundingBox:
    """3D axis-aligned bounding box.

    Attributes:
        xmin, ymin, zmin, xmax, ymax, zmax: Box coordinates

    Example:
        >>> b = BoundingBox(0.0, 0.0, 0.0, 10.0, 5.0, 0.0)
        >>> b.inflate(1.0).min
        (-1.0, -1.0, -1.0)
    """

    def __init__(self, xmin, ymin, zmin, xmax, ymax, zmax):
        self.xmin = float(xmin)
        self.ymin = float(ymin)
        self.zmin = float(zmin)
        self.xmax = float(xmax)
        self.ymax = float(ymax)
        self.zmax = float(zmax)

    @classmethod
    def from_points(cls, points):
        """Box around an iterable of (x, y[, z]) points. Returns None when empty."""
        pts = [_xyz(p) for p in points]
        if not pts:
            return None
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        zs = [p[2] for p in pts]
        return cls(min(xs), min(ys), min(zs), max(xs), max(ys), max(zs))

    @property
    def min(self):
        return (self.xmin, self.ymin, self.zmin)

    @property
    def max(self):
        return (self.xmax, self.ymax, self.zmax)

    def union(self, other):
        """Return the smallest box containing both boxes (None is ignored)."""
        if other is None:
            return self
        return BoundingBox(
            min(self.xmin, other.xmin),
            min(self.ymin, other.ymin),
            min(self.zmin, other.zmin),
            max(self.xmax, other.xmax),
            max(self.ymax, other.ymax),
            max(self.zmax, other.zmax),
        )

    def inflate(self, margin):
        """Return new box grown by margin on all sides."""
        m = float(margin)
        return BoundingBox(
            self.xmin - m, self.ymin - m, self.zmin - m,
            self.xmax + m, self.ymax + m, self.zmax + m,
        )

    def __eq__(self, other):
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.min == other.min and self.max == other.max

    def __repr__(self):
        return "BoundingBox(({:.3f}, {:.3f}, {:.3f}), ({:.3f}, {:.3f}, {:.3f}))".format(
            self.xmin, self.ymin, self.zmin, self.xmax, self.ymax, self.zmax
        )


def _xyz(p):
    """Accept Rhino Point3d-like or tuple/list; return (x, y, z) floats."""
    try:
        return (float(p.X), float(p.Y), float(p.Z))
    except AttributeError:
        if len(p) == 2:
            return (float(p[0]), float(p[1]), 0.0)
        return (float(p[0]), float(p[1]), float(p[2]))


def coincides(a, b):
    """True iff the boxes overlap on all three axes (inclusive bounds).

    Example:
        >>> a = BoundingBox(0, 0, 0, 1, 1, 0)
        >>> coincides(a, BoundingBox(1, 1, 0, 2, 2, 0))
        True
        >>> coincides(a, BoundingBox(1.5, 0, 0, 2, 1, 0))
        False
    """
    return (
        a.xmin <= b.xmax
        and a.xmax >= b.xmin
        and a.ymin <= b.ymax
        and a.ymax >= b.ymin
        and a.zmin <= b.zmax
        and a.zmax >= b.zmin
    )


def union_all(boxes):
    """Union of an iterable of boxes, skipping None. Returns None when empty."""
    out = None
    for b in boxes:
        if b is None:
            continue
        out = b if out is None else out.union(b)
    return out
