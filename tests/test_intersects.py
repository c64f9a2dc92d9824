# tests/test_intersects.py
#
# Host-free: the object refs below stand in for Rhino ObjRef; no RhinoCommon import.

from autolineweight.core.diagnostics import Diagnostics
from autolineweight.rhino.intersects import make_intersection_service


class _Pt:
    def __init__(self, x, y, z):
        self.X, self.Y, self.Z = x, y, z


class _BBox:
    def __init__(self, lo, hi):
        self.Min = _Pt(*lo)
        self.Max = _Pt(*hi)


class _Geometry:
    def __init__(self, lo, hi):
        self._bb = _BBox(lo, hi)

    def GetBoundingBox(self, accurate):
        return self._bb


class _Object:
    def __init__(self, geometry):
        self.Geometry = geometry


class FakeRef:
    def __init__(self, object_id, lo, hi, fail=False):
        self.ObjectId = object_id
        self._geometry = _Geometry(lo, hi)
        self._fail = fail

    def Brep(self):
        if self._fail:
            raise RuntimeError("unreadable object")
        return "brep-" + self.ObjectId

    def Object(self):
        return _Object(self._geometry)


class _UserDict:
    def __init__(self):
        self.values = {}

    def Set(self, key, value):
        self.values[key] = value


class FakeCurve:
    def __init__(self, label):
        self.label = label
        self.UserDictionary = _UserDict()


def _pair_fn(brep_a, brep_b, tol):
    return [FakeCurve(brep_a + "|" + brep_b)]


def test_unreadable_object_is_skipped_and_recorded():
    diag = Diagnostics(max_events=10)
    refs = [
        FakeRef("a", (0, 0, 0), (2, 2, 2)),
        FakeRef("bad", (0, 0, 0), (2, 2, 2), fail=True),
        FakeRef("b", (1, 1, 1), (3, 3, 3)),
    ]

    curves = make_intersection_service(diag=diag, pair_fn=_pair_fn)(refs, 0.001)

    assert [c.label for c in curves] == ["brep-a|brep-b"]
    assert curves[0].UserDictionary.values == {"parentObj1": "a", "parentObj2": "b"}

    d = diag.to_dict()
    assert d["num_events"] == 1
    ev = d["events"][0]
    assert ev["callsite"] == "object_bbox"
    assert ev["source_id"] == "bad"
    assert ev["exc_type"] == "RuntimeError"


def test_object_without_brep_is_skipped():
    class NoBrepRef(FakeRef):
        def Brep(self):
            return None

    refs = [
        FakeRef("a", (0, 0, 0), (2, 2, 2)),
        NoBrepRef("empty", (0, 0, 0), (2, 2, 2)),
        FakeRef("b", (1, 1, 1), (3, 3, 3)),
    ]

    curves = make_intersection_service(pair_fn=_pair_fn)(refs, 0.001)

    assert [c.label for c in curves] == ["brep-a|brep-b"]


def test_disjoint_boxes_are_not_queried():
    calls = []

    def pair_fn(a, b, tol):
        calls.append((a, b))
        return []

    refs = [
        FakeRef("a", (0, 0, 0), (1, 1, 1)),
        FakeRef("far", (10, 10, 10), (11, 11, 11)),
    ]

    assert make_intersection_service(pair_fn=pair_fn)(refs, 0.001) == []
    assert calls == []


def test_failed_pair_is_skipped():
    diag = Diagnostics(max_events=10)

    def pair_fn(a, b, tol):
        if "brep-c" in (a, b):
            raise RuntimeError("BrepBrep failed")
        return [FakeCurve(a + "|" + b)]

    refs = [
        FakeRef("a", (0, 0, 0), (2, 2, 2)),
        FakeRef("b", (1, 1, 1), (3, 3, 3)),
        FakeRef("c", (1, 1, 1), (3, 3, 3)),
    ]

    curves = make_intersection_service(diag=diag, pair_fn=pair_fn)(refs, 0.001)

    assert [c.label for c in curves] == ["brep-a|brep-b"]
    assert diag.to_dict()["num_events"] == 2
