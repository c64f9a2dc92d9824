"""
Solid/solid intersection service over Intersection.BrepBrep.

Pairs are culled with the bounding-box prefilter before the expensive query.
An object whose Brep or box cannot be read is skipped, as is a failed pair.
Curves are tagged with both parent object ids (user dictionary keys
"parentObj1" / "parentObj2").
"""

from ..core.bbox import BoundingBox, coincides
from ..core.safe_api import safe_call


def _object_bbox(obj_ref):
    bb = obj_ref.Object().Geometry.GetBoundingBox(False)
    return BoundingBox(bb.Min.X, bb.Min.Y, bb.Min.Z, bb.Max.X, bb.Max.Y, bb.Max.Z)


def brep_pair_curves(brep_a, brep_b, tol):
    """Intersection curves of two Breps ([] when Rhino reports failure)."""
    from Rhino.Geometry.Intersect import Intersection

    result = Intersection.BrepBrep(brep_a, brep_b, tol)
    # pythonnet returns (success, curves, points)
    success, curves = result[0], result[1]
    if not success or curves is None:
        return []
    return [c for c in curves if c is not None]


def _prepare(obj_ref, diag):
    """(ref, brep, box) for one input object, or None when it cannot be read."""

    def _read():
        brep = obj_ref.Brep()
        if brep is None:
            return None
        return (obj_ref, brep, _object_bbox(obj_ref))

    return safe_call(
        diag,
        phase="intersections",
        callsite="object_bbox",
        fn=_read,
        default=None,
        context={"source_id": str(getattr(obj_ref, "ObjectId", None))},
    )


def make_intersection_service(diag=None, pair_fn=brep_pair_curves):
    """fn(object_refs, tolerance) -> list of 3D intersection curves."""

    def _intersect(object_refs, tol):
        prepared = [_prepare(r, diag) for r in object_refs if r is not None]
        prepared = [p for p in prepared if p is not None]

        out = []
        for i in range(len(prepared)):
            ref_a, brep_a, box_a = prepared[i]
            for j in range(i + 1, len(prepared)):
                ref_b, brep_b, box_b = prepared[j]
                if not coincides(box_a, box_b):
                    continue

                curves = safe_call(
                    diag,
                    phase="intersections",
                    callsite="brep_brep",
                    fn=lambda a=brep_a, b=brep_b: pair_fn(a, b, tol),
                    default=[],
                    context={"source_id": str(ref_a.ObjectId), "other_id": str(ref_b.ObjectId)},
                )
                for crv in curves:
                    crv.UserDictionary.Set("parentObj1", ref_a.ObjectId)
                    crv.UserDictionary.Set("parentObj2", ref_b.ObjectId)
                    out.append(crv)
        return out

    return _intersect
