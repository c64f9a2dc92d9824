"""
Projection service over Rhino's HiddenLineDrawing.

make_projector(doc) returns fn(ProjectionRequest) -> list of Segment.

Geometry is tagged with its object id so every segment can be traced back to
its source object; extra curves (solid intersections) are tagged
"alw:extra:<k>" and come back as segments with extra_index = k.
"""

from ..core.model import ParentCurveRecord, Segment, parse_enum, SilhouetteType, Visibility
from .curves import RhinoCurve
from ..core.safe_api import safe_call

EXTRA_TAG_PREFIX = "alw:extra:"


def extra_tag(k):
    return "{}{}".format(EXTRA_TAG_PREFIX, int(k))


def parse_extra_tag(tag):
    """Index k for an "alw:extra:<k>" tag, else None."""
    if not isinstance(tag, str) or not tag.startswith(EXTRA_TAG_PREFIX):
        return None
    try:
        return int(tag[len(EXTRA_TAG_PREFIX):])
    except ValueError:
        return None


def _active_clipping_planes(doc, viewport):
    """Planes of clipping-plane objects that clip `viewport`."""
    from Rhino.DocObjects import ObjectType

    planes = []
    vp_id = getattr(viewport, "Id", None)
    for obj in doc.Objects.FindByObjectType(ObjectType.ClippingPlane) or []:
        cp = obj.ClippingPlaneGeometry
        if cp is None:
            continue
        ids = list(cp.ViewportIds())
        if vp_id is None or vp_id in ids:
            planes.append(cp.Plane)
    return planes


def build_parameters(doc, request, diag=None):
    """HiddenLineDrawingParameters for a ProjectionRequest."""
    from Rhino.Geometry import HiddenLineDrawingParameters, Transform

    params = HiddenLineDrawingParameters()
    params.SetViewport(request.viewport)
    params.IncludeHiddenCurves = request.include_hidden
    params.IncludeTangentEdges = request.include_tangent
    params.Flatten = request.flatten
    params.AbsoluteTolerance = request.tolerance

    if request.include_scene_silhouette:
        if hasattr(params, "IncludeSceneSilhouette"):
            params.IncludeSceneSilhouette = True
        elif diag is not None:
            diag.debug_dedupe(
                "scene_silhouette_unsupported",
                phase="projection",
                callsite="build_parameters",
                message="Host has no scene-silhouette option; continuing without it",
            )

    if request.include_clipping:
        for plane in _active_clipping_planes(doc, request.viewport):
            params.AddClippingPlane(plane)

    xform = request.transform if request.transform is not None else Transform.Identity

    for ref in request.geometry:
        obj = ref.Object() if hasattr(ref, "Object") else doc.Objects.FindId(ref)
        if obj is None:
            continue
        params.AddGeometry(obj.Geometry, xform, obj.Id)

    for k, crv in enumerate(request.extra_curves):
        native = getattr(crv, "geometry", crv)
        params.AddGeometry(native, xform, extra_tag(k))

    return params


def segment_from_host(hld_segment, index):
    """Segment record for one HiddenLineDrawingSegment (None if unusable)."""
    geom = hld_segment.CurveGeometry
    if geom is None:
        return None
    crv = geom.DuplicateCurve()
    if crv is None:
        return None

    visibility = parse_enum(Visibility, str(hld_segment.SegmentVisibility), None)
    if visibility is None:
        # Projecting/Duplicate/Unset segments carry no drawing meaning here
        return None

    parent = None
    extra_index = None
    pc = hld_segment.ParentCurve
    if pc is not None:
        source = pc.SourceObject
        tag = source.Tag if source is not None else None
        extra_index = parse_extra_tag(tag)
        parent = ParentCurveRecord(
            parse_enum(SilhouetteType, str(pc.SilhouetteType), SilhouetteType.NONE),
            source_object_id=None if extra_index is not None else tag,
            component_index=None if extra_index is not None else pc.SourceObjectComponentIndex,
        )

    return Segment(RhinoCurve(crv), visibility, parent=parent, index=index, extra_index=extra_index)


def make_projector(doc, diag=None, multiple_threads=True):
    """fn(ProjectionRequest) -> list of Segment, or None if Rhino computes nothing."""

    def _project(request):
        from Rhino.Geometry import HiddenLineDrawing

        params = build_parameters(doc, request, diag=diag)
        drawing = HiddenLineDrawing.Compute(params, multiple_threads)
        if drawing is None:
            return None

        segments = []
        for i, hld_segment in enumerate(drawing.Segments):
            seg = safe_call(
                diag,
                phase="projection",
                callsite="segment_from_host",
                fn=lambda s=hld_segment, i=i: segment_from_host(s, i),
                default=None,
                context={"segment_index": i},
            )
            if seg is not None:
                segments.append(seg)
        return segments

    return _project
