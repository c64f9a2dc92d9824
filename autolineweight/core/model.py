"""
Data records shared by the classification pipeline.

Enums mirror the host's hidden-line drawing vocabulary (Rhino
HiddenLineDrawingSegment.Visibility, SilhouetteType, Concavity) so adapters
can map by name. Records are plain classes: they are created by the
projection adapter once per run and never shared across threads.
"""

from enum import Enum


class Visibility(Enum):
    VISIBLE = 1
    HIDDEN = 2


class SilhouetteType(Enum):
    """Why an edge shows up in the projection."""

    NONE = 0
    BOUNDARY = 1
    CREASE = 2
    TANGENT = 3
    TANGENT_PROJECTS = 4
    SECTION_CUT = 5
    # Classified by edge concavity, not as outlines
    PROJECTING = 6
    DRAFT_CURVE = 7

    @property
    def host_name(self):
        return _HOST_SILHOUETTE_NAMES[self]


_HOST_SILHOUETTE_NAMES = {
    SilhouetteType.NONE: "None",
    SilhouetteType.BOUNDARY: "Boundary",
    SilhouetteType.CREASE: "Crease",
    SilhouetteType.TANGENT: "Tangent",
    SilhouetteType.TANGENT_PROJECTS: "TangentProjects",
    SilhouetteType.SECTION_CUT: "SectionCut",
    SilhouetteType.PROJECTING: "Projecting",
    SilhouetteType.DRAFT_CURVE: "DraftCurve",
}


class Concavity(Enum):
    NONE = 0
    CONVEX = 1
    CONCAVE = 2


class WeightClass(Enum):
    """Drawing-importance bucket, heaviest first.

    The declaration order is policy: it fixes the weight gradient and the
    layer order (see core.weights).
    """

    CUT = 1
    OUTLINE = 2
    CONVEX = 3
    CONCAVE = 4
    HIDDEN = 5

    @property
    def label(self):
        return self.name.capitalize()


# Ordinal order of visible classes (HIDDEN has its own layer and weight).
VISIBLE_CLASS_ORDER = (
    WeightClass.CUT,
    WeightClass.OUTLINE,
    WeightClass.CONVEX,
    WeightClass.CONCAVE,
)


def parse_enum(enum_cls, value, default=None):
    """Resolve an enum member from a member, host name, or case-insensitive name.

    Host enums stringify as e.g. "TangentProjects"; ours are TANGENT_PROJECTS.
    Returns default when nothing matches.
    """
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    key = str(value).split(".")[-1].replace("_", "").lower()
    for member in enum_cls:
        if member.name.replace("_", "").lower() == key:
            return member
    return default


class ParentCurveRecord:
    """3D source metadata for a projected segment.

    Attributes:
        silhouette_type (SilhouetteType): Why the edge appears
        source_object_id: Id of the source object (None if synthetic)
        component_index: Sub-entity index (edge index) within the source object
        edge_ref: Optional host edge handle; adapters may resolve lazily
    """

    def __init__(self, silhouette_type, source_object_id=None, component_index=None, edge_ref=None):
        self.silhouette_type = parse_enum(SilhouetteType, silhouette_type, SilhouetteType.NONE)
        self.source_object_id = source_object_id
        self.component_index = component_index
        self.edge_ref = edge_ref

    @property
    def has_source_edge(self):
        return self.edge_ref is not None or (
            self.source_object_id is not None and self.component_index is not None
        )

    def __repr__(self):
        return "ParentCurveRecord({}, src={}, ci={})".format(
            self.silhouette_type.host_name, self.source_object_id, self.component_index
        )


class Segment:
    """One projected piece of an edge's drawing representation.

    Attributes:
        curve: Curve implementing the engine's curve protocol
        visibility (Visibility)
        parent (ParentCurveRecord or None)
        index (int): Position in the projection output (diagnostics key)
        extra_index (int or None): Set when the segment comes from
            ProjectionRequest.extra_curves[extra_index] rather than from the
            selected geometry
    """

    def __init__(self, curve, visibility, parent=None, index=None, extra_index=None):
        self.curve = curve
        self.visibility = parse_enum(Visibility, visibility, Visibility.HIDDEN)
        self.parent = parent
        self.index = index
        self.extra_index = extra_index

    @property
    def is_extra(self):
        return self.extra_index is not None

    @property
    def silhouette_type(self):
        if self.parent is None:
            return SilhouetteType.NONE
        return self.parent.silhouette_type

    @property
    def source_object_id(self):
        return self.parent.source_object_id if self.parent is not None else None

    def __repr__(self):
        return "Segment(#{}, {}, {})".format(self.index, self.visibility.name, self.parent)


class ClassifiedPiece:
    """A retained piece of output: what a host writer persists.

    Attributes:
        curve: Trimmed curve geometry
        weight_class (WeightClass)
        layer_name (str)
        object_color, plot_color: Resolved display colours (host types or tuples)
        silhouette (str): Host name of the source silhouette type
        source_object_id: Source object id
        segment_index (int): Index of the originating segment
        repartitioned (bool): True if produced by intersection segmentation
        selected (bool): Writer should select the curve after adding it
    """

    def __init__(self, curve, weight_class, layer_name, object_color=None, plot_color=None,
                 silhouette=None, source_object_id=None, segment_index=None,
                 repartitioned=False, selected=False):
        self.curve = curve
        self.weight_class = weight_class
        self.layer_name = layer_name
        self.object_color = object_color
        self.plot_color = plot_color
        self.silhouette = silhouette
        self.source_object_id = source_object_id
        self.segment_index = segment_index
        self.repartitioned = bool(repartitioned)
        self.selected = bool(selected)

    def with_curve(self, curve, weight_class=None, repartitioned=None):
        """Copy of this piece carrying a different curve (and optionally class)."""
        wc = self.weight_class if weight_class is None else weight_class
        return ClassifiedPiece(
            curve,
            wc,
            self.layer_name,
            object_color=self.object_color,
            plot_color=self.plot_color,
            silhouette=self.silhouette,
            source_object_id=self.source_object_id,
            segment_index=self.segment_index,
            repartitioned=self.repartitioned if repartitioned is None else repartitioned,
            selected=self.selected,
        )

    def __repr__(self):
        return "ClassifiedPiece({}, layer={}, seg={})".format(
            self.weight_class.label, self.layer_name, self.segment_index
        )


class ProjectionRequest:
    """Input to the 2D-projection service.

    Attributes:
        geometry: List of geometry references (host object refs or ids)
        viewport: Host viewport / camera (None is invalid)
        tolerance (float)
        include_hidden, include_tangent, include_clipping,
        include_scene_silhouette, flatten (bool)
        extra_curves: 3D curves (e.g. solid intersections) projected alongside
        transform: Optional host transform applied to all geometry
    """

    def __init__(self, geometry, viewport, tolerance, include_hidden=True, include_tangent=True,
                 include_clipping=False, include_scene_silhouette=False, flatten=True,
                 extra_curves=None, transform=None):
        self.geometry = list(geometry or [])
        self.viewport = viewport
        self.tolerance = float(tolerance)
        self.include_hidden = bool(include_hidden)
        self.include_tangent = bool(include_tangent)
        self.include_clipping = bool(include_clipping)
        self.include_scene_silhouette = bool(include_scene_silhouette)
        self.flatten = bool(flatten)
        self.extra_curves = list(extra_curves or [])
        self.transform = transform
