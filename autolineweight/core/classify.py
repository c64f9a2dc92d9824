"""
Segment classification for weighted Make2D.

classify() is the decision table; classify_segment() feeds it from a Segment
record and the injected edge-concavity oracle.

Decision order (first match wins):
  1. silhouette NONE                         -> DISCARD
  2. HIDDEN                                  -> HIDDEN if hidden lines requested, else DISCARD
  3. SECTION_CUT                             -> CUT if clipping requested, else DISCARD
  4. BOUNDARY / CREASE / TANGENT / TANGENT_PROJECTS -> OUTLINE
  5. concavity at the segment midpoint: CONVEX -> CONVEX, anything else -> CONCAVE

OUTLINE and CONVEX pieces may later be split by intersection segmentation;
the overlapping part becomes CONCAVE (see pipeline.IntersectionStage).
"""

from .curves import midpoint
from .model import Concavity, SilhouetteType, Visibility, WeightClass, parse_enum
from .safe_api import safe_call

# classify() returns this for segments that are not drawn.
DISCARD = None

OUTLINE_SILHOUETTES = frozenset([
    SilhouetteType.BOUNDARY,
    SilhouetteType.CREASE,
    SilhouetteType.TANGENT,
    SilhouetteType.TANGENT_PROJECTS,
])

REPARTITION_CLASSES = frozenset([WeightClass.OUTLINE, WeightClass.CONVEX])

# Discard reasons (summary keys)
REASON_NO_PARENT = "no_parent"
REASON_SILHOUETTE_NONE = "silhouette_none"
REASON_HIDDEN_EXCLUDED = "hidden_excluded"
REASON_CLIPPING_EXCLUDED = "clipping_excluded"
REASON_NO_CURVE = "no_curve"
REASON_DEGENERATE = "degenerate"
REASON_UNCLASSIFIED = "unclassified"


def classify(visibility, silhouette_type, concavity, include_hidden=False, include_clipping=False):
    """Map visibility + silhouette + concavity to a WeightClass or DISCARD.

    Args:
        visibility: Visibility (or host name)
        silhouette_type: SilhouetteType (or host name)
        concavity: Concavity, host name, None, or a zero-argument callable
            returning one. A callable is only invoked when rules 1-4 do not
            decide, so the oracle is not queried for outlines/cuts/hidden.
        include_hidden: Hidden-line output requested
        include_clipping: Clipping-cut output requested

    Returns:
        WeightClass, or DISCARD (None). Never raises for unknown inputs:
        unrecognised silhouette values are treated as NONE, unrecognised
        concavity as NONE.

    Examples:
        >>> classify(Visibility.VISIBLE, SilhouetteType.BOUNDARY, Concavity.CONCAVE)
        <WeightClass.OUTLINE: 2>
        >>> classify(Visibility.VISIBLE, SilhouetteType.SECTION_CUT, None) is DISCARD
        True
    """
    sil = parse_enum(SilhouetteType, silhouette_type, SilhouetteType.NONE)
    vis = parse_enum(Visibility, visibility, None)

    if sil is SilhouetteType.NONE:
        return DISCARD

    if vis is Visibility.HIDDEN:
        return WeightClass.HIDDEN if include_hidden else DISCARD

    if vis is None:
        return DISCARD

    if sil is SilhouetteType.SECTION_CUT:
        return WeightClass.CUT if include_clipping else DISCARD

    if sil in OUTLINE_SILHOUETTES:
        return WeightClass.OUTLINE

    if callable(concavity):
        concavity = concavity()
    if parse_enum(Concavity, concavity, Concavity.NONE) is Concavity.CONVEX:
        return WeightClass.CONVEX
    return WeightClass.CONCAVE


def is_repartition_eligible(weight_class):
    """OUTLINE and CONVEX pieces can be re-split against intersection curves."""
    return weight_class in REPARTITION_CLASSES


def sample_concavity(segment, oracle, tolerance, diag=None):
    """Concavity of the segment's source edge at the segment midpoint.

    Returns Concavity.NONE when there is no oracle, no source edge, or the
    oracle fails (failure is recorded in diag).
    """
    parent = segment.parent
    if oracle is None or parent is None or not parent.has_source_edge:
        return Concavity.NONE

    ctx = {"segment_index": segment.index, "source_id": parent.source_object_id}

    mid = safe_call(
        diag,
        phase="classify",
        callsite="segment_midpoint",
        fn=lambda: midpoint(segment.curve),
        default=None,
        context=ctx,
    )
    if mid is None:
        return Concavity.NONE

    value = safe_call(
        diag,
        phase="classify",
        callsite="concavity_oracle",
        fn=lambda: oracle(parent, mid, tolerance),
        default=Concavity.NONE,
        context=ctx,
    )
    return parse_enum(Concavity, value, Concavity.NONE)


def classify_segment(segment, oracle=None, tolerance=0.001, include_hidden=False,
                     include_clipping=False, diag=None):
    """Classify one projected Segment.

    Args:
        segment: Segment record
        oracle: fn(parent_record, point, tolerance) -> Concavity, or None
        tolerance: Document absolute tolerance for concavity sampling
        include_hidden, include_clipping: Output flags
        diag: Diagnostics (optional)

    Returns:
        (weight_class_or_DISCARD, discard_reason_or_None)
    """
    if segment is None or segment.curve is None:
        return DISCARD, REASON_NO_CURVE
    if segment.curve.length() <= 0.0:
        return DISCARD, REASON_DEGENERATE
    if segment.parent is None:
        return DISCARD, REASON_NO_PARENT

    wc = classify(
        segment.visibility,
        segment.silhouette_type,
        lambda: sample_concavity(segment, oracle, tolerance, diag=diag),
        include_hidden=include_hidden,
        include_clipping=include_clipping,
    )
    if wc is not DISCARD:
        return wc, None

    if segment.silhouette_type is SilhouetteType.NONE:
        return DISCARD, REASON_SILHOUETTE_NONE
    if segment.visibility is Visibility.HIDDEN:
        return DISCARD, REASON_HIDDEN_EXCLUDED
    if segment.silhouette_type is SilhouetteType.SECTION_CUT:
        return DISCARD, REASON_CLIPPING_EXCLUDED
    return DISCARD, REASON_UNCLASSIFIED
