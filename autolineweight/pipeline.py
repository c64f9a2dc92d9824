"""
Weighted Make2D Pipeline - Main Processing Logic.

One orchestrator, parameterised by the optional stages enabled in Config:
- scene silhouette   : projection flag
- clipping           : projection flag, section cuts drawn on the cut layer
- intersection segmentation : solid/solid intersection curves are projected
  with the selection; outline/convex lines running along them are split and
  the overlapping part is drawn as concave

Core principles:
1. The projection service is the ONLY visibility truth
2. Per-segment and per-pair failures are recorded and skipped
3. Run-invalidating failures (no viewport, no selection, no drawing) raise
4. Layers are created if absent; existing layers are never re-weighted
"""

# ────────────────────────────────────────────────────────────────────────────
# RUN ORDER
#
#   validate → intersections (3D, once) → project → split off intersection
#   pieces → layers → classify + re-split per segment → flatten → summary
#
# Intersection curves go through the projection like any other edge, so the
# subtractor family is already hidden-line trimmed and in drawing space. Only
# their VISIBLE pieces subtract; the pieces themselves are never output.
#
# If output looks wrong, check in this order:
#   (1) summary["discarded"]       - why segments were dropped
#   (2) summary["difference"]      - culled vs tested intersection pairs
#   (3) diagnostics ERROR events   - failed host queries (concavity, curve-curve)
# ────────────────────────────────────────────────────────────────────────────

import time

from .config import Config, STAGE_CLIPPING, STAGE_INTERSECTIONS, STAGE_SILHOUETTE
from .core.bbox import union_all
from .core.boolean_difference import CurveFamily, DifferenceStats, curve_boolean_difference
from .core.classify import DISCARD, REASON_DEGENERATE, classify_segment, is_repartition_eligible
from .core.diagnostics import Diagnostics
from .core.intersect import curve_curve
from .core.model import ClassifiedPiece, ProjectionRequest, Visibility, WeightClass
from .core.weights import InMemoryLayerTable, ensure_layers
from .errors import InputError, ProjectionError
from .core.safe_api import safe_call


def _perf_now():
    return time.perf_counter()


def _perf_ms(t0, t1):
    return (float(t1) - float(t0)) * 1000.0


class RunSummary(object):
    """Counts reported after each run."""

    def __init__(self):
        self.segments_total = 0
        self.intersection_segments = 0
        self.processed = 0
        self.kept = 0
        self.discarded = {}
        self.pieces_by_class = {}
        self.repartitioned_segments = 0
        self.intersection_curves = 0
        self.difference = {}
        self.timings = {}
        self.stages = []

    @property
    def discarded_total(self):
        return sum(self.discarded.values())

    def mark_discarded(self, reason):
        self.discarded[reason] = self.discarded.get(reason, 0) + 1

    def mark_piece(self, weight_class):
        key = weight_class.label
        self.pieces_by_class[key] = self.pieces_by_class.get(key, 0) + 1

    def to_dict(self):
        return {
            "segments_total": self.segments_total,
            "intersection_segments": self.intersection_segments,
            "processed": self.processed,
            "kept": self.kept,
            "discarded_total": self.discarded_total,
            "discarded": dict(self.discarded),
            "pieces_by_class": dict(self.pieces_by_class),
            "repartitioned_segments": self.repartitioned_segments,
            "intersection_curves": self.intersection_curves,
            "difference": dict(self.difference),
            "timings": dict(self.timings),
            "stages": list(self.stages),
        }

    def format_lines(self):
        """Human-readable summary lines for the host command line."""
        lines = [
            "Weighted Make2D: {} segments processed, {} kept, {} discarded.".format(
                self.processed, self.kept, self.discarded_total
            )
        ]
        for reason in sorted(self.discarded):
            lines.append("  discarded[{}]: {}".format(reason, self.discarded[reason]))
        for label in sorted(self.pieces_by_class):
            lines.append("  {}: {} curves".format(label, self.pieces_by_class[label]))
        if self.repartitioned_segments:
            lines.append("  split at intersections: {} segments".format(self.repartitioned_segments))
        for name in sorted(self.timings):
            lines.append("  {}: {:.1f} ms".format(name, self.timings[name]))
        return lines


class PipelineResult(object):
    """Output of run_pipeline.

    Attributes:
        pieces: List of ClassifiedPiece (flattened if cfg.flatten_to_page)
        layer_plan: LayerPlan
        summary: RunSummary
        diagnostics: Diagnostics
        offset: (dx, dy) applied by page flattening
    """

    def __init__(self, pieces, layer_plan, summary, diagnostics, offset=(0.0, 0.0)):
        self.pieces = pieces
        self.layer_plan = layer_plan
        self.summary = summary
        self.diagnostics = diagnostics
        self.offset = offset

    def pieces_of(self, weight_class):
        return [p for p in self.pieces if p.weight_class is weight_class]

    def to_dict(self):
        return {
            "summary": self.summary.to_dict(),
            "layers": self.layer_plan.to_dict(),
            "offset": list(self.offset),
            "diagnostics": self.diagnostics.to_dict(),
        }


# ────────────────────────────────────────────────────────────────────────────
# Stages
# ────────────────────────────────────────────────────────────────────────────

def apply_silhouette_stage(request, cfg, diag):
    request.include_scene_silhouette = True


def apply_clipping_stage(request, cfg, diag):
    request.include_clipping = True


def build_projection_request(geometry, viewport, cfg, diag, extra_curves=None, transform=None):
    """ProjectionRequest for this run with optional stages applied."""
    request = ProjectionRequest(
        geometry,
        viewport,
        cfg.tolerance,
        include_hidden=cfg.include_hidden_lines,
        include_tangent=cfg.include_tangent_edges,
        flatten=True,
        extra_curves=extra_curves,
        transform=transform,
    )

    caps = cfg.capabilities()
    if STAGE_SILHOUETTE in caps:
        apply_silhouette_stage(request, cfg, diag)
    if STAGE_CLIPPING in caps:
        apply_clipping_stage(request, cfg, diag)
    if cfg.clipping_suppressed:
        diag.warn(
            phase="projection",
            callsite="build_projection_request",
            message="Clipping cuts and scene silhouette are mutually exclusive; clipping suppressed",
        )
    return request


class IntersectionStage(object):
    """Re-splits outline/convex pieces along projected intersection curves.

    Usage:
        stage = IntersectionStage(service, intersector, cfg, diag)
        curves3d = stage.compute(geometry)            # before projection
        segments = stage.extract_family(segments)     # after projection
        pieces = stage.repartition(piece, concave_layer)
    """

    def __init__(self, service, intersector, cfg, diag):
        self.service = service
        self.intersector = intersector or curve_curve
        self.tolerance = cfg.tolerance
        self.diag = diag
        self.family = CurveFamily([])
        self.stats = DifferenceStats()

    def compute(self, geometry):
        """3D intersection curves between the selected solids (once per run)."""
        if self.service is None:
            return []
        curves = safe_call(
            self.diag,
            phase="intersections",
            callsite="intersection_service",
            fn=lambda: list(self.service(geometry, self.tolerance) or []),
            default=[],
        )
        return [c for c in curves if c is not None]

    def extract_family(self, segments):
        """Split intersection segments off; visible ones become the subtractor family.

        Returns the remaining (ordinary) segments.
        """
        ordinary = []
        family = []
        for seg in segments:
            if seg is not None and seg.is_extra:
                if seg.visibility is Visibility.VISIBLE and seg.curve is not None:
                    family.append(seg.curve)
                continue
            ordinary.append(seg)
        self.family = CurveFamily(family)
        return ordinary

    def repartition(self, piece, concave_layer):
        """Split one piece; overlapping runs become CONCAVE.

        Returns a list of pieces: [piece] unchanged when nothing overlaps,
        [] when the piece's curve is degenerate.
        """
        if not len(self.family):
            return [piece]

        result = curve_boolean_difference(
            piece.curve,
            self.family,
            self.tolerance,
            self.intersector,
            diag=self.diag,
            stats=self.stats,
            segment_index=piece.segment_index,
        )
        if result.is_empty:
            return []
        if not result.has_overlap:
            return [piece]

        out = [piece.with_curve(crv, repartitioned=True) for crv in result.remainder_curves]
        for crv in result.overlap_curves:
            concave = piece.with_curve(crv, weight_class=WeightClass.CONCAVE, repartitioned=True)
            concave.layer_name = concave_layer
            out.append(concave)
        return out


def flatten_pieces(pieces, segments):
    """Translate pieces so the drawing's bbox min sits at the origin.

    The box covers every projected segment (hidden and discarded included) so
    the offset does not depend on the output flags.

    Returns:
        (pieces, (dx, dy))
    """
    box = union_all(
        seg.curve.bounding_box() for seg in segments if seg is not None and seg.curve is not None
    )
    if box is None:
        return pieces, (0.0, 0.0)
    dx, dy = -box.xmin, -box.ymin
    if dx == 0.0 and dy == 0.0:
        return pieces, (0.0, 0.0)
    moved = [p.with_curve(p.curve.translate(dx, dy, 0.0)) for p in pieces]
    return moved, (dx, dy)


# ────────────────────────────────────────────────────────────────────────────
# Orchestrator
# ────────────────────────────────────────────────────────────────────────────

def run_pipeline(
    geometry,
    viewport,
    cfg,
    projector,
    layer_repo=None,
    intersection_service=None,
    concavity_oracle=None,
    color_resolver=None,
    curve_intersector=None,
    diag=None,
    transform=None,
):
    """Classify a hidden-line drawing of `geometry` seen from `viewport`.

    Args:
        geometry: Non-empty list of geometry references
        viewport: Host viewport/camera handle (None is an input error)
        cfg: Config
        projector: fn(ProjectionRequest) -> list of Segment (None = failure)
        layer_repo: Layer repository; None plans against a throwaway table
        intersection_service: fn(geometry, tolerance) -> list of 3D curves
        concavity_oracle: fn(parent_record, point, tolerance) -> Concavity
        color_resolver: fn(source_object_id) -> (object_color, plot_color)
        curve_intersector: fn(curve_a, curve_b, tol) -> events
            (default: core.intersect.curve_curve)
        diag: Diagnostics (default: new per run)
        transform: Optional host transform passed to the projector

    Returns:
        PipelineResult

    Raises:
        TypeError: cfg is not a Config
        InputError: no viewport or empty selection
        ProjectionError: projector raised or returned nothing
    """
    if isinstance(cfg, dict):
        raise TypeError("cfg must be autolineweight.config.Config (not dict)")
    if cfg is None:
        cfg = Config()
    if diag is None:
        diag = Diagnostics(max_events=cfg.max_diagnostic_events)

    geometry = list(geometry or [])
    if viewport is None:
        raise InputError("No viewport to project from")
    if not geometry:
        raise InputError("Nothing selected")

    summary = RunSummary()
    summary.stages = sorted(cfg.capabilities())
    timings = summary.timings

    def _tmark(name, t0, t1):
        if cfg.perf_collect_timings:
            timings[name] = round(_perf_ms(t0, t1), 3)

    t_run0 = _perf_now()

    # 1) Intersection curves (3D, once per run)
    stage = None
    extra_curves = []
    if STAGE_INTERSECTIONS in cfg.capabilities() and intersection_service is not None:
        stage = IntersectionStage(intersection_service, curve_intersector, cfg, diag)
        t0 = _perf_now()
        extra_curves = stage.compute(geometry)
        _tmark("intersections_ms", t0, _perf_now())
        summary.intersection_curves = len(extra_curves)

    # 2) Projection
    request = build_projection_request(geometry, viewport, cfg, diag,
                                       extra_curves=extra_curves, transform=transform)
    t0 = _perf_now()
    try:
        segments = safe_call(
            diag,
            phase="projection",
            callsite="projector",
            fn=lambda: projector(request),
            default=None,
            policy="raise",
        )
    except Exception as e:
        raise ProjectionError("Projection failed: {}".format(e)) from e
    _tmark("make2d_ms", t0, _perf_now())
    if segments is None:
        raise ProjectionError("Projection produced no drawing")
    segments = list(segments)
    summary.segments_total = len(segments)

    ordinary = segments
    if stage is not None:
        ordinary = stage.extract_family(segments)
        summary.intersection_segments = len(segments) - len(ordinary)

    # 3) Layers
    t0 = _perf_now()
    repo = layer_repo if layer_repo is not None else InMemoryLayerTable()
    plan = ensure_layers(repo, cfg, diag=diag)
    _tmark("layers_ms", t0, _perf_now())

    # 4) Classify and re-split
    t0 = _perf_now()
    concave_layer = plan.layer_for(WeightClass.CONCAVE)
    pieces = []
    for seg in ordinary:
        summary.processed += 1
        wc, reason = classify_segment(
            seg,
            oracle=concavity_oracle,
            tolerance=cfg.tolerance,
            include_hidden=cfg.include_hidden_lines,
            include_clipping=cfg.clipping_enabled,
            diag=diag,
        )
        if wc is DISCARD:
            summary.mark_discarded(reason)
            continue

        object_color, plot_color = None, None
        if color_resolver is not None:
            object_color, plot_color = safe_call(
                diag,
                phase="classify",
                callsite="color_resolver",
                fn=lambda: tuple(color_resolver(seg.source_object_id)),
                default=(None, None),
                context={"segment_index": seg.index, "source_id": seg.source_object_id},
            )

        piece = ClassifiedPiece(
            seg.curve,
            wc,
            plan.layer_for(wc),
            object_color=object_color,
            plot_color=plot_color,
            silhouette=seg.silhouette_type.host_name,
            source_object_id=seg.source_object_id,
            segment_index=seg.index,
            selected=cfg.select_output,
        )

        out = [piece]
        if stage is not None and is_repartition_eligible(wc):
            out = stage.repartition(piece, concave_layer)
            if not out:
                summary.mark_discarded(REASON_DEGENERATE)
                continue
            if any(p.repartitioned for p in out):
                summary.repartitioned_segments += 1

        summary.kept += 1
        for p in out:
            summary.mark_piece(p.weight_class)
        pieces.extend(out)
    _tmark("sort_ms", t0, _perf_now())

    # 5) Page flattening
    offset = (0.0, 0.0)
    if cfg.flatten_to_page:
        pieces, offset = flatten_pieces(pieces, segments)

    if stage is not None:
        summary.difference = stage.stats.to_dict()
    _tmark("total_ms", t_run0, _perf_now())

    diag.info(
        phase="pipeline",
        callsite="run_pipeline",
        message="Run complete",
        extra={"processed": summary.processed, "kept": summary.kept,
               "discarded": summary.discarded_total},
    )
    return PipelineResult(pieces, plan, summary, diag, offset=offset)
