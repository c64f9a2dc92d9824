"""
Rhino entry point for the weighted Make2D pipeline.

Usage in Rhino 8 ScriptEditor (CPython 3):
    import sys
    sys.path.append(r'C:\\path\\to\\autolineweight')

    import rhinoscriptsyntax as rs
    from autolineweight.entry_rhino import run_weighted_make2d
    from autolineweight.config import Config

    ids = rs.GetObjects("Select geometry for the weighted make2d", 8 | 16 | 4, preselect=True)
    cfg = Config(include_hidden_lines=True, include_scene_silhouette=False,
                 include_clipping_cuts=True)
    result = run_weighted_make2d(object_ids=ids, cfg=cfg)
"""

from .config import Config
from .core.diagnostics import Diagnostics
from .errors import AutoLineWeightError
from .export import export_run
from .pipeline import run_pipeline
from .rhino.curves import rhino_curve_intersector
from .rhino.intersects import make_intersection_service
from .rhino.layers import RhinoLayerTable
from .rhino.make2d import make_projector
from .rhino.oracles import make_color_resolver, make_concavity_oracle
from .core.safe_api import safe_call


def get_active_document():
    import Rhino

    return Rhino.RhinoDoc.ActiveDoc


def get_active_viewport(doc):
    view = doc.Views.ActiveView
    return view.ActiveViewport if view is not None else None


def _object_refs(doc, object_ids):
    from Rhino.DocObjects import ObjRef
    from System import Guid

    refs = []
    for oid in object_ids or []:
        if oid is None:
            continue
        guid = oid if isinstance(oid, Guid) else Guid(str(oid))
        refs.append(ObjRef(doc, guid))
    return refs


def write_pieces(doc, pieces, layer_table, diag=None):
    """Add classified pieces to the document; returns the new object ids."""
    from Rhino.DocObjects import ObjectAttributes, ObjectColorSource, ObjectPlotColorSource

    layer_index = {}
    added = []
    for piece in pieces:
        idx = layer_index.get(piece.layer_name)
        if idx is None:
            idx = layer_table.layer_index(piece.layer_name)
            layer_index[piece.layer_name] = idx

        attribs = ObjectAttributes()
        if idx >= 0:
            attribs.LayerIndex = idx
        if piece.object_color is not None:
            attribs.ColorSource = ObjectColorSource.ColorFromObject
            attribs.ObjectColor = piece.object_color
        if piece.plot_color is not None:
            attribs.PlotColorSource = ObjectPlotColorSource.PlotColorFromObject
            attribs.PlotColor = piece.plot_color
        if piece.silhouette:
            attribs.SetUserString("SilType", piece.silhouette)

        geometry = getattr(piece.curve, "geometry", None)
        if geometry is None:
            continue

        obj_id = safe_call(
            diag,
            phase="write",
            callsite="add_curve",
            fn=lambda g=geometry, a=attribs: doc.Objects.AddCurve(g, a),
            default=None,
            context={"segment_index": piece.segment_index},
        )
        if obj_id is None:
            continue
        added.append(obj_id)
        if piece.selected:
            doc.Objects.Select(obj_id)
    return added


def run_weighted_make2d(doc=None, object_ids=None, viewport=None, cfg=None,
                        use_document_tolerance=True, output_dir=None, date_override=None):
    """Run the pipeline on the given objects and write the drawing into `doc`.

    use_document_tolerance replaces cfg.tolerance with doc.ModelAbsoluteTolerance.
    output_dir, when given, also receives the pieces CSV and JSON run summary
    (see export.export_result_to_csv; date_override is passed through).

    Returns:
        dict: {"success", "added", "summary", "layers", "diagnostics", "errors",
               "export"}
    """
    if cfg is None:
        cfg = Config()
    doc = doc or get_active_document()
    if viewport is None and doc is not None:
        viewport = get_active_viewport(doc)
    if doc is not None and use_document_tolerance:
        d = cfg.to_dict()
        d["tolerance"] = float(doc.ModelAbsoluteTolerance)
        cfg = Config.from_dict(d)

    diag = Diagnostics(max_events=cfg.max_diagnostic_events)
    refs = _object_refs(doc, object_ids)
    layer_table = RhinoLayerTable(doc)

    print("Weighted Make2D running!")
    print("A total of {} objects were selected.".format(len(refs)))
    if cfg.clipping_suppressed:
        print("Warning: clipping planes and scene silhouettes are mutually exclusive. "
              "Scene silhouettes are prioritized; process clipping separately.")

    try:
        result = run_pipeline(
            refs,
            viewport,
            cfg,
            make_projector(doc, diag=diag),
            layer_repo=layer_table,
            intersection_service=make_intersection_service(diag=diag),
            concavity_oracle=make_concavity_oracle(doc),
            color_resolver=make_color_resolver(doc),
            curve_intersector=rhino_curve_intersector,
            diag=diag,
        )
    except AutoLineWeightError as e:
        print("Weighted Make2D failed: {}".format(e))
        return {
            "success": False,
            "added": [],
            "summary": {},
            "layers": {},
            "diagnostics": diag.to_dict(),
            "errors": [str(e)],
        }

    added = write_pieces(doc, result.pieces, layer_table, diag=diag)
    doc.Views.Redraw()

    for line in result.summary.format_lines():
        print(line)

    exported = export_run(result, output_dir, config=cfg, diag=diag, date_override=date_override)
    if exported is not None:
        print("Exported {} rows to {}".format(exported["rows_exported"], exported["pieces_csv_path"]))

    payload = result.to_dict()
    payload.update({"success": True, "added": [str(i) for i in added], "errors": [],
                    "export": exported})
    # Export failures are recorded after result.to_dict() took its snapshot
    payload["diagnostics"] = diag.to_dict()
    return payload
