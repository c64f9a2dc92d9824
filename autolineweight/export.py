"""CSV / JSON export for weighted Make2D runs.

One CSV row per output curve (class, layer, weight, length, source) plus a
JSON run summary, for checking a drawing's line-weight mix outside Rhino.
Rows are appended so repeated runs accumulate in the same dated file.
"""

import csv
import hashlib
import json
import os
from datetime import datetime

from .core.safe_api import safe_call

PIECES_HEADERS = [
    "Date", "RunId", "ConfigHash", "SegmentIndex", "WeightClass", "Layer",
    "PlotWeight", "Length", "Silhouette", "SourceId", "Repartitioned",
    "XMin", "YMin", "XMax", "YMax",
]


def _round6(x):
    try:
        return round(float(x), 6)
    except (TypeError, ValueError):
        return x


def compute_config_hash(config):
    """8-character hash of the settings that change the drawing.

    Commentary:
        ✔ Stable: same config -> same hash
        ✔ Ignores diagnostics-only settings (timings, event cap)
    """
    if config is None:
        return "00000000"
    d = config.to_dict()
    d.pop("perf_collect_timings", None)
    d.pop("max_diagnostic_events", None)
    payload = json.dumps(d, sort_keys=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:8]


def _write_piece_rows(path, rows):
    """Append rows to the pieces CSV; the header goes in only for a new file."""
    if not rows:
        return 0
    is_new = not os.path.exists(path) or os.path.getsize(path) == 0
    with open(path, "a", newline="") as f:
        writer = csv.writer(f)
        if is_new:
            writer.writerow(PIECES_HEADERS)
        writer.writerows(rows)
    return len(rows)


def piece_to_row(piece, layer_plan, date_str, run_id, config_hash):
    """Build one CSV row for a ClassifiedPiece."""
    box = piece.curve.bounding_box()
    weight = layer_plan.weight_for(piece.weight_class) if layer_plan is not None else None
    return [
        date_str,
        run_id,
        config_hash,
        piece.segment_index,
        piece.weight_class.label,
        piece.layer_name,
        "" if weight is None else _round6(weight),
        _round6(piece.curve.length()),
        piece.silhouette or "",
        "" if piece.source_object_id is None else str(piece.source_object_id),
        bool(piece.repartitioned),
        _round6(box.xmin) if box is not None else "",
        _round6(box.ymin) if box is not None else "",
        _round6(box.xmax) if box is not None else "",
        _round6(box.ymax) if box is not None else "",
    ]


def export_result_to_csv(result, output_dir, config=None, diag=None, date_override=None):
    """Append a run's pieces to a dated CSV and write its JSON summary.

    Args:
        result: PipelineResult from run_pipeline()
        output_dir: Output directory path (created if missing)
        config: Config used for the run (hashed into every row)
        diag: Optional Diagnostics sink
        date_override: "YYYY-MM-DD" or ISO datetime for the Date column and
            filenames; any other string is used as a filename tag

    Returns:
        Dict with pieces_csv_path, summary_json_path, rows_exported
    """
    if not output_dir:
        raise ValueError("output_dir is required")
    os.makedirs(output_dir, exist_ok=True)

    run_dt = datetime.now()
    tag = None
    if date_override:
        s = str(date_override).strip()
        try:
            run_dt = datetime.strptime(s, "%Y-%m-%d") if len(s) == 10 else datetime.fromisoformat(s)
        except ValueError:
            tag = s

    date_str = run_dt.strftime("%Y-%m-%d")
    run_id = run_dt.strftime("%Y%m%dT%H%M%S")
    if tag:
        run_id = "{}_{}".format(run_id, tag)
    suffix = "_" + tag if tag else ""

    pieces_path = os.path.join(output_dir, "make2d_pieces_{}{}.csv".format(date_str, suffix))
    summary_path = os.path.join(output_dir, "make2d_summary_{}.json".format(run_id))

    config_hash = compute_config_hash(config)
    rows = [
        piece_to_row(p, result.layer_plan, date_str, run_id, config_hash)
        for p in result.pieces
    ]
    written = _write_piece_rows(pieces_path, rows)

    payload = result.to_dict()
    payload["run_id"] = run_id
    payload["config_hash"] = config_hash
    if config is not None:
        payload["config"] = config.to_dict()
    with open(summary_path, "w") as f:
        json.dump(payload, f, indent=2, sort_keys=True, default=str)

    if diag is not None:
        diag.info(
            phase="export",
            callsite="export_result_to_csv",
            message="Exported run",
            extra={"rows": written, "csv": pieces_path},
        )

    return {
        "pieces_csv_path": pieces_path,
        "summary_json_path": summary_path,
        "rows_exported": written,
    }


def export_run(result, output_dir, config=None, diag=None, date_override=None):
    """export_result_to_csv for a finished run; a failed write is recorded, not raised.

    Runs after the drawing is written; a failed write leaves the run successful.

    Returns:
        The export_result_to_csv dict, or None when nothing was written
    """
    if not output_dir:
        return None
    return safe_call(
        diag,
        phase="export",
        callsite="export_run",
        fn=lambda: export_result_to_csv(
            result, output_dir, config=config, diag=diag, date_override=date_override
        ),
        default=None,
        context={"output_dir": str(output_dir)},
    )
