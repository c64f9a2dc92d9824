"""
Rhino smoke test - two overlapping boxes through the full pipeline.

Run inside Rhino 8's ScriptEditor (CPython 3), or under pytest with
ALW_RUN_RHINO_TESTS=1 from a Rhino-hosted interpreter (rhinoinside).
"""

import sys
sys.path.append(r'C:\path\to\autolineweight')

from autolineweight.config import Config
from autolineweight.entry_rhino import get_active_document, run_weighted_make2d


def _add_boxes(doc):
    import Rhino.Geometry as rg

    ids = []
    for x0 in (0.0, 5.0):
        box = rg.Box(rg.Plane.WorldXY, rg.Interval(x0, x0 + 10.0), rg.Interval(0.0, 10.0),
                     rg.Interval(0.0, 10.0))
        ids.append(doc.Objects.AddBrep(box.ToBrep()))
    return ids


def test_two_boxes_produce_weighted_layers():
    doc = get_active_document()
    ids = _add_boxes(doc)
    try:
        result = run_weighted_make2d(doc=doc, object_ids=ids, cfg=Config(include_hidden_lines=True))
        assert result["success"], result["errors"]
        assert result["added"]
        layers = result["layers"]["layers"]
        assert layers["Outline"] == "WT_Outline"
        assert doc.Layers.FindName("WT_Hidden") is not None
    finally:
        for oid in ids:
            doc.Objects.Delete(oid, True)


if __name__ == "__main__":
    test_two_boxes_produce_weighted_layers()
    print("OK")
