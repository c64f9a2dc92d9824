"""
AutoLineWeight - weighted Make2D for Rhino.

Sorts the segments of a hidden-line drawing into line-weight classes based on
the formal relationship between each segment's source edge and its adjacent
faces. Core principles:

1. The projection service is the ONLY visibility truth
2. Silhouette category decides outlines; edge concavity decides the rest
3. Lines crossed by a true solid/solid intersection read as concave there
4. Existing layers are never re-weighted (user edits win)

Modules:
- config: Configuration for flags, tolerance and weight gradient
- core.intervals: Interval difference/merge over curve parameters
- core.bbox: Bounding-box prefilter
- core.boolean_difference: Curve boolean difference against a curve family
- core.classify: Segment classification decision table
- core.weights: Layer plan and weight gradient
- rhino: RhinoCommon adapters (projection, intersections, concavity, layers)
- pipeline: Orchestrator (run_pipeline)
- entry_rhino: Entry point for Rhino's script editor
"""

__version__ = "1.0.0"

from .config import Config

__all__ = ["Config"]
