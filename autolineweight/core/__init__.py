"""
Core data structures and algorithms for the weighted Make2D pipeline.

Host-free: nothing here imports RhinoCommon.

Modules:
- model: Segment / ParentCurveRecord / ClassifiedPiece records and enums
- intervals: Interval difference and merge over curve parameters
- bbox: Axis-aligned boxes and the coincidence prefilter
- curves: PolylineCurve (offline curve protocol implementation)
- intersect: Curve/curve intersection for PolylineCurve
- boolean_difference: Curve boolean difference against a curve family
- classify: Weight-class decision table
- weights: Weight gradient and layer plan
- diagnostics: Structured, bounded run diagnostics
- safe_api: safe_call wrapper for host queries
"""

from .intervals import Interval, difference, merge
from .model import Concavity, SilhouetteType, Visibility, WeightClass

__all__ = [
    "Interval",
    "difference",
    "merge",
    "Concavity",
    "SilhouetteType",
    "Visibility",
    "WeightClass",
]
