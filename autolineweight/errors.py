"""Exceptions raised by the weighted Make2D pipeline.

Only run-invalidating problems raise. Per-segment and per-pair failures are
recorded in Diagnostics and skipped (see core.safe_api.safe_call).
"""


class AutoLineWeightError(Exception):
    """Base class for pipeline errors."""


class InputError(AutoLineWeightError):
    """The invocation itself is unusable (no viewport, empty selection...)."""


class ProjectionError(AutoLineWeightError):
    """The projection service produced no drawing."""
