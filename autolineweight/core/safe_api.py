"""
Failure wrapper for host geometry queries.

Every external query (projection, Brep/Brep, curve/curve, concavity, colour)
goes through safe_call so a failure is recorded in Diagnostics with the
segment / source object it concerns.
"""

from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

POLICY_SKIP = "default"
POLICY_RAISE = "raise"


def safe_call(
    diag: Any,
    *,
    phase: str,
    callsite: str,
    fn: Callable[[], T],
    default: T,
    context: Optional[Dict[str, Any]] = None,
    policy: str = POLICY_SKIP,
) -> T:
    """Run fn(); on failure record an ERROR event and skip or re-raise.

    policy:
      - "default": the query concerns one segment / pair / object; return default
      - "raise":   the query invalidates the run; re-raise after recording
    """
    if policy not in (POLICY_SKIP, POLICY_RAISE):
        raise ValueError("policy must be 'default' or 'raise'")

    try:
        return fn()
    except Exception as e:
        ctx = context or {}
        if diag is not None:
            try:
                diag.error(
                    phase=phase,
                    callsite=callsite,
                    message="Host query failed",
                    exc=e,
                    segment_index=ctx.get("segment_index"),
                    source_id=ctx.get("source_id"),
                    extra=ctx,
                )
            except Exception:
                # Diagnostics must never mask the query result
                pass

        if policy == POLICY_RAISE:
            raise
        return default
