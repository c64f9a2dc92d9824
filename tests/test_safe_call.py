# tests/test_safe_call.py

import pytest

from autolineweight.core.diagnostics import Diagnostics
from autolineweight.core.safe_api import safe_call


def test_safe_call_returns_value():
    assert safe_call(None, phase="unit", callsite="ok", fn=lambda: 5, default=0) == 5


def test_safe_call_default_records_and_returns_default():
    diag = Diagnostics(max_events=10)

    def boom():
        raise ValueError("x")

    result = safe_call(
        diag,
        phase="unit",
        callsite="safe_call_default",
        fn=boom,
        default=42,
        context={"segment_index": 4, "source_id": "abc"},
    )

    assert result == 42
    d = diag.to_dict()
    assert d["num_events"] == 1
    ev = d["events"][0]
    assert ev["exc_type"] == "ValueError"
    assert ev["segment_index"] == 4
    assert ev["source_id"] == "abc"


def test_safe_call_raise_records_and_raises():
    diag = Diagnostics(max_events=10)

    def boom():
        raise RuntimeError("y")

    with pytest.raises(RuntimeError):
        safe_call(
            diag,
            phase="unit",
            callsite="safe_call_raise",
            fn=boom,
            default=None,
            policy="raise",
        )

    d = diag.to_dict()
    assert d["num_events"] == 1
    assert d["events"][0]["exc_type"] == "RuntimeError"


def test_safe_call_without_diag_still_returns_default():
    def boom():
        raise KeyError("k")

    assert safe_call(None, phase="unit", callsite="nodiag", fn=boom, default="d") == "d"


def test_safe_call_rejects_unknown_policy():
    with pytest.raises(ValueError):
        safe_call(None, phase="unit", callsite="bad", fn=lambda: 1, default=None, policy="retry")
