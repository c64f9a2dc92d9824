# tests/test_diagnostics.py

import json

from autolineweight.core.diagnostics import Diagnostics


def test_error_records_event_and_counts():
    diag = Diagnostics(max_events=10)

    try:
        raise ValueError("boom")
    except Exception as e:
        diag.error(
            phase="unit",
            callsite="concavity_oracle",
            message="failed",
            exc=e,
            segment_index=12,
            source_id="3f2c",
            extra={"k": "v"},
        )

    d = diag.to_dict()
    assert d["num_events"] == 1
    assert d["dropped_events"] == 0
    ev = d["events"][0]
    assert ev["level"] == "ERROR"
    assert ev["phase"] == "unit"
    assert ev["exc_type"] == "ValueError"
    assert "boom" in (ev["exc_message"] or "")
    assert ev["segment_index"] == 12
    assert ev["source_id"] == "3f2c"


def test_event_cap_drops_but_counts_continue():
    diag = Diagnostics(max_events=2)

    for i in range(7):
        diag.warn(phase="unit", callsite="cap", message="w{}".format(i))

    d = diag.to_dict()
    assert d["num_events"] == 2
    assert d["dropped_events"] == 5
    assert sum(d["counts"].values()) == 7
    assert diag.count(level="WARN") == 7


def test_count_filters_by_level_and_phase():
    diag = Diagnostics()
    diag.info(phase="pipeline", callsite="a", message="m")
    diag.warn(phase="layers", callsite="b", message="m")
    diag.warn(phase="pipeline", callsite="c", message="m")

    assert diag.count() == 3
    assert diag.count(level="WARN") == 2
    assert diag.count(phase="pipeline") == 2
    assert diag.count(level="WARN", phase="layers") == 1


def test_to_dict_is_json_serializable():
    diag = Diagnostics(max_events=3)

    class _Guid(object):
        def __str__(self):
            return "guid-1"

    diag.debug(phase="unit", callsite="json", message="m", source_id=_Guid())
    payload = diag.to_dict()
    json.dumps(payload)
    assert payload["events"][0]["source_id"] == "guid-1"


def test_debug_dedupe_records_once_and_updates_suppressed_count():
    diag = Diagnostics(max_events=10)

    for i in range(5):
        diag.debug_dedupe(
            dedupe_key="k",
            phase="unit",
            callsite="dedupe",
            message="m",
            segment_index=i,
            extra={"x": "y"},
        )

    d = diag.to_dict()
    assert d["num_events"] == 1
    ev = d["events"][0]
    assert ev["level"] == "DEBUG"
    assert ev["extra"]["suppressed_count"] == 4
