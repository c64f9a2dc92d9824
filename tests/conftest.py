# tests/conftest.py

import os
from pathlib import Path

import pytest

from autolineweight.core.curves import line
from autolineweight.core.model import ParentCurveRecord, Segment, Visibility


def pytest_ignore_collect(collection_path: Path, config):
    """
    Prevent collection of Rhino integration tests unless explicitly enabled.

    Enable by setting:
        ALW_RUN_RHINO_TESTS=1
    """
    run_rhino = os.environ.get("ALW_RUN_RHINO_TESTS", "").strip() == "1"
    if run_rhino:
        return False

    p = str(collection_path).replace("\\", "/")
    return "/tests/rhino/" in p


def make_segment(a, b, silhouette, visibility=Visibility.VISIBLE, index=0, source="obj-1",
                 component_index=0, extra_index=None):
    """Straight projected segment with a parent record."""
    parent = ParentCurveRecord(silhouette, source_object_id=source, component_index=component_index)
    return Segment(line(a, b), visibility, parent=parent, index=index, extra_index=extra_index)


@pytest.fixture
def segment_factory():
    return make_segment
