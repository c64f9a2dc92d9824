# tests/test_weights.py

import pytest

from autolineweight.config import Config
from autolineweight.core.diagnostics import Diagnostics
from autolineweight.core.model import WeightClass
from autolineweight.core.weights import (
    InMemoryLayerTable,
    LayerNode,
    classes_in_use,
    ensure_layers,
    find_or_create,
    gradient_weight,
)


def test_gradient_weight_values():
    assert gradient_weight(0, 4) == pytest.approx(0.15 * 8.0)
    assert gradient_weight(3, 4) == pytest.approx(0.15)
    assert gradient_weight(0, 3, base_weight=1.0, exponent=2.0) == 9.0


@pytest.mark.parametrize("n", [1, 2, 3, 4, 7])
def test_gradient_weight_strictly_decreasing(n):
    weights = [gradient_weight(i, n) for i in range(n)]
    for heavier, lighter in zip(weights, weights[1:]):
        assert heavier > lighter


def test_gradient_weight_rejects_bad_position():
    with pytest.raises(ValueError):
        gradient_weight(4, 4)
    with pytest.raises(ValueError):
        gradient_weight(0, 0)


def test_classes_in_use():
    assert classes_in_use(False) == [WeightClass.OUTLINE, WeightClass.CONVEX, WeightClass.CONCAVE]
    assert classes_in_use(True)[0] is WeightClass.CUT


def test_find_or_create_reports_existing():
    repo = InMemoryLayerTable()
    node, existed = find_or_create(repo, "A", plot_weight=1.0)
    assert not existed
    again, existed = find_or_create(repo, "A", plot_weight=2.0)
    assert existed
    assert again is node
    assert again.plot_weight == 1.0
    assert repo.create_calls == ["A"]


def test_ensure_layers_builds_tree():
    repo = InMemoryLayerTable()
    plan = ensure_layers(repo, Config())

    assert repo.children_of(None) == ["WT_Make2D"]
    assert repo.children_of("WT_Make2D") == ["WT_Visible"]
    assert repo.children_of("WT_Visible") == ["WT_Concave", "WT_Convex", "WT_Outline"]
    assert plan.layer_for(WeightClass.OUTLINE) == "WT_Outline"
    assert plan.layer_for(WeightClass.HIDDEN) is None
    assert plan.layer_for(WeightClass.CUT) is None


def test_ensure_layers_weights_follow_classes_in_use():
    repo = InMemoryLayerTable()
    ensure_layers(repo, Config())
    # n = 3 without clipping
    assert repo.nodes["WT_Outline"].plot_weight == pytest.approx(0.15 * 3 ** 1.5)
    assert repo.nodes["WT_Concave"].plot_weight == pytest.approx(0.15)

    repo = InMemoryLayerTable()
    ensure_layers(repo, Config(include_clipping_cuts=True, include_scene_silhouette=False))
    assert repo.nodes["WT_Cut"].plot_weight == pytest.approx(1.2)
    assert repo.nodes["WT_Concave"].plot_weight == pytest.approx(0.15)


def test_ensure_layers_is_idempotent_and_first_writer_wins():
    repo = InMemoryLayerTable()
    ensure_layers(repo, Config())
    repo.nodes["WT_Outline"].plot_weight = 0.7  # user edit

    plan = ensure_layers(repo, Config(base_weight=0.5))

    assert repo.nodes["WT_Outline"].plot_weight == 0.7
    assert plan.created == []
    assert plan.weight_for(WeightClass.OUTLINE) is None
    assert len(repo.create_calls) == len(set(repo.create_calls))


def test_hidden_layer_gets_hidden_linetype():
    repo = InMemoryLayerTable()
    plan = ensure_layers(repo, Config(include_hidden_lines=True))
    hidden = repo.nodes["WT_Hidden"]
    assert hidden.parent == "WT_Make2D"
    assert hidden.linetype == "Hidden"
    assert hidden.plot_weight == 0.1
    assert plan.layer_for(WeightClass.HIDDEN) == "WT_Hidden"


def test_hidden_layer_without_linetype_falls_back():
    repo = InMemoryLayerTable(linetypes=("Continuous",))
    diag = Diagnostics()
    ensure_layers(repo, Config(include_hidden_lines=True), diag=diag)
    assert repo.nodes["WT_Hidden"].linetype is None
    assert repo.nodes["WT_Hidden"].plot_weight == 0.1
    assert diag.count(level="DEBUG", phase="layers") == 1


def test_name_conflict_is_reported_not_reweighted():
    repo = InMemoryLayerTable()
    repo.nodes["WT_Convex"] = LayerNode("WT_Convex", kind="deleted")
    diag = Diagnostics()

    plan = ensure_layers(repo, Config(), diag=diag)

    assert plan.conflicts == ["WT_Convex"]
    assert repo.nodes["WT_Convex"].plot_weight is None
    assert diag.count(level="WARN", phase="layers") == 1


def test_custom_layer_names():
    repo = InMemoryLayerTable()
    cfg = Config(class_layer_names={WeightClass.OUTLINE: "Heavy"})
    plan = ensure_layers(repo, cfg)
    assert plan.layer_for(WeightClass.OUTLINE) == "Heavy"
    assert "Heavy" in repo.nodes
