"""
Layer plan and line-weight gradient.

Layer tree (created if absent, never duplicated):

    WT_Make2D
      WT_Visible
        WT_Cut        (only when clipping output is on)
        WT_Outline
        WT_Convex
        WT_Concave
      WT_Hidden       (only when hidden output is on; "Hidden" linetype)

Visible class layers get weight  w0 * (n - i) ** p  where i is the class's
position in the in-use list (heaviest first) and n its length. A layer that
already exists keeps whatever weight it has: the first run that creates a
layer decides its weight, later runs leave user edits alone.

Layer storage is injected (find_by_name / create / find_linetype) so the
policy runs against a live document or InMemoryLayerTable alike.
"""

from .model import VISIBLE_CLASS_ORDER, WeightClass

LAYER_KIND = "layer"


def gradient_weight(i, n, base_weight=0.15, exponent=1.5):
    """Line weight for the class at position i of n (0 = heaviest).

    Examples:
        >>> round(gradient_weight(0, 4), 4)
        1.2
        >>> gradient_weight(3, 4)
        0.15
    """
    if n <= 0:
        raise ValueError("n must be positive")
    if not 0 <= i < n:
        raise ValueError("i must be in [0, n)")
    return float(base_weight) * float(n - i) ** float(exponent)


def classes_in_use(include_clipping):
    """Visible weight classes drawn in this run, heaviest first."""
    return [wc for wc in VISIBLE_CLASS_ORDER if include_clipping or wc is not WeightClass.CUT]


class LayerNode(object):
    """A layer as seen through a layer repository.

    Attributes:
        name (str)
        parent (str or None): Parent layer name
        plot_weight (float or None)
        linetype: Linetype handle/name or None
        kind (str): "layer" for real layers; anything else is a name conflict
        exists (bool): False until the repository has stored it
    """

    def __init__(self, name, parent=None, plot_weight=None, linetype=None, kind=LAYER_KIND,
                 exists=True):
        self.name = str(name)
        self.parent = parent
        self.plot_weight = None if plot_weight is None else float(plot_weight)
        self.linetype = linetype
        self.kind = kind
        self.exists = bool(exists)

    @property
    def is_layer(self):
        return self.kind == LAYER_KIND

    def __repr__(self):
        return "LayerNode({!r}, parent={!r}, weight={})".format(self.name, self.parent, self.plot_weight)


class InMemoryLayerTable(object):
    """Dict-backed layer repository (tests, offline runs).

    Attributes:
        nodes: name -> LayerNode
        linetypes: Names of available line patterns
        create_calls: Names passed to create(), in order
    """

    def __init__(self, linetypes=("Continuous", "Hidden")):
        self.nodes = {}
        self.linetypes = set(linetypes or ())
        self.create_calls = []

    def find_by_name(self, name):
        return self.nodes.get(name)

    def create(self, name, parent=None, plot_weight=None, linetype=None):
        if name in self.nodes:
            raise ValueError("layer already exists: {}".format(name))
        node = LayerNode(name, parent=parent, plot_weight=plot_weight, linetype=linetype)
        self.nodes[name] = node
        self.create_calls.append(name)
        return node

    def find_linetype(self, name):
        return name if name in self.linetypes else None

    def children_of(self, name):
        return sorted(n.name for n in self.nodes.values() if n.parent == name)


def find_or_create(repo, name, parent=None, plot_weight=None, linetype=None):
    """Return (node, existed). New layers get plot_weight/linetype; old ones are untouched."""
    node = repo.find_by_name(name)
    if node is not None:
        return node, True
    node = repo.create(name, parent=parent, plot_weight=plot_weight, linetype=linetype)
    return node, False


class LayerPlan(object):
    """Result of ensure_layers: where each weight class goes.

    Attributes:
        layers: WeightClass -> layer name
        weights: WeightClass -> weight written at creation (None if pre-existing)
        created: Layer names created by this run
        conflicts: Layer names found but not usable as layers
    """

    def __init__(self):
        self.layers = {}
        self.weights = {}
        self.created = []
        self.conflicts = []

    def layer_for(self, weight_class):
        return self.layers.get(weight_class)

    def weight_for(self, weight_class):
        return self.weights.get(weight_class)

    def to_dict(self):
        return {
            "layers": dict((wc.label, name) for wc, name in self.layers.items()),
            "weights": dict((wc.label, w) for wc, w in self.weights.items()),
            "created": list(self.created),
            "conflicts": list(self.conflicts),
        }


def _note(plan, node, existed, diag):
    if not existed:
        plan.created.append(node.name)
        return
    if not getattr(node, "is_layer", True):
        plan.conflicts.append(node.name)
        if diag is not None:
            diag.warn(
                phase="layers",
                callsite="find_or_create",
                message="Name exists but is not a layer; weight left unchanged",
                extra={"name": node.name, "kind": getattr(node, "kind", None)},
            )


def ensure_layers(repo, cfg, diag=None):
    """Create the layer tree for this run and return its LayerPlan.

    Args:
        repo: Layer repository (find_by_name, create, find_linetype)
        cfg: Config (layer names, flags, weight gradient)
        diag: Diagnostics (optional)
    """
    plan = LayerPlan()

    root, existed = find_or_create(repo, cfg.root_layer)
    _note(plan, root, existed, diag)
    visible, existed = find_or_create(repo, cfg.visible_layer, parent=root.name)
    _note(plan, visible, existed, diag)

    if cfg.include_hidden_lines:
        linetype = repo.find_linetype(cfg.hidden_linetype)
        if linetype is None and diag is not None:
            diag.debug(
                phase="layers",
                callsite="find_linetype",
                message="Hidden linetype not found; hidden layer uses default pattern",
                extra={"linetype": cfg.hidden_linetype},
            )
        hidden, existed = find_or_create(
            repo, cfg.hidden_layer, parent=root.name,
            plot_weight=cfg.hidden_weight, linetype=linetype,
        )
        _note(plan, hidden, existed, diag)
        plan.layers[WeightClass.HIDDEN] = hidden.name
        plan.weights[WeightClass.HIDDEN] = None if existed else cfg.hidden_weight

    in_use = classes_in_use(cfg.clipping_enabled)
    n = len(in_use)
    for i, wc in enumerate(in_use):
        weight = gradient_weight(i, n, cfg.base_weight, cfg.weight_exponent)
        node, existed = find_or_create(
            repo, cfg.layer_name_for(wc), parent=visible.name, plot_weight=weight,
        )
        _note(plan, node, existed, diag)
        plan.layers[wc] = node.name
        plan.weights[wc] = None if existed else weight

    return plan
