"""Layer repository over a Rhino document's layer and linetype tables."""

from ..core.weights import LAYER_KIND, LayerNode


def _node(doc, layer):
    parent = None
    try:
        parent_layer = doc.Layers.FindId(layer.ParentLayerId)
        if parent_layer is not None:
            parent = parent_layer.Name
    except Exception:
        parent = None
    node = LayerNode(
        layer.Name,
        parent=parent,
        plot_weight=layer.PlotWeight,
        linetype=layer.LinetypeIndex,
        kind="deleted" if getattr(layer, "IsDeleted", False) else LAYER_KIND,
    )
    node.index = layer.Index
    return node


class RhinoLayerTable(object):
    """find_by_name / create / find_linetype on doc.Layers and doc.Linetypes."""

    def __init__(self, doc):
        self.doc = doc

    def find_by_name(self, name):
        layer = self.doc.Layers.FindName(name)
        if layer is None:
            return None
        return _node(self.doc, layer)

    def create(self, name, parent=None, plot_weight=None, linetype=None):
        from Rhino.DocObjects import Layer

        layer = Layer()
        layer.Name = name
        if parent is not None:
            parent_layer = self.doc.Layers.FindName(parent)
            if parent_layer is not None:
                layer.ParentLayerId = parent_layer.Id
        if plot_weight is not None:
            layer.PlotWeight = float(plot_weight)
        if linetype is not None:
            layer.LinetypeIndex = int(linetype)

        idx = self.doc.Layers.Add(layer)
        if idx < 0:
            raise RuntimeError("Rhino refused to add layer {!r}".format(name))
        return _node(self.doc, self.doc.Layers.FindIndex(idx))

    def find_linetype(self, name):
        idx = self.doc.Linetypes.Find(name)
        return idx if idx >= 0 else None

    def layer_index(self, name):
        layer = self.doc.Layers.FindName(name)
        return layer.Index if layer is not None else -1
