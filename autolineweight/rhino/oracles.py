"""Edge-concavity oracle and colour resolver bound to a Rhino document."""

from ..core.model import Concavity, parse_enum


def _guid(value):
    from System import Guid

    if isinstance(value, Guid):
        return value
    return Guid(str(value))


def make_concavity_oracle(doc):
    """fn(parent_record, point, tolerance) -> Concavity.

    Resolves the source BrepEdge from (object id, component index) and samples
    ConcavityAt at the edge parameter closest to `point`. Returns NONE when the
    component is not an edge.
    """

    def _oracle(parent, point, tol):
        from Rhino.DocObjects import ObjRef
        from Rhino.Geometry import Point3d

        edge = parent.edge_ref
        if edge is None:
            edge = ObjRef(doc, _guid(parent.source_object_id), parent.component_index).Edge()
        if edge is None:
            return Concavity.NONE

        result = edge.ClosestPoint(Point3d(point[0], point[1], point[2]))
        t = result[1] if isinstance(result, tuple) else result
        return parse_enum(Concavity, str(edge.ConcavityAt(t, tol)), Concavity.NONE)

    return _oracle


def make_color_resolver(doc):
    """fn(source_object_id) -> (draw colour, plot colour) of the source object."""

    def _resolve(source_object_id):
        if source_object_id is None:
            return (None, None)
        obj = doc.Objects.FindId(_guid(source_object_id))
        if obj is None:
            return (None, None)
        attrs = obj.Attributes
        return (attrs.DrawColor(doc), attrs.ComputedPlotColor(doc))

    return _resolve
