"""
RhinoCommon adapters for the weighted Make2D pipeline.

Every module here must import under pytest (outside Rhino): `Rhino` and
`System` are imported inside functions only.

Modules:
- curves: RhinoCurve (engine curve protocol over Rhino.Geometry.Curve)
- make2d: Projection service over HiddenLineDrawing
- intersects: Solid/solid intersection service over Intersection.BrepBrep
- oracles: Edge concavity oracle and colour resolver
- layers: Layer repository over doc.Layers
"""
