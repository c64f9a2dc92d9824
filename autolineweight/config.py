"""
Configuration for weighted Make2D.

Defines the Config class with the output flags, tolerance, layer names and
line-weight gradient used by the pipeline.
"""

from .core.model import WeightClass

STAGE_INTERSECTIONS = "intersection_segmentation"
STAGE_SILHOUETTE = "scene_silhouette"
STAGE_CLIPPING = "clipping"

_DEFAULT_CLASS_LAYERS = {
    "Cut": "WT_Cut",
    "Outline": "WT_Outline",
    "Convex": "WT_Convex",
    "Concave": "WT_Concave",
}


class Config:
    """Configuration for a weighted Make2D run.

    Attributes:
        include_hidden_lines (bool): Draw hidden segments on the hidden layer (default: False)
        include_clipping_cuts (bool): Draw section cuts from clipping planes (default: False)
        include_scene_silhouette (bool): Ask the projection for scene silhouettes (default: True)
        include_tangent_edges (bool): Project tangent edges (default: True)
        intersection_segmentation (bool): Re-split outline/convex lines where
            solid/solid intersection curves run along them (default: True)
        flatten_to_page (bool): Move output so the drawing's bbox min is the origin (default: True)
        select_output (bool): Mark output pieces for selection (default: True)
        tolerance (float): Absolute model tolerance (default: 0.001)
        base_weight (float): w0 of the weight gradient in mm (default: 0.15)
        weight_exponent (float): p of the weight gradient (default: 1.5)
        hidden_weight (float): Weight of a newly created hidden layer (default: 0.1)
        hidden_linetype (str): Line pattern requested for hidden lines (default: "Hidden")
        root_layer, visible_layer, hidden_layer (str): Layer tree names
        class_layer_names (dict): Class label -> layer name for visible classes
        perf_collect_timings (bool): Collect per-stage timings (default: True)
        max_diagnostic_events (int): Event cap for Diagnostics (default: 200)

    Commentary:
        ✔ Scene silhouette and clipping cuts are mutually exclusive; when both
          are requested silhouette wins (clipping_enabled is False)
        ✔ Weight for class i of n in use: base_weight * (n - i) ** weight_exponent
        ⚠ tolerance should match the document's absolute tolerance; intersection
          overlaps shorter than it are not reported

    Example:
        >>> cfg = Config()
        >>> cfg.clipping_enabled
        False
        >>> cfg.layer_name_for(WeightClass.OUTLINE)
        'WT_Outline'
    """

    def __init__(
        self,
        include_hidden_lines=False,
        include_clipping_cuts=False,
        include_scene_silhouette=True,
        include_tangent_edges=True,
        intersection_segmentation=True,
        flatten_to_page=True,
        select_output=True,
        tolerance=0.001,
        # Weight gradient
        base_weight=0.15,
        weight_exponent=1.5,
        hidden_weight=0.1,
        hidden_linetype="Hidden",
        # Layer tree
        root_layer="WT_Make2D",
        visible_layer="WT_Visible",
        hidden_layer="WT_Hidden",
        class_layer_names=None,
        # Diagnostics
        perf_collect_timings=True,
        max_diagnostic_events=200,
    ):
        self.include_hidden_lines = bool(include_hidden_lines)
        self.include_clipping_cuts = bool(include_clipping_cuts)
        self.include_scene_silhouette = bool(include_scene_silhouette)
        self.include_tangent_edges = bool(include_tangent_edges)
        self.intersection_segmentation = bool(intersection_segmentation)
        self.flatten_to_page = bool(flatten_to_page)
        self.select_output = bool(select_output)
        self.tolerance = float(tolerance)

        self.base_weight = float(base_weight)
        self.weight_exponent = float(weight_exponent)
        self.hidden_weight = float(hidden_weight)
        self.hidden_linetype = str(hidden_linetype)

        self.root_layer = str(root_layer)
        self.visible_layer = str(visible_layer)
        self.hidden_layer = str(hidden_layer)

        names = dict(_DEFAULT_CLASS_LAYERS)
        for key, value in (class_layer_names or {}).items():
            label = key.label if isinstance(key, WeightClass) else str(key).capitalize()
            names[label] = str(value)
        self.class_layer_names = names

        self.perf_collect_timings = bool(perf_collect_timings)
        self.max_diagnostic_events = int(max_diagnostic_events)

        # Validate
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if self.base_weight <= 0:
            raise ValueError("base_weight must be positive")
        if self.weight_exponent <= 0:
            raise ValueError("weight_exponent must be positive (weights must fall with rank)")
        if self.hidden_weight < 0:
            raise ValueError("hidden_weight must be non-negative")
        if self.max_diagnostic_events < 0:
            raise ValueError("max_diagnostic_events must be non-negative")
        unknown = set(self.class_layer_names) - set(_DEFAULT_CLASS_LAYERS)
        if unknown:
            raise ValueError("unknown weight classes in class_layer_names: {}".format(sorted(unknown)))
        all_names = [self.root_layer, self.visible_layer, self.hidden_layer] + list(self.class_layer_names.values())
        if len(set(all_names)) != len(all_names):
            raise ValueError("layer names must be unique")

    @property
    def clipping_enabled(self):
        """Clipping cuts requested and not suppressed by scene silhouette."""
        return self.include_clipping_cuts and not self.include_scene_silhouette

    @property
    def clipping_suppressed(self):
        """True when clipping was requested but scene silhouette took precedence."""
        return self.include_clipping_cuts and self.include_scene_silhouette

    def capabilities(self):
        """Set of optional stages enabled for this run."""
        caps = set()
        if self.intersection_segmentation:
            caps.add(STAGE_INTERSECTIONS)
        if self.include_scene_silhouette:
            caps.add(STAGE_SILHOUETTE)
        if self.clipping_enabled:
            caps.add(STAGE_CLIPPING)
        return caps

    def layer_name_for(self, weight_class):
        """Target layer name for a WeightClass."""
        if weight_class is WeightClass.HIDDEN:
            return self.hidden_layer
        return self.class_layer_names[weight_class.label]

    def __repr__(self):
        return (
            f"Config(hidden={self.include_hidden_lines}, "
            f"clipping={self.include_clipping_cuts}, "
            f"scene_silhouette={self.include_scene_silhouette}, "
            f"tangent={self.include_tangent_edges}, "
            f"intersections={self.intersection_segmentation}, "
            f"tolerance={self.tolerance}, "
            f"weights={self.base_weight}*(n-i)^{self.weight_exponent})"
        )

    def to_dict(self):
        """Export configuration as dictionary for JSON serialization."""
        return {
            "include_hidden_lines": self.include_hidden_lines,
            "include_clipping_cuts": self.include_clipping_cuts,
            "include_scene_silhouette": self.include_scene_silhouette,
            "include_tangent_edges": self.include_tangent_edges,
            "intersection_segmentation": self.intersection_segmentation,
            "flatten_to_page": self.flatten_to_page,
            "select_output": self.select_output,
            "tolerance": self.tolerance,
            "base_weight": self.base_weight,
            "weight_exponent": self.weight_exponent,
            "hidden_weight": self.hidden_weight,
            "hidden_linetype": self.hidden_linetype,
            "root_layer": self.root_layer,
            "visible_layer": self.visible_layer,
            "hidden_layer": self.hidden_layer,
            "class_layer_names": dict(self.class_layer_names),
            "perf_collect_timings": self.perf_collect_timings,
            "max_diagnostic_events": self.max_diagnostic_events,
        }

    @classmethod
    def from_dict(cls, d):
        """Create Config from dictionary (e.g., from JSON)."""
        return cls(
            include_hidden_lines=d.get("include_hidden_lines", False),
            include_clipping_cuts=d.get("include_clipping_cuts", False),
            include_scene_silhouette=d.get("include_scene_silhouette", True),
            include_tangent_edges=d.get("include_tangent_edges", True),
            intersection_segmentation=d.get("intersection_segmentation", True),
            flatten_to_page=d.get("flatten_to_page", True),
            select_output=d.get("select_output", True),
            tolerance=d.get("tolerance", 0.001),
            base_weight=d.get("base_weight", 0.15),
            weight_exponent=d.get("weight_exponent", 1.5),
            hidden_weight=d.get("hidden_weight", 0.1),
            hidden_linetype=d.get("hidden_linetype", "Hidden"),
            root_layer=d.get("root_layer", "WT_Make2D"),
            visible_layer=d.get("visible_layer", "WT_Visible"),
            hidden_layer=d.get("hidden_layer", "WT_Hidden"),
            class_layer_names=d.get("class_layer_names"),
            perf_collect_timings=d.get("perf_collect_timings", True),
            max_diagnostic_events=d.get("max_diagnostic_events", 200),
        )
