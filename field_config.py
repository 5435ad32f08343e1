# field_config.py
"""
Configuration surface of the particle field animator.

Every constant that differs between the places the field is shown (the
landing page, the dashboard background and the loading screen) is a field
of `FieldConfig`. Divergent behaviors, such as wrapping versus bouncing at
the edges or attracting versus repelling around the pointer, are exposed
as enums rather than hard-coded.
"""
import dataclasses
import logging
import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from constants import (
    COMPACT_BREAKPOINT, CORE_WHITE, DASHBOARD_BACKGROUND, DEPTH_CONSTANT,
    HUE_WHEEL_COLORS, LANDING_BACKGROUND, LANDING_COLORS, LANDING_EDGE_COLOR,
    LOADING_BACKGROUND, LOADING_SURFACE_SIZE, NEON_COLORS, Z_MAX
)

# --- Data Contracts ---
#
# class FieldConfig (frozen dataclass):
#   - Validated on construction. Any invalid value is logged at CRITICAL
#     and raised as ValueError.
#   - count_for_width(width: int) -> int:
#     - Outputs: particle_count, or compact_particle_count when the
#       viewport is narrower than compact_breakpoint.
#   - from_dict(params: Dict[str, Any], base: Optional[FieldConfig]) -> FieldConfig:
#     - Inputs: overrides keyed by field name, usually the "field" section
#       of config.json. Lists become tuples, enum names become enums.
#     - Outputs: a new FieldConfig. Unknown keys raise ValueError.
#
# preset(name: str) -> FieldConfig:
#   - Outputs: one of "dashboard", "landing", "loading".
#   - Raises KeyError for unknown names.


class BoundaryPolicy(Enum):
    """How a particle is kept inside its range on one axis."""
    WRAP = "wrap"      # Teleport to the opposite edge.
    BOUNCE = "bounce"  # Clamp to the edge and invert the velocity component.


class PointerForce(Enum):
    """Sign of the impulse applied to particles near the pointer."""
    ATTRACT = "attract"
    REPEL = "repel"

    @property
    def sign(self) -> float:
        return 1.0 if self is PointerForce.ATTRACT else -1.0


class EdgeMetric(Enum):
    """Distance used to decide whether two particles are connected."""
    PLANAR = "planar"    # 2D distance between projected screen positions.
    SPATIAL = "spatial"  # 3D distance between world positions.


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _as_float(value) -> float:
    if not _is_number(value):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    return float(value)


def _as_int(value) -> int:
    """JSON has one number type, so integral floats such as 40.0 are accepted."""
    if not _is_number(value):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if not float(value).is_integer():
        raise ValueError(f"expected an integer, got {value}")
    return int(value)


def _as_bool(value) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected true or false, got {type(value).__name__}")
    return value


def _tuple_of(convert: Callable[[Any], Any]) -> Callable[[Any], tuple]:
    def build(value):
        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
            raise TypeError(f"expected a list, got {type(value).__name__}")
        return tuple(convert(v) for v in value)
    return build


def _as_color_name(value) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a color string, got {type(value).__name__}")
    return value


# Fixed lengths of the tuple-valued fields.
_TUPLE_LENGTHS = {
    "initial_speed": 3,
    "size_range": 2,
    "opacity_range": 2,
    "wave_amplitude": 2,
    "edge_color": 3,
    "core_color": 3,
    "background_color": 3,
    "surface_size": 2,
}

# Fields where None is a meaningful value.
_OPTIONAL_FIELDS = {"compact_particle_count", "seed", "edge_color", "core_color", "surface_size"}


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class FieldConfig:
    """
    All tunable constants of one particle field.

    The defaults reproduce the dashboard background.
    """
    # Population
    particle_count: int = 250
    compact_particle_count: Optional[int] = 150
    compact_breakpoint: int = COMPACT_BREAKPOINT
    palette: Tuple[str, ...] = tuple(NEON_COLORS)
    seed: Optional[int] = None
    initial_speed: Tuple[float, float, float] = (0.75, 0.75, 2.0)
    size_range: Tuple[float, float] = (1.5, 6.5)
    opacity_range: Tuple[float, float] = (0.3, 1.0)

    # Depth and projection
    z_max: float = Z_MAX
    depth_constant: float = DEPTH_CONSTANT

    # Physics
    time_step: float = 0.008
    wave_amplitude: Tuple[float, float] = (0.8, 0.8)
    wave_phase_offset: float = 0.1
    wave_swap: bool = False  # Drive x with cos and y with sin.
    depth_wave: float = 0.5
    rotation_speed: float = 0.0
    pointer_radius: float = 200.0
    pointer_force: PointerForce = PointerForce.REPEL
    pointer_strength: float = 0.3
    pointer_jitter: float = 0.1
    friction: float = 0.99
    boundary: BoundaryPolicy = BoundaryPolicy.WRAP
    depth_boundary: BoundaryPolicy = BoundaryPolicy.WRAP
    edge_margin: float = 50.0
    pulse_step: float = 0.05

    # Rendering
    pulse_amplitude: float = 0.3
    opacity_pulse: float = 0.0
    trail_length: int = 8
    trail_alpha: float = 0.3
    trail_width: float = 0.3
    edge_threshold: float = 100.0
    edge_metric: EdgeMetric = EdgeMetric.SPATIAL
    edge_alpha: float = 0.3
    edge_width: float = 2.0
    taper_edges: bool = True
    edge_color: Optional[Color] = None
    glow_ratio: float = 3.0
    core_color: Optional[Color] = CORE_WHITE
    background_color: Color = DASHBOARD_BACKGROUND
    fade_alpha: float = 0.08
    surface_size: Optional[Tuple[int, int]] = field(default=None)

    def __post_init__(self):
        errors = self._check_types()
        if not errors:
            errors = self._validate()
        if errors:
            msg = "Configuration error: " + "; ".join(errors)
            logging.critical(msg)
            raise ValueError(msg)

    def _check_types(self) -> list:
        """Type errors are reported before range checks, which assume numbers."""
        errors = []
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.name in _TUPLE_LENGTHS:
                if value is None and f.name in _OPTIONAL_FIELDS:
                    continue
                if not isinstance(value, tuple) or len(value) != _TUPLE_LENGTHS[f.name] \
                        or not all(_is_number(v) for v in value):
                    errors.append(f"{f.name} needs {_TUPLE_LENGTHS[f.name]} numbers, got {value!r}")
            elif f.type in (int, Optional[int]):
                if value is None and f.name in _OPTIONAL_FIELDS:
                    continue
                if not _is_number(value) or not isinstance(value, numbers.Integral):
                    errors.append(f"{f.name} must be an integer, got {value!r}")
            elif f.type is float:
                if not _is_number(value):
                    errors.append(f"{f.name} must be a number, got {value!r}")
            elif f.type is bool:
                if not isinstance(value, bool):
                    errors.append(f"{f.name} must be true or false, got {value!r}")
            elif isinstance(f.type, type) and issubclass(f.type, Enum):
                if not isinstance(value, f.type):
                    errors.append(f"{f.name} must be one of {[m.value for m in f.type]}, got {value!r}")
        if not isinstance(self.palette, tuple) or not all(isinstance(c, str) for c in self.palette):
            errors.append(f"palette must be a sequence of color strings, got {self.palette!r}")
        return errors

    def _validate(self) -> list:
        errors = []
        if self.particle_count < 0:
            errors.append(f"particle_count must be >= 0, got {self.particle_count}")
        if self.compact_particle_count is not None and self.compact_particle_count < 0:
            errors.append(f"compact_particle_count must be >= 0, got {self.compact_particle_count}")
        if not self.palette:
            errors.append("palette must contain at least one color")
        if len(self.initial_speed) != 3:
            errors.append("initial_speed needs one value per axis (x, y, z)")
        for name in ("size_range", "opacity_range"):
            low, high = getattr(self, name)
            if low > high:
                errors.append(f"{name} is inverted: {low} > {high}")
        low, high = self.opacity_range
        if low < 0.0 or high > 1.0:
            errors.append(f"opacity_range must lie in [0, 1], got {self.opacity_range}")
        for name in ("z_max", "depth_constant", "pointer_radius", "edge_threshold"):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be > 0, got {getattr(self, name)}")
        if not 0.0 < self.friction <= 1.0:
            errors.append(f"friction must be in (0, 1], got {self.friction}")
        if self.trail_length < 1:
            errors.append(f"trail_length must be >= 1, got {self.trail_length}")
        if not 0.0 <= self.fade_alpha <= 1.0:
            errors.append(f"fade_alpha must be in [0, 1], got {self.fade_alpha}")
        if self.edge_margin < 0:
            errors.append(f"edge_margin must be >= 0, got {self.edge_margin}")
        if self.surface_size is not None and min(self.surface_size) <= 0:
            errors.append(f"surface_size must be positive, got {self.surface_size}")
        return errors

    def count_for_width(self, width: int) -> int:
        """Returns the particle count for a viewport of the given width."""
        if self.compact_particle_count is not None and width <= self.compact_breakpoint:
            return self.compact_particle_count
        return self.particle_count

    @classmethod
    def from_dict(cls, params: Dict[str, Any], base: Optional["FieldConfig"] = None) -> "FieldConfig":
        """
        Builds a config from a dictionary of overrides.

        Args:
            params (Dict[str, Any]): Field names mapped to new values.
            base (Optional[FieldConfig]): Config to override. Defaults to
                the dashboard defaults.

        Returns:
            FieldConfig: The merged, validated config.
        """
        base = base if base is not None else cls()
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            msg = f"Configuration error: unknown field setting(s) {unknown}."
            logging.critical(msg)
            raise ValueError(msg)

        overrides = {}
        for key, value in params.items():
            convert = _CONVERTERS.get(key)
            if convert is not None and value is not None:
                try:
                    value = convert(value)
                except (ValueError, TypeError) as e:
                    msg = f"Configuration error: invalid value for {key!r}: {value!r} ({e})."
                    logging.critical(msg)
                    raise ValueError(msg) from e
            overrides[key] = value
        logging.debug(f"Applying {len(overrides)} field override(s): {sorted(overrides)}")
        return dataclasses.replace(base, **overrides)


_CONVERTERS: Dict[str, Callable[[Any], Any]] = {
    "palette": _tuple_of(_as_color_name),
    "initial_speed": _tuple_of(_as_float),
    "size_range": _tuple_of(_as_float),
    "opacity_range": _tuple_of(_as_float),
    "wave_amplitude": _tuple_of(_as_float),
    "edge_color": _tuple_of(_as_int),
    "core_color": _tuple_of(_as_int),
    "background_color": _tuple_of(_as_int),
    "surface_size": _tuple_of(_as_int),
    "pointer_force": PointerForce,
    "boundary": BoundaryPolicy,
    "depth_boundary": BoundaryPolicy,
    "edge_metric": EdgeMetric,
}
_CONVERTERS.update({
    f.name: _as_int for f in dataclasses.fields(FieldConfig) if f.type in (int, Optional[int])
})
_CONVERTERS.update({
    f.name: _as_float for f in dataclasses.fields(FieldConfig) if f.type is float
})
_CONVERTERS.update({
    f.name: _as_bool for f in dataclasses.fields(FieldConfig) if f.type is bool
})


# --- Presets ---
# One per place the field is shown. The dashboard preset is the default.

DASHBOARD = FieldConfig()

LANDING = FieldConfig(
    particle_count=150,
    compact_particle_count=None,
    palette=tuple(LANDING_COLORS),
    initial_speed=(0.4, 0.4, 1.0),
    size_range=(1.0, 4.0),
    opacity_range=(1.0, 1.0),
    time_step=0.01,
    wave_amplitude=(0.3, 0.5),
    wave_swap=True,
    depth_wave=0.0,
    rotation_speed=0.001,
    pointer_force=PointerForce.ATTRACT,
    pointer_jitter=0.0,
    friction=0.98,
    edge_margin=0.0,
    pulse_amplitude=0.0,
    trail_alpha=0.0,
    edge_metric=EdgeMetric.PLANAR,
    edge_width=1.0,
    taper_edges=False,
    edge_color=LANDING_EDGE_COLOR,
    core_color=None,
    background_color=LANDING_BACKGROUND,
    fade_alpha=0.15,
)

LOADING = FieldConfig(
    particle_count=150,
    compact_particle_count=None,
    palette=tuple(HUE_WHEEL_COLORS),
    initial_speed=(1.0, 1.0, 3.0),
    size_range=(2.0, 5.0),
    opacity_range=(0.5, 1.0),
    time_step=0.02,
    wave_amplitude=(0.4, 0.4),
    depth_wave=0.0,
    pointer_radius=100.0,
    pointer_force=PointerForce.ATTRACT,
    pointer_jitter=0.0,
    friction=0.97,
    boundary=BoundaryPolicy.BOUNCE,
    depth_boundary=BoundaryPolicy.BOUNCE,
    edge_margin=0.0,
    opacity_pulse=0.2,
    trail_length=6,
    edge_threshold=80.0,
    edge_metric=EdgeMetric.PLANAR,
    glow_ratio=4.0,
    background_color=LOADING_BACKGROUND,
    fade_alpha=0.12,
    surface_size=LOADING_SURFACE_SIZE,
)

PRESETS: Dict[str, FieldConfig] = {
    "dashboard": DASHBOARD,
    "landing": LANDING,
    "loading": LOADING,
}


def preset(name: str) -> FieldConfig:
    """Looks up a preset by name."""
    try:
        return PRESETS[name]
    except KeyError:
        logging.error(f"Unknown preset '{name}'. Available: {sorted(PRESETS)}")
        raise
