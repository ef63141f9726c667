"""
Generation policies for the crystalline mountain.

This module contains all policy dataclasses used by the generation module.
All policies are JSON-serializable and support the "requested vs effective" pattern.

UNIT CONVENTIONS
----------------
Geometric values are in scene units. Y is up; the mountain base sits on
the y = 0 plane and its axis is the +Y axis through the origin.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List, Literal, Tuple

from .base import check_range, check_int, check_positive, check_color, coerce_color


Color = Tuple[float, float, float, float]

# Hard limits; values outside are configuration errors.
MIN_SHELLS = 1
MAX_SHELLS = 16
MIN_RESOLUTION = 3
MAX_RESOLUTION = 72

# Recommended minima; values between the hard and recommended limits warn.
RECOMMENDED_MIN_SHELLS = 3
RECOMMENDED_MIN_RESOLUTION = 8

# Child length decay is (0.6 - 0.1 * depth); depth 6 is the last positive term.
MAX_SUB_BRANCH_LEVELS = 6


def _colors_from_dict(d: Dict[str, Any], keys: List[str]) -> Dict[str, Any]:
    d = dict(d)
    for key in keys:
        if key in d and d[key] is not None:
            d[key] = coerce_color(d[key])
    return d


@dataclass
class ShellPolicy:
    """
    Policy for the concentric cone shells that form the rock body.

    Shell i has radius ``base_radius - i * radius_decrement`` and height
    ``base_height - i * height_decrement``; shell 0 is the outermost.

    JSON Schema:
    {
        "number_of_cones": int [1, 16],
        "cone_resolution": int [3, 72],
        "base_radius": float,
        "base_height": float,
        "radius_decrement": float,
        "height_decrement": float,
        "noise_frequency": float,
        "noise_amplitude": float,
        "facet_chance_outer": float (0-1),
        "facet_chance_middle": float (0-1),
        "facet_chance_inner": float (0-1),
        "facet_height_fraction": float,
        "facet_width_fraction": float,
        "facet_jitter": [float, float]
    }
    """
    number_of_cones: int = 5
    cone_resolution: int = 36
    base_radius: float = 20.0
    base_height: float = 15.0
    radius_decrement: float = 3.0
    height_decrement: float = 2.0
    noise_frequency: float = 0.1
    noise_amplitude: float = 0.2
    facet_chance_outer: float = 0.9
    facet_chance_middle: float = 0.6
    facet_chance_inner: float = 0.4
    facet_height_fraction: float = 0.3
    facet_width_fraction: float = 0.15
    facet_jitter: Tuple[float, float] = (0.7, 1.3)

    def shell_radius(self, index: int) -> float:
        return self.base_radius - index * self.radius_decrement

    def shell_height(self, index: int) -> float:
        return self.base_height - index * self.height_decrement

    def facet_chance(self, index: int) -> float:
        """Facet probability for shell ``index``; outer shells get more facets."""
        if index == 0:
            return self.facet_chance_outer
        if index == self.number_of_cones - 1:
            return self.facet_chance_inner
        return self.facet_chance_middle

    def validate(self) -> List[str]:
        errors = []
        errors += check_int("number_of_cones", self.number_of_cones, MIN_SHELLS, MAX_SHELLS)
        errors += check_int("cone_resolution", self.cone_resolution, MIN_RESOLUTION, MAX_RESOLUTION)
        errors += check_positive("base_radius", self.base_radius)
        errors += check_positive("base_height", self.base_height)
        errors += check_range("radius_decrement", self.radius_decrement, 0.0)
        errors += check_range("height_decrement", self.height_decrement, 0.0)
        errors += check_range("noise_frequency", self.noise_frequency)
        errors += check_range("noise_amplitude", self.noise_amplitude, 0.0, 1.0)
        for name in ("facet_chance_outer", "facet_chance_middle", "facet_chance_inner"):
            errors += check_range(name, getattr(self, name), 0.0, 1.0)
        errors += check_range("facet_height_fraction", self.facet_height_fraction, 0.0)
        errors += check_range("facet_width_fraction", self.facet_width_fraction, 0.0)
        low, high = self.facet_jitter
        jitter_errors = check_range("facet_jitter low", low, 0.0) + check_range("facet_jitter high", high, 0.0)
        errors += jitter_errors
        if not jitter_errors and low > high:
            errors.append(f"facet_jitter low bound {low} exceeds high bound {high}")
        if errors:
            return errors

        # Every derived shell must stay a proper cone
        for i in range(self.number_of_cones):
            radius = self.shell_radius(i)
            height = self.shell_height(i)
            if radius <= 0:
                errors.append(
                    f"shell {i} radius would be {radius:g} "
                    f"(base_radius={self.base_radius}, radius_decrement={self.radius_decrement})"
                )
            if height <= 0:
                errors.append(
                    f"shell {i} height would be {height:g} "
                    f"(base_height={self.base_height}, height_decrement={self.height_decrement})"
                )
        return errors

    def recommendations(self) -> List[str]:
        warnings = []
        if self.number_of_cones < RECOMMENDED_MIN_SHELLS:
            warnings.append(
                f"number_of_cones={self.number_of_cones} is below the recommended "
                f"minimum of {RECOMMENDED_MIN_SHELLS}"
            )
        if self.cone_resolution < RECOMMENDED_MIN_RESOLUTION:
            warnings.append(
                f"cone_resolution={self.cone_resolution} is below the recommended "
                f"minimum of {RECOMMENDED_MIN_RESOLUTION}"
            )
        return warnings

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ShellPolicy":
        d = dict(d)
        if "facet_jitter" in d:
            d["facet_jitter"] = tuple(d["facet_jitter"])
        return ShellPolicy(**{k: v for k, v in d.items() if k in ShellPolicy.__dataclass_fields__})


@dataclass
class VeinPolicy:
    """
    Policy for the fractal vein network.

    JSON Schema:
    {
        "enabled": bool,
        "main_branches": int,
        "sub_branch_levels": int [0, 6],
        "branches_per_level": int,
        "branch_thickness": float,
        "branch_length_factor": float,
        "branch_randomness": float (0-1),
        "main_color": [r, g, b, a],
        "sub_color": [r, g, b, a]
    }
    """
    enabled: bool = True
    main_branches: int = 12
    sub_branch_levels: int = 3
    branches_per_level: int = 3
    branch_thickness: float = 0.4
    branch_length_factor: float = 0.7
    branch_randomness: float = 0.2
    main_color: Color = (1.0, 1.0, 1.0, 0.95)
    sub_color: Color = (1.0, 0.98, 0.95, 0.9)

    def validate(self) -> List[str]:
        errors = []
        errors += check_int("main_branches", self.main_branches, 0)
        errors += check_int("sub_branch_levels", self.sub_branch_levels, 0, MAX_SUB_BRANCH_LEVELS)
        errors += check_int("branches_per_level", self.branches_per_level, 0)
        errors += check_positive("branch_thickness", self.branch_thickness)
        errors += check_positive("branch_length_factor", self.branch_length_factor)
        errors += check_range("branch_randomness", self.branch_randomness, 0.0, 1.0)
        errors += check_color("main_color", self.main_color)
        errors += check_color("sub_color", self.sub_color)
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "VeinPolicy":
        d = _colors_from_dict(d, ["main_color", "sub_color"])
        return VeinPolicy(**{k: v for k, v in d.items() if k in VeinPolicy.__dataclass_fields__})


@dataclass
class TubeMeshPolicy:
    """
    Policy for vein tube meshing.

    JSON Schema:
    {
        "segments": int,
        "sides": int,
        "taper": float (0-1),
        "tube_color": [r, g, b, a]
    }
    """
    segments: int = 5
    sides: int = 6
    taper: float = 0.3
    tube_color: Color = (1.0, 1.0, 1.0, 0.95)

    def validate(self) -> List[str]:
        errors = []
        errors += check_int("segments", self.segments, 1)
        errors += check_int("sides", self.sides, 3)
        taper_errors = check_range("taper", self.taper, 0.0)
        if not taper_errors and self.taper >= 1.0:
            taper_errors.append(f"taper must lie in [0, 1), got {self.taper}")
        errors += taper_errors
        errors += check_color("tube_color", self.tube_color)
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TubeMeshPolicy":
        d = _colors_from_dict(d, ["tube_color"])
        return TubeMeshPolicy(**{k: v for k, v in d.items() if k in TubeMeshPolicy.__dataclass_fields__})


@dataclass
class WireframePolicy:
    """
    Policy for the wireframe edge skeleton.

    JSON Schema:
    {
        "enabled": bool,
        "color": [r, g, b, a],
        "thickness": float,
        "emission_intensity": float
    }
    """
    enabled: bool = True
    color: Color = (0.8, 0.9, 1.0, 0.8)
    thickness: float = 0.05
    emission_intensity: float = 2.5

    def validate(self) -> List[str]:
        errors = check_color("wireframe color", self.color)
        errors += check_range("wireframe thickness", self.thickness, 0.0)
        errors += check_range("wireframe emission_intensity", self.emission_intensity, 0.0)
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "WireframePolicy":
        d = _colors_from_dict(d, ["color"])
        return WireframePolicy(**{k: v for k, v in d.items() if k in WireframePolicy.__dataclass_fields__})


@dataclass
class AppearancePolicy:
    """
    Material hints handed to the presentation layer.

    None of these values affect geometry.
    """
    crystal_color: Color = (0.8, 0.9, 1.0, 0.05)
    emission_color: Color = (0.9, 0.95, 1.0, 1.0)
    emission_intensity: float = 1.5
    roughness: float = 0.05
    metallic: float = 0.0

    def validate(self) -> List[str]:
        errors = check_color("crystal_color", self.crystal_color)
        errors += check_color("emission_color", self.emission_color)
        errors += check_range("emission_intensity", self.emission_intensity, 0.0)
        errors += check_range("roughness", self.roughness, 0.0, 1.0)
        errors += check_range("metallic", self.metallic, 0.0, 1.0)
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AppearancePolicy":
        d = _colors_from_dict(d, ["crystal_color", "emission_color"])
        return AppearancePolicy(**{k: v for k, v in d.items() if k in AppearancePolicy.__dataclass_fields__})


@dataclass
class AssemblyPolicy:
    """
    Policy for final buffer assembly.

    ``max_vertices_per_buffer`` guards the index width of the target
    renderer (60000 leaves headroom under a 16-bit index budget).

    JSON Schema:
    {
        "max_vertices_per_buffer": int,
        "overflow_mode": "split" | "error"
    }
    """
    max_vertices_per_buffer: int = 60000
    overflow_mode: Literal["split", "error"] = "split"

    def validate(self) -> List[str]:
        errors = check_int("max_vertices_per_buffer", self.max_vertices_per_buffer, 3)
        if self.overflow_mode not in ("split", "error"):
            errors.append(f"overflow_mode must be 'split' or 'error', got {self.overflow_mode!r}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AssemblyPolicy":
        return AssemblyPolicy(**{k: v for k, v in d.items() if k in AssemblyPolicy.__dataclass_fields__})


@dataclass
class MountainPolicy:
    """
    Top-level policy for one crystalline mountain generation pass.

    JSON Schema:
    {
        "seed": int | null,
        "shells": ShellPolicy,
        "veins": VeinPolicy,
        "tubes": TubeMeshPolicy,
        "wireframe": WireframePolicy,
        "appearance": AppearancePolicy,
        "assembly": AssemblyPolicy
    }
    """
    seed: Optional[int] = None
    shells: ShellPolicy = field(default_factory=ShellPolicy)
    veins: VeinPolicy = field(default_factory=VeinPolicy)
    tubes: TubeMeshPolicy = field(default_factory=TubeMeshPolicy)
    wireframe: WireframePolicy = field(default_factory=WireframePolicy)
    appearance: AppearancePolicy = field(default_factory=AppearancePolicy)
    assembly: AssemblyPolicy = field(default_factory=AssemblyPolicy)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "MountainPolicy":
        return MountainPolicy(
            seed=d.get("seed"),
            shells=ShellPolicy.from_dict(d.get("shells", {})),
            veins=VeinPolicy.from_dict(d.get("veins", {})),
            tubes=TubeMeshPolicy.from_dict(d.get("tubes", {})),
            wireframe=WireframePolicy.from_dict(d.get("wireframe", {})),
            appearance=AppearancePolicy.from_dict(d.get("appearance", {})),
            assembly=AssemblyPolicy.from_dict(d.get("assembly", {})),
        )


def validate_mountain_policy(policy: MountainPolicy) -> List[str]:
    """
    Validate every sub-policy of a mountain policy.

    Returns
    -------
    List[str]
        Validation error messages (empty if valid)
    """
    errors = []
    errors += policy.shells.validate()
    errors += policy.veins.validate()
    errors += policy.tubes.validate()
    errors += policy.wireframe.validate()
    errors += policy.appearance.validate()
    errors += policy.assembly.validate()
    return errors
