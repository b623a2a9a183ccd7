from dataclasses import dataclass, field
from typing import Optional, List, Tuple
import numpy as np

from fresim.exceptions import ConfigurationError
from fresim.utilities.fire_util import (MaterialCategory, StructuralRole, RestraintCondition,
                                        ExposureConfiguration, STRUCTURAL_LAYER)


def _require(condition: bool, message: str, parameter: str, config_path: Optional[str] = None):
    if not condition:
        raise ConfigurationError(message, config_path=config_path, parameter=parameter)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and np.isfinite(value)


@dataclass
class ClockParams:
    """Time-scale settings of the simulation clock.

    A scale of 60 advances one simulated minute per real second.
    """
    default_time_scale: float = 60.0
    min_time_scale: float = 1.0
    max_time_scale: float = 3600.0

    def validate(self, config_path: Optional[str] = None):
        _require(_is_number(self.min_time_scale) and self.min_time_scale >= 1,
                 "Minimum time scale must be a number >= 1", "min_time_scale", config_path)
        _require(_is_number(self.max_time_scale) and self.max_time_scale >= self.min_time_scale,
                 "Maximum time scale must be >= the minimum time scale", "max_time_scale", config_path)
        _require(_is_number(self.default_time_scale)
                 and self.min_time_scale <= self.default_time_scale <= self.max_time_scale,
                 "Default time scale must lie within the time scale bounds", "default_time_scale", config_path)

@dataclass
class SpreadParams:
    """Settings of the element-to-element fire spread model.

    Attributes:
        enabled (bool): Whether spreading elements ignite neighbours.
        spread_radius_m (float): Search radius around a spreading element.
        spread_threshold_s (float): Simulated exposure time after which an element spreads fire.
        scan_interval_s (float): Simulated seconds between spread scans (0 scans every running tick).
        seed (int): Seed of the spread random generator, None for nondeterministic draws.
    """
    enabled: bool = True
    spread_radius_m: float = 3.0
    spread_threshold_s: float = 600.0
    scan_interval_s: float = 60.0
    seed: Optional[int] = None

    def validate(self, config_path: Optional[str] = None):
        _require(_is_number(self.spread_radius_m) and self.spread_radius_m > 0,
                 "Spread radius must be positive", "spread_radius_m", config_path)
        _require(_is_number(self.spread_threshold_s) and self.spread_threshold_s >= 0,
                 "Spread threshold must be non-negative", "spread_threshold_s", config_path)
        _require(_is_number(self.scan_interval_s) and self.scan_interval_s >= 0,
                 "Scan interval must be non-negative", "scan_interval_s", config_path)

@dataclass
class FireSourceParams:
    """Settings of a single ignition point.

    Growth rate is in meters per simulated minute; the radius never exceeds
    ``max_radius_m``. The check interval is measured in real seconds.
    """
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    radius_m: float = 5.0
    max_radius_m: float = 5.0
    growth_rate_m_per_min: float = 0.5
    auto_grow: bool = True
    check_interval_s: float = 0.5
    layer: str = STRUCTURAL_LAYER
    name: Optional[str] = None

    def validate(self, config_path: Optional[str] = None):
        _require(len(self.position) in (2, 3) and all(_is_number(v) for v in self.position),
                 "Fire source position must be 2 or 3 finite numbers", "position", config_path)
        _require(_is_number(self.radius_m) and self.radius_m >= 0,
                 "Fire source radius must be non-negative", "radius_m", config_path)
        _require(_is_number(self.max_radius_m) and self.max_radius_m >= self.radius_m,
                 "Maximum radius must be >= the starting radius", "max_radius_m", config_path)
        _require(_is_number(self.growth_rate_m_per_min) and self.growth_rate_m_per_min >= 0,
                 "Growth rate must be non-negative", "growth_rate_m_per_min", config_path)
        _require(_is_number(self.check_interval_s) and self.check_interval_s >= 0,
                 "Check interval must be non-negative", "check_interval_s", config_path)

@dataclass
class ElementData:
    """Definition of a structural element as produced by material mapping.

    All dimensions are in meters.
    """
    id: int
    name: Optional[str] = None
    role: int = StructuralRole.OTHER
    material: Optional[int] = MaterialCategory.UNKNOWN
    cover_m: float = 0.0
    equivalent_thickness_m: float = 0.0
    least_dimension_m: float = 0.0
    width_m: Optional[float] = None
    restraint: int = RestraintCondition.NOT_APPLICABLE
    exposure_config: int = ExposureConfiguration.FOUR_SIDES
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    bounds: Optional[Tuple[Tuple[float, float, float], Tuple[float, float, float]]] = None
    detection_center: Optional[Tuple[float, float, float]] = None
    layer: str = STRUCTURAL_LAYER

    def validate(self, config_path: Optional[str] = None):
        prefix = f"elements[{self.id}]"
        _require(self.role in StructuralRole.names, "Unknown structural role", f"{prefix}.role", config_path)
        _require(self.material is None or self.material in MaterialCategory.names,
                 "Unknown material category", f"{prefix}.material", config_path)
        _require(self.restraint in RestraintCondition.names,
                 "Unknown restraint condition", f"{prefix}.restraint", config_path)
        _require(self.exposure_config in ExposureConfiguration.names,
                 "Unknown exposure configuration", f"{prefix}.exposure_config", config_path)

        for dim in ("cover_m", "equivalent_thickness_m", "least_dimension_m"):
            value = getattr(self, dim)
            _require(_is_number(value) and value >= 0,
                     "Dimensions must be finite and non-negative", f"{prefix}.{dim}", config_path)

        if self.width_m is not None:
            _require(_is_number(self.width_m) and self.width_m >= 0,
                     "Dimensions must be finite and non-negative", f"{prefix}.width_m", config_path)

@dataclass
class SimParams:
    clock: ClockParams = field(default_factory=ClockParams)
    spread: SpreadParams = field(default_factory=SpreadParams)
    fire_sources: List[FireSourceParams] = field(default_factory=list)
    elements: List[ElementData] = field(default_factory=list)
    log_folder: Optional[str] = None
    write_logs: bool = False
    log_interval_s: float = 60.0
    config_path: Optional[str] = None

    def validate(self):
        """Validate every section, raising ConfigurationError on the first problem."""
        self.clock.validate(self.config_path)
        self.spread.validate(self.config_path)

        for source in self.fire_sources:
            source.validate(self.config_path)

        seen = set()
        for element in self.elements:
            element.validate(self.config_path)
            _require(element.id not in seen, f"Duplicate element id {element.id}", "elements", self.config_path)
            seen.add(element.id)

        if self.write_logs:
            _require(bool(self.log_folder), "A log folder is required when write_logs is set",
                     "log_folder", self.config_path)
            _require(_is_number(self.log_interval_s) and self.log_interval_s > 0,
                     "Log interval must be positive", "log_interval_s", self.config_path)
