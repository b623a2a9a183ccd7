"""Loading simulation inputs from JSON configuration files.

A configuration file holds the sections of `SimParams`. Enumerated element
fields (role, material, restraint, exposure configuration) are given by name,
case-insensitively, e.g.::

    {
        "clock": {"default_time_scale": 60},
        "spread": {"spread_radius_m": 3.0, "seed": 42},
        "fire_sources": [{"position": [0, 0, 0], "radius_m": 2.0, "max_radius_m": 6.0}],
        "elements": [
            {"id": 1, "name": "Slab_L1", "role": "Slab", "material": "Siliceous",
             "equivalent_thickness_m": 0.125, "position": [1.0, 0.0, 3.0]}
        ],
        "write_logs": true,
        "log_folder": "logs"
    }

.. autofunction:: load_sim_params
.. autofunction:: load_elements
"""
import json
import os
from dataclasses import fields
from typing import List, Optional

from fresim.exceptions import ConfigurationError
from fresim.utilities.data_classes import (ClockParams, SpreadParams, FireSourceParams, ElementData,
                                           SimParams)
from fresim.utilities.fire_util import (MaterialCategory, StructuralRole, RestraintCondition,
                                        ExposureConfiguration)

_ENUM_FIELDS = {
    "role": StructuralRole,
    "material": MaterialCategory,
    "restraint": RestraintCondition,
    "exposure_config": ExposureConfiguration,
}


def _read_json(path: str):
    if not os.path.exists(path):
        raise ConfigurationError("Configuration file not found", config_path=path)

    try:
        with open(path) as f:
            return json.load(f)

    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file is not valid JSON ({e})", config_path=path) from e


def _as_point(value, parameter: str, config_path: Optional[str]) -> tuple:
    try:
        return tuple(float(v) for v in value)
    except (TypeError, ValueError):
        raise ConfigurationError("Points must be lists of numbers", config_path=config_path,
                                 parameter=parameter)


def _build(cls, data: dict, section: str, config_path: Optional[str]):
    """Instantiate a parameter dataclass, rejecting keys it does not define."""
    if not isinstance(data, dict):
        raise ConfigurationError("Section must be a JSON object", config_path=config_path, parameter=section)

    allowed = {f.name for f in fields(cls)}
    for key in data:
        if key not in allowed:
            raise ConfigurationError("Unknown parameter", config_path=config_path,
                                     parameter=f"{section}.{key}")

    return cls(**data)


def _parse_element(data: dict, index: int, config_path: Optional[str]) -> ElementData:
    section = f"elements[{index}]"
    if not isinstance(data, dict) or "id" not in data:
        raise ConfigurationError("Element definitions must be objects with an id", config_path=config_path,
                                 parameter=section)

    data = dict(data)
    for key, constants in _ENUM_FIELDS.items():
        value = data.get(key)
        if value is None or isinstance(value, int):
            continue

        try:
            data[key] = constants.from_name(value)
        except KeyError:
            raise ConfigurationError(f"Unknown {key} '{value}'", config_path=config_path,
                                     parameter=f"{section}.{key}")

    for key in ("position", "detection_center"):
        if data.get(key) is not None:
            data[key] = _as_point(data[key], f"{section}.{key}", config_path)

    if data.get("bounds") is not None:
        try:
            box_min, box_max = data["bounds"]
        except (TypeError, ValueError):
            raise ConfigurationError("Bounds must be a [min, max] pair of points", config_path=config_path,
                                     parameter=f"{section}.bounds")
        data["bounds"] = (_as_point(box_min, f"{section}.bounds", config_path),
                          _as_point(box_max, f"{section}.bounds", config_path))

    return _build(ElementData, data, section, config_path)


def load_elements(path: str) -> List[ElementData]:
    """Read element definitions from a JSON file.

    The file holds either a list of element objects or an object with an
    ``elements`` list.

    Raises:
        ConfigurationError: If the file is missing, malformed or holds invalid values.
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("elements", [])

    if not isinstance(data, list):
        raise ConfigurationError("Elements must be a list", config_path=path, parameter="elements")

    elements = [_parse_element(item, i, path) for i, item in enumerate(data)]
    for element in elements:
        element.validate(path)

    return elements


def load_sim_params(path: str) -> SimParams:
    """Read and validate a simulation configuration file.

    Args:
        path (str): Path to the JSON configuration.

    Returns:
        SimParams: Validated parameters, with ``config_path`` set to ``path``.

    Raises:
        ConfigurationError: If the file is missing, malformed or holds invalid values.
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration root must be a JSON object", config_path=path)

    known = {"clock", "spread", "fire_sources", "elements", "log_folder", "write_logs", "log_interval_s"}
    for key in data:
        if key not in known:
            raise ConfigurationError("Unknown parameter", config_path=path, parameter=key)

    sources = data.get("fire_sources", [])
    if not isinstance(sources, list):
        raise ConfigurationError("Fire sources must be a list", config_path=path, parameter="fire_sources")

    fire_sources = []
    for i, source in enumerate(sources):
        source = dict(source) if isinstance(source, dict) else source
        if isinstance(source, dict) and "position" in source:
            source["position"] = _as_point(source["position"], f"fire_sources[{i}].position", path)
        fire_sources.append(_build(FireSourceParams, source, f"fire_sources[{i}]", path))

    elements = data.get("elements", [])
    if not isinstance(elements, list):
        raise ConfigurationError("Elements must be a list", config_path=path, parameter="elements")

    sim_params = SimParams(
        clock=_build(ClockParams, data.get("clock", {}), "clock", path),
        spread=_build(SpreadParams, data.get("spread", {}), "spread", path),
        fire_sources=fire_sources,
        elements=[_parse_element(item, i, path) for i, item in enumerate(elements)],
        log_folder=data.get("log_folder"),
        write_logs=bool(data.get("write_logs", False)),
        log_interval_s=data.get("log_interval_s", 60.0),
        config_path=path
    )

    sim_params.validate()
    return sim_params
