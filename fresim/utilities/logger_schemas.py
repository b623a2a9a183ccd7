from dataclasses import dataclass, asdict


@dataclass
class ElementLogEntry:
    timestamp: float
    id: int
    name: str
    x: float
    y: float
    z: float
    role: int
    material: int
    rating_hr: float
    state: int
    exposed: bool
    exposure_time_s: float
    failed: bool

    def to_dict(self):
        return asdict(self)

@dataclass
class FailureEntry:
    timestamp: float
    id: int
    name: str
    rating_hr: float
    exposure_time_s: float

    def to_dict(self):
        return asdict(self)

@dataclass
class IgnitionEntry:
    timestamp: float
    id: int
    cause: str # 'fire_source' or 'spread'
    source_id: int = -1

    def to_dict(self):
        return asdict(self)
