"""Core data structures shared by the layout pipeline."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

SetId = str
SMALL = 1e-10


class VennLayoutError(Exception):
    """Base class for errors raised by the layout engine."""


class InvalidAreaError(VennLayoutError, ValueError):
    """Raised when an area specification is malformed."""

    def __init__(self, message: str, sets: Optional[Sequence[SetId]] = None):
        super().__init__(message)
        self.sets = tuple(sets) if sets is not None else None


class BisectionError(VennLayoutError, ValueError):
    """Raised when bisection endpoints do not bracket a root."""


class MissingOverlapError(VennLayoutError, ValueError):
    """Raised when greedy placement has no overlap data for a set."""

    def __init__(self, setid: SetId):
        super().__init__(f"missing pairwise overlap information for set '{setid}'")
        self.setid = setid


class EmptyCircleListError(VennLayoutError, ValueError):
    """Raised when an intersection of zero circles is requested."""


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass
class Circle:
    """Circle placed for a single set; ``previous`` is only used for tweening."""

    x: float
    y: float
    radius: float
    setid: Optional[SetId] = None
    previous: Optional["Circle"] = field(default=None, repr=False, compare=False)

    def copy(self) -> "Circle":
        return Circle(self.x, self.y, self.radius, self.setid)

    @property
    def center(self) -> Point:
        return Point(self.x, self.y)


Solution = Dict[SetId, Circle]


def _as_float(value: Any, what: str, sets: Sequence[SetId]) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidAreaError(f"{what} must be a real number, got {value!r}", sets)
    result = float(value)
    if math.isnan(result):
        raise InvalidAreaError(f"{what} must not be NaN", sets)
    return result


@dataclass(frozen=True)
class AreaSpec:
    """Requested size for a single set or for an intersection of sets."""

    sets: Tuple[SetId, ...]
    size: float
    weight: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "sets", tuple(str(s) for s in self.sets))
        object.__setattr__(self, "size", _as_float(self.size, "size", self.sets))
        object.__setattr__(self, "weight", _as_float(self.weight, "weight", self.sets))

    @property
    def key(self) -> str:
        return combination_key(self.sets)

    @classmethod
    def coerce(cls, value: Union["AreaSpec", Mapping[str, Any], Sequence[Any]]) -> "AreaSpec":
        if isinstance(value, AreaSpec):
            return value
        if isinstance(value, Mapping):
            if "sets" not in value or "size" not in value:
                raise InvalidAreaError(f"area record needs 'sets' and 'size': {value!r}")
            sets = value["sets"]
            if isinstance(sets, str):
                sets = [sets]
            return cls(tuple(sets), value["size"], value.get("weight", 1.0))
        if isinstance(value, (list, tuple)) and len(value) in (2, 3):
            sets = value[0]
            if isinstance(sets, str):
                sets = [sets]
            return cls(tuple(sets), *value[1:])
        raise InvalidAreaError(f"cannot interpret {value!r} as an area specification")


def combination_key(sets: Sequence[SetId]) -> str:
    """Return the canonical key of a set combination (``"a,b"``)."""

    return ",".join(sorted(sets))


@dataclass
class IntersectionPoint:
    x: float
    y: float
    parent_index: Tuple[int, int]
    angle: float = 0.0


@dataclass
class Arc:
    circle: Circle
    p1: Point
    p2: Point
    width: float


@dataclass
class IntersectionStats:
    """Arc/polygon decomposition of an N-circle intersection."""

    area: float = 0.0
    arc_area: float = 0.0
    polygon_area: float = 0.0
    arcs: List[Arc] = field(default_factory=list)
    inner_points: List[IntersectionPoint] = field(default_factory=list)
    intersection_points: List[IntersectionPoint] = field(default_factory=list)


@dataclass
class SimplexVertex:
    coords: np.ndarray
    value: float


@dataclass
class UnionFindNode:
    parent_index: int


@dataclass
class TextCentre:
    x: float
    y: float
    disjoint: bool = False

    def as_point(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class BoundingBox:
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def area(self) -> float:
        return self.width * self.height


__all__ = [
    "SetId",
    "SMALL",
    "VennLayoutError",
    "InvalidAreaError",
    "BisectionError",
    "MissingOverlapError",
    "EmptyCircleListError",
    "Point",
    "Circle",
    "Solution",
    "AreaSpec",
    "combination_key",
    "IntersectionPoint",
    "Arc",
    "IntersectionStats",
    "SimplexVertex",
    "UnionFindNode",
    "TextCentre",
    "BoundingBox",
]
