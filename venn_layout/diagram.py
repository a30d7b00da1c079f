"""Record-level facade: count set memberships, lay them out and place labels."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import numpy as np

from .config import LayoutConfig, LayoutOptions, get_layout_config
from .labels import compute_inner_radius, compute_text_centres
from .logging_utils import LayoutObserver, LoggingObserver
from .orientation import normalize_solution, scale_solution
from .regions import RegionOutline, region_outline_at
from .scatter import distribute_points
from .solver import solution_loss, venn
from .types import AreaSpec, Point, SetId, Solution, TextCentre, combination_key

logger = logging.getLogger(__name__)

SetsAccessor = Callable[[Any], Sequence[SetId]]
SizeFunction = Callable[[float], float]


def default_sets_accessor(record: Any) -> Sequence[SetId]:
    if isinstance(record, dict):
        return record.get("set") or []
    return getattr(record, "set", None) or []


@dataclass
class VennSet:
    """One set combination of a diagram together with its member records."""

    key: str
    sets: List[SetId]
    size: float
    nodes: List[Any] = field(default_factory=list)
    center: Optional[TextCentre] = None
    inner_radius: float = 0.0
    node_positions: List[Point] = field(default_factory=list)

    def as_area(self) -> AreaSpec:
        return AreaSpec(tuple(self.sets), self.size)


def extract_sets(
    records: Iterable[Any],
    sets_accessor: Optional[SetsAccessor] = None,
    sets_size: Optional[SizeFunction] = None,
    *,
    max_combination_size: Optional[int] = None,
) -> Dict[str, VennSet]:
    """Count records per set combination.

    A record tagged ``["a", "b"]`` counts towards ``a``, ``b`` and ``a,b``:
    every combination's size is the number of records belonging to all of
    its sets. Records are attached as ``nodes`` only to the combination they
    carry exactly. ``sets_size`` maps raw counts to the sizes laid out.

    A record with ``k`` sets contributes to ``2**k - 1`` combinations, and
    the layout loss grows quadratically with the number of combinations, so
    heavily tagged records get expensive fast. ``max_combination_size``
    limits the enumerated sub-combinations to that many sets. A record's
    exact combination is always kept, but above the limit it only counts
    records carrying exactly those sets.
    """

    if max_combination_size is not None and max_combination_size < 1:
        raise ValueError("max_combination_size must be at least 1, got %r" % (max_combination_size,))
    sets_accessor = sets_accessor or default_sets_accessor
    sets_size = sets_size or (lambda size: size)

    result: Dict[str, VennSet] = {}

    def _entry(combo: Sequence[str]) -> VennSet:
        key = combination_key(combo)
        entry = result.get(key)
        if entry is None:
            entry = result[key] = VennSet(key=key, sets=list(combo), size=0)
        return entry

    for record in records:
        members = sorted({str(s) for s in sets_accessor(record)})
        if not members:
            continue
        top = len(members)
        if max_combination_size is not None:
            top = min(top, max_combination_size)
        for k in range(1, top + 1):
            for combo in combinations(members, k):
                _entry(combo).size += 1
        exact = _entry(members)
        if top < len(members):
            exact.size += 1
        exact.nodes.append(record)

    for entry in result.values():
        entry.size = sets_size(entry.size)
    return result


class VennDiagram:
    """Stateful diagram: repeated :meth:`compute` calls keep the previous circles
    on ``Circle.previous`` so outlines can be tweened between layouts."""

    def __init__(
        self,
        options: Optional[LayoutOptions] = None,
        config: Optional[LayoutConfig] = None,
        observer: Optional[LayoutObserver] = None,
        *,
        sets_accessor: Optional[SetsAccessor] = None,
        sets_size: Optional[SizeFunction] = None,
        scatter: bool = False,
        max_combination_size: Optional[int] = None,
    ):
        self.options = options or LayoutOptions()
        self.config = config or get_layout_config()
        self.observer = observer or LoggingObserver(logger)
        self.sets_accessor = sets_accessor
        self.sets_size = sets_size
        self.max_combination_size = max_combination_size
        self.scatter = scatter
        self.circles: Solution = {}
        self.centres: Dict[str, TextCentre] = {}
        self.sets: Dict[str, VennSet] = {}
        self.loss: Optional[float] = None

    def compute(self, records: Iterable[Any]) -> "VennDiagram":
        records = list(records)
        self.sets = extract_sets(
            records,
            self.sets_accessor,
            self.sets_size,
            max_combination_size=self.max_combination_size,
        )
        logger.info("Extracted %d set combination(s) from %d record(s)", len(self.sets), len(records))
        self.layout([entry.as_area() for entry in self.sets.values()])
        return self

    def layout(self, areas: Sequence[Any]) -> Solution:
        """Lay out ``areas`` directly, bypassing record extraction."""

        options = self.options
        solution = venn(areas, options, config=self.config)
        self.loss = solution_loss(solution, areas, config=self.config)
        if options.normalize:
            solution = normalize_solution(solution, options.orientation)

        old_circles = self.circles
        self.circles = scale_solution(solution, options.width, options.height, options.padding)
        for setid, circle in self.circles.items():
            previous = old_circles.get(setid)
            if previous is not None:
                circle.previous = previous.copy()

        specs = [AreaSpec.coerce(area) for area in areas]
        self.centres = compute_text_centres(self.circles, specs, observer=self.observer)

        for entry in self.sets.values():
            entry.center = self.centres.get(entry.key)
            if entry.center is not None:
                entry.inner_radius = compute_inner_radius(entry.sets, entry.center, self.circles)

        if self.scatter:
            self.distribute()
        return self.circles

    def distribute(self) -> None:
        """Scatter every combination's nodes inside its region."""

        rng = np.random.default_rng(self.options.random_seed)
        for entry in self.sets.values():
            if entry.center is None or not entry.nodes:
                continue
            interior = [c for setid, c in self.circles.items() if setid in entry.sets]
            exterior = [c for setid, c in self.circles.items() if setid not in entry.sets]
            entry.node_positions = distribute_points(
                entry.center,
                entry.inner_radius,
                interior,
                exterior,
                len(entry.nodes),
                rng=rng,
                observer=self.observer,
            )

    def outline(self, key: str, t: float = 1.0) -> RegionOutline:
        """Outline of combination ``key`` at tween time ``t``."""

        if key in self.sets:
            setids = self.sets[key].sets
        else:
            setids = key.split(",")
        return region_outline_at(setids, self.circles, t)


__all__ = [
    "SetsAccessor",
    "SizeFunction",
    "default_sets_accessor",
    "VennSet",
    "extract_sets",
    "VennDiagram",
]
