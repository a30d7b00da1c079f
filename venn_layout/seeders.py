"""Initial layout strategies: greedy placement and constrained MDS."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from .geometry import circle_circle_intersection, distance_from_intersect_area
from .logging_utils import apply_debug_logging
from .loss import loss_function
from .optimize import GradientState, conjugate_gradient
from .types import SMALL, AreaSpec, Circle, MissingOverlapError, Point, SetId, Solution

logger = logging.getLogger(__name__)

_UNPLACED = 1e10


class BaseSeeder(Protocol):
    """Protocol implemented by initial layout strategies."""

    def seed(self, areas: Sequence[AreaSpec], rng: np.random.Generator) -> Solution:
        """Return an initial circle for every single-set area."""


@dataclass
class _Overlap:
    set: SetId
    size: float
    weight: float


def _radius(size: float) -> float:
    return math.sqrt(size / math.pi)


def greedy_layout(areas: Sequence[AreaSpec]) -> Solution:
    """Place circles one by one, heaviest overlap first, at the best candidate spot."""

    circles: Solution = {}
    sizes: Dict[SetId, float] = {}
    set_overlaps: Dict[SetId, List[_Overlap]] = {}

    for area in areas:
        if len(area.sets) == 1:
            setid = area.sets[0]
            circles[setid] = Circle(_UNPLACED, _UNPLACED, _radius(area.size), setid)
            sizes[setid] = area.size
            set_overlaps[setid] = []

    if not circles:
        return circles

    for area in areas:
        if len(area.sets) != 2:
            continue
        left, right = area.sets
        weight = area.weight
        # full containment carries no positional information
        if area.size + SMALL >= min(sizes[left], sizes[right]):
            weight = 0.0
        set_overlaps[left].append(_Overlap(right, area.size, weight))
        set_overlaps[right].append(_Overlap(left, area.size, weight))

    most_overlapped: List[Tuple[SetId, float]] = [
        (setid, sum(o.size * o.weight for o in overlaps)) for setid, overlaps in set_overlaps.items()
    ]
    most_overlapped.sort(key=lambda item: item[1], reverse=True)

    positioned = set()

    def position_set(point: Point, setid: SetId) -> None:
        circles[setid].x = point.x
        circles[setid].y = point.y
        positioned.add(setid)

    position_set(Point(0.0, 0.0), most_overlapped[0][0])

    for setid, _ in most_overlapped[1:]:
        overlap = [o for o in set_overlaps[setid] if o.set in positioned]
        overlap.sort(key=lambda o: o.size, reverse=True)
        if not overlap:
            raise MissingOverlapError(setid)

        circle = circles[setid]
        points: List[Point] = []
        for j, first in enumerate(overlap):
            p1 = circles[first.set]
            d1 = distance_from_intersect_area(circle.radius, p1.radius, first.size)
            points.extend(
                [
                    Point(p1.x + d1, p1.y),
                    Point(p1.x - d1, p1.y),
                    Point(p1.x, p1.y + d1),
                    Point(p1.x, p1.y - d1),
                ]
            )
            for second in overlap[j + 1 :]:
                p2 = circles[second.set]
                d2 = distance_from_intersect_area(circle.radius, p2.radius, second.size)
                points.extend(
                    circle_circle_intersection(Circle(p1.x, p1.y, d1), Circle(p2.x, p2.y, d2))
                )

        best_loss = math.inf
        best_point = points[0]
        for point in points:
            circle.x = point.x
            circle.y = point.y
            loss = loss_function(circles, areas)
            if loss < best_loss:
                best_loss = loss
                best_point = point

        position_set(best_point, setid)

    return circles


def get_distance_matrices(
    areas: Sequence[AreaSpec], sets: Sequence[AreaSpec], setids: Dict[SetId, int]
) -> Tuple[np.ndarray, np.ndarray]:
    """Return target centre distances and the ``>=``/``<=``/``==`` constraint matrix.

    A constraint of ``1`` means the pair may sit closer (containment), ``-1``
    means it may sit further apart (disjoint), ``0`` means exactly.
    """

    n = len(sets)
    distances = np.zeros((n, n), dtype=float)
    constraints = np.zeros((n, n), dtype=float)

    for area in areas:
        if len(area.sets) != 2:
            continue
        left = setids[area.sets[0]]
        right = setids[area.sets[1]]
        r1 = _radius(sets[left].size)
        r2 = _radius(sets[right].size)
        dist = distance_from_intersect_area(r1, r2, area.size)
        distances[left, right] = distances[right, left] = dist

        c = 0.0
        if area.size + 1e-10 >= min(sets[left].size, sets[right].size):
            c = 1.0
        elif area.size <= 1e-10:
            c = -1.0
        constraints[left, right] = constraints[right, left] = c

    return distances, constraints


def constrained_mds_gradient(
    x: np.ndarray, fxprime: np.ndarray, distances: np.ndarray, constraints: np.ndarray
) -> float:
    """Stress of the flattened positions ``x``; writes the gradient into ``fxprime``.

    Pairs whose inequality constraint already holds contribute nothing.
    """

    xy = x.reshape(-1, 2)
    diff = xy[:, None, :] - xy[None, :, :]
    squared = np.einsum("ijk,ijk->ij", diff, diff)
    dist = np.sqrt(squared)
    delta = squared - distances * distances

    satisfied = ((constraints > 0) & (dist <= distances)) | ((constraints < 0) & (dist >= distances))
    active = np.triu(~satisfied, k=1)
    loss = 2.0 * float(np.sum(delta[active] ** 2))

    weights = np.where(active | active.T, 8.0 * delta, 0.0)
    fxprime[:] = np.einsum("ij,ijk->ik", weights, diff).ravel()
    return loss


def constrained_mds_layout(
    areas: Sequence[AreaSpec],
    *,
    restarts: int = 10,
    rng: Optional[np.random.Generator] = None,
    history: Optional[List[GradientState]] = None,
) -> Solution:
    """Lay circles out by MDS on the pairwise target distances with random restarts."""

    rng = rng if rng is not None else np.random.default_rng()
    sets: List[AreaSpec] = []
    setids: Dict[SetId, int] = {}
    for area in areas:
        if len(area.sets) == 1:
            setids[area.sets[0]] = len(sets)
            sets.append(area)

    if not sets:
        return {}

    distances, constraints = get_distance_matrices(areas, sets, setids)
    norm = float(np.linalg.norm(distances)) / len(sets)
    if norm <= 0.0:
        norm = 1.0
    distances = distances / norm

    def objective(x: np.ndarray, fxprime: np.ndarray) -> float:
        return constrained_mds_gradient(x, fxprime, distances, constraints)

    best: Optional[GradientState] = None
    for attempt in range(max(1, restarts)):
        initial = rng.random(2 * len(sets))
        current = conjugate_gradient(objective, initial, history=history)
        logger.debug("constrained_mds_layout: restart=%d loss=%.6g", attempt, current.fx)
        if best is None or current.fx < best.fx:
            best = current

    assert best is not None
    positions = best.x * norm
    if history is not None:
        for state in history:
            state.x *= norm

    return {
        area.sets[0]: Circle(
            float(positions[2 * i]), float(positions[2 * i + 1]), _radius(area.size), area.sets[0]
        )
        for i, area in enumerate(sets)
    }


def best_initial_layout(
    areas: Sequence[AreaSpec],
    *,
    restarts: int = 10,
    rng: Optional[np.random.Generator] = None,
) -> Solution:
    """Greedy layout, replaced by constrained MDS when that scores strictly better."""

    initial = greedy_layout(areas)
    if len(areas) >= 8:
        constrained = constrained_mds_layout(areas, restarts=restarts, rng=rng)
        constrained_loss = loss_function(constrained, areas)
        greedy_loss = loss_function(initial, areas)
        logger.info(
            "Initial layout losses: greedy=%.6g constrained_mds=%.6g", greedy_loss, constrained_loss
        )
        if constrained_loss + 1e-8 < greedy_loss:
            initial = constrained
    return initial


class GreedySeeder:
    """Seed with :func:`greedy_layout`."""

    def seed(self, areas: Sequence[AreaSpec], rng: np.random.Generator) -> Solution:
        return greedy_layout(areas)


@dataclass
class ConstrainedMDSSeeder:
    """Seed with :func:`constrained_mds_layout`."""

    restarts: int = 10

    def seed(self, areas: Sequence[AreaSpec], rng: np.random.Generator) -> Solution:
        return constrained_mds_layout(areas, restarts=self.restarts, rng=rng)


@dataclass
class BestInitialSeeder:
    """Seed with the better of greedy and constrained MDS."""

    restarts: int = 10

    def seed(self, areas: Sequence[AreaSpec], rng: np.random.Generator) -> Solution:
        return best_initial_layout(areas, restarts=self.restarts, rng=rng)


apply_debug_logging(globals(), logger=logger, skip={"constrained_mds_gradient"})


__all__ = [
    "BaseSeeder",
    "greedy_layout",
    "get_distance_matrices",
    "constrained_mds_gradient",
    "constrained_mds_layout",
    "best_initial_layout",
    "GreedySeeder",
    "ConstrainedMDSSeeder",
    "BestInitialSeeder",
]
