"""Layout orchestrator: input normalization, initial layout and simplex refinement."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence, Set

import numpy as np

from .config import LayoutConfig, LayoutOptions, get_layout_config
from .logging_utils import apply_debug_logging
from .types import AreaSpec, Circle, InvalidAreaError, SetId, Solution

logger = logging.getLogger(__name__)


def coerce_areas(areas: Iterable[Any]) -> List[AreaSpec]:
    return [AreaSpec.coerce(area) for area in areas]


def validate_areas(areas: Sequence[AreaSpec]) -> None:
    """Reject malformed area specifications with :class:`InvalidAreaError`."""

    singles: Set[SetId] = set()
    for area in areas:
        if not area.sets:
            raise InvalidAreaError("area specification has an empty set list", area.sets)
        if len(set(area.sets)) != len(area.sets):
            raise InvalidAreaError(f"duplicate set id in {list(area.sets)}", area.sets)
        if area.size < 0:
            raise InvalidAreaError(f"negative size {area.size} for {list(area.sets)}", area.sets)
        if area.weight < 0:
            raise InvalidAreaError(f"negative weight {area.weight} for {list(area.sets)}", area.sets)
        if len(area.sets) == 1:
            if area.sets[0] in singles:
                raise InvalidAreaError(f"set '{area.sets[0]}' is specified more than once", area.sets)
            singles.add(area.sets[0])

    for area in areas:
        unknown = [s for s in area.sets if s not in singles]
        if unknown:
            raise InvalidAreaError(
                f"intersection {list(area.sets)} references unknown set(s) {unknown}", area.sets
            )


def add_missing_areas(areas: Sequence[AreaSpec]) -> List[AreaSpec]:
    """Return ``areas`` plus a zero-size entry for every unlisted pair of sets."""

    result = list(areas)
    ids: List[SetId] = []
    pairs = set()
    for area in areas:
        if len(area.sets) == 1:
            ids.append(area.sets[0])
        elif len(area.sets) == 2:
            pairs.add(frozenset(area.sets))

    ids.sort()
    for i, a in enumerate(ids):
        for b in ids[i + 1 :]:
            if frozenset((a, b)) not in pairs:
                result.append(AreaSpec((a, b), 0.0))
    return result


def _flatten(circles: Solution, setids: Sequence[SetId]) -> np.ndarray:
    values = np.empty(2 * len(setids), dtype=float)
    for i, setid in enumerate(setids):
        values[2 * i] = circles[setid].x
        values[2 * i + 1] = circles[setid].y
    return values


def venn(
    areas: Iterable[Any],
    options: Optional[LayoutOptions] = None,
    *,
    config: Optional[LayoutConfig] = None,
) -> Solution:
    """Compute circle positions whose overlaps approximate the requested areas.

    Radii come from the single-set sizes and stay fixed; only centres are
    optimized. The result is a best effort: running out of iterations is
    not an error.
    """

    options = options or LayoutOptions()
    config = config or get_layout_config()

    specs = coerce_areas(areas)
    validate_areas(specs)
    specs = add_missing_areas(specs)
    if not specs:
        return {}

    logger.info(
        "Laying out %d area(s) with max_iterations=%d random_seed=%s",
        len(specs),
        options.max_iterations,
        options.random_seed,
    )

    rng = np.random.default_rng(options.random_seed)
    circles = config.initial_layout.seed(specs, rng)
    setids = list(circles.keys())
    radii = {setid: circles[setid].radius for setid in setids}
    initial = _flatten(circles, setids)

    def objective(values: np.ndarray) -> float:
        current = {
            setid: Circle(float(values[2 * i]), float(values[2 * i + 1]), radii[setid], setid)
            for i, setid in enumerate(setids)
        }
        return config.loss(current, specs)

    result = config.minimizer(objective, initial, max_iterations=options.max_iterations)
    if result.iterations >= options.max_iterations:
        logger.info("Refinement used its full budget of %d iteration(s)", options.max_iterations)

    positions = result.solution
    for i, setid in enumerate(setids):
        circles[setid].x = float(positions[2 * i])
        circles[setid].y = float(positions[2 * i + 1])

    logger.info("Layout finished with loss=%.6g after %d iteration(s)", result.value, result.iterations)
    return circles


def solution_loss(
    solution: Solution, areas: Iterable[Any], *, config: Optional[LayoutConfig] = None
) -> float:
    """Canonical loss of ``solution`` against ``areas`` (missing pairs count as disjoint)."""

    config = config or get_layout_config()
    specs = add_missing_areas(coerce_areas(areas))
    return config.loss(solution, specs)


apply_debug_logging(globals(), logger=logger)

layout_venn = venn


__all__ = [
    "coerce_areas",
    "validate_areas",
    "add_missing_areas",
    "venn",
    "layout_venn",
    "solution_loss",
]
