"""Scatter member points inside the region of a set combination."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np
from scipy.stats import qmc

from .geometry import contained_in_circles, out_of_circles
from .logging_utils import LayoutObserver, LoggingObserver, apply_debug_logging
from .types import Circle, Point

logger = logging.getLogger(__name__)

# widens the sampling disc so tiny regions still get candidates
_SPREAD = 100.0


def distribute_points(
    centre,
    inner_radius: float,
    interior: Sequence[Circle],
    exterior: Sequence[Circle],
    count: int,
    *,
    rng: Optional[np.random.Generator] = None,
    max_attempt: int = 500,
    observer: Optional[LayoutObserver] = None,
) -> List[Point]:
    """Return ``count`` points inside every ``interior`` and outside every ``exterior`` circle.

    The first point is ``centre``. Each later point is sampled on a disc around
    a randomly chosen earlier point; candidates come from a scrambled Halton
    sequence so one region's points spread evenly. When ``max_attempt``
    candidates all miss the region the point falls back to ``centre`` and the
    observer is warned.
    """

    if count <= 0:
        return []

    rng = rng if rng is not None else np.random.default_rng()
    observer = observer or LoggingObserver(logger)
    sampler = qmc.Halton(d=3, scramble=True, seed=rng)
    reach = inner_radius * inner_radius + _SPREAD

    origin = Point(float(centre.x), float(centre.y))
    queue: List[Point] = [origin]
    points: List[Point] = [origin]
    misses = 0

    for _ in range(1, count):
        candidate: Optional[Point] = None
        for u in sampler.random(max_attempt):
            source = queue[min(int(u[0] * len(queue)), len(queue) - 1)]
            angle = 2 * math.pi * u[1]
            r = math.sqrt(u[2] * reach)
            p = Point(source.x + r * math.cos(angle), source.y + r * math.sin(angle))
            if contained_in_circles(p, interior) and out_of_circles(p, exterior):
                candidate = p
                queue.append(p)
                break

        if candidate is None:
            misses += 1
            candidate = origin
        points.append(candidate)

    if misses:
        observer.warning(
            "scatter-exhausted",
            f"no candidate found for {misses} point(s); placed at the region centre",
            misses=misses,
            count=count,
        )
    return points


apply_debug_logging(globals(), logger=logger)


__all__ = ["distribute_points"]
