"""Label anchors: the point of each region furthest from any boundary."""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .geometry import distance, get_center, intersection_area
from .logging_utils import LayoutObserver, LoggingObserver, apply_debug_logging
from .optimize import nelder_mead
from .types import AreaSpec, Circle, IntersectionStats, Point, SetId, TextCentre, combination_key

logger = logging.getLogger(__name__)

# where labels of regions that are not visible end up
DISJOINT_SENTINEL = Point(0.0, -1000.0)


def circle_margin(point, interior: Sequence[Circle], exterior: Sequence[Circle]) -> float:
    """Smallest distance from ``point`` to the edge of the region it should be in.

    Negative when the point lies outside some interior circle or inside some
    exterior circle.
    """

    margin = min(c.radius - distance(c, point) for c in interior)
    for c in exterior:
        margin = min(margin, distance(c, point) - c.radius)
    return margin


def compute_text_centre(interior: Sequence[Circle], exterior: Sequence[Circle]) -> TextCentre:
    if not interior:
        raise ValueError("compute_text_centre requires at least one interior circle")

    candidates: List[Point] = []
    for c in interior:
        half = c.radius / 2
        candidates.extend(
            [
                Point(c.x, c.y),
                Point(c.x + half, c.y),
                Point(c.x - half, c.y),
                Point(c.x, c.y + half),
                Point(c.x, c.y - half),
            ]
        )

    initial = candidates[0]
    margin = circle_margin(initial, interior, exterior)
    for candidate in candidates[1:]:
        m = circle_margin(candidate, interior, exterior)
        if m >= margin:
            initial = candidate
            margin = m

    result = nelder_mead(
        lambda p: -circle_margin(Point(p[0], p[1]), interior, exterior),
        [initial.x, initial.y],
        max_iterations=500,
        min_error_delta=1e-10,
    )
    centre = TextCentre(float(result.solution[0]), float(result.solution[1]))

    valid = all(distance(centre, c) <= c.radius for c in interior) and all(
        distance(centre, c) >= c.radius for c in exterior
    )
    if valid:
        return centre

    if len(interior) == 1:
        return TextCentre(interior[0].x, interior[0].y)

    stats = IntersectionStats()
    intersection_area(interior, stats)
    if not stats.arcs:
        return TextCentre(DISJOINT_SENTINEL.x, DISJOINT_SENTINEL.y, disjoint=True)
    if len(stats.arcs) == 1:
        return TextCentre(stats.arcs[0].circle.x, stats.arcs[0].circle.y)
    mean = get_center([arc.p1 for arc in stats.arcs])
    return TextCentre(mean.x, mean.y)


def get_overlapping_circles(circles: Mapping[SetId, Circle]) -> Dict[SetId, List[SetId]]:
    """Map each set to the sets whose circle fully contains its own."""

    ret: Dict[SetId, List[SetId]] = {setid: [] for setid in circles}
    ids = list(circles)
    for i, a_id in enumerate(ids):
        a = circles[a_id]
        for b_id in ids[i + 1 :]:
            b = circles[b_id]
            d = distance(a, b)
            if d + b.radius <= a.radius + 1e-10:
                ret[b_id].append(a_id)
            elif d + a.radius <= b.radius + 1e-10:
                ret[a_id].append(b_id)
    return ret


def compute_text_centres(
    circles: Mapping[SetId, Circle],
    areas: Iterable[AreaSpec],
    observer: Optional[LayoutObserver] = None,
) -> Dict[str, TextCentre]:
    """Label anchor for every area, keyed by :func:`combination_key`."""

    observer = observer or LoggingObserver(logger)
    overlapped = get_overlapping_circles(circles)
    ret: Dict[str, TextCentre] = {}

    for area in areas:
        members = set(area.sets)
        exclude = set()
        for setid in area.sets:
            exclude.update(overlapped.get(setid, ()))

        interior = [c for setid, c in circles.items() if setid in members]
        exterior = [c for setid, c in circles.items() if setid not in members and setid not in exclude]

        key = combination_key(area.sets)
        centre = compute_text_centre(interior, exterior)
        ret[key] = centre
        if centre.disjoint and area.size > 0:
            observer.warning(
                "area-not-represented",
                f"area {key} is not represented on screen",
                sets=list(area.sets),
                size=area.size,
            )
    return ret


def compute_inner_radius(
    sets: Sequence[SetId], centre, circles: Mapping[SetId, Circle]
) -> float:
    """Distance from ``centre`` to the nearest boundary of the region of ``sets``.

    Member circles bound the region from outside; other circles bound it only
    where they overlap one of the members.
    """

    members = [circles[s] for s in sets if s in circles]
    candidate = math.inf
    for setid, circle in circles.items():
        d = distance(centre, circle)
        if setid in sets:
            d = circle.radius - d
        elif any(distance(m, circle) < m.radius + circle.radius for m in members):
            d = d - circle.radius
        else:
            continue
        candidate = min(candidate, d)
    return max(candidate, 0.0) if math.isfinite(candidate) else 0.0


apply_debug_logging(globals(), logger=logger, skip={"circle_margin"})


__all__ = [
    "DISJOINT_SENTINEL",
    "circle_margin",
    "compute_text_centre",
    "get_overlapping_circles",
    "compute_text_centres",
    "compute_inner_radius",
]
