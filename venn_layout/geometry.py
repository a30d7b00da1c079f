"""Circle geometry kernel: lens areas, intersection points and N-circle areas."""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence

from .optimize import bisect
from .types import (
    SMALL,
    Arc,
    BoundingBox,
    Circle,
    EmptyCircleListError,
    IntersectionPoint,
    IntersectionStats,
    Point,
)

logger = logging.getLogger(__name__)


def distance(p1, p2) -> float:
    """Euclidean distance between two objects exposing ``x`` and ``y``."""

    return math.hypot(p1.x - p2.x, p1.y - p2.y)


def get_center(points: Sequence) -> Point:
    if not points:
        raise ValueError("get_center requires at least one point")
    cx = sum(p.x for p in points) / len(points)
    cy = sum(p.y for p in points) / len(points)
    return Point(cx, cy)


def circle_integral(r: float, x: float) -> float:
    y = math.sqrt(max(r * r - x * x, 0.0))
    return x * y + r * r * math.atan2(x, y)


def circle_area(r: float, width: float) -> float:
    """Area of the circular segment of radius ``r`` cut at ``width`` from the edge."""

    return circle_integral(r, width - r) - circle_integral(r, -r)


def circle_overlap(r1: float, r2: float, d: float) -> float:
    """Lens area of two circles with radii ``r1``/``r2`` and centre distance ``d``."""

    if d >= r1 + r2:
        return 0.0
    if d <= abs(r1 - r2):
        return math.pi * min(r1, r2) ** 2

    w1 = r1 - (d * d - r2 * r2 + r1 * r1) / (2 * d)
    w2 = r2 - (d * d - r1 * r1 + r2 * r2) / (2 * d)
    return circle_area(r1, w1) + circle_area(r2, w2)


def circle_circle_intersection(c1, c2) -> List[Point]:
    """Return the two crossing points of ``c1`` and ``c2`` or an empty list."""

    d = distance(c1, c2)
    r1 = c1.radius
    r2 = c2.radius

    # separate or nested
    if d >= r1 + r2 or d <= abs(r1 - r2):
        return []

    a = (r1 * r1 - r2 * r2 + d * d) / (2 * d)
    h = math.sqrt(max(r1 * r1 - a * a, 0.0))
    x0 = c1.x + a * (c2.x - c1.x) / d
    y0 = c1.y + a * (c2.y - c1.y) / d
    rx = -(c2.y - c1.y) * (h / d)
    ry = -(c2.x - c1.x) * (h / d)
    return [Point(x0 + rx, y0 - ry), Point(x0 - rx, y0 + ry)]


def get_intersection_points(circles: Sequence[Circle]) -> List[IntersectionPoint]:
    points: List[IntersectionPoint] = []
    for i in range(len(circles)):
        for j in range(i + 1, len(circles)):
            for p in circle_circle_intersection(circles[i], circles[j]):
                points.append(IntersectionPoint(p.x, p.y, (i, j)))
    return points


def contained_in_circles(point, circles: Iterable[Circle]) -> bool:
    return all(distance(point, c) <= c.radius + SMALL for c in circles)


def out_of_circles(point, circles: Iterable[Circle]) -> bool:
    return all(distance(point, c) >= c.radius + SMALL for c in circles)


def _narrowest_arc(
    p1: IntersectionPoint, p2: IntersectionPoint, circles: Sequence[Circle]
) -> Optional[Arc]:
    mid = Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
    arc: Optional[Arc] = None
    for index in p1.parent_index:
        if index not in p2.parent_index:
            continue
        circle = circles[index]
        a1 = math.atan2(p1.x - circle.x, p1.y - circle.y)
        a2 = math.atan2(p2.x - circle.x, p2.y - circle.y)
        angle_diff = a2 - a1
        if angle_diff < 0:
            angle_diff += 2 * math.pi

        a = a2 - angle_diff / 2
        apex = Point(circle.x + circle.radius * math.sin(a), circle.y + circle.radius * math.cos(a))
        width = distance(mid, apex)
        if arc is None or arc.width > width:
            arc = Arc(circle=circle, p1=Point(p1.x, p1.y), p2=Point(p2.x, p2.y), width=width)
    return arc


def intersection_area(circles: Sequence[Circle], stats: Optional[IntersectionStats] = None) -> float:
    """Area common to every circle in ``circles``.

    The region boundary is decomposed into the polygon spanned by the inner
    intersection points plus one circular segment per polygon edge, which is
    exact for any number of circles. When ``stats`` is given it receives the
    decomposition.
    """

    if not circles:
        raise EmptyCircleListError("intersection_area requires at least one circle")

    intersection_points = get_intersection_points(circles)
    inner_points = [p for p in intersection_points if contained_in_circles(p, circles)]

    arc_area = 0.0
    polygon_area = 0.0
    arcs: List[Arc] = []

    if len(inner_points) > 1:
        center = get_center(inner_points)
        for p in inner_points:
            p.angle = math.atan2(p.x - center.x, p.y - center.y)
        inner_points.sort(key=lambda p: p.angle, reverse=True)

        p2 = inner_points[-1]
        for p1 in inner_points:
            polygon_area += (p2.x + p1.x) * (p1.y - p2.y)
            arc = _narrowest_arc(p1, p2, circles)
            if arc is not None:
                arcs.append(arc)
                arc_area += circle_area(arc.circle.radius, arc.width)
            p2 = p1
    else:
        smallest = min(circles, key=lambda c: c.radius)
        disjoint = any(
            distance(c, smallest) > abs(smallest.radius - c.radius) for c in circles
        )
        logger.debug(
            "intersection_area: %d inner point(s) among %d circle(s), smallest radius %g, disjoint=%s",
            len(inner_points),
            len(circles),
            smallest.radius,
            disjoint,
        )
        if not disjoint:
            arc_area = math.pi * smallest.radius * smallest.radius
            arcs.append(
                Arc(
                    circle=smallest,
                    p1=Point(smallest.x, smallest.y + smallest.radius),
                    p2=Point(smallest.x - SMALL, smallest.y + smallest.radius),
                    width=smallest.radius * 2,
                )
            )

    polygon_area /= 2
    if stats is not None:
        stats.area = arc_area + polygon_area
        stats.arc_area = arc_area
        stats.polygon_area = polygon_area
        stats.arcs = arcs
        stats.inner_points = inner_points
        stats.intersection_points = intersection_points

    return arc_area + polygon_area


def distance_from_intersect_area(r1: float, r2: float, overlap: float) -> float:
    """Centre distance at which two circles overlap by ``overlap``."""

    if min(r1, r2) ** 2 * math.pi <= overlap + SMALL:
        return abs(r1 - r2)
    return bisect(lambda d: circle_overlap(r1, r2, d) - overlap, 0.0, r1 + r2)


def bounding_box(circles: Iterable[Circle]) -> BoundingBox:
    circles = list(circles)
    if not circles:
        raise ValueError("bounding_box requires at least one circle")
    return BoundingBox(
        x_min=min(c.x - c.radius for c in circles),
        x_max=max(c.x + c.radius for c in circles),
        y_min=min(c.y - c.radius for c in circles),
        y_max=max(c.y + c.radius for c in circles),
    )


__all__ = [
    "distance",
    "get_center",
    "circle_integral",
    "circle_area",
    "circle_overlap",
    "circle_circle_intersection",
    "get_intersection_points",
    "contained_in_circles",
    "out_of_circles",
    "intersection_area",
    "distance_from_intersect_area",
    "bounding_box",
]
