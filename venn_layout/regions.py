"""Outline descriptors for intersection regions, with transition tweening."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Mapping, Optional, Sequence

from .geometry import intersection_area
from .types import Circle, IntersectionStats, Point, SetId

OutlineKind = Literal["empty", "circle", "arcs"]


@dataclass
class ArcSegment:
    """Circular arc from the previous segment's end to ``end``."""

    end: Point
    radius: float
    large_arc: bool
    sweep: bool
    circle: Circle


@dataclass
class RegionOutline:
    """Boundary of the region common to a group of circles.

    ``kind == "circle"`` means the whole region is ``circle``; ``"arcs"``
    means the boundary starts at ``start`` and follows ``segments`` in
    order back to ``start``.
    """

    kind: OutlineKind
    start: Optional[Point] = None
    segments: List[ArcSegment] = field(default_factory=list)
    circle: Optional[Circle] = None
    area: float = 0.0


def intersection_region_outline(circles: Sequence[Circle]) -> RegionOutline:
    stats = IntersectionStats()
    area = intersection_area(circles, stats)
    arcs = stats.arcs

    if not arcs:
        return RegionOutline(kind="empty", area=0.0)
    if len(arcs) == 1:
        return RegionOutline(kind="circle", circle=arcs[0].circle, area=area)

    segments = [
        ArcSegment(
            end=arc.p1,
            radius=arc.circle.radius,
            large_arc=arc.width > arc.circle.radius,
            sweep=True,
            circle=arc.circle,
        )
        for arc in arcs
    ]
    return RegionOutline(kind="arcs", start=arcs[0].p2, segments=segments, area=area)


def interpolate_circles(circles: Sequence[Circle], t: float) -> List[Circle]:
    """Blend each circle from its ``previous`` state towards itself at time ``t``."""

    blended: List[Circle] = []
    for circle in circles:
        start = circle.previous
        if start is None:
            blended.append(Circle(circle.x, circle.y, circle.radius, circle.setid))
            continue
        blended.append(
            Circle(
                x=start.x * (1 - t) + circle.x * t,
                y=start.y * (1 - t) + circle.y * t,
                radius=start.radius * (1 - t) + circle.radius * t,
                setid=circle.setid,
            )
        )
    return blended


def region_outline_at(
    setids: Sequence[SetId], solution: Mapping[SetId, Circle], t: float = 1.0
) -> RegionOutline:
    """Outline of the region shared by ``setids`` at tween time ``t``."""

    circles = [solution[setid] for setid in setids]
    return intersection_region_outline(interpolate_circles(circles, t))


__all__ = [
    "OutlineKind",
    "ArcSegment",
    "RegionOutline",
    "intersection_region_outline",
    "interpolate_circles",
    "region_outline_at",
]
