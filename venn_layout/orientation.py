"""Post-layout normalization: cluster separation, orientation and viewport scaling."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from .geometry import bounding_box, distance
from .logging_utils import apply_debug_logging
from .types import BoundingBox, Circle, SetId, Solution, UnionFindNode

logger = logging.getLogger(__name__)


@dataclass
class OrientationResult:
    """Rigid transform applied to one cluster by :func:`orientate_circles`."""

    translation: tuple
    rotation: float
    reflected: bool


def disjoint_cluster(circles: Sequence[Circle]) -> List[List[Circle]]:
    """Group circles into clusters of (transitively) overlapping circles."""

    nodes = [UnionFindNode(parent_index=i) for i in range(len(circles))]

    def find(index: int) -> int:
        root = index
        while nodes[root].parent_index != root:
            root = nodes[root].parent_index
        while nodes[index].parent_index != root:
            nodes[index].parent_index, index = root, nodes[index].parent_index
        return root

    def union(x: int, y: int) -> None:
        nodes[find(x)].parent_index = find(y)

    for i in range(len(circles)):
        for j in range(i + 1, len(circles)):
            max_distance = circles[i].radius + circles[j].radius
            if distance(circles[i], circles[j]) + 1e-10 < max_distance:
                union(j, i)

    clusters: Dict[int, List[Circle]] = {}
    for i, circle in enumerate(circles):
        clusters.setdefault(find(i), []).append(circle)
    return list(clusters.values())


def orientate_circles(circles: List[Circle], orientation: float = math.pi / 2) -> OrientationResult:
    """Canonically orient a cluster in place.

    Circles are sorted by descending radius, the largest is moved to the
    origin and the second largest is rotated onto ``orientation``. When the
    third largest then falls on the far side, the cluster is mirrored across
    the line through the first two.
    """

    circles.sort(key=lambda c: c.radius, reverse=True)
    translation = (0.0, 0.0)
    rotation = 0.0
    reflected = False

    if circles:
        largest_x = circles[0].x
        largest_y = circles[0].y
        translation = (-largest_x, -largest_y)
        for circle in circles:
            circle.x -= largest_x
            circle.y -= largest_y

    if len(circles) > 1:
        rotation = math.atan2(circles[1].x, circles[1].y) - orientation
        c = math.cos(rotation)
        s = math.sin(rotation)
        for circle in circles:
            x, y = circle.x, circle.y
            circle.x = c * x - s * y
            circle.y = s * x + c * y

    if len(circles) > 2:
        angle = math.atan2(circles[2].x, circles[2].y) - orientation
        angle %= 2 * math.pi
        if angle > math.pi:
            slope = circles[1].y / (1e-10 + circles[1].x)
            for circle in circles:
                d = (circle.x + slope * circle.y) / (1 + slope * slope)
                circle.x = 2 * d - circle.x
                circle.y = 2 * d * slope - circle.y
            reflected = True

    return OrientationResult(translation=translation, rotation=rotation, reflected=reflected)


@dataclass
class _Cluster:
    circles: List[Circle]
    bounds: BoundingBox


def normalize_solution(solution: Mapping[SetId, Circle], orientation: float = math.pi / 2) -> Solution:
    """Orient every disjoint cluster and tile the clusters around the largest one."""

    circles = [Circle(c.x, c.y, c.radius, setid) for setid, c in solution.items()]
    if not circles:
        return {}

    clusters: List[_Cluster] = []
    for group in disjoint_cluster(circles):
        orientate_circles(group, orientation)
        clusters.append(_Cluster(group, bounding_box(group)))
    clusters.sort(key=lambda cluster: cluster.bounds.area, reverse=True)
    logger.info("Normalizing solution with %d disjoint cluster(s)", len(clusters))

    main = clusters[0].circles
    return_bounds = clusters[0].bounds
    spacing = return_bounds.width / 50

    def add_cluster(cluster: Optional[_Cluster], right: bool, bottom: bool) -> None:
        if cluster is None:
            return
        bounds = cluster.bounds

        if right:
            x_offset = return_bounds.x_max - bounds.x_min + spacing
        else:
            x_offset = return_bounds.x_max - bounds.x_max - spacing
            centreing = bounds.width / 2 - return_bounds.width / 2
            if centreing < 0:
                x_offset += centreing

        if bottom:
            y_offset = return_bounds.y_max - bounds.y_min + spacing
        else:
            y_offset = return_bounds.y_max - bounds.y_max - spacing
            centreing = bounds.height / 2 - return_bounds.height / 2
            if centreing < 0:
                y_offset += centreing

        for circle in cluster.circles:
            circle.x += x_offset
            circle.y += y_offset
            main.append(circle)

    def at(index: int) -> Optional[_Cluster]:
        return clusters[index] if index < len(clusters) else None

    index = 1
    while index < len(clusters):
        add_cluster(at(index), True, False)
        add_cluster(at(index + 1), False, True)
        add_cluster(at(index + 2), True, True)
        index += 3
        return_bounds = bounding_box(main)

    return {circle.setid: circle for circle in main}


def scale_solution(
    solution: Mapping[SetId, Circle], width: float, height: float, padding: float
) -> Solution:
    """Scale and centre ``solution`` inside ``[padding, size - padding]`` on both axes."""

    if not solution:
        return {}

    width -= 2 * padding
    height -= 2 * padding

    bounds = bounding_box(solution.values())
    scales = []
    if bounds.width > 0:
        scales.append(width / bounds.width)
    if bounds.height > 0:
        scales.append(height / bounds.height)
    scaling = min(scales) if scales else 1.0

    x_offset = (width - bounds.width * scaling) / 2
    y_offset = (height - bounds.height * scaling) / 2

    return {
        setid: Circle(
            x=padding + x_offset + (circle.x - bounds.x_min) * scaling,
            y=padding + y_offset + (circle.y - bounds.y_min) * scaling,
            radius=scaling * circle.radius,
            setid=setid,
        )
        for setid, circle in solution.items()
    }


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "OrientationResult",
    "disjoint_cluster",
    "orientate_circles",
    "normalize_solution",
    "scale_solution",
]
