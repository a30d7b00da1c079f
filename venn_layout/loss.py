"""Canonical layout loss: weighted squared error between actual and requested areas."""

from __future__ import annotations

from typing import Callable, Mapping, Sequence

from .geometry import circle_overlap, distance, intersection_area
from .types import AreaSpec, Circle, SetId

LossFunction = Callable[[Mapping[SetId, Circle], Sequence[AreaSpec]], float]


def loss_function(circles: Mapping[SetId, Circle], areas: Sequence[AreaSpec]) -> float:
    """Sum of ``weight * (actual - size) ** 2`` over every intersection entry.

    Single-set specs are skipped: their radius is fixed by the set size.
    """

    output = 0.0
    for area in areas:
        if len(area.sets) == 1:
            continue
        if len(area.sets) == 2:
            left = circles[area.sets[0]]
            right = circles[area.sets[1]]
            overlap = circle_overlap(left.radius, right.radius, distance(left, right))
        else:
            overlap = intersection_area([circles[s] for s in area.sets])
        output += area.weight * (overlap - area.size) ** 2
    return output


__all__ = ["LossFunction", "loss_function"]
