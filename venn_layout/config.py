"""Configuration objects for the layout pipeline."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from typing import Callable, Optional

from .loss import LossFunction, loss_function
from .optimize import SimplexResult, nelder_mead
from .seeders import BaseSeeder, BestInitialSeeder

Minimizer = Callable[..., SimplexResult]


@dataclass
class LayoutOptions:
    """Numeric knobs of a layout run."""

    max_iterations: int = 500
    random_seed: Optional[int] = None
    orientation: float = math.pi / 2
    normalize: bool = True
    width: float = 1.0
    height: float = 1.0
    padding: float = 15.0


@dataclass
class LayoutConfig:
    """Pluggable strategies used by :func:`venn_layout.solver.venn`.

    ``minimizer`` is called as ``minimizer(f, x0, max_iterations=n)`` and must
    return a :class:`~venn_layout.optimize.SimplexResult`.
    """

    loss: LossFunction = loss_function
    initial_layout: BaseSeeder = field(default_factory=BestInitialSeeder)
    minimizer: Minimizer = nelder_mead


_LAYOUT_CONFIG = LayoutConfig()


def get_layout_config() -> LayoutConfig:
    return copy.deepcopy(_LAYOUT_CONFIG)


def set_layout_config(config: LayoutConfig) -> None:
    global _LAYOUT_CONFIG
    _LAYOUT_CONFIG = copy.deepcopy(config)


def reset_layout_config() -> None:
    set_layout_config(LayoutConfig())


__all__ = [
    "Minimizer",
    "LayoutOptions",
    "LayoutConfig",
    "get_layout_config",
    "set_layout_config",
    "reset_layout_config",
]
