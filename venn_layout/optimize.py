"""General purpose numerical optimizers used by the layout engine.

Nothing in here knows about circles: the layout code hands over plain
objective functions on flat ``numpy`` vectors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np
from scipy.optimize import minimize

from .types import BisectionError, SimplexVertex

logger = logging.getLogger(__name__)

ScalarFunc = Callable[[float], float]
Objective = Callable[[np.ndarray], float]
GradientObjective = Callable[[np.ndarray, np.ndarray], float]

# Wolfe condition constants (sufficient decrease, curvature)
_WOLFE_C1 = 1e-6
_WOLFE_C2 = 0.1
_GRADIENT_TOLERANCE = 1e-5


def bisect(
    f: ScalarFunc,
    a: float,
    b: float,
    tolerance: float = 1e-10,
    max_iterations: int = 100,
) -> float:
    """Find a root of ``f`` in ``[a, b]`` by bisection.

    ``f(a)`` and ``f(b)`` must have opposite signs. When the iteration budget
    runs out the current estimate is returned.
    """

    f_a = f(a)
    f_b = f(b)
    if f_a * f_b > 0:
        raise BisectionError(
            f"initial bisect points must have opposite signs: f({a})={f_a}, f({b})={f_b}"
        )
    if f_a == 0:
        return a
    if f_b == 0:
        return b

    delta = b - a
    for _ in range(max_iterations):
        delta /= 2
        mid = a + delta
        f_mid = f(mid)
        if f_mid * f_a >= 0:
            a = mid
        if abs(delta) < tolerance or f_mid == 0:
            return mid
    return a + delta


@dataclass
class SimplexResult:
    value: float
    solution: np.ndarray
    iterations: int


def nelder_mead(
    f: Objective,
    x0: Sequence[float],
    *,
    max_iterations: Optional[int] = None,
    non_zero_delta: float = 1.1,
    zero_delta: float = 0.001,
    min_error_delta: float = 1e-6,
    rho: float = 1.0,
    chi: float = 2.0,
    psi: float = -0.5,
    sigma: float = 0.5,
    callback: Optional[Callable[[List[SimplexVertex]], None]] = None,
) -> SimplexResult:
    """Minimize ``f`` with the downhill simplex method."""

    start = np.asarray(x0, dtype=float)
    n = start.size
    if max_iterations is None:
        max_iterations = 200 * n
    if n == 0:
        return SimplexResult(value=float(f(start)), solution=start.copy(), iterations=0)

    def vertex(coords: np.ndarray) -> SimplexVertex:
        return SimplexVertex(coords=coords, value=float(f(coords)))

    simplex: List[SimplexVertex] = [vertex(start.copy())]
    for i in range(n):
        point = start.copy()
        point[i] = point[i] * non_zero_delta if point[i] else zero_delta
        simplex.append(vertex(point))

    iteration = 0
    for iteration in range(max_iterations):
        simplex.sort(key=lambda v: v.value)
        if callback is not None:
            callback(simplex)

        best = simplex[0]
        worst = simplex[n]
        if abs(best.value - worst.value) < min_error_delta:
            break

        centroid = np.mean([v.coords for v in simplex[:n]], axis=0)

        reflected = vertex((1 + rho) * centroid - rho * worst.coords)
        if reflected.value < best.value:
            expanded = vertex((1 + chi) * centroid - chi * worst.coords)
            simplex[n] = expanded if expanded.value < reflected.value else reflected
        elif reflected.value >= simplex[n - 1].value:
            should_reduce = False
            if reflected.value > worst.value:
                # inside contraction
                contracted = vertex((1 + psi) * centroid - psi * worst.coords)
                if contracted.value < worst.value:
                    simplex[n] = contracted
                else:
                    should_reduce = True
            else:
                # outside contraction
                contracted = vertex((1 - psi * rho) * centroid + psi * rho * worst.coords)
                if contracted.value < reflected.value:
                    simplex[n] = contracted
                else:
                    should_reduce = True

            if should_reduce:
                if sigma >= 1:
                    break
                for i in range(1, len(simplex)):
                    shrunk = best.coords + sigma * (simplex[i].coords - best.coords)
                    simplex[i] = vertex(shrunk)
        else:
            simplex[n] = reflected

    simplex.sort(key=lambda v: v.value)
    logger.debug(
        "nelder_mead: finished after %d iteration(s) value=%.6g", iteration + 1, simplex[0].value
    )
    return SimplexResult(value=simplex[0].value, solution=simplex[0].coords.copy(), iterations=iteration + 1)


def scipy_nelder_mead(
    f: Objective,
    x0: Sequence[float],
    *,
    max_iterations: Optional[int] = None,
    min_error_delta: float = 1e-6,
    **_: object,
) -> SimplexResult:
    """Drop-in replacement for :func:`nelder_mead` backed by ``scipy.optimize``."""

    start = np.asarray(x0, dtype=float)
    if max_iterations is None:
        max_iterations = 200 * max(start.size, 1)
    if start.size == 0:
        return SimplexResult(value=float(f(start)), solution=start.copy(), iterations=0)
    result = minimize(
        f,
        start,
        method="Nelder-Mead",
        options={"maxiter": max_iterations, "fatol": min_error_delta, "xatol": 1e-8},
    )
    return SimplexResult(value=float(result.fun), solution=np.asarray(result.x, dtype=float), iterations=int(result.nit))


@dataclass
class GradientState:
    x: np.ndarray
    fx: float
    fxprime: np.ndarray

    def copy(self) -> "GradientState":
        return GradientState(self.x.copy(), self.fx, self.fxprime.copy())


def wolfe_line_search(
    f: GradientObjective,
    pk: np.ndarray,
    current: GradientState,
    next_state: GradientState,
    a: float = 1.0,
) -> float:
    """Return a step length satisfying the strong Wolfe conditions, or ``0.0``.

    ``next_state`` is overwritten with the point evaluated last.
    """

    phi0 = current.fx
    phi_prime0 = float(np.dot(current.fxprime, pk))
    phi_old = phi0
    a0 = 0.0
    a = a or 1.0

    def evaluate(step: float) -> tuple:
        next_state.x[:] = current.x + step * pk
        next_state.fx = f(next_state.x, next_state.fxprime)
        return next_state.fx, float(np.dot(next_state.fxprime, pk))

    def zoom(a_lo: float, a_high: float, phi_lo: float) -> float:
        for _ in range(16):
            step = (a_lo + a_high) / 2
            phi, phi_prime = evaluate(step)
            if phi > phi0 + _WOLFE_C1 * step * phi_prime0 or phi >= phi_lo:
                a_high = step
            else:
                if abs(phi_prime) <= -_WOLFE_C2 * phi_prime0:
                    return step
                if phi_prime * (a_high - a_lo) >= 0:
                    a_high = a_lo
                a_lo = step
                phi_lo = phi
        return 0.0

    for iteration in range(10):
        phi, phi_prime = evaluate(a)
        if phi > phi0 + _WOLFE_C1 * a * phi_prime0 or (iteration and phi >= phi_old):
            return zoom(a0, a, phi_old)
        if abs(phi_prime) <= -_WOLFE_C2 * phi_prime0:
            return a
        if phi_prime >= 0:
            return zoom(a, a0, phi)
        phi_old = phi
        a0 = a
        a *= 2

    return 0.0


def conjugate_gradient(
    f: GradientObjective,
    x0: Sequence[float],
    *,
    max_iterations: Optional[int] = None,
    history: Optional[List[GradientState]] = None,
) -> GradientState:
    """Nonlinear conjugate gradient (Polak-Ribiere) with a Wolfe line search.

    ``f(x, gradient)`` returns the objective value and writes the gradient
    into ``gradient`` in place.
    """

    start = np.asarray(x0, dtype=float)
    if max_iterations is None:
        max_iterations = 5 * start.size

    current = GradientState(start.copy(), 0.0, np.zeros_like(start))
    next_state = GradientState(start.copy(), 0.0, np.zeros_like(start))
    current.fx = f(current.x, current.fxprime)
    pk = -current.fxprime.copy()
    a = 1.0

    for _ in range(max_iterations):
        if history is not None:
            history.append(current.copy())

        a = wolfe_line_search(f, pk, current, next_state, a)
        if not a:
            # no acceptable step: restart along steepest descent
            pk = -current.fxprime.copy()
        else:
            yk = next_state.fxprime - current.fxprime
            delta_k = float(np.dot(current.fxprime, current.fxprime))
            beta_k = max(0.0, float(np.dot(yk, next_state.fxprime)) / delta_k) if delta_k else 0.0
            pk = beta_k * pk - next_state.fxprime
            current, next_state = next_state, current

        if float(np.linalg.norm(current.fxprime)) <= _GRADIENT_TOLERANCE:
            break

    if history is not None:
        history.append(current.copy())
    return current


__all__ = [
    "bisect",
    "SimplexResult",
    "nelder_mead",
    "scipy_nelder_mead",
    "GradientState",
    "wolfe_line_search",
    "conjugate_gradient",
]
