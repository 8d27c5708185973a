"""Bounded measurement series and the Newton-Raphson root finder."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_MAX_DATA_POINTS = 300
_DERIVATIVE_EPSILON = 1e-12


@dataclass(frozen=True)
class Value:
    """A single plotted point: ``x`` is time or iteration, ``y`` the reading."""

    x: float
    y: float


@dataclass
class Measurements:
    """A series of values that keeps at most ``max_data_points`` of the newest."""

    values: list[Value] = field(default_factory=list)
    max_data_points: int = DEFAULT_MAX_DATA_POINTS

    def add_value(self, value: Value) -> None:
        """Append a value, dropping the oldest one if the series is over its limit."""
        self.values.append(value)
        if len(self.values) > self.max_data_points:
            del self.values[0]

    def clear_values(self) -> None:
        """Remove every value."""
        self.values.clear()

    def set_max_data_points(self, max_points: int) -> None:
        """Change the limit and drop the oldest values that no longer fit."""
        self.max_data_points = max_points
        excess = len(self.values) - max_points
        if excess > 0:
            del self.values[:excess]

    def __len__(self) -> int:
        return len(self.values)

    @property
    def latest(self) -> Value | None:
        """The newest value, or None when the series is empty."""
        return self.values[-1] if self.values else None


def newton_raphson(
    f: Callable[[float], float],
    fp: Callable[[float], float],
    x0: float,
    tol: float,
    max_iter: int,
) -> tuple[float, list[Value]]:
    """Find a root of ``f`` starting at ``x0``.

    Returns the last estimate and the history of estimates, where each entry's
    ``x`` is the iteration number (0 for the starting guess).  Iteration stops
    when the derivative is nearly zero, when two successive estimates differ by
    less than ``tol``, or after ``max_iter`` steps.
    """
    x = x0
    history = [Value(0.0, x0)]

    for i in range(max_iter):
        fx = f(x)
        fpx = fp(x)

        if abs(fpx) < _DERIVATIVE_EPSILON:
            logger.info("Newton-Raphson: derivative near zero at iteration %d; stopping.", i)
            break

        x_new = x - fx / fpx
        history.append(Value(float(i + 1), x_new))

        if abs(x_new - x) < tol:
            logger.info("Newton-Raphson: converged at iteration %d, x = %.8f", i + 1, x_new)
            x = x_new
            break
        x = x_new

        if i == max_iter - 1:
            logger.info("Newton-Raphson: maximum iterations reached, x = %.8f", x)

    return x, history