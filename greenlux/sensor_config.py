"""Calibration, serial and Newton-Raphson settings plus the latest iteration history."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from greenlux.measurements import Value

MIN_BAUD_RATE = 300
MAX_BAUD_RATE = 115200


@dataclass
class SensorConfiguration:
    """Settings used to turn photodiode readings into lux."""

    calib_a_power: float = 0.0001
    calib_b_power: float = 1.05
    initial_guess_nr: float = 1.0
    tolerance_nr: float = 1e-6
    max_iterations_nr: int = 20
    baud_rate: int = 9600
    newton_raphson_iter_results: list[Value] = field(default_factory=list)
    newton_raphson_akar: float | None = None

    def update_nr_display_data(self, akar: float, history: Iterable[float]) -> None:
        """Record the latest root and its iteration history."""
        self.newton_raphson_akar = akar
        self.newton_raphson_iter_results = [
            Value(float(i), float(v)) for i, v in enumerate(history)
        ]

    def history_lines(self) -> list[str]:
        """The iteration history as ``"<iteration> | <estimate>"`` lines."""
        return [f"{v.x:.0f} | {v.y:.8f}" for v in self.newton_raphson_iter_results]


def clamp_baud_rate(value: float) -> int:
    """Round a baud rate and keep it within the supported range."""
    return max(MIN_BAUD_RATE, min(MAX_BAUD_RATE, round(value)))