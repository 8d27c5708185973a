"""Conversion of raw photodiode readings into lux by solving a power-law model."""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass

from greenlux.measurements import newton_raphson
from greenlux.sensor_config import SensorConfiguration

logger = logging.getLogger(__name__)

ARDUINO_MAX_VOLTAGE = 3.3
ARDUINO_MAX_PHOTODIODE_VALUE = 1000.0

_FLOAT_MAX = sys.float_info.max


@dataclass(frozen=True)
class LuxEstimate:
    """The outcome of converting one reading to lux."""

    raw: float
    voltage: float
    lux: float
    history: tuple[float, ...]


def photodiode_to_voltage(raw: float) -> float:
    """Scale a 0-1000 photodiode reading to the sensor's output voltage."""
    return raw * (ARDUINO_MAX_VOLTAGE / ARDUINO_MAX_PHOTODIODE_VALUE)


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf


def estimate_lux(raw: float, config: SensorConfiguration) -> LuxEstimate:
    """Solve ``a * lux**b = voltage`` for lux with Newton-Raphson.

    A non-positive initial guess is replaced by 1.0; a result that is not a
    finite, non-negative number is reported as 0.0 lux.
    """
    voltage = photodiode_to_voltage(raw)
    a = config.calib_a_power
    b = config.calib_b_power

    def f(lux: float) -> float:
        if lux <= 0.0:
            return _FLOAT_MAX
        return a * _power(lux, b) - voltage

    def f_prime(lux: float) -> float:
        if lux <= 0.0:
            return _FLOAT_MAX
        return a * b * _power(lux, b - 1.0)

    x0 = config.initial_guess_nr
    if x0 <= 0.0:
        logger.warning("Initial lux guess %s is invalid; using 1.0.", x0)
        x0 = 1.0

    max_iterations = max(0, int(config.max_iterations_nr))
    result, history = newton_raphson(f, f_prime, x0, config.tolerance_nr, max_iterations)

    if math.isfinite(result) and result >= 0.0:
        lux = result
    else:
        logger.warning("Newton-Raphson result %s is invalid; using 0.0 lux.", result)
        lux = 0.0

    return LuxEstimate(
        raw=raw,
        voltage=voltage,
        lux=lux,
        history=tuple(v.y for v in history),
    )