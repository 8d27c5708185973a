"""The monitor's shared state: readings, lux results, status and stored rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from greenlux.lux import LuxEstimate, estimate_lux
from greenlux.measurements import DEFAULT_MAX_DATA_POINTS, Measurements, Value
from greenlux.sensor_config import SensorConfiguration
from greenlux.views import LightStatus, classify_light, status_level

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "Menunggu koneksi serial..."


@dataclass
class MonitorState:
    """Everything the monitor shows, updated one reading at a time."""

    config: SensorConfiguration = field(default_factory=SensorConfiguration)
    max_data_points: int = DEFAULT_MAX_DATA_POINTS
    measurements: Measurements = field(default_factory=Measurements)
    lux_measurements: Measurements = field(default_factory=Measurements)
    current_photodiode_value: float = 0.0
    status_message: str = DEFAULT_STATUS
    database_data: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.measurements.set_max_data_points(self.max_data_points)
        self.lux_measurements.set_max_data_points(self.max_data_points)

    def handle_reading(self, value: Value) -> LuxEstimate:
        """Record a photodiode reading and the lux solved from it."""
        self.measurements.add_value(value)
        self.current_photodiode_value = value.y

        estimate = estimate_lux(value.y, self.config)
        logger.info("Photodiode value (scaled 0-1000): %.2f", value.y)
        logger.info("Measured output voltage: %.4f V", estimate.voltage)
        logger.info("Lux from Newton-Raphson: %.2f", estimate.lux)

        self.lux_measurements.add_value(Value(value.x, estimate.lux))
        self.config.update_nr_display_data(estimate.lux, estimate.history)
        return estimate

    def set_status(self, message: str) -> None:
        """Replace the serial status message."""
        self.status_message = message

    def clear(self) -> None:
        """Drop every plotted value and every fetched database row."""
        self.measurements.clear_values()
        self.lux_measurements.clear_values()
        self.database_data.clear()

    @property
    def status_level(self) -> str:
        """``"error"``, ``"ok"`` or ``"neutral"`` for the current status message."""
        return status_level(self.status_message)

    @property
    def light_status(self) -> LightStatus:
        """The light status for the latest photodiode value."""
        return classify_light(self.current_photodiode_value)