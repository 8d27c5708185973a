"""Text and classification shown by the monitor's screens."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from greenlux.measurements import Measurements

BRIGHT_LIMIT = 300.0
NORMAL_LIMIT = 600.0

NOT_AVAILABLE = "N/A"
FIELD_MISSING = "N/A (Field Tidak Ditemukan)"
UNKNOWN_TYPE = "N/A (Tipe Data Tak Dikenal)"

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class LightStatus(Enum):
    """Light level read from a photodiode value; low values mean bright light."""

    VERY_BRIGHT = ("☀️", "Sangat Terang")
    NORMAL = ("☁️", "Normal")
    DARK = ("🌙", "Gelap")

    def __init__(self, icon: str, label: str) -> None:
        self.icon = icon
        self.label = label

    @property
    def text(self) -> str:
        return f"{self.icon} {self.label}"


def classify_light(value: float) -> LightStatus:
    """The light status for a photodiode reading."""
    if value < BRIGHT_LIMIT:
        return LightStatus.VERY_BRIGHT
    if value < NORMAL_LIMIT:
        return LightStatus.NORMAL
    return LightStatus.DARK


class DatabaseDataType(Enum):
    """Which stored collection the database screen shows."""

    PHOTODIODE_DATA = "Photodiode"
    NEWTON_RAPHSON_RESULTS = "Akar (Newton-Raphson)"

    @property
    def header(self) -> str:
        return self.value


def _format_photodiode(doc: Mapping[str, Any]) -> str:
    if "photodiode_value" not in doc:
        return FIELD_MISSING
    value = doc["photodiode_value"]
    if isinstance(value, bool):
        return UNKNOWN_TYPE
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, int) and _INT32_MIN <= value <= _INT32_MAX:
        return str(value)
    return UNKNOWN_TYPE


def _format_root(doc: Mapping[str, Any]) -> str:
    value = doc.get("akar_terakhir")
    if isinstance(value, float):
        return f"{value:.8f}"
    return NOT_AVAILABLE


def _format_timestamp(doc: Mapping[str, Any]) -> str:
    stamp = doc.get("timestamp")
    if not isinstance(stamp, datetime):
        return NOT_AVAILABLE
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone(timezone.utc)
    return stamp.strftime("%Y-%m-%d %H:%M:%S UTC")


def format_database_row(
    index: int, doc: Mapping[str, Any], data_type: DatabaseDataType
) -> tuple[str, str, str]:
    """The row number, value and timestamp cells for one stored document.

    ``index`` is the row number as shown, counting from 1.  Naive timestamps
    are taken to be UTC, as the database driver returns them.
    """
    if data_type is DatabaseDataType.PHOTODIODE_DATA:
        value_text = _format_photodiode(doc)
    else:
        value_text = _format_root(doc)
    return str(index), value_text, _format_timestamp(doc)


def latest_value_text(measurements: Measurements, label: str, waiting_text: str) -> str:
    """``"<label>: <newest y>"`` or ``waiting_text`` when there is no data yet."""
    latest = measurements.latest
    if latest is None:
        return waiting_text
    return f"{label}: {latest.y:.2f}"


def status_level(message: str) -> str:
    """Classify a serial status message as ``"error"``, ``"ok"`` or ``"neutral"``."""
    if "ERROR" in message or "Gagal" in message:
        return "error"
    if "Terhubung" in message or "Diterima" in message:
        return "ok"
    return "neutral"