"""Reading newline-terminated photodiode values from a serial port."""

from __future__ import annotations

import codecs
import threading
import time
from typing import Any, Callable

import serial

from greenlux.measurements import Value

DEFAULT_PORT = "COM4"
DEFAULT_BAUD_RATE = 9600
READ_TIMEOUT = 0.03
POLL_INTERVAL = 0.01
READ_SIZE = 256

PortOpener = Callable[[str, int, float], Any]


class LineBuffer:
    """Collects decoded bytes and hands out complete lines."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, data: bytes) -> list[str]:
        """Add bytes and return every line completed by them, without the newline."""
        self._pending += self._decoder.decode(data)
        *lines, self._pending = self._pending.split("\n")
        return lines

    @property
    def pending(self) -> str:
        """Text received after the last newline."""
        return self._pending


def parse_photodiode_line(line: str) -> float | None:
    """Parse a trimmed line as a number, or return None if it is not one."""
    text = line.strip()
    if not text or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _open_serial(port_name: str, baud_rate: int, timeout: float) -> Any:
    return serial.Serial(port_name, baud_rate, timeout=timeout)


class SerialReader:
    """Reads photodiode values from a serial port until stopped or an error occurs.

    Each line yields one value; a line that does not parse is reported and
    delivered as 0.0.  ``x`` of each value is the seconds since ``start_time``.
    """

    def __init__(
        self,
        on_value: Callable[[Value], None],
        on_status: Callable[[str], None],
        port_name: str = DEFAULT_PORT,
        baud_rate: int = DEFAULT_BAUD_RATE,
        opener: PortOpener = _open_serial,
        start_time: float | None = None,
    ) -> None:
        self.port_name = port_name
        self.baud_rate = baud_rate
        self._on_value = on_value
        self._on_status = on_status
        self._opener = opener
        self._start_time = time.monotonic() if start_time is None else start_time
        self._stop = threading.Event()

    def stop(self) -> None:
        """Ask a running reader to finish after its current read."""
        self._stop.set()

    def run(self) -> None:
        """Open the port and read from it until stopped or a read fails."""
        self._on_status(f"Mencoba membuka port: {self.port_name}...")
        try:
            port = self._opener(self.port_name, self.baud_rate, READ_TIMEOUT)
        except (serial.SerialException, OSError, ValueError) as exc:
            self._on_status(f"Gagal membuka port {self.port_name}: {exc}")
            self._on_status("Pastikan Arduino IDE Serial Monitor TIDAK terbuka!")
            return

        try:
            self._on_status(f"Terhubung ke: {self.port_name} ({self.baud_rate} bps)")
            buffer = LineBuffer()
            while not self._stop.is_set():
                try:
                    data = port.read(READ_SIZE)
                except (serial.SerialException, OSError) as exc:
                    self._on_status(f"Serial Read ERROR: {exc!r}")
                    break
                for line in buffer.feed(data or b""):
                    self._handle_line(line)
                self._stop.wait(POLL_INTERVAL)
        finally:
            port.close()

    def _handle_line(self, line: str) -> None:
        trimmed = line.strip()
        reading = parse_photodiode_line(trimmed)
        if reading is None:
            self._on_status(f"Parsing ERROR (Photodiode): '{trimmed}'")
        else:
            self._on_status(f"Nilai Photodiode Diterima: {reading:.2f}")
        elapsed = time.monotonic() - self._start_time
        self._on_value(Value(elapsed, reading if reading is not None else 0.0))