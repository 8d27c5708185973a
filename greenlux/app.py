"""Command-line light monitor: reads the sensor, solves lux and stores results."""

from __future__ import annotations

import argparse
import logging
import queue
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TextIO

from pymongo.errors import PyMongoError

from greenlux.db import (
    DEFAULT_URI,
    connect_db,
    get_all_newton_raphson_results,
    get_all_photodiode_data,
    insert_newton_raphson_result,
    insert_photodiode_data,
)
from greenlux.measurements import DEFAULT_MAX_DATA_POINTS, Value
from greenlux.monitor import MonitorState
from greenlux.sensor_config import SensorConfiguration, clamp_baud_rate
from greenlux.serial_link import DEFAULT_PORT, SerialReader
from greenlux.views import DatabaseDataType, format_database_row, latest_value_text

logger = logging.getLogger(__name__)

TITLE = (
    "Monitoring Intesitas Cahaya Pada Green House menggunakan Light Sensor "
    "untuk Budidaya tanaman Selada (Lactusa Sativa)"
)
_EVENT_POLL = 0.1
_JOIN_TIMEOUT = 1.0

_DATABASE_VIEWS = {
    "photodiode": DatabaseDataType.PHOTODIODE_DATA,
    "newton-raphson": DatabaseDataType.NEWTON_RAPHSON_RESULTS,
}


class MonitorApp:
    """Runs the serial reader and reports each reading, or lists stored data."""

    def __init__(
        self,
        state: MonitorState | None = None,
        *,
        port_name: str = DEFAULT_PORT,
        baud_rate: int | None = None,
        db: Any = None,
        database_view: DatabaseDataType | None = None,
        opener: Callable[[str, int, float], Any] | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.state = state if state is not None else MonitorState()
        self.port_name = port_name
        self.baud_rate = baud_rate if baud_rate is not None else self.state.config.baud_rate
        self.db = db
        self.database_view = database_view
        self._opener = opener
        self._out = out if out is not None else sys.stdout

    def run(self) -> int:
        """Show the chosen database view, or monitor the sensor until it stops."""
        if self.database_view is not None:
            self._show_database(self.database_view)
            return 0

        self._emit(TITLE)
        events: queue.Queue[tuple[str, Any]] = queue.Queue()
        reader_kwargs: dict[str, Any] = {}
        if self._opener is not None:
            reader_kwargs["opener"] = self._opener
        reader = SerialReader(
            on_value=lambda value: events.put(("value", value)),
            on_status=lambda message: events.put(("status", message)),
            port_name=self.port_name,
            baud_rate=self.baud_rate,
            **reader_kwargs,
        )
        thread = threading.Thread(target=reader.run, name="serial-reader", daemon=True)

        with ThreadPoolExecutor(max_workers=1) as storage:
            thread.start()
            try:
                while thread.is_alive() or not events.empty():
                    try:
                        kind, payload = events.get(timeout=_EVENT_POLL)
                    except queue.Empty:
                        continue
                    if kind == "status":
                        self._on_status(payload)
                    else:
                        self._on_value(payload, storage)
            except KeyboardInterrupt:
                self._emit("Dihentikan.")
            finally:
                reader.stop()
                thread.join(_JOIN_TIMEOUT)

        self._emit(
            latest_value_text(
                self.state.measurements,
                "Nilai Sensor Terbaru",
                "Menunggu data photodiode dari sensor...",
            )
        )
        self._emit(
            latest_value_text(
                self.state.lux_measurements,
                "Lux Newton-Raphson Terbaru",
                "Menunggu perhitungan Newton-Raphson Lux...",
            )
        )
        return 0

    def _emit(self, text: str) -> None:
        print(text, file=self._out, flush=True)

    def _on_status(self, message: str) -> None:
        self.state.set_status(message)
        self._emit(f"Status Serial: {message}")

    def _on_value(self, value: Value, storage: ThreadPoolExecutor) -> None:
        estimate = self.state.handle_reading(value)
        self._emit(f"Nilai Photodiode dari Arduino (Scaled 0-1000): {value.y:.2f}")
        self._emit(f"Tegangan Output Terukur (V_out): {estimate.voltage:.4f} V")
        self._emit(f"Lux dari Newton-Raphson (Validasi): {estimate.lux:.2f} Lux")
        self._emit(self.state.light_status.text)
        if self.db is not None:
            storage.submit(self._store_result, estimate.lux)
            storage.submit(self._store_reading, value.y, estimate.lux)

    def _store_result(self, lux: float) -> None:
        try:
            insert_newton_raphson_result(self.db, lux, [])
        except PyMongoError as exc:
            logger.error("Failed to store Newton-Raphson result: %s", exc)

    def _store_reading(self, raw: float, lux: float) -> None:
        try:
            insert_photodiode_data(self.db, raw)
            insert_newton_raphson_result(self.db, lux, [])
        except PyMongoError as exc:
            logger.error("Failed to store photodiode reading: %s", exc)

    def _show_database(self, data_type: DatabaseDataType) -> None:
        self._emit("Data Tersimpan (MongoDB)")
        docs: list[dict[str, Any]] = []
        if self.db is not None:
            fetch = (
                get_all_photodiode_data
                if data_type is DatabaseDataType.PHOTODIODE_DATA
                else get_all_newton_raphson_results
            )
            try:
                docs = fetch(self.db)
            except PyMongoError as exc:
                logger.error("Failed to fetch stored data: %s", exc)
        self.state.database_data = docs

        self._emit(f"No. | {data_type.header} | Waktu Pengukuran")
        if not docs:
            self._emit("Belum ada data di database.")
            self._emit("Pastikan sensor terhubung dan pengiriman data ke MongoDB aktif.")
            return
        for number, doc in enumerate(docs, start=1):
            self._emit(" | ".join(format_database_row(number, doc, data_type)))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the command line."""
    defaults = SensorConfiguration()
    parser = argparse.ArgumentParser(prog="greenlux", description=TITLE)
    parser.add_argument("--port", default=DEFAULT_PORT, help="serial port name")
    parser.add_argument("--baud", type=int, default=defaults.baud_rate, help="baud rate")
    parser.add_argument("--db-uri", default=DEFAULT_URI, help="MongoDB connection URI")
    parser.add_argument("--no-db", action="store_true", help="do not store or read data")
    parser.add_argument(
        "--database",
        choices=sorted(_DATABASE_VIEWS),
        help="list stored data of this kind and exit",
    )
    parser.add_argument("--calib-a", type=float, default=defaults.calib_a_power)
    parser.add_argument("--calib-b", type=float, default=defaults.calib_b_power)
    parser.add_argument("--initial-guess", type=float, default=defaults.initial_guess_nr)
    parser.add_argument("--tolerance", type=float, default=defaults.tolerance_nr)
    parser.add_argument("--max-iterations", type=int, default=defaults.max_iterations_nr)
    parser.add_argument("--max-points", type=int, default=DEFAULT_MAX_DATA_POINTS)
    parser.add_argument("--verbose", action="store_true", help="log solver details")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the monitor from the command line."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    config = SensorConfiguration(
        calib_a_power=args.calib_a,
        calib_b_power=args.calib_b,
        initial_guess_nr=args.initial_guess,
        tolerance_nr=args.tolerance,
        max_iterations_nr=args.max_iterations,
        baud_rate=clamp_baud_rate(args.baud),
    )
    state = MonitorState(config=config, max_data_points=args.max_points)
    db = None if args.no_db else connect_db(args.db_uri)
    view = _DATABASE_VIEWS.get(args.database) if args.database else None

    app = MonitorApp(state, port_name=args.port, db=db, database_view=view)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())