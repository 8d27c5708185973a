from datetime import datetime, timezone

import pytest
import serial
from pymongo.errors import PyMongoError

from greenlux.app import MonitorApp, main, parse_args
from greenlux.monitor import MonitorState
from greenlux.views import DatabaseDataType


class FakeCollection:
    def __init__(self, fail=False):
        self.docs = []
        self.fail = fail

    def insert_one(self, doc):
        if self.fail:
            raise PyMongoError("server down")
        self.docs.append(dict(doc))

    def find(self, query):
        return iter(list(self.docs))


class FakeDatabase(dict):
    def __init__(self, fail=False):
        super().__init__()
        self.fail = fail

    def __missing__(self, key):
        collection = FakeCollection(self.fail)
        self[key] = collection
        return collection


class FakePort:
    def __init__(self, chunks):
        self._chunks = list(chunks)
        self.closed = False

    def read(self, size):
        if not self._chunks:
            raise OSError("unplugged")
        return self._chunks.pop(0)

    def close(self):
        self.closed = True


class Out:
    def __init__(self):
        self.parts = []

    def write(self, text):
        self.parts.append(text)

    def flush(self):
        pass

    @property
    def text(self):
        return "".join(self.parts)


def test_parse_args_defaults():
    args = parse_args([])
    assert args.port == "COM4"
    assert args.baud == 9600
    assert args.max_points == 300
    assert args.no_db is False
    assert args.database is None
    assert args.db_uri == "mongodb://localhost:27017"


def test_parse_args_overrides():
    args = parse_args(["--port", "/dev/ttyUSB0", "--baud", "115200", "--no-db",
                       "--database", "newton-raphson", "--max-iterations", "5"])
    assert args.port == "/dev/ttyUSB0"
    assert args.baud == 115200
    assert args.no_db is True
    assert args.database == "newton-raphson"
    assert args.max_iterations == 5


def test_parse_args_rejects_unknown_view():
    with pytest.raises(SystemExit):
        parse_args(["--database", "other"])


def test_run_processes_readings_and_stores_them():
    port = FakePort([b"250\n", b"ab", b"c\n"])
    db = FakeDatabase()
    out = Out()
    state = MonitorState()
    app = MonitorApp(state, db=db, opener=lambda name, baud, timeout: port, out=out)

    assert app.run() == 0
    assert [v.y for v in state.measurements.values] == [250.0, 0.0]
    assert len(state.lux_measurements) == 2
    assert port.closed
    assert [d["photodiode_value"] for d in db["photodiode_data"].docs] == [250.0, 0.0]
    assert len(db["newton_raphson_results"].docs) == 4
    assert "Nilai Photodiode dari Arduino (Scaled 0-1000): 250.00" in out.text
    assert "Parsing ERROR (Photodiode): 'abc'" in out.text
    assert "Serial Read ERROR" in state.status_message


def test_run_reports_open_failure():
    def opener(name, baud, timeout):
        raise serial.SerialException("no such port")

    out = Out()
    state = MonitorState()
    app = MonitorApp(state, opener=opener, out=out)
    assert app.run() == 0
    assert "Gagal membuka port COM4" in out.text
    assert state.status_message == "Pastikan Arduino IDE Serial Monitor TIDAK terbuka!"
    assert "Menunggu data photodiode dari sensor..." in out.text


def test_run_survives_storage_errors():
    port = FakePort([b"420\n"])
    out = Out()
    state = MonitorState()
    app = MonitorApp(state, db=FakeDatabase(fail=True),
                     opener=lambda name, baud, timeout: port, out=out)
    assert app.run() == 0
    assert [v.y for v in state.measurements.values] == [420.0]


def test_run_uses_config_baud_rate():
    seen = []

    def opener(name, baud, timeout):
        seen.append((name, baud))
        return FakePort([])

    state = MonitorState()
    state.config.baud_rate = 19200
    out = Out()
    code = MonitorApp(state, port_name="/dev/ttyACM0", opener=opener, out=out).run()
    assert code == 0
    assert seen == [("/dev/ttyACM0", 19200)]
    assert "Serial Read ERROR" in state.status_message


def test_database_view_lists_rows_without_opening_port():
    db = FakeDatabase()
    db["photodiode_data"].docs.append(
        {"photodiode_value": 12.5,
         "timestamp": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)}
    )
    opened = []
    out = Out()
    state = MonitorState()
    app = MonitorApp(state, db=db, database_view=DatabaseDataType.PHOTODIODE_DATA,
                     opener=lambda *a: opened.append(a), out=out)
    assert app.run() == 0
    assert opened == []
    assert "No. | Photodiode | Waktu Pengukuran" in out.text
    assert "1 | 12.50 | 2024-01-02 03:04:05 UTC" in out.text
    assert state.database_data == db["photodiode_data"].docs


def test_database_view_empty():
    out = Out()
    app = MonitorApp(db=FakeDatabase(),
                     database_view=DatabaseDataType.NEWTON_RAPHSON_RESULTS, out=out)
    assert app.run() == 0
    assert "No. | Akar (Newton-Raphson) | Waktu Pengukuran" in out.text
    assert "Belum ada data di database." in out.text


def test_main_without_database_reports_missing_port(capsys):
    code = main(["--no-db", "--port", "/nonexistent/greenlux-port"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Gagal membuka port /nonexistent/greenlux-port" in captured.out