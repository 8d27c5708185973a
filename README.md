# greenlux

Light-intensity monitoring for lettuce (*Lactuca sativa*) grown in a
greenhouse. A photodiode attached to a microcontroller sends one reading per
line over a serial port; greenlux reads those lines, turns each reading into an
output voltage, solves a power-law calibration model for lux with the
Newton-Raphson method, keeps a rolling window of both series and stores the
results in MongoDB. Everything is reported as lines of text on standard output.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Requirements at run time

- A serial device that prints one numeric photodiode value per line
  (raw range 0–1000; a low value means bright light, a high value means dark).
  The default port is `COM4` at 9600 bps.
- A MongoDB server, by default at `mongodb://localhost:27017`. Readings go
  into the `photodiode_data` collection and lux results into
  `newton_raphson_results`, both in the `amitdb` database. Use `--no-db` to
  run without one.

Close any other program that holds the serial port open before starting.

## Running the monitor

```
greenlux
```

The same entry point is available as `python -m greenlux.app`.

The monitor prints a title, then a `Status Serial: ...` line for every change in
the serial connection (opening the port, connected, each reading received or
failing to parse, read errors). For every line from the sensor it:

1. parses the line as a number; a line that is not a number is reported as a
   parsing error and taken as 0.0;
2. adds the raw value to a rolling window (300 points by default);
3. scales it to a voltage (3.3 V at a raw value of 1000);
4. solves `A * lux ** B - V_out = 0` for lux by Newton-Raphson, starting from
   the configured initial guess (a guess of zero or less is replaced by 1.0),
   and replaces a non-finite or negative result with 0.0 lux;
5. prints the raw value, the voltage, the lux and the light status;
6. unless `--no-db` is given, stores the raw reading in `photodiode_data` and
   the lux in `newton_raphson_results` in the background. A lux record is
   written twice per reading (once on its own, once together with the
   reading); its iteration history is stored as an empty list. Storage
   failures are logged and do not stop the monitor.

Light status follows the raw value: below 300 is *Sangat Terang* (very
bright), below 600 is *Normal*, anything higher is *Gelap* (dark).

Monitoring ends when the port cannot be opened, when a read fails, or on
Ctrl-C; the newest raw value and the newest lux are then printed.

### Listing stored data

```
greenlux --database photodiode
greenlux --database newton-raphson
```

prints every stored document of that kind as `No. | value | timestamp` rows
(photodiode values with 2 decimals, lux roots with 8, timestamps in UTC) and
exits without touching the serial port.

### Options

| Option              | Default                      | Meaning                                  |
|---------------------|------------------------------|------------------------------------------|
| `--port`            | `COM4`                       | serial port name                         |
| `--baud`            | `9600`                       | baud rate, kept between 300 and 115200   |
| `--db-uri`          | `mongodb://localhost:27017`  | MongoDB connection URI                   |
| `--no-db`           | off                          | do not store or read data                |
| `--database`        | none                         | `photodiode` or `newton-raphson`: list and exit |
| `--calib-a`         | `0.0001`                     | power-law constant A                     |
| `--calib-b`         | `1.05`                       | power-law constant B                     |
| `--initial-guess`   | `1.0`                        | Newton-Raphson starting lux              |
| `--tolerance`       | `1e-6`                       | Newton-Raphson tolerance                 |
| `--max-iterations`  | `20`                         | Newton-Raphson iteration limit           |
| `--max-points`      | `300`                        | size of the rolling windows              |
| `--verbose`         | off                          | log solver details                       |

## Using the library

```python
from greenlux.measurements import Measurements, Value, newton_raphson
from greenlux.sensor_config import SensorConfiguration
from greenlux.lux import photodiode_to_voltage, estimate_lux

window = Measurements()
window.add_value(Value(x=0.0, y=512.0))

root, history = newton_raphson(
    lambda x: x * x - 2.0,
    lambda x: 2.0 * x,
    1.0,
    1e-10,
    50,
)

voltage = photodiode_to_voltage(512.0)
estimate = estimate_lux(512.0, SensorConfiguration())
print(estimate.lux, estimate.history)
```

The modules:

- `greenlux.measurements` — `Value`, `Measurements` (a bounded series with
  `add_value`, `clear_values`, `set_max_data_points`, `latest`) and
  `newton_raphson`, which returns the last estimate with the full history,
  starting with the initial guess at step 0, and stops early when the
  derivative is practically zero or two successive estimates differ by less
  than the tolerance.
- `greenlux.sensor_config` — `SensorConfiguration` with the calibration,
  solver and baud-rate settings, the latest root and its history
  (`update_nr_display_data`, `history_lines`), and `clamp_baud_rate`.
- `greenlux.lux` — `photodiode_to_voltage`, `estimate_lux` and `LuxEstimate`.
- `greenlux.db` — `connect_db`, `insert_photodiode_data`,
  `get_all_photodiode_data`, `insert_newton_raphson_result`,
  `get_all_newton_raphson_results`.
- `greenlux.serial_link` — `LineBuffer`, `parse_photodiode_line` and
  `SerialReader` (`run`, `stop`).
- `greenlux.views` — `LightStatus`, `classify_light`, `DatabaseDataType`,
  `format_database_row`, `latest_value_text` and `status_level`.
- `greenlux.monitor` — `MonitorState`, which holds both series, the current
  value, the status message and fetched rows (`handle_reading`, `set_status`,
  `clear`).
- `greenlux.app` — `MonitorApp`, `parse_args` and `main`.

## What greenlux does not do

There is no graphical interface: no windows, no live plots of the sensor or
lux series, and no on-screen editing of the calibration or solver settings.
Settings are given once, on the command line, and results are shown as text.