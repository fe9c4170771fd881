# racing_metrics

Replays the event log of a biathlon race. Each event is printed as it is applied, and at the end a resulting table of the competitors is printed.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Usage

```
racing-metrics config.json events.txt
```

Event messages and the resulting table go to standard output. If the config cannot be read or parsed, the events file cannot be opened, or an event cannot be applied, a message goes to standard error and the command exits with status 1. Nothing after the failing event is processed and no table is printed.

### Configuration

The configuration file is a JSON object. Keys are matched without regard to case, and unknown keys are ignored:

```json
{
  "laps": 2,
  "lapLen": 3651,
  "penaltyLen": 50,
  "firingLines": 1,
  "start": "09:30:00.000",
  "startDelta": "00:00:30"
}
```

`startDelta` is written as `HH:MM:SS`. The number of targets per firing line is always 5.

### Events

Each line of the events file has the form `[HH:MM:SS.mmm] eventID competitorID [extra]`:

| ID | Event                          | Extra parameter  |
|----|--------------------------------|------------------|
| 1  | competitor registered          |                  |
| 2  | start time set by draw         | start time       |
| 3  | competitor on the start line   |                  |
| 4  | competitor started             |                  |
| 5  | competitor on the firing range | firing range     |
| 6  | target hit                     | target           |
| 7  | competitor left firing range   |                  |
| 8  | competitor entered penalty     |                  |
| 9  | competitor left penalty        |                  |
| 10 | competitor ended the main lap  |                  |
| 11 | competitor can't continue      | comment          |

An unknown event ID is reported with a "No such event" line and skipped. A competitor who starts later than `startDelta` after the drawn start time is disqualified. A firing range can hold only one competitor at a time.

### Resulting table

Finished competitors come first, ordered by total time. Each line gives the total time, the competitor, every lap's time and average speed, the penalty time and average penalty speed, and targets hit out of targets shot at. Competitors who did not start (`[NotStarted]`) or did not finish (`[NotFinished]`) follow.

## Library use

```python
from racing_metrics.config import load_config
from racing_metrics.event_logger import EventLogger

logger = EventLogger(load_config("config.json"), out=None)
logger.run_file("events.txt")
logger.print_resulting_table()
```

- `racing_metrics.config`: `Config`, `parse_config(text)` and `load_config(path)`; both raise `ValueError` for bad JSON or wrongly typed fields.
- `racing_metrics.event_logger`: `EventLogger` takes a `Config` and an optional text stream `out` (standard output when `None`). `handle_line`, `run_events` and `run_file` apply events; `resulting_table()` returns the result lines as a list; `print_resulting_table()` writes them under a "Resulting table" heading. An event that cannot be applied raises `EventError`. `EventKind` lists the event IDs.
- `racing_metrics.runner`: `Runner` tracks one competitor on its own, and `result()` returns `(total time in ms, result line)`. Its methods raise `InvalidTransition` when an event comes out of order and `InvalidTimeFormat` when a time cannot be read; both derive from `RaceError`. `parse_clock`, `parse_clock_seconds` and `format_clock` convert between clock strings and milliseconds.