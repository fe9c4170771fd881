"""A single competitor's progress through a race."""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import List, Tuple

from racing_metrics.config import Config

_HMS = r"([0-9]{1,2}):([0-9]{2}):([0-9]{2})"
_HMS_RE = re.compile(_HMS)
_HMS_OPTIONAL_FRACTION_RE = re.compile(_HMS + r"(?:[.,][0-9]+)?")
_MILLIS_RE = re.compile(r"[+-]?[0-9]+")

NOT_STARTED_STATUS = "NotStarted"
NOT_FINISHED_STATUS = "NotFinished"


class RaceError(Exception):
    """Base error for race bookkeeping."""


class InvalidTimeFormat(RaceError):
    """A clock value could not be parsed."""

    def __init__(self) -> None:
        super().__init__("invalid time format")


class InvalidTransition(RaceError):
    """An event arrived in a state that does not allow it."""


class RunnerState(Enum):
    REGISTERED = 0
    TIME_SET = 1
    ON_LINE = 2
    NOT_STARTED = 3
    NOT_FINISHED = 4
    RUNNING_MAIN = 5
    FIRING = 6
    LEFT_FIRING_RANGE = 7
    RUNNING_PENALTY = 8
    FINISHED = 9


def _hms_to_millis(match: "re.Match[str]") -> int:
    hours, minutes, seconds = (int(group) for group in match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise InvalidTimeFormat()
    return ((hours * 60 + minutes) * 60 + seconds) * 1000


def parse_clock(text: str) -> int:
    """Parse 'HH:MM:SS.mmm' into milliseconds since midnight."""
    parts = text.split(".")
    if len(parts) == 1 or len(parts[1]) != 3:
        raise InvalidTimeFormat()
    if not _MILLIS_RE.fullmatch(parts[1]):
        raise InvalidTimeFormat()
    match = _HMS_RE.fullmatch(parts[0])
    if match is None:
        raise InvalidTimeFormat()
    return _hms_to_millis(match) + int(parts[1])


def parse_clock_seconds(text: str) -> int:
    """Parse 'HH:MM:SS' into milliseconds; a fractional part is ignored."""
    match = _HMS_OPTIONAL_FRACTION_RE.fullmatch(text)
    if match is None:
        raise InvalidTimeFormat()
    return _hms_to_millis(match)


def _quot(a: int, b: int) -> int:
    q = abs(a) // b
    return -q if a < 0 else q


def _rem(a: int, b: int) -> int:
    return a - b * _quot(a, b)


def format_clock(milliseconds: int) -> str:
    """Render milliseconds as 'HH:MM:SS.mmm'."""
    hours = _quot(milliseconds, 3600 * 1000)
    minutes = _quot(_rem(milliseconds, 3600 * 1000), 60 * 1000)
    seconds = _quot(_rem(milliseconds, 60 * 1000), 1000)
    millis = _rem(milliseconds, 1000)
    return "%02d:%02d:%02d.%03d" % (hours, minutes, seconds, millis)


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0:
        if numerator == 0:
            return math.nan
        return math.inf if numerator > 0 else -math.inf
    return numerator / denominator


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:f}"


class Runner:
    """Tracks one competitor's state, laps, penalties and hits."""

    def __init__(self, config: Config, runner_id: int) -> None:
        self.start_delta = parse_clock_seconds(config.start_delta)
        self.total_race_laps = config.laps
        self.lap_len = config.lap_len
        self.penalty_lap_len = config.penalty_len
        self.targets_amount = config.targets_amount
        self.runner_id = runner_id
        self.state = RunnerState.REGISTERED

        self.draw_start_time = 0
        self.start_diff = 0
        self.last_finish_line_time = 0

        self.laps = 0
        self.lap_times: List[int] = []
        self.lap_speeds: List[float] = []

        self.last_penalty_time = 0
        self.penalty_laps = 0
        self.penalty_time = 0

        self.firing_range = 0
        self.target_hit = 0

    def set_start_time(self, time: str) -> None:
        """Record the drawn start time."""
        if self.state is not RunnerState.REGISTERED:
            raise InvalidTransition("cannot reset draw time for runner")
        self.draw_start_time = parse_clock(time)
        self.state = RunnerState.TIME_SET

    def on_line(self) -> None:
        """Put the runner on the start line."""
        if self.state is not RunnerState.TIME_SET:
            raise InvalidTransition("draw time ain't set")
        self.state = RunnerState.ON_LINE

    def start(self, time: str) -> bool:
        """Start the run; returns False if the start came too late."""
        if self.state is not RunnerState.ON_LINE:
            raise InvalidTransition("not on the start")
        started_at = parse_clock(time)
        self.start_diff = started_at - self.draw_start_time
        self.last_finish_line_time = started_at
        if self.start_diff > self.start_delta:
            self.state = RunnerState.NOT_STARTED
            return False
        self.state = RunnerState.RUNNING_MAIN
        return True

    def start_firing(self, firing_range: int) -> None:
        """Enter a firing range."""
        if self.state is not RunnerState.RUNNING_MAIN:
            raise InvalidTransition("not running main lap")
        self.firing_range = firing_range
        self.state = RunnerState.FIRING

    def hit_target(self, target: int) -> None:
        """Count a hit target."""
        if self.state is not RunnerState.FIRING:
            raise InvalidTransition("not on firing range")
        self.target_hit += 1

    def quit_firing(self) -> int:
        """Leave the firing range; returns the range number."""
        if self.state is not RunnerState.FIRING:
            raise InvalidTransition("not on firing range")
        self.state = RunnerState.LEFT_FIRING_RANGE
        return self.firing_range

    def start_penalty(self, time: str) -> None:
        """Enter the penalty laps right after firing."""
        if self.state is not RunnerState.LEFT_FIRING_RANGE:
            raise InvalidTransition("started penalty not exactly after firing")
        entered_at = parse_clock(time)
        self.state = RunnerState.RUNNING_PENALTY
        self.penalty_laps += 1
        self.last_penalty_time = entered_at

    def quit_penalty(self, time: str) -> None:
        """Leave the penalty laps."""
        if self.state is not RunnerState.RUNNING_PENALTY:
            raise InvalidTransition("not running penalty lap")
        left_at = parse_clock(time)
        self.state = RunnerState.RUNNING_MAIN
        self.penalty_time += left_at - self.last_penalty_time

    def finish_lap(self, time: str) -> bool:
        """Complete a main lap; returns True when the race is finished."""
        if self.state not in (RunnerState.RUNNING_MAIN, RunnerState.LEFT_FIRING_RANGE):
            raise InvalidTransition("not running main lap")
        self.state = RunnerState.RUNNING_MAIN
        crossed_at = parse_clock(time)
        lap_time = crossed_at - self.last_finish_line_time
        self.lap_times.append(lap_time)
        self.lap_speeds.append(_divide(self.lap_len * 1000.0, lap_time))
        self.laps += 1
        finished = self.total_race_laps == self.laps
        if finished:
            self.state = RunnerState.FINISHED
        self.last_finish_line_time = crossed_at
        return finished

    def quit_running(self) -> None:
        """Mark the runner as unable to continue."""
        self.state = RunnerState.NOT_FINISHED

    def _penalty_summary(self) -> str:
        speed = _divide(self.penalty_laps * self.penalty_lap_len * 1000, self.penalty_time)
        return f"{{{format_clock(self.penalty_time)}, {_format_float(speed)}}}"

    def result(self) -> Tuple[int, str]:
        """Return (total time in ms, result line); total time is 0 unless finished."""
        lap_parts = [
            f"{{{format_clock(lap_time)},{_format_float(speed)}}}"
            for lap_time, speed in zip(self.lap_times, self.lap_speeds)
        ]
        lap_parts.extend("{,}" for _ in range(self.total_race_laps - len(self.lap_times)))
        laps_text = ", ".join(lap_parts)

        total_time = 0
        line = ""
        if self.state is RunnerState.FINISHED:
            total_time = self.last_finish_line_time - self.draw_start_time
            if self.penalty_time > 0:
                penalty = self._penalty_summary()
            else:
                penalty = f"{{{format_clock(self.penalty_time)}, {0.0:f}}}"
            line = (
                f"[{format_clock(total_time)}] {self.runner_id} [{laps_text}] {penalty} "
                f"{self.target_hit}/{self.laps * self.targets_amount}"
            )
        elif self.state is RunnerState.NOT_STARTED:
            line = f"[{NOT_STARTED_STATUS}] {self.runner_id} [{laps_text}] {{,}} 0/0"
        elif self.state is RunnerState.NOT_FINISHED:
            line = (
                f"[{NOT_FINISHED_STATUS}] {self.runner_id} [{laps_text}] "
                f"{self._penalty_summary()} {self.target_hit}/{self.laps * 5}"
            )
        return total_time, line