"""Replays a stream of race events and builds the resulting table."""

from __future__ import annotations

import re
import sys
from enum import IntEnum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, TextIO, Union

from racing_metrics.config import Config
from racing_metrics.runner import RaceError, Runner

_INT_RE = re.compile(r"[+-]?[0-9]+")


class EventError(RaceError):
    """An event could not be applied; processing must stop."""


class EventKind(IntEnum):
    REGISTER = 1
    SET_START_TIME = 2
    ON_START_LINE = 3
    START = 4
    START_FIRING = 5
    HIT_TARGET = 6
    QUIT_FIRING = 7
    ENTER_PENALTY = 8
    LEAVE_PENALTY = 9
    END_MAIN_LAP = 10
    CANNOT_CONTINUE = 11


def _to_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    return int(text)


class EventLogger:
    """Applies events to registered runners and reports each one."""

    def __init__(self, config: Config, out: Optional[TextIO] = None) -> None:
        self.config = config
        self._out = out
        self.runners: Dict[int, Runner] = {}
        self._occupied_ranges: set = set()

    def _emit(self, text: str) -> None:
        print(text, file=self._out if self._out is not None else sys.stdout)

    def _runner(self, runner_id: int) -> Runner:
        try:
            return self.runners[runner_id]
        except KeyError:
            raise EventError(f"No such runner registered: {runner_id}") from None

    @staticmethod
    def _extra(args: List[str], time: str) -> str:
        if len(args) < 4:
            raise EventError(f"Err at event {time}: missing event parameter")
        return args[3]

    def handle_line(self, line: str) -> None:
        """Parse one event line and apply it."""
        args = line.split()
        if len(args) < 3:
            raise EventError(f"malformed event line: {line!r}")
        stamp = args[0]
        if len(stamp) < 2:
            raise EventError(f"malformed event time: {stamp!r}")
        time = stamp[1:-1]
        try:
            event_id = _to_int(args[1])
            runner_id = _to_int(args[2])
        except ValueError as exc:
            raise EventError(f"Error parsing event ID: {exc}") from exc

        try:
            kind = EventKind(event_id)
        except ValueError:
            self._emit(f"[{time}] No such event for competitor({runner_id})")
            return

        try:
            self._dispatch(kind, time, runner_id, args)
        except EventError:
            raise
        except (RaceError, ValueError) as exc:
            raise EventError(f"Err at event {time}: {exc}") from exc

    def _dispatch(self, kind: EventKind, time: str, runner_id: int, args: List[str]) -> None:
        if kind is EventKind.REGISTER:
            if runner_id in self.runners:
                raise EventError(f"Can't register same competitor twice: {runner_id}")
            self.runners[runner_id] = Runner(self.config, runner_id)
            self._emit(f"[{time}] The competitor({runner_id}) registered")
            return

        runner = self._runner(runner_id)

        if kind is EventKind.SET_START_TIME:
            draw_time = self._extra(args, time)
            runner.set_start_time(draw_time)
            self._emit(
                f"[{time}] The start time for the competitor({runner_id}) "
                f"was set by a draw to {draw_time}"
            )
        elif kind is EventKind.ON_START_LINE:
            runner.on_line()
            self._emit(f"[{time}] The competitor({runner_id}) is on the start line")
        elif kind is EventKind.START:
            started = runner.start(time)
            self._emit(f"[{time}] The competitor({runner_id}) has started")
            if not started:
                self._emit(f"[{time}] The competitor({runner_id}) is disqualified")
        elif kind is EventKind.START_FIRING:
            firing_range = _to_int(self._extra(args, time))
            if firing_range in self._occupied_ranges:
                raise EventError(f"Err at event {time}: range occupied")
            self._occupied_ranges.add(firing_range)
            runner.start_firing(firing_range)
            self._emit(
                f"[{time}] The competitor({runner_id}) is on the firing range({firing_range})"
            )
        elif kind is EventKind.HIT_TARGET:
            target = _to_int(self._extra(args, time))
            runner.hit_target(target)
            self._emit(f"[{time}] The target({target}) has been hit by competitor({runner_id})")
        elif kind is EventKind.QUIT_FIRING:
            firing_range = runner.quit_firing()
            self._occupied_ranges.discard(firing_range)
            self._emit(f"[{time}] The competitor({runner_id}) left the firing range")
        elif kind is EventKind.ENTER_PENALTY:
            runner.start_penalty(time)
            self._emit(f"[{time}] The competitor({runner_id}) entered the penalty laps")
        elif kind is EventKind.LEAVE_PENALTY:
            runner.quit_penalty(time)
            self._emit(f"[{time}] The competitor({runner_id}) left the penalty laps")
        elif kind is EventKind.END_MAIN_LAP:
            finished = runner.finish_lap(time)
            self._emit(f"[{time}] The competitor({runner_id}) ended the main lap")
            if finished:
                self._emit(f"[{time}] The competitor({runner_id}) has finished")
        elif kind is EventKind.CANNOT_CONTINUE:
            comment = self._extra(args, time)
            runner.quit_running()
            self._emit(f"[{time}] The competitor({runner_id}) can`t continue: {comment}")

    def run_events(self, lines: Iterable[str]) -> None:
        """Apply every event line in order."""
        for line in lines:
            self.handle_line(line)

    def run_file(self, path: Union[str, Path]) -> None:
        """Apply every event line from a file."""
        with open(path, encoding="utf-8") as handle:
            self.run_events(line.rstrip("\r\n") for line in handle)

    def resulting_table(self) -> List[str]:
        """Result lines: finishers by total time, then everyone else."""
        finished = []
        failed = []
        for runner in self.runners.values():
            total, line = runner.result()
            if total == 0:
                failed.append(line)
            else:
                finished.append((total, line))
        finished.sort(key=lambda item: item[0])
        return [line for _, line in finished] + failed

    def print_resulting_table(self) -> None:
        """Write the resulting table to the output stream."""
        self._emit("Resulting table")
        for line in self.resulting_table():
            self._emit(line)