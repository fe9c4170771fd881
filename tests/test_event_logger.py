import io

import pytest

from racing_metrics.config import Config
from racing_metrics.event_logger import EventError, EventKind, EventLogger
from racing_metrics.runner import RunnerState


def make_logger(laps=1):
    config = Config(
        laps=laps,
        lap_len=3651,
        penalty_len=50,
        firing_lines=1,
        start="09:30:00.000",
        start_delta="00:00:30",
    )
    out = io.StringIO()
    return EventLogger(config, out), out


def lines_of(out):
    return out.getvalue().splitlines()


def test_register_prints_message():
    logger, out = make_logger()
    logger.handle_line("[09:05:59.867] 1 1")
    assert lines_of(out) == ["[09:05:59.867] The competitor(1) registered"]
    assert logger.runners[1].state is RunnerState.REGISTERED


def test_register_twice_raises():
    logger, _ = make_logger()
    logger.handle_line("[09:05:59.867] 1 1")
    with pytest.raises(EventError, match="twice"):
        logger.handle_line("[09:06:00.000] 1 1")


def test_unknown_runner_raises():
    logger, _ = make_logger()
    with pytest.raises(EventError, match="No such runner registered: 7"):
        logger.handle_line("[09:05:59.867] 3 7")


def test_unknown_event_is_reported():
    logger, out = make_logger()
    logger.handle_line("[09:05:59.867] 42 3")
    assert lines_of(out) == ["[09:05:59.867] No such event for competitor(3)"]


def test_bad_event_id_raises():
    logger, _ = make_logger()
    with pytest.raises(EventError, match="Error parsing event ID"):
        logger.handle_line("[09:05:59.867] x 1")


def test_invalid_transition_is_wrapped():
    logger, _ = make_logger()
    logger.handle_line("[09:05:59.867] 1 1")
    with pytest.raises(EventError, match="draw time ain't set"):
        logger.handle_line("[09:06:00.000] 3 1")


def test_missing_parameter_raises():
    logger, _ = make_logger()
    logger.handle_line("[09:05:59.867] 1 1")
    with pytest.raises(EventError):
        logger.handle_line("[09:06:00.000] 2 1")


def test_late_start_is_disqualified():
    logger, out = make_logger()
    logger.run_events(
        [
            "[09:05:59.867] 1 1",
            "[09:15:00.841] 2 1 09:30:00.000",
            "[09:29:45.734] 3 1",
            "[09:31:00.000] 4 1",
        ]
    )
    assert lines_of(out)[-1] == "[09:31:00.000] The competitor(1) is disqualified"
    assert logger.resulting_table()[0].startswith("[NotStarted] 1")


def _start_runner(logger, runner_id, draw, start):
    logger.run_events(
        [
            f"[09:00:00.000] 1 {runner_id}",
            f"[09:00:01.000] 2 {runner_id} {draw}",
            f"[09:00:02.000] 3 {runner_id}",
            f"[{start}] 4 {runner_id}",
        ]
    )


def test_occupied_range_raises_and_frees():
    logger, out = make_logger()
    _start_runner(logger, 1, "09:30:00.000", "09:30:01.000")
    _start_runner(logger, 2, "09:30:00.000", "09:30:02.000")
    logger.handle_line("[09:40:00.000] 5 1 1")
    assert lines_of(out)[-1] == "[09:40:00.000] The competitor(1) is on the firing range(1)"
    with pytest.raises(EventError, match="range occupied"):
        logger.handle_line("[09:40:01.000] 5 2 1")
    logger.handle_line("[09:41:00.000] 7 1")
    logger.handle_line("[09:41:01.000] 5 2 1")
    assert logger.runners[2].state is RunnerState.FIRING


def test_hits_and_penalty_messages():
    logger, out = make_logger()
    _start_runner(logger, 1, "09:30:00.000", "09:30:01.000")
    logger.run_events(
        [
            "[09:40:00.000] 5 1 1",
            "[09:40:01.000] 6 1 3",
            "[09:40:05.000] 7 1",
            "[09:40:10.000] 8 1",
            "[09:41:10.000] 9 1",
        ]
    )
    output = lines_of(out)
    assert "[09:40:01.000] The target(3) has been hit by competitor(1)" in output
    assert "[09:40:10.000] The competitor(1) entered the penalty laps" in output
    assert output[-1] == "[09:41:10.000] The competitor(1) left the penalty laps"
    assert logger.runners[1].target_hit == 1


def test_cannot_continue_prints_comment():
    logger, out = make_logger()
    _start_runner(logger, 1, "09:30:00.000", "09:30:01.000")
    logger.handle_line("[09:59:03.872] 11 1 Lost in the forest")
    assert lines_of(out)[-1] == "[09:59:03.872] The competitor(1) can`t continue: Lost"
    assert logger.runners[1].state is RunnerState.NOT_FINISHED


def test_table_orders_finishers_by_time():
    logger, out = make_logger(laps=1)
    _start_runner(logger, 1, "09:30:00.000", "09:30:01.000")
    _start_runner(logger, 2, "09:31:00.000", "09:31:05.000")
    _start_runner(logger, 3, "09:32:00.000", "09:40:00.000")
    logger.handle_line("[09:35:00.000] 10 1")
    logger.handle_line("[09:33:00.000] 10 2")
    assert lines_of(out)[-1] == "[09:33:00.000] The competitor(2) has finished"
    table = logger.resulting_table()
    assert [line.split()[1] for line in table] == ["2", "1", "3"]
    assert table[0] == logger.runners[2].result()[1]
    logger.print_resulting_table()
    assert lines_of(out)[-4:] == ["Resulting table"] + table


def test_run_file(tmp_path):
    events = tmp_path / "events"
    events.write_text("[09:05:59.867] 1 1\n[09:15:00.841] 2 1 09:30:00.000\n")
    logger, out = make_logger()
    logger.run_file(events)
    assert lines_of(out)[-1] == (
        "[09:15:00.841] The start time for the competitor(1) was set by a draw to 09:30:00.000"
    )
    assert logger.runners[1].state is RunnerState.TIME_SET


def test_event_kind_values():
    assert EventKind(1) is EventKind.REGISTER
    assert EventKind(11) is EventKind.CANNOT_CONTINUE