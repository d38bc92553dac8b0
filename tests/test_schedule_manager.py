import shlex

import pytest

from core.models import Schedule, schedule_id
from core.schedule_manager import ScheduleManager, parse_schedule_lines, add_command, cancel_command


def test_list_all_is_empty_without_jobs(executor) -> None:
    manager = ScheduleManager(executor)

    assert manager.list_all() == []
    assert executor.commands == ["djs i o", "djs i d"]


def test_daily_job_is_listed(executor) -> None:
    executor.responses["djs i d"] = ["daily jobs:", "0730: echo hi"]
    manager = ScheduleManager(executor)

    assert manager.list_all() == [Schedule("0730", False, 7, 30, "echo hi")]


def test_once_jobs_come_first(executor) -> None:
    executor.responses["djs i o"] = ["2305: acc -f 90"]
    executor.responses["djs i d"] = ["0100: acc -s capacity 5,60,70-80; acc -s temp 400-450_90"]
    schedules = ScheduleManager(executor).list_all()

    assert [(s.id, s.execute_once) for s in schedules] == [("2305", True), ("0100", False)]
    assert schedules[1].command == "acc -s capacity 5,60,70-80; acc -s temp 400-450_90"


def test_lines_without_a_time_are_ignored() -> None:
    lines = ["", "no jobs", "730: short", "  0915: indented"]

    assert parse_schedule_lines(lines, True) == [Schedule("0915", True, 9, 15, "indented")]


def test_add_builds_djs_command(executor) -> None:
    manager = ScheduleManager(executor)

    assert manager.add(False, 7, 30, "echo hi")
    assert manager.add(True, 23, 5, "acc -f 90")
    assert executor.commands == ["djs d 07 30 'echo hi'", "djs o 23 05 'acc -f 90'"]


def test_add_commands_joins_with_separator(executor) -> None:
    ScheduleManager(executor).add_commands(False, 6, 0, ["acc -s capacity 5,60,70-80", "acc -s coolDown"])

    assert executor.commands == ["djs d 06 00 'acc -s capacity 5,60,70-80; acc -s coolDown'"]


def test_add_rejects_out_of_range_time(executor) -> None:
    manager = ScheduleManager(executor)

    assert not manager.add(False, 24, 0, "echo hi")
    assert not manager.add(False, 7, 60, "echo hi")
    assert executor.commands == []


def test_delete(executor) -> None:
    manager = ScheduleManager(executor)

    assert manager.delete(False, "0730")
    assert manager.delete(True, "2305")
    assert executor.commands == ["djs cancel daily 0730", "djs cancel once 2305"]
    assert cancel_command(False, "0730") == "djs cancel daily 0730"


def test_refresh_publishes_to_state(executor, state) -> None:
    executor.responses["djs i d"] = ["0730: echo hi"]
    manager = ScheduleManager(executor, state)

    assert manager.refresh() == [Schedule("0730", False, 7, 30, "echo hi")]
    assert state.get_schedules() == manager.schedules


def test_edit_command_updates_the_cache(executor, state) -> None:
    executor.responses["djs i d"] = ["0730: echo hi"]
    manager = ScheduleManager(executor, state)
    existing = manager.refresh()[0]

    updated = manager.edit_command(existing, "echo bye")

    assert updated == Schedule("0730", False, 7, 30, "echo bye")
    assert manager.schedules == [updated]
    assert state.get_schedules() == [updated]
    assert executor.commands[-1] == "djs d 07 30 'echo bye'"


def test_failed_edit_leaves_the_cache_alone(executor) -> None:
    executor.responses["djs i d"] = ["0730: echo hi"]
    manager = ScheduleManager(executor)
    existing = manager.refresh()[0]
    executor.failing.append("djs d")

    assert manager.edit_command(existing, "echo bye") is None
    assert manager.schedules == [existing]


def test_schedule_ids() -> None:
    assert schedule_id(7, 30) == "0730"
    assert Schedule.create(True, 0, 5, "x").id == "0005"
    assert add_command(False, 12, 0, "x") == "djs d 12 00 x"
    with pytest.raises(ValueError):
        schedule_id(-1, 0)


def test_add_command_keeps_quotes_and_dollars_literal() -> None:
    for command in ['acc -s onBoot echo "$HOME"', "echo it's $(date)"]:
        line = add_command(False, 7, 30, command)

        assert line.startswith("djs d 07 30 ")
        assert shlex.split(line)[4:] == [command]
