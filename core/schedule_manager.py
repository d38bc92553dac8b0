# -*- coding: utf-8 -*-
"""
Manages time-triggered acc commands through the djs job runner.

djs keeps two independent job classes, one-shot ("once") and daily, each
addressed by an HHMM name. The jobs live in djs; `schedules` here is only a
cache that is rebuilt by listing both classes again.
"""
import re
import shlex
import sys
from typing import List, Optional, Sequence

from .shell import ShellExecutor
from .state import AppState
from .models import Schedule, schedule_id
from config.settings import (
    DJS_BINARY, SCHEDULE_KIND_ONCE, SCHEDULE_KIND_DAILY, SCHEDULE_COMMAND_SEPARATOR
)

SCHEDULE_LINE_REGEXP = re.compile(r"^\s*([0-9]{2})([0-9]{2}): (.*)$")


def _class_flag(execute_once: bool) -> str:
    return "o" if execute_once else "d"

def _class_name(execute_once: bool) -> str:
    return SCHEDULE_KIND_ONCE if execute_once else SCHEDULE_KIND_DAILY


def parse_schedule_lines(lines: Sequence[str], execute_once: bool) -> List[Schedule]:
    """Keeps the `HHMM: command` lines of `djs i` output and parses them."""
    schedules = []
    for line in lines:
        match = SCHEDULE_LINE_REGEXP.match(line)
        if not match:
            continue
        hour, minute, command = match.groups()
        schedules.append(Schedule(f"{hour}{minute}", execute_once, int(hour), int(minute), command))
    return schedules


def list_command(execute_once: bool) -> str:
    return f"{DJS_BINARY} i {_class_flag(execute_once)}"

def add_command(execute_once: bool, hour: int, minute: int, command: str) -> str:
    schedule_id(hour, minute)  # raises ValueError on an out of range time
    return f'{DJS_BINARY} {_class_flag(execute_once)} {hour:02d} {minute:02d} {shlex.quote(command)}'

def cancel_command(execute_once: bool, name: str) -> str:
    return f"{DJS_BINARY} cancel {_class_name(execute_once)} {shlex.quote(name)}"


class ScheduleManager:
    """Lists, creates, edits and deletes djs jobs."""

    def __init__(self, executor: ShellExecutor, app_state: Optional[AppState] = None):
        self._shell = executor
        self.state = app_state
        self.schedules: List[Schedule] = []

    def list(self, execute_once: bool) -> List[Schedule]:
        result = self._shell.execute(list_command(execute_once))
        return parse_schedule_lines(result.out, execute_once)

    def list_all(self) -> List[Schedule]:
        """One-shot jobs first, then daily ones."""
        return self.list(True) + self.list(False)

    def refresh(self) -> List[Schedule]:
        """Rebuilds the cached list from djs."""
        self.schedules = self.list_all()
        if self.state:
            self.state.set_schedules(self.schedules)
        return list(self.schedules)

    def add(self, execute_once: bool, hour: int, minute: int, command: str) -> bool:
        """
        Creates a job. An existing job with the same time and class is
        replaced by djs itself.
        """
        try:
            line = add_command(execute_once, hour, minute, command)
        except ValueError as e:
            print(f"Error: invalid schedule time: {e}", file=sys.stderr)
            return False
        return self._shell.execute(line).success

    def add_commands(self, execute_once: bool, hour: int, minute: int, commands: Sequence[str]) -> bool:
        return self.add(execute_once, hour, minute, SCHEDULE_COMMAND_SEPARATOR.join(commands))

    def delete(self, execute_once: bool, name: str) -> bool:
        return self._shell.execute(cancel_command(execute_once, name)).success

    def edit_command(self, schedule: Schedule, command: str) -> Optional[Schedule]:
        """
        Replaces the command of an existing job. The id does not change, so
        the cached entry is updated in place instead of re-listing.

        Returns:
            The updated Schedule, or None if djs rejected the change.
        """
        if not self.add(schedule.execute_once, schedule.hour, schedule.minute, command):
            return None
        updated = Schedule(schedule.id, schedule.execute_once, schedule.hour, schedule.minute, command)
        self.schedules = [updated if s.id == schedule.id and s.execute_once == schedule.execute_once else s
                          for s in self.schedules]
        if self.state:
            self.state.set_schedules(self.schedules)
        return updated
