# -*- coding: utf-8 -*-
"""
Parses acc's config.txt into an AccConfig and builds the exact `acc` command
line for every settable field group.

Parsing is driven by the FIELDS table: each entry pairs a line-anchored
pattern with a converter and a fallback, and every entry is resolved on its
own, so one malformed line never spoils the rest of the config. Only the
capacity resume/pause pair is required.
"""

import os
import re
import sys
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Pattern

from .models import AccConfig, Capacity, Cooldown, Temp, VoltControl
from .shell import AccError
from config.settings import (
    ACC_BINARY, CAPACITY_COOL_DOWN_DISABLED, CAPACITY_SHUTDOWN_FALLBACK,
    TEMP_COOL_DOWN_FALLBACK, TEMP_PAUSE_CHARGING_FALLBACK, TEMP_WAIT_SECONDS_FALLBACK,
    DECI_DEGREES_PER_DEGREE
)


class ConfigParseError(AccError):
    """Raised when a required field group is missing from config.txt."""
    pass


class _Required:
    """Marker for a field group without a fallback."""
    pass

REQUIRED = _Required()


class FieldSpec(NamedTuple):
    key: str
    pattern: Pattern
    convert: Callable[[re.Match], Any]
    default: Any


def _line(expr: str) -> Pattern:
    return re.compile(r"^\s*" + expr, re.MULTILINE)


def _to_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _or_default(value: Optional[int], default: int) -> int:
    return default if value is None else value


def _deci_to_degrees(value: Optional[str], default: int) -> int:
    raw = _to_int(value)
    return default if raw is None else raw // DECI_DEGREES_PER_DEGREE


def _trimmed_or_none(match: re.Match) -> Optional[str]:
    value = match.group(1).strip()
    return value or None


# --- Converters (one per field group) ---
def _convert_capacity(match: re.Match) -> Capacity:
    shutdown, cool_down, resume, pause = match.groups()
    return Capacity(
        _or_default(_to_int(shutdown), CAPACITY_SHUTDOWN_FALLBACK),
        _or_default(_to_int(cool_down), CAPACITY_COOL_DOWN_DISABLED),
        int(resume),
        int(pause),
    )

def _convert_cooldown(match: re.Match) -> Optional[Cooldown]:
    charge, pause = (_to_int(v) for v in match.groups())
    if charge is None or pause is None:
        return None
    return Cooldown(charge, pause)

def _convert_temp(match: re.Match) -> Temp:
    cool_down, pause_charging, wait = match.groups()
    return Temp(
        _deci_to_degrees(cool_down, TEMP_COOL_DOWN_FALLBACK),
        _deci_to_degrees(pause_charging, TEMP_PAUSE_CHARGING_FALLBACK),
        _or_default(_to_int(wait), TEMP_WAIT_SECONDS_FALLBACK),
    )

def _convert_bool(match: re.Match) -> bool:
    return match.group(1) == "true"

def _convert_volt_control(match: re.Match) -> Optional[VoltControl]:
    # Accepted shapes: "file:mV", "mV" and "file"
    value = match.group(1).strip()
    if not value:
        return None
    if ":" in value:
        control_file, millivolts = value.rsplit(":", 1)
        return VoltControl(control_file.strip() or None, _to_int(millivolts.strip()))
    if value.isdigit():
        return VoltControl(None, int(value))
    return VoltControl(value, None)


DEFAULT_TEMP = Temp(TEMP_COOL_DOWN_FALLBACK, TEMP_PAUSE_CHARGING_FALLBACK, TEMP_WAIT_SECONDS_FALLBACK)

FIELDS: List[FieldSpec] = [
    FieldSpec("capacity", _line(r"capacity=(\d*),(\d*),(\d+)-(\d+)"), _convert_capacity, REQUIRED),
    FieldSpec("cooldown", _line(r"coolDown=(\d*)/(\d*)"), _convert_cooldown, None),
    FieldSpec("temp", _line(r"temp=(\d*)-(\d*)_(\d*)"), _convert_temp, DEFAULT_TEMP),
    FieldSpec("volt_control", _line(r"cVolt=([^#\n]*)"), _convert_volt_control, None),
    FieldSpec("reset_unplugged", _line(r"resetUnplugged=(true|false)"), _convert_bool, False),
    FieldSpec("on_boot_exit", _line(r"onBootExit=(true|false)"), _convert_bool, False),
    FieldSpec("on_boot", _line(r"onBoot=([^#\n]+)"), _trimmed_or_none, None),
    FieldSpec("on_plugged", _line(r"onPlugged=([^#\n]+)"), _trimmed_or_none, None),
    FieldSpec("charging_switch", _line(r"switch=([^#\n]+)"), _trimmed_or_none, None),
]


def extract_fields(text: str, specs: List[FieldSpec]) -> Dict[str, Any]:
    """
    Resolves every FieldSpec against the whole text.

    The first match of each pattern wins. A missing line yields the entry's
    default; an entry whose default is REQUIRED raises ConfigParseError.
    """
    values: Dict[str, Any] = {}
    for spec in specs:
        match = spec.pattern.search(text)
        if match is None:
            if spec.default is REQUIRED:
                raise ConfigParseError(f"required setting '{spec.key}' not found")
            values[spec.key] = spec.default
        else:
            values[spec.key] = spec.convert(match)
    return values


def parse_config(text: str) -> AccConfig:
    """Parses the content of config.txt. Raises ConfigParseError without capacity."""
    return AccConfig(**extract_fields(text, FIELDS))


# ==============================================================================
# Raw file pass-through (advanced editor)
# ==============================================================================
def read_config_lines(path: str) -> List[str]:
    """Returns config.txt split into lines, or an empty list if it does not exist."""
    if not os.path.exists(path):
        return []
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read().split("\n")
    except OSError as e:
        print(f"Error: cannot read '{path}': {e}", file=sys.stderr)
        return []


def write_config_lines(path: str, lines: List[str]) -> bool:
    """Overwrites config.txt. Never creates it: returns False if it is missing."""
    if not os.path.exists(path):
        return False
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write("\n".join(lines))
        return True
    except OSError as e:
        print(f"Error: cannot write '{path}': {e}", file=sys.stderr)
        return False


# ==============================================================================
# Command builders
# ==============================================================================
def _acc(*args: Any) -> str:
    return " ".join([ACC_BINARY] + [str(a) for a in args])

def _bool_str(value: bool) -> str:
    return "true" if value else "false"

def capacity_command(shutdown: int, cool_down: int, resume: int, pause: int) -> str:
    return _acc("-s", "capacity", f"{shutdown},{cool_down},{resume}-{pause}")

def cool_down_command(charge_seconds: Optional[int], pause_seconds: Optional[int]) -> str:
    if charge_seconds is None or pause_seconds is None:
        return _acc("-s", "coolDown")
    return _acc("-s", "coolDown", f"{charge_seconds}/{pause_seconds}")

def temp_command(cool_down_temp: int, pause_charging_temp: int, wait_seconds: int) -> str:
    cool_down = cool_down_temp * DECI_DEGREES_PER_DEGREE
    pause_charging = pause_charging_temp * DECI_DEGREES_PER_DEGREE
    return _acc("-s", "temp", f"{cool_down}-{pause_charging}_{wait_seconds}")

def reset_unplugged_command(reset_unplugged: bool) -> str:
    return _acc("-s", "resetUnplugged", _bool_str(reset_unplugged))

def on_boot_exit_command(on_boot_exit: bool) -> str:
    return _acc("-s", "onBootExit", _bool_str(on_boot_exit))

def on_boot_command(value: Optional[str]) -> str:
    return _acc("-s", "onBoot", value) if value else _acc("-s", "onBoot")

def on_plugged_command(value: Optional[str]) -> str:
    return _acc("-s", "onPlugged", value) if value else _acc("-s", "onPlugged")

def voltage_command(control_file: Optional[str], max_millivolts: Optional[int]) -> str:
    if control_file is not None and max_millivolts is not None:
        return _acc("--set", "cVolt", f"{control_file}:{max_millivolts}")
    elif max_millivolts is not None:
        return _acc("--set", "cVolt", max_millivolts)
    else:
        return _acc("--set", "cVolt")

def charging_switch_command(charging_switch: Optional[str]) -> str:
    if not charging_switch:
        return unset_charging_switch_command()
    return _acc("-s", "s", charging_switch)

def unset_charging_switch_command() -> str:
    return _acc("-s", "s-")


# --- Whole-config helpers ---
def group_commands(config: AccConfig) -> Dict[str, str]:
    """Maps each ConfigUpdateResult group to the command that pushes it."""
    capacity = config.capacity
    cooldown = config.cooldown
    volt = config.volt_control
    return {
        "capacity": capacity_command(capacity.shutdown, capacity.cool_down, capacity.resume, capacity.pause),
        "cooldown": cool_down_command(
            cooldown.charge_seconds if cooldown else None,
            cooldown.pause_seconds if cooldown else None),
        "temp": temp_command(config.temp.cool_down_temp, config.temp.pause_charging_temp, config.temp.wait_seconds),
        "volt_control": voltage_command(
            volt.control_file if volt else None,
            volt.max_millivolts if volt else None),
        "reset_unplugged": reset_unplugged_command(config.reset_unplugged),
        "on_boot_exit": on_boot_exit_command(config.on_boot_exit),
        "on_boot": on_boot_command(config.on_boot),
        "on_plugged": on_plugged_command(config.on_plugged),
        "charging_switch": charging_switch_command(config.charging_switch),
    }

def config_commands(config: AccConfig) -> List[str]:
    """Every command needed to push `config`, in a fixed order."""
    return list(group_commands(config).values())


def format_config(config: AccConfig) -> str:
    """Human readable rendering, one setting per line."""
    capacity = config.capacity
    cool_down = str(capacity.cool_down) if capacity.is_cool_down_enabled() else "disabled"
    lines = [
        f"capacity: shutdown={capacity.shutdown}% coolDown={cool_down} "
        f"resume={capacity.resume}% pause={capacity.pause}%",
    ]
    if config.cooldown:
        lines.append(f"coolDown: charge {config.cooldown.charge_seconds}s / pause {config.cooldown.pause_seconds}s")
    else:
        lines.append("coolDown: none")
    lines.append(
        f"temp: coolDown={config.temp.cool_down_temp}°C pause={config.temp.pause_charging_temp}°C "
        f"wait={config.temp.wait_seconds}s")
    if config.volt_control:
        lines.append(f"cVolt: file={config.volt_control.control_file or '-'} "
                     f"max={config.volt_control.max_millivolts if config.volt_control.max_millivolts is not None else '-'}mV")
    else:
        lines.append("cVolt: none")
    lines.append(f"resetUnplugged: {_bool_str(config.reset_unplugged)}")
    lines.append(f"onBootExit: {_bool_str(config.on_boot_exit)}")
    lines.append(f"onBoot: {config.on_boot or '-'}")
    lines.append(f"onPlugged: {config.on_plugged or '-'}")
    lines.append(f"switch: {config.charging_switch or 'automatic'}")
    return "\n".join(lines)
