# -*- coding: utf-8 -*-
"""
Parses the KEY=VALUE dump printed by `acc -i` into a BatteryInfo.

Each field resolves on its own: unknown numbers become -1, unknown strings
become "Unknown" and a missing STATUS reads as "Discharging".
"""

import re
from typing import Iterable, List, Optional

from .config_codec import FieldSpec, extract_fields
from .models import BatteryInfo
from config.settings import (
    TELEMETRY_NUMBER_UNKNOWN, TELEMETRY_STRING_UNKNOWN, STATUS_CHARGING, STATUS_DISCHARGING, STATUS_NOT_CHARGING,
    DECI_DEGREES_PER_DEGREE, DAEMON_RUNNING_MARKER
)


def _key(name: str, value_expr: str):
    return re.compile(rf"^\s*{name}=({value_expr})", re.MULTILINE)


def _text(match: re.Match) -> str:
    return match.group(1)

def _number(match: re.Match) -> int:
    return int(match.group(1))

def _deci_degrees(match: re.Match) -> int:
    return int(match.group(1)) // DECI_DEGREES_PER_DEGREE

def _zero_flag(match: re.Match) -> bool:
    # a '0' digit reads as True
    return int(match.group(1)) == 0


def _string_field(attr: str, key: str, value_expr: str, default: str = TELEMETRY_STRING_UNKNOWN) -> FieldSpec:
    return FieldSpec(attr, _key(key, value_expr), _text, default)

def _number_field(attr: str, key: str, value_expr: str = r"\d+") -> FieldSpec:
    return FieldSpec(attr, _key(key, value_expr), _number, TELEMETRY_NUMBER_UNKNOWN)

def _temp_field(attr: str, key: str) -> FieldSpec:
    return FieldSpec(attr, _key(key, r"\d+"), _deci_degrees, TELEMETRY_NUMBER_UNKNOWN)

def _flag_field(attr: str, key: str, value_expr: str = r"0|1") -> FieldSpec:
    return FieldSpec(attr, _key(key, value_expr), _zero_flag, False)


STATUS_PATTERN = _key("STATUS", "|".join(re.escape(s) for s in (STATUS_CHARGING, STATUS_DISCHARGING, STATUS_NOT_CHARGING)))

FIELDS: List[FieldSpec] = [
    _string_field("name", "NAME", r"[a-zA-Z0-9]+"),
    _flag_field("input_suspend", "INPUT_SUSPEND"),
    FieldSpec("status", STATUS_PATTERN, _text, STATUS_DISCHARGING),
    _string_field("health", "HEALTH", r"[a-zA-Z]+"),
    _number_field("present", "PRESENT"),
    _string_field("charge_type", "CHARGE_TYPE", r"N/A|[a-zA-Z]+"),
    _number_field("capacity", "CAPACITY"),
    _temp_field("charger_temp", "CHARGER_TEMP"),
    _temp_field("charger_temp_max", "CHARGER_TEMP_MAX"),
    _flag_field("input_current_limited", "INPUT_CURRENT_LIMITED"),
    _number_field("voltage_now", "VOLTAGE_NOW"),
    _number_field("voltage_max", "VOLTAGE_MAX"),
    _number_field("voltage_qnovo", "VOLTAGE_QNOVO"),
    _number_field("current_now", "CURRENT_NOW", r"-?\d+"),
    _number_field("current_qnovo", "CURRENT_QNOVO", r"-?\d+"),
    _number_field("constant_charge_current_max", "CONSTANT_CHARGE_CURRENT_MAX"),
    _temp_field("temperature", "TEMP"),
    _string_field("technology", "TECHNOLOGY", r"[a-zA-Z\-]+"),
    _flag_field("step_charging_enabled", "STEP_CHARGING_ENABLED"),
    _flag_field("sw_jeita_enabled", "SW_JEITA_ENABLED"),
    _flag_field("taper_control_enabled", "TAPER_CONTROL_ENABLED"),
    _flag_field("charge_disable", "CHARGE_DISABLE"),
    _flag_field("charge_done", "CHARGE_DONE"),
    _flag_field("parallel_disable", "PARALLEL_DISABLE"),
    _flag_field("set_ship_mode", "SET_SHIP_MODE"),
    _string_field("die_health", "DIE_HEALTH", r"[a-zA-Z]+"),
    _flag_field("rerun_aicl", "RERUN_AICL"),
    _flag_field("dp_dm", "DP_DM", r"\d+"),
    _number_field("charge_control_limit_max", "CHARGE_CONTROL_LIMIT_MAX"),
    _number_field("charge_control_limit", "CHARGE_CONTROL_LIMIT"),
    _number_field("input_current_max", "INPUT_CURRENT_MAX"),
    _number_field("cycle_count", "CYCLE_COUNT"),
]


def parse_telemetry(text: str) -> BatteryInfo:
    """Parses `acc -i` output. Never raises: every field has a fallback."""
    return BatteryInfo(**extract_fields(text, FIELDS))


def parse_telemetry_lines(lines: Iterable[str]) -> BatteryInfo:
    return parse_telemetry("\n".join(lines))


def parse_daemon_running(lines: Iterable[str]) -> bool:
    """True if the `acc -D` output reports a running accd."""
    return any(DAEMON_RUNNING_MARKER in line for line in lines)


def parse_status(lines: Iterable[str]) -> Optional[str]:
    """Returns the STATUS value from `acc -i` output lines, if present."""
    for line in lines:
        match = STATUS_PATTERN.match(line)
        if match:
            return match.group(1)
    return None
