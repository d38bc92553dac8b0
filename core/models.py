# -*- coding: utf-8 -*-
"""
Typed models for the acc configuration, battery telemetry and djs schedules.
"""
import copy
from dataclasses import dataclass, field, asdict, fields
from typing import Optional, Dict, Any

from config.settings import (
    DEFAULT_CONFIG_SETTINGS, CAPACITY_COOL_DOWN_DISABLED,
    STATUS_CHARGING, TELEMETRY_NUMBER_UNKNOWN
)


@dataclass(frozen=True)
class Capacity:
    shutdown: int
    cool_down: int
    resume: int
    pause: int

    def is_cool_down_enabled(self) -> bool:
        return self.cool_down != CAPACITY_COOL_DOWN_DISABLED

    def is_valid(self) -> bool:
        """Checks shutdown <= resume < pause."""
        return self.shutdown <= self.resume < self.pause


@dataclass(frozen=True)
class Cooldown:
    charge_seconds: int
    pause_seconds: int


@dataclass(frozen=True)
class Temp:
    """Temperatures in whole degrees Celsius."""
    cool_down_temp: int
    pause_charging_temp: int
    wait_seconds: int


@dataclass(frozen=True)
class VoltControl:
    control_file: Optional[str] = None
    max_millivolts: Optional[int] = None


@dataclass(frozen=True)
class AccConfig:
    """Mutable settings of the acc daemon, as read from its config file."""
    capacity: Capacity
    cooldown: Optional[Cooldown]
    temp: Temp
    volt_control: Optional[VoltControl] = None
    reset_unplugged: bool = False
    on_boot_exit: bool = False
    on_boot: Optional[str] = None
    on_plugged: Optional[str] = None
    charging_switch: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccConfig":
        """Builds a config from a snapshot dict, using defaults for missing keys."""
        final_data = copy.deepcopy(DEFAULT_CONFIG_SETTINGS)
        final_data.update(data)

        cooldown = final_data.get("cooldown")
        volt_control = final_data.get("volt_control")
        return cls(
            capacity=Capacity(**final_data["capacity"]),
            cooldown=Cooldown(**cooldown) if cooldown else None,
            temp=Temp(**final_data["temp"]),
            volt_control=VoltControl(**volt_control) if volt_control else None,
            reset_unplugged=bool(final_data["reset_unplugged"]),
            on_boot_exit=bool(final_data["on_boot_exit"]),
            on_boot=final_data["on_boot"],
            on_plugged=final_data["on_plugged"],
            charging_switch=final_data["charging_switch"],
        )


DEFAULT_ACC_CONFIG: AccConfig = AccConfig.from_dict({})


@dataclass
class ConfigUpdateResult:
    """Per field group outcome of pushing a config to the daemon."""
    capacity_update_successful: bool = True
    cooldown_update_successful: bool = True
    temp_update_successful: bool = True
    volt_control_update_successful: bool = True
    reset_unplugged_update_successful: bool = True
    on_boot_exit_update_successful: bool = True
    on_boot_update_successful: bool = True
    on_plugged_update_successful: bool = True
    charging_switch_update_successful: bool = True

    @classmethod
    def rejected(cls) -> "ConfigUpdateResult":
        """Result for a config that was refused before any command ran."""
        return cls(**{f.name: False for f in fields(cls)})

    def is_successful(self) -> bool:
        return all(getattr(self, f.name) for f in fields(self))

    @property
    def voltage_failed(self) -> bool:
        return not self.volt_control_update_successful

    def failed_groups(self) -> list:
        return [f.name[:-len("_update_successful")] for f in fields(self) if not getattr(self, f.name)]


@dataclass(frozen=True)
class BatteryInfo:
    """Snapshot of `acc -i`. Recreated on every poll."""
    name: str
    input_suspend: bool
    status: str
    health: str
    present: int
    charge_type: str
    capacity: int
    charger_temp: int
    charger_temp_max: int
    input_current_limited: bool
    voltage_now: int
    voltage_max: int
    voltage_qnovo: int
    current_now: int
    current_qnovo: int
    constant_charge_current_max: int
    temperature: int
    technology: str
    step_charging_enabled: bool
    sw_jeita_enabled: bool
    taper_control_enabled: bool
    charge_disable: bool
    charge_done: bool
    parallel_disable: bool
    set_ship_mode: bool
    die_health: str
    rerun_aicl: bool
    dp_dm: bool
    charge_control_limit_max: int
    charge_control_limit: int
    input_current_max: int
    cycle_count: int

    def is_charging(self) -> bool:
        return self.status == STATUS_CHARGING

    def current_now_ma(self) -> int:
        """current_now is reported in microamperes."""
        if self.current_now == TELEMETRY_NUMBER_UNKNOWN:
            return TELEMETRY_NUMBER_UNKNOWN
        return int(self.current_now / 1000)

    def voltage_now_v(self) -> float:
        """voltage_now is reported in microvolts."""
        if self.voltage_now == TELEMETRY_NUMBER_UNKNOWN:
            return float(TELEMETRY_NUMBER_UNKNOWN)
        return self.voltage_now / 1000000.0


def schedule_id(hour: int, minute: int) -> str:
    """Returns the djs job name for a time, e.g. 7:30 -> '0730'."""
    if not 0 <= hour <= 23:
        raise ValueError(f"hour out of range: {hour}")
    if not 0 <= minute <= 59:
        raise ValueError(f"minute out of range: {minute}")
    return f"{hour:02d}{minute:02d}"


@dataclass
class Schedule:
    id: str
    execute_once: bool
    hour: int
    minute: int
    command: str = field(default="")

    @classmethod
    def create(cls, execute_once: bool, hour: int, minute: int, command: str) -> "Schedule":
        return cls(schedule_id(hour, minute), execute_once, hour, minute, command)
