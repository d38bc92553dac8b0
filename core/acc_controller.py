# core/acc_controller.py
# -*- coding: utf-8 -*-
"""
Controls the acc daemon: reads and pushes its configuration, reads battery
telemetry and drives the accd lifecycle through the privileged shell.
"""

import sys
from typing import List, Optional

from .shell import ShellExecutor
from .models import AccConfig, BatteryInfo, ConfigUpdateResult, DEFAULT_ACC_CONFIG
from .config_codec import (
    ConfigParseError, parse_config, read_config_lines, write_config_lines, group_commands,
    capacity_command, cool_down_command, temp_command, reset_unplugged_command,
    on_boot_exit_command, on_boot_command, on_plugged_command, voltage_command,
    charging_switch_command, unset_charging_switch_command
)
from .telemetry_codec import parse_telemetry_lines, parse_daemon_running, parse_status
from config.settings import ACC_BINARY, ACC_INSTALLED_MARKER, STATUS_CHARGING


class AccController:
    """Manages all interactions with acc/accd."""

    def __init__(self, executor: ShellExecutor, config_path: str):
        """
        Initializes the AccController.

        Args:
            executor: The shell used to run acc commands.
            config_path: Location of acc's config.txt.
        """
        self._shell = executor
        self.config_path = config_path

    def _run(self, command: str) -> bool:
        result = self._shell.execute(command)
        if not result.success:
            print(f"Error: '{command}' failed with exit code {result.code}.", file=sys.stderr)
        return result.success

    # --- Configuration ---
    def read_config_lines(self) -> List[str]:
        return read_config_lines(self.config_path)

    def write_config_lines(self, lines: List[str]) -> bool:
        """Rewrites config.txt verbatim. Fails if the file does not exist yet."""
        return write_config_lines(self.config_path, lines)

    def read_config(self) -> AccConfig:
        """
        Reads and parses config.txt.

        Returns:
            The parsed config, or DEFAULT_ACC_CONFIG when the file is missing
            or lacks the required capacity line.
        """
        lines = self.read_config_lines()
        if not lines:
            print(f"Warning: acc config '{self.config_path}' not found, using defaults.", file=sys.stderr)
            return DEFAULT_ACC_CONFIG
        try:
            return parse_config("\n".join(lines))
        except ConfigParseError as e:
            print(f"Warning: invalid acc config '{self.config_path}': {e}. Using defaults.", file=sys.stderr)
            return DEFAULT_ACC_CONFIG

    def apply_config(self, config: AccConfig) -> ConfigUpdateResult:
        """
        Pushes every field group of `config` to acc, one command per group.

        Returns:
            A ConfigUpdateResult with one success flag per group.
        """
        result = ConfigUpdateResult()
        for group, command in group_commands(config).items():
            setattr(result, f"{group}_update_successful", self._run(command))
        return result

    def update_capacity(self, shutdown: int, cool_down: int, resume: int, pause: int) -> bool:
        return self._run(capacity_command(shutdown, cool_down, resume, pause))

    def update_cool_down(self, charge_seconds: Optional[int], pause_seconds: Optional[int]) -> bool:
        return self._run(cool_down_command(charge_seconds, pause_seconds))

    def update_temp(self, cool_down_temp: int, pause_charging_temp: int, wait_seconds: int) -> bool:
        return self._run(temp_command(cool_down_temp, pause_charging_temp, wait_seconds))

    def update_reset_unplugged(self, reset_unplugged: bool) -> bool:
        return self._run(reset_unplugged_command(reset_unplugged))

    def update_on_boot_exit(self, on_boot_exit: bool) -> bool:
        return self._run(on_boot_exit_command(on_boot_exit))

    def update_on_boot(self, value: Optional[str]) -> bool:
        return self._run(on_boot_command(value))

    def update_on_plugged(self, value: Optional[str]) -> bool:
        return self._run(on_plugged_command(value))

    def update_voltage(self, control_file: Optional[str], max_millivolts: Optional[int]) -> bool:
        return self._run(voltage_command(control_file, max_millivolts))

    def set_charging_switch(self, charging_switch: str) -> bool:
        return self._run(charging_switch_command(charging_switch))

    def unset_charging_switch(self) -> bool:
        return self._run(unset_charging_switch_command())

    # --- Telemetry ---
    def get_battery_info(self) -> BatteryInfo:
        result = self._shell.execute(f"{ACC_BINARY} -i")
        return parse_telemetry_lines(result.out)

    def is_battery_charging(self) -> bool:
        result = self._shell.execute(f"{ACC_BINARY} -i")
        return parse_status(result.out) == STATUS_CHARGING

    # --- Daemon lifecycle ---
    def is_daemon_running(self) -> bool:
        result = self._shell.execute(f"{ACC_BINARY} -D")
        return parse_daemon_running(result.out)

    def start_daemon(self) -> bool:
        return self._run(f"{ACC_BINARY} -D start")

    def stop_daemon(self) -> bool:
        return self._run(f"{ACC_BINARY} -D stop")

    def restart_daemon(self) -> bool:
        return self._run(f"{ACC_BINARY} -D restart")

    # --- Charging switches, voltage control files and one-off actions ---
    def list_charging_switches(self) -> List[str]:
        result = self._shell.execute(f"{ACC_BINARY} -s s:")
        if not result.success:
            return []
        return [line.strip() for line in result.out if line.strip()]

    def test_charging_switch(self, charging_switch: Optional[str] = None) -> int:
        """Runs `acc -t`; returns its exit code (0 means the switch works)."""
        command = f"{ACC_BINARY} -t {charging_switch}" if charging_switch else f"{ACC_BINARY} -t"
        return self._shell.execute(command).code

    def list_voltage_control_files(self) -> List[str]:
        result = self._shell.execute(f"{ACC_BINARY} -v :")
        if not result.success:
            return []
        return [line for line in result.out if line]

    def set_charging_limit_once(self, limit: int) -> bool:
        return self._run(f"{ACC_BINARY} -f {limit}")

    def reset_battery_stats(self) -> bool:
        return self._run(f"{ACC_BINARY} -R")

    # --- Installation probes ---
    def is_installed(self) -> bool:
        return self._shell.execute(f"which {ACC_BINARY} 1>/dev/null").success

    def is_install_pending_reboot(self) -> bool:
        """The installer leaves a marker file until the device is rebooted."""
        return self._shell.execute(f"test -f {ACC_INSTALLED_MARKER}").code == 0
