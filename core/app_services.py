# -*- coding: utf-8 -*-
"""
Provides a centralized service layer (AppServices) that decouples the core
from whatever UI drives it.

AppServices owns the acc controller and the schedule manager, pushes edits
to acc, keeps AppState in sync and runs the 1 second telemetry poll. Every
public operation returns a value; nothing raises across this boundary.
"""

import dataclasses
import sys
from functools import wraps
from typing import Any, Callable, List, Optional, Sequence, Tuple

from gui.qt import QObject, QTimer, Signal, Slot

from .acc_controller import AccController
from .background import run_in_background
from .config_codec import config_commands
from .models import AccConfig, BatteryInfo, Capacity, Cooldown, ConfigUpdateResult, Schedule, Temp, VoltControl
from .profile_manager import ProfileManager
from .schedule_manager import ScheduleManager
from .settings_manager import SettingsManager
from .shell import ShellExecutor
from .state import AppState
from tools.localization import tr
from config.settings import DEFAULT_POLL_INTERVAL_MS

ProfileOutcome = Tuple[str, AccConfig, ConfigUpdateResult]
ConfigOutcome = Tuple[AccConfig, ConfigUpdateResult]


def _live_edit(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator for edits made outside profile selection. Clears the selected
    profile afterwards, whether or not the edit succeeded."""
    @wraps(func)
    def wrapper(self: 'AppServices', *args: Any, **kwargs: Any) -> Any:
        result = func(self, *args, **kwargs)
        self.settings_manager.save_current_selection(None)
        return result
    return wrapper


class AppServices(QObject):
    """Service layer coordinating acc, the profile store and djs."""

    # (operation name, result) for operations dispatched in the background
    operation_finished = Signal(str, object)

    def __init__(self, state: AppState, profile_manager: ProfileManager, settings_manager: SettingsManager,
                 executor: Optional[ShellExecutor] = None, poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._is_shutting_down = False
        self.state = state
        self.profile_manager = profile_manager
        self.settings_manager = settings_manager
        self.shell = executor or ShellExecutor()
        self.controller = AccController(self.shell, state.paths.acc_config)
        self.schedule_manager = ScheduleManager(self.shell, state)

        # Single-shot: the next tick is armed only when the current one completes
        self.poll_timer = QTimer(self)
        self.poll_timer.setSingleShot(True)
        self.poll_timer.setInterval(poll_interval_ms)
        self.poll_timer.timeout.connect(self._start_poll_tick)

        self._is_ui_visible: bool = False
        self._tick_in_flight: bool = False
        self._poll_generation: int = 0

        self.state.set_controller_status_message(tr("initializing"))

    # ==========================================================================
    # Lifecycle
    # ==========================================================================
    def initialize(self) -> bool:
        """Checks that acc is available and loads the live config and profiles."""
        if not self.controller.is_installed():
            if self.controller.is_install_pending_reboot():
                self.state.set_controller_status_message(tr("acc_reboot_required"))
            else:
                self.state.set_controller_status_message(tr("acc_not_installed"))
            return False
        self.reload_config()
        self.profile_manager.refresh()
        self.state.set_controller_status_message("")
        return True

    def shutdown(self):
        """Stops polling. Dispatched background work is abandoned, not aborted."""
        if self._is_shutting_down: return
        self._is_shutting_down = True
        self.poll_timer.stop()
        self._poll_generation += 1

    # ==========================================================================
    # Live configuration
    # ==========================================================================
    def reload_config(self) -> AccConfig:
        config = self.controller.read_config()
        self.state.set_current_config(config)
        return config

    def read_raw_config(self) -> List[str]:
        return self.controller.read_config_lines()

    @_live_edit
    def write_raw_config(self, lines: List[str]) -> bool:
        """Saves config.txt verbatim from the advanced editor."""
        if not self.controller.write_config_lines(lines):
            return False
        self.reload_config()
        return True

    def _push_config(self, config: AccConfig) -> Optional[ConfigOutcome]:
        if not config.capacity.is_valid():
            return None
        return config, self.controller.apply_config(config)

    def _commit_config(self, outcome: Optional[ConfigOutcome]) -> ConfigUpdateResult:
        if outcome is None:
            self.state.set_controller_status_message(tr("invalid_capacity"))
            return ConfigUpdateResult.rejected()
        config, result = outcome
        self.settings_manager.save_current_selection(None)
        self.settings_manager.set_reset_unplugged_mirror(config.reset_unplugged)
        self.state.set_current_config(config)
        self._report_update_result(result)
        return result

    def update_config(self, config: AccConfig) -> ConfigUpdateResult:
        """Pushes an edited config to acc (one command per field group).

        A capacity breaking shutdown <= resume < pause is refused: nothing is
        sent and every group of the result reads as failed.
        """
        return self._commit_config(self._push_config(config))

    def update_config_async(self, config: AccConfig):
        run_in_background(lambda: self._push_config(config), self._on_config_pushed, self._on_task_failed)

    @Slot(object)
    def _on_config_pushed(self, outcome: Optional[ConfigOutcome]):
        self.operation_finished.emit("update_config", self._commit_config(outcome))

    def _replace_config(self, **changes: Any):
        self.state.set_current_config(dataclasses.replace(self.state.get_current_config(), **changes))

    # --- Single field groups ---
    @_live_edit
    def update_capacity(self, shutdown: int, cool_down: int, resume: int, pause: int) -> bool:
        capacity = Capacity(shutdown, cool_down, resume, pause)
        if not capacity.is_valid():
            print(f"Error: invalid capacity {capacity}.", file=sys.stderr)
            self.state.set_controller_status_message(tr("invalid_capacity"))
            return False
        success = self.controller.update_capacity(shutdown, cool_down, resume, pause)
        if success:
            self._replace_config(capacity=capacity)
        return success

    @_live_edit
    def update_cool_down(self, charge_seconds: Optional[int], pause_seconds: Optional[int]) -> bool:
        success = self.controller.update_cool_down(charge_seconds, pause_seconds)
        if success:
            cooldown = None if charge_seconds is None or pause_seconds is None else Cooldown(charge_seconds, pause_seconds)
            self._replace_config(cooldown=cooldown)
        return success

    @_live_edit
    def update_temp(self, cool_down_temp: int, pause_charging_temp: int, wait_seconds: int) -> bool:
        success = self.controller.update_temp(cool_down_temp, pause_charging_temp, wait_seconds)
        if success:
            self._replace_config(temp=Temp(cool_down_temp, pause_charging_temp, wait_seconds))
        return success

    @_live_edit
    def update_voltage(self, control_file: Optional[str], max_millivolts: Optional[int]) -> bool:
        success = self.controller.update_voltage(control_file, max_millivolts)
        if success:
            volt = None if control_file is None and max_millivolts is None else VoltControl(control_file, max_millivolts)
            self._replace_config(volt_control=volt)
        else:
            self.state.set_controller_status_message(tr("wrong_volt_file"))
        return success

    @_live_edit
    def update_reset_unplugged(self, reset_unplugged: bool) -> bool:
        success = self.controller.update_reset_unplugged(reset_unplugged)
        if success:
            self._replace_config(reset_unplugged=reset_unplugged)
            self.settings_manager.set_reset_unplugged_mirror(reset_unplugged)
        return success

    @_live_edit
    def update_on_boot_exit(self, on_boot_exit: bool) -> bool:
        success = self.controller.update_on_boot_exit(on_boot_exit)
        if success:
            self._replace_config(on_boot_exit=on_boot_exit)
        return success

    @_live_edit
    def update_on_boot(self, value: Optional[str]) -> bool:
        success = self.controller.update_on_boot(value)
        if success:
            self._replace_config(on_boot=value or None)
        return success

    @_live_edit
    def update_on_plugged(self, value: Optional[str]) -> bool:
        success = self.controller.update_on_plugged(value)
        if success:
            self._replace_config(on_plugged=value or None)
        return success

    @_live_edit
    def set_charging_switch(self, charging_switch: Optional[str]) -> bool:
        """Selects a charging switch; None goes back to automatic selection."""
        if charging_switch:
            success = self.controller.set_charging_switch(charging_switch)
        else:
            success = self.controller.unset_charging_switch()
        if success:
            self._replace_config(charging_switch=charging_switch or None)
        return success

    def _report_update_result(self, result: ConfigUpdateResult):
        if result.voltage_failed:
            self.state.set_controller_status_message(tr("wrong_volt_file"))
        elif not result.is_successful():
            self.state.set_controller_status_message(
                tr("config_apply_failed", groups=", ".join(result.failed_groups())))
        else:
            self.state.set_controller_status_message(tr("config_applied"))

    # ==========================================================================
    # Profiles
    # ==========================================================================
    def _push_profile(self, name: str) -> Optional[ProfileOutcome]:
        config = self.profile_manager.read(name)
        if config is None:
            return None
        return name, config, self.controller.apply_config(config)

    def _commit_profile(self, outcome: Optional[ProfileOutcome], name: str) -> Optional[ConfigUpdateResult]:
        if outcome is None:
            self.state.set_controller_status_message(tr("profile_not_found", name=name))
            return None
        name, config, result = outcome
        self.settings_manager.save_current_selection(name)
        self.settings_manager.set_reset_unplugged_mirror(config.reset_unplugged)
        self.state.set_current_config(config)
        self._report_update_result(result)
        if result.is_successful():
            self.state.set_controller_status_message(tr("profile_applied", name=name))
        return result

    def apply_profile(self, name: str) -> Optional[ConfigUpdateResult]:
        """
        Pushes every field group of a stored profile and marks it selected.

        Returns:
            The composite result, or None if the profile cannot be read.
        """
        return self._commit_profile(self._push_profile(name), name)

    def apply_profile_async(self, name: str):
        run_in_background(lambda: (name, self._push_profile(name)), self._on_profile_pushed, self._on_task_failed)

    @Slot(object)
    def _on_profile_pushed(self, outcome: Tuple[str, Optional[ProfileOutcome]]):
        name, pushed = outcome
        self.operation_finished.emit("apply_profile", self._commit_profile(pushed, name))

    def create_profile_from_current(self, name: str) -> bool:
        """Saves the live config as a new profile."""
        return self.profile_manager.create(name, self.state.get_current_config())

    def rename_profile(self, old_name: str, new_name: str) -> bool:
        success = self.profile_manager.rename(old_name, new_name)
        if success and self.settings_manager.get_current_selection() == old_name:
            self.settings_manager.save_current_selection(new_name)
        return success

    def delete_profile(self, name: str) -> bool:
        success = self.profile_manager.delete(name)
        if success and self.settings_manager.get_current_selection() == name:
            self.settings_manager.save_current_selection(None)
        return success

    # ==========================================================================
    # Schedules
    # ==========================================================================
    def refresh_schedules(self) -> List[Schedule]:
        return self.schedule_manager.refresh()

    def add_schedule(self, execute_once: bool, hour: int, minute: int, command: str) -> bool:
        success = self.schedule_manager.add(execute_once, hour, minute, command)
        self.refresh_schedules()
        return success

    def schedule_config(self, execute_once: bool, hour: int, minute: int, config: AccConfig) -> bool:
        """Schedules the commands that push `config` at the given time."""
        return self.schedule_commands(execute_once, hour, minute, config_commands(config))

    def schedule_commands(self, execute_once: bool, hour: int, minute: int, commands: Sequence[str]) -> bool:
        success = self.schedule_manager.add_commands(execute_once, hour, minute, commands)
        self.refresh_schedules()
        return success

    def schedule_profile(self, execute_once: bool, hour: int, minute: int, name: str) -> bool:
        config = self.profile_manager.read(name)
        if config is None:
            self.state.set_controller_status_message(tr("profile_not_found", name=name))
            return False
        return self.schedule_config(execute_once, hour, minute, config)

    def edit_schedule_command(self, schedule: Schedule, command: str) -> Optional[Schedule]:
        return self.schedule_manager.edit_command(schedule, command)

    def delete_schedule(self, execute_once: bool, name: str) -> bool:
        success = self.schedule_manager.delete(execute_once, name)
        self.refresh_schedules()
        return success

    # ==========================================================================
    # Daemon
    # ==========================================================================
    def daemon_action(self, action: str) -> bool:
        actions = {
            "start": self.controller.start_daemon,
            "stop": self.controller.stop_daemon,
            "restart": self.controller.restart_daemon,
        }
        run = actions.get(action)
        if run is None:
            print(f"Error: unknown daemon action '{action}'.", file=sys.stderr)
            return False
        return run()

    def start_daemon_async(self): self._daemon_action_async("start")
    def stop_daemon_async(self): self._daemon_action_async("stop")
    def restart_daemon_async(self): self._daemon_action_async("restart")

    def _daemon_action_async(self, action: str):
        run_in_background(lambda: (action, self.daemon_action(action)), self._on_daemon_action_finished, self._on_task_failed)

    @Slot(object)
    def _on_daemon_action_finished(self, outcome: Tuple[str, bool]):
        action, success = outcome
        if not success:
            self.state.set_controller_status_message(tr("daemon_action_failed", action=action))
        self.operation_finished.emit(f"daemon_{action}", success)

    @Slot(str)
    def _on_task_failed(self, message: str):
        self.state.set_controller_status_message(message)

    # ==========================================================================
    # Telemetry polling
    # ==========================================================================
    def _read_status(self) -> Tuple[BatteryInfo, bool]:
        return self.controller.get_battery_info(), self.controller.is_daemon_running()

    def _update_state_from_status(self, info: BatteryInfo, daemon_running: bool):
        self.state.set_battery_info(info)
        self.state.set_daemon_running(daemon_running)

    @Slot()
    def perform_full_status_update(self):
        """Blocking telemetry read, for places that need immediate feedback."""
        self._update_state_from_status(*self._read_status())

    def _arm_poll_timer(self):
        if self._is_ui_visible and not self._is_shutting_down and not self._tick_in_flight:
            self.poll_timer.start()

    @Slot()
    def _start_poll_tick(self):
        if self._is_shutting_down or not self._is_ui_visible or self._tick_in_flight:
            return
        self._tick_in_flight = True
        generation = self._poll_generation
        run_in_background(lambda: (generation, self._read_status()), self._on_poll_tick_finished, self._on_poll_tick_failed)

    @Slot(object)
    def _on_poll_tick_finished(self, outcome: Tuple[int, Tuple[BatteryInfo, bool]]):
        generation, status = outcome
        self._tick_in_flight = False
        # Results of a tick abandoned by a visibility change are dropped
        if generation == self._poll_generation:
            self._update_state_from_status(*status)
        self._arm_poll_timer()

    @Slot(str)
    def _on_poll_tick_failed(self, message: str):
        self._tick_in_flight = False
        self._arm_poll_timer()

    def is_polling(self) -> bool:
        return self.poll_timer.isActive() or self._tick_in_flight

    def set_ui_visibility(self, is_visible: bool):
        """Called when the UI shows or hides; polling runs only while visible."""
        if self._is_ui_visible == is_visible:
            return
        self._is_ui_visible = is_visible
        if is_visible:
            self._arm_poll_timer()
        else:
            self.poll_timer.stop()
            self._poll_generation += 1
