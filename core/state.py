# -*- coding: utf-8 -*-
"""
Defines the application's centralized, reactive state.

AppState is a QObject that exposes its values through Qt's property system:
every setter emits a change signal only when the value actually changes, so
UI collaborators subscribe precisely to the data they care about.
"""
from gui.qt import QObject, Signal, Property
from typing import List, Optional, Any

from config.settings import DEFAULT_LANGUAGE
from core.path_manager import PathManager
from core.models import AccConfig, BatteryInfo, DEFAULT_ACC_CONFIG


class AppState(QObject):
    """
    Top-level reactive state object.
    The single source of truth for everything the UI renders.
    """
    language_changed = Signal(str)
    battery_info_changed = Signal(object)
    daemon_running_changed = Signal(bool)
    current_config_changed = Signal(object)
    selected_profile_changed = Signal(object)  # Optional[str]
    profile_names_changed = Signal(list)
    schedules_changed = Signal(list)
    reset_unplugged_mirror_changed = Signal(bool)
    controller_status_message_changed = Signal(str)

    def __init__(self, path_manager: PathManager, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.paths = path_manager
        self._language: str = DEFAULT_LANGUAGE
        self._battery_info: Optional[BatteryInfo] = None
        self._daemon_running: bool = False
        self._current_config: AccConfig = DEFAULT_ACC_CONFIG
        self._selected_profile: Optional[str] = None
        self._profile_names: List[str] = []
        self._schedules: list = []
        self._reset_unplugged_mirror: bool = False
        self._controller_status_message: str = ""

    def _set_value(self, field_name: str, value: Any, signal: Any):
        if getattr(self, field_name) != value:
            setattr(self, field_name, value)
            signal.emit(value)

    def get_language(self) -> str: return self._language
    def set_language(self, value: str): self._set_value('_language', value, self.language_changed)
    language = Property(str, get_language, set_language, notify=language_changed) # type: ignore

    def get_battery_info(self) -> Optional[BatteryInfo]: return self._battery_info
    def set_battery_info(self, value: BatteryInfo): self._set_value('_battery_info', value, self.battery_info_changed)
    battery_info = Property(object, get_battery_info, set_battery_info, notify=battery_info_changed) # type: ignore

    def get_daemon_running(self) -> bool: return self._daemon_running
    def set_daemon_running(self, value: bool): self._set_value('_daemon_running', value, self.daemon_running_changed)
    daemon_running = Property(bool, get_daemon_running, set_daemon_running, notify=daemon_running_changed) # type: ignore

    def get_current_config(self) -> AccConfig: return self._current_config
    def set_current_config(self, value: AccConfig): self._set_value('_current_config', value, self.current_config_changed)
    current_config = Property(object, get_current_config, set_current_config, notify=current_config_changed) # type: ignore

    def get_selected_profile(self) -> Optional[str]: return self._selected_profile
    def set_selected_profile(self, value: Optional[str]): self._set_value('_selected_profile', value, self.selected_profile_changed)
    selected_profile = Property(object, get_selected_profile, set_selected_profile, notify=selected_profile_changed) # type: ignore

    def get_profile_names(self) -> List[str]: return list(self._profile_names)
    def set_profile_names(self, value: List[str]): self._set_value('_profile_names', list(value), self.profile_names_changed)
    profile_names = Property(list, get_profile_names, set_profile_names, notify=profile_names_changed) # type: ignore

    def get_schedules(self) -> list: return list(self._schedules)
    def set_schedules(self, value: list): self._set_value('_schedules', list(value), self.schedules_changed)
    schedules = Property(list, get_schedules, set_schedules, notify=schedules_changed) # type: ignore

    def get_reset_unplugged_mirror(self) -> bool: return self._reset_unplugged_mirror
    def set_reset_unplugged_mirror(self, value: bool): self._set_value('_reset_unplugged_mirror', value, self.reset_unplugged_mirror_changed)
    reset_unplugged_mirror = Property(bool, get_reset_unplugged_mirror, set_reset_unplugged_mirror, notify=reset_unplugged_mirror_changed) # type: ignore

    def get_controller_status_message(self) -> str: return self._controller_status_message
    def set_controller_status_message(self, value: str): self._set_value('_controller_status_message', value, self.controller_status_message_changed)
    controller_status_message = Property(str, get_controller_status_message, set_controller_status_message, notify=controller_status_message_changed) # type: ignore
