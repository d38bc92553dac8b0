# -*- coding: utf-8 -*-
"""
Global constants and default settings for the ACC manager.
"""
from typing import List, Dict, Any, Tuple

# ==============================================================================
# Application info
# ==============================================================================
APP_NAME: str = "AccManager"
APP_ORGANIZATION_NAME: str = "AccManager"
APP_INTERNAL_NAME: str = "acc-manager"

# ==============================================================================
# Paths (resolved by core.path_manager.PathManager)
# ==============================================================================
DEFAULT_ACC_CONFIG_PATH: str = "/sdcard/acc/config.txt"
DEFAULT_DATA_DIR: str = "~/.acc-manager"
ENV_ACC_CONFIG_PATH: str = "ACC_CONFIG_PATH"
ENV_DATA_DIR: str = "ACC_MANAGER_HOME"
ENV_SHELL: str = "ACC_SHELL"

PROFILES_DIR_NAME: str = "profiles"
PROFILE_FILE_SUFFIX: str = ".profile"
PROFILE_INDEX_FILE_NAME: str = "profiles.json"
PREFERENCES_FILE_NAME: str = "preferences.json"
LANGUAGES_FILE_NAME: str = "languages.json"

# ==============================================================================
# Shell / external programs
# ==============================================================================
DEFAULT_SHELL_PREFIX: List[str] = ["su", "-c"]
# Prefixes starting with one of these take the script as a single argv entry
LOCAL_SHELL_PROGRAMS: Tuple[str, ...] = ("su", "sh", "bash")
ACC_BINARY: str = "acc"
DJS_BINARY: str = "djs"
ACC_INSTALLED_MARKER: str = "/dev/acc/installed"
DAEMON_RUNNING_MARKER: str = "accd is running"

# ==============================================================================
# Defaults
# ==============================================================================
DEFAULT_LANGUAGE: str = "en"
KNOWN_LANGUAGES: Dict[str, str] = {"en": "English", "it": "Italiano"}

# --- Capacity ---
CAPACITY_COOL_DOWN_DISABLED: int = 101
CAPACITY_SHUTDOWN_FALLBACK: int = 0

# --- Temperatures (whole degrees Celsius; the config file stores deci-degrees) ---
TEMP_COOL_DOWN_FALLBACK: int = 90
TEMP_PAUSE_CHARGING_FALLBACK: int = 95
TEMP_WAIT_SECONDS_FALLBACK: int = 90
DECI_DEGREES_PER_DEGREE: int = 10

# Used when the live config cannot be read at all
DEFAULT_CONFIG_SETTINGS: Dict[str, Any] = {
    "capacity": {"shutdown": 5, "cool_down": 60, "resume": 70, "pause": 80},
    "cooldown": {"charge_seconds": 50, "pause_seconds": 10},
    "temp": {"cool_down_temp": 40, "pause_charging_temp": 45, "wait_seconds": 90},
    "volt_control": None,
    "reset_unplugged": False,
    "on_boot_exit": False,
    "on_boot": None,
    "on_plugged": None,
    "charging_switch": None,
}

# ==============================================================================
# Telemetry
# ==============================================================================
TELEMETRY_NUMBER_UNKNOWN: int = -1
TELEMETRY_STRING_UNKNOWN: str = "Unknown"
STATUS_CHARGING: str = "Charging"
STATUS_DISCHARGING: str = "Discharging"
STATUS_NOT_CHARGING: str = "Not charging"

# ==============================================================================
# Scheduling / polling
# ==============================================================================
DEFAULT_POLL_INTERVAL_MS: int = 1000
SCHEDULE_KIND_ONCE: str = "once"
SCHEDULE_KIND_DAILY: str = "daily"
SCHEDULE_COMMAND_SEPARATOR: str = "; "

# ==============================================================================
# Profiles
# ==============================================================================
# Characters that cannot appear in a profile name (it doubles as a file name)
PROFILE_NAME_INVALID_CHARS: str = '/\\:*?"<>|'
