import os
from typing import Optional

from config.settings import (
    DEFAULT_ACC_CONFIG_PATH, DEFAULT_DATA_DIR, ENV_ACC_CONFIG_PATH, ENV_DATA_DIR,
    PROFILES_DIR_NAME, PROFILE_FILE_SUFFIX, PROFILE_INDEX_FILE_NAME,
    PREFERENCES_FILE_NAME, LANGUAGES_FILE_NAME
)

class PathManager:
    """
    A centralized path manager that resolves every file and directory the
    application needs. It is the single source of truth for paths and is
    created once by main.py at startup.
    """
    def __init__(self, data_dir: Optional[str] = None, acc_config_path: Optional[str] = None):
        """
        Resolves the application's paths.

        Args:
            data_dir (str): Where profiles and preferences live. Defaults to
                $ACC_MANAGER_HOME or ~/.acc-manager.
            acc_config_path (str): acc's config.txt. Defaults to
                $ACC_CONFIG_PATH or /sdcard/acc/config.txt.
        """
        self.data_dir = os.path.expanduser(
            data_dir or os.environ.get(ENV_DATA_DIR) or DEFAULT_DATA_DIR)
        self.acc_config = os.path.expanduser(
            acc_config_path or os.environ.get(ENV_ACC_CONFIG_PATH) or DEFAULT_ACC_CONFIG_PATH)

        # --- Profiles ---
        self.profiles_dir = os.path.join(self.data_dir, PROFILES_DIR_NAME)
        self.profile_index = os.path.join(self.profiles_dir, PROFILE_INDEX_FILE_NAME)

        # --- Preferences and translations ---
        self.preferences = os.path.join(self.data_dir, PREFERENCES_FILE_NAME)
        self.languages = os.path.join(self.data_dir, LANGUAGES_FILE_NAME)

    def profile_file(self, name: str) -> str:
        """Path of the snapshot file backing profile `name`."""
        return os.path.join(self.profiles_dir, f"{name}{PROFILE_FILE_SUFFIX}")

    def ensure_dirs(self):
        os.makedirs(self.profiles_dir, exist_ok=True)
