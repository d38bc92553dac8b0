# -*- coding: utf-8 -*-
"""
Manages process-wide preferences that are not part of any profile: the
currently selected profile, the resetUnplugged display mirror and the UI
language.
"""
import json
import sys
from typing import Optional, Dict, Any

from gui.qt import QObject
from .state import AppState
from config.settings import DEFAULT_LANGUAGE

class SettingsManager(QObject):
    """Class managing global preferences."""

    def __init__(self, app_state: AppState, parent: Optional[QObject] = None):
        """
        Initializes the SettingsManager.

        Args:
            app_state: Reference to the application's global state object.
        """
        super().__init__(parent)
        self.state = app_state
        self.preferences_path = self.state.paths.preferences

    def load(self):
        """Loads preferences from JSON and populates the state."""
        data = self._read_preferences_file()
        selected = data.get("selected_profile")
        self.state.set_selected_profile(selected if isinstance(selected, str) else None)
        self.state.set_reset_unplugged_mirror(bool(data.get("reset_unplugged", False)))
        self.state.set_language(data.get("language", DEFAULT_LANGUAGE))

    def save(self):
        """Saves the current preferences to the JSON file."""
        data = {
            "selected_profile": self.state.get_selected_profile(),
            "reset_unplugged": self.state.get_reset_unplugged_mirror(),
            "language": self.state.get_language(),
        }
        try:
            self.state.paths.ensure_dirs()
            with open(self.preferences_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=4)
        except OSError as e:
            print(f"Error: cannot save preferences to '{self.preferences_path}'. Error: {e}", file=sys.stderr)

    def _read_preferences_file(self) -> Dict[str, Any]:
        try:
            with open(self.preferences_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (FileNotFoundError, json.JSONDecodeError):
            return {}

    def save_current_selection(self, name: Optional[str]):
        """Records which profile is active; None means the live config matches no profile."""
        if self.state.get_selected_profile() != name:
            self.state.set_selected_profile(name)
            self.save()

    def get_current_selection(self) -> Optional[str]:
        return self.state.get_selected_profile()

    def set_reset_unplugged_mirror(self, enabled: bool):
        if self.state.get_reset_unplugged_mirror() != enabled:
            self.state.set_reset_unplugged_mirror(enabled)
            self.save()

    def get_reset_unplugged_mirror(self) -> bool:
        return self.state.get_reset_unplugged_mirror()

    def set_language(self, lang_code: str):
        if self.state.get_language() != lang_code:
            self.state.set_language(lang_code)
            self.save()
