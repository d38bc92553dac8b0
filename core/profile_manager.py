# -*- coding: utf-8 -*-
"""
Persists named acc config snapshots ("profiles").

Each profile is one JSON file `<name>.profile`; a separate index file holds
the ordered list of names. The index is the source of truth for what should
exist, so every mutation updates the index first and the snapshot second.
"""
import os
import json
import sys
import tempfile
from typing import List, Optional

from gui.qt import QObject, Signal
from .state import AppState
from .models import AccConfig
from config.settings import PROFILE_NAME_INVALID_CHARS


def is_valid_profile_name(name: str) -> bool:
    """Profile names double as file names."""
    if not name or not name.strip() or name in (".", ".."):
        return False
    return not any(c in PROFILE_NAME_INVALID_CHARS for c in name)


class ProfileManager(QObject):
    """Central class managing the stored profiles and their index."""
    profiles_list_changed = Signal(list)

    def __init__(self, app_state: AppState, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.state = app_state
        self.paths = app_state.paths

    # --- Index ---
    def list(self) -> List[str]:
        """Returns the profile names in index order."""
        try:
            with open(self.paths.profile_index, 'r', encoding='utf-8') as f:
                names = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            return []
        if not isinstance(names, list):
            return []
        return [str(name) for name in names]

    def write(self, names: List[str]) -> bool:
        """Rewrites the whole index atomically."""
        temp_path = ""
        try:
            self.paths.ensure_dirs()
            with tempfile.NamedTemporaryFile('w', encoding='utf-8', suffix=".tmp", dir=self.paths.profiles_dir, delete=False) as temp_file:
                temp_path = temp_file.name
                json.dump(list(names), temp_file, indent=4)
            os.replace(temp_path, self.paths.profile_index)
        except OSError as e:
            print(f"Error: cannot write profile index '{self.paths.profile_index}'. Error: {e}", file=sys.stderr)
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
            return False
        self._publish(list(names))
        return True

    def refresh(self) -> List[str]:
        names = self.list()
        self._publish(names)
        return names

    def _publish(self, names: List[str]):
        self.state.set_profile_names(names)
        self.profiles_list_changed.emit(names)

    # --- Snapshots ---
    def read(self, name: str) -> Optional[AccConfig]:
        """Loads a profile's config, or None if its snapshot is missing or unreadable."""
        try:
            with open(self.paths.profile_file(name), 'r', encoding='utf-8') as f:
                return AccConfig.from_dict(json.load(f))
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, TypeError, KeyError, AttributeError) as e:
            print(f"Error: profile '{name}' is corrupt: {e}", file=sys.stderr)
            return None

    def _write_snapshot(self, name: str, config: AccConfig) -> bool:
        try:
            self.paths.ensure_dirs()
            with open(self.paths.profile_file(name), 'w', encoding='utf-8') as f:
                json.dump(config.to_dict(), f, indent=4)
            return True
        except OSError as e:
            print(f"Error: cannot save profile '{name}'. Error: {e}", file=sys.stderr)
            return False

    # --- Mutations ---
    def create(self, name: str, config: AccConfig) -> bool:
        """Adds a profile, or overwrites the snapshot of an existing one."""
        if not is_valid_profile_name(name):
            print(f"Error: invalid profile name '{name}'.", file=sys.stderr)
            return False
        names = self.list()
        if name not in names:
            names.append(name)
            if not self.write(names):
                return False
        return self._write_snapshot(name, config)

    def save(self, name: str, config: AccConfig) -> bool:
        """Updates the snapshot of an existing profile."""
        if name not in self.list():
            return False
        return self._write_snapshot(name, config)

    def rename(self, old_name: str, new_name: str) -> bool:
        names = self.list()
        if old_name not in names or new_name in names or not is_valid_profile_name(new_name):
            return False

        names[names.index(old_name)] = new_name
        if not self.write(names):
            return False
        try:
            os.replace(self.paths.profile_file(old_name), self.paths.profile_file(new_name))
        except OSError as e:
            print(f"Error: cannot move profile '{old_name}' to '{new_name}'. Error: {e}", file=sys.stderr)
            return False
        return True

    def delete(self, name: str) -> bool:
        names = self.list()
        if name not in names:
            return False

        names.remove(name)
        if not self.write(names):
            return False
        try:
            os.remove(self.paths.profile_file(name))
        except FileNotFoundError:
            pass
        except OSError as e:
            print(f"Error: cannot delete profile '{name}'. Error: {e}", file=sys.stderr)
            return False
        return True
